from loanbot.cli import main

main()
