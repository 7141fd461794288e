import logging

from loanbot import config
from loanbot.assistant import LoanAssistant
from loanbot.exceptions import LoanbotError
from loanbot.sessions import SessionStore

CLI_USER = "cli"


def setup_logging(level=None):
    logging.basicConfig(
        level=getattr(logging, (level or config.LOG_LEVEL).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ========= CLI =========
def main():
    setup_logging()
    try:
        assistant = LoanAssistant()
    except LoanbotError as e:
        raise SystemExit(f"Could not start the assistant: {e.message}")

    store = SessionStore()
    session = store.start(CLI_USER)

    print(f"🤖 Bot: {session.messages[0].content}\n")
    print("Type 'exit' to end the chat.\n")
    while True:
        try:
            msg = input("You: ").strip()
        except (KeyboardInterrupt, EOFError):
            print("\nSession ended.")
            break

        if not msg:
            continue

        if msg.lower() in ["exit", "quit"]:
            print("🤖 Bot: Thank you for chatting with Fundobaba. Goodbye!")
            break

        reply = store.send(session.session_id, CLI_USER, msg, assistant)
        entities = {k: v for k, v in reply.entities.items() if v}
        print(f"\n🎯 Predicted Intent: {reply.intent} ({reply.confidence:.2f})")
        print(f"📎 Extracted Entities: {entities}")
        if reply.closest is not None and reply.closest.match is not None:
            print(f"🔎 Closest Phrase: {reply.closest.match} ({reply.closest.confidence:.2f})")
        print(f"🤖 Bot: {reply.text}\n")


if __name__ == "__main__":
    main()
