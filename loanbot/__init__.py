from loanbot.assistant import LoanAssistant, Reply
from loanbot.exceptions import DataFileError, LoanbotError, SessionNotFoundError
from loanbot.sessions import ChatSession, Message, SessionStore
from loanbot.tables import NLPTables, load_tables

__version__ = "0.1.0"
