import os

# ========= Paths =========
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
DATA_DIR = os.environ.get("LOANBOT_DATA_DIR", os.path.join(BASE_DIR, "data"))

INTENT_FILE = os.environ.get("LOANBOT_INTENT_FILE", os.path.join(DATA_DIR, "intent_examples.csv"))
RESPONSE_FILE = os.environ.get("LOANBOT_RESPONSE_FILE", os.path.join(DATA_DIR, "response_patterns.csv"))

# sqlite chat log; empty string disables it
CHAT_DB_PATH = os.environ.get("LOANBOT_CHAT_DB", "")

# ========= NLP =========
# "" builds a blank English pipeline; set to e.g. "en_core_web_sm" to use a trained one
SPACY_MODEL = os.environ.get("LOANBOT_SPACY_MODEL", "")

PATTERN_THRESHOLD = float(os.environ.get("LOANBOT_PATTERN_THRESHOLD", "0.3"))
SELECT_THRESHOLD = 0.5
FUZZY_THRESHOLD = 0.6

INTENT_HISTORY = 3
MOOD_HISTORY = 5
TOPIC_HISTORY = 5
STAGE_HISTORY = 3

LOG_LEVEL = os.environ.get("LOANBOT_LOG_LEVEL", "WARNING")

# ========= Canned texts =========
WELCOME_MESSAGE = (
    "Hello! I'm your Fundobaba loan assistant. I'm here to help you with quick pay-day loans "
    "backed by RBI-registered NBFC UY Fincorp. How can I assist you today? You can ask me about "
    "loan amounts, eligibility, application process, terms and conditions, or any other questions "
    "about our services."
)

FALLBACK_RESPONSE = (
    "Thank you for your question! I'm here to help you with Fundobaba pay-day loans and services. "
    "Could you please be more specific about what you'd like to know? I can help with loan "
    "information, application process, terms and conditions, data privacy, regulatory compliance, "
    "or any other aspect of our services."
)

EMPTY_MESSAGE_RESPONSE = "Please type something."

DEFAULT_SESSION_TITLE = "New Chat Session"
