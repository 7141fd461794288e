import argparse
import warnings

from sklearn.metrics import classification_report

from loanbot import config, db
from loanbot.cli import setup_logging
from loanbot.entities import EntityExtractor
from loanbot.intents import IntentScorer
from loanbot.tables import load_tables

warnings.filterwarnings("ignore")

SAMPLE_QUERIES = [
    "How much loan can I get for my wedding?",
    "What documents do I need to apply?",
    "Can I repay early, I get my salary on 5-11-2025",
    "Call me on +91 9876543210 please",
    "I am in Pune, is Fundobaba approved by RBI?",
    "Thanks a lot, bye",
]


def format_confidence(conf):
    if conf is None:
        return "-"
    val = float(conf)
    if 0 <= val <= 1:
        val *= 100.0
    return f"{val:.1f}%"


# ========= Intent evaluation =========
def print_intent_report():
    print("🚀 Loading intent examples...")

    tables = load_tables()
    texts, labels = [], []
    for intent, phrases in tables.intent_examples.items():
        texts.extend(phrases)
        labels.extend([intent] * len(phrases))

    scorer = IntentScorer(tables)
    extractor = EntityExtractor(tables)

    print("\n=== CLASSIFICATION REPORT ===\n")
    print(classification_report(labels, scorer.predict(texts), zero_division=0))

    print("=== SAMPLE PREDICTIONS ===\n")
    for query in SAMPLE_QUERIES:
        match = scorer.score(query)
        entities = extractor.extract(query).non_empty()
        print(f"💬 Sample Query: {query}")
        print(f"🤖 Predicted Intent: {match.intent} ({match.confidence:.2f})")
        print(f"📎 Extracted Entities: {entities}\n")


# ========= Chat log summary =========
def print_chat_stats(db_path, recent=5, frequent=5):
    """Totals, latest queries and most repeated questions from the chat log."""
    print("=== CHAT LOG ===\n")
    print(f"Total queries: {db.get_total_queries(db_path)}")
    print(f"Distinct intents: {db.get_total_intents(db_path)}\n")

    print("--- Recent queries ---")
    for r in db.get_recent_chats(limit=recent, db_path=db_path):
        account = r["account"] or "-"
        print(f"[{r['timestamp']}] {account}: {r['user_message']} -> {r['intent']} ({format_confidence(r['confidence'])})")

    print("\n--- Frequent questions ---")
    for r in db.get_frequent_questions(db_path)[:frequent]:
        print(f"{r['freq']}x {r['user_message']}")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Intent evaluation and chat log summary")
    parser.add_argument("--stats", action="store_true", help="summarise the chat log instead of the intent table")
    parser.add_argument("--db", default=config.CHAT_DB_PATH, help="chat log path (default: LOANBOT_CHAT_DB)")
    args = parser.parse_args(argv)

    setup_logging()
    if not args.stats:
        print_intent_report()
        return

    if not args.db:
        raise SystemExit("No chat log configured, pass --db or set LOANBOT_CHAT_DB")
    db.create_db(args.db)
    print_chat_stats(args.db)


if __name__ == "__main__":
    main()
