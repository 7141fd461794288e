import logging
import sqlite3

from loanbot import config

logger = logging.getLogger(__name__)


# ---------------- DATABASE CONNECTION ----------------
def get_db(db_path=None):
    conn = sqlite3.connect(db_path or config.CHAT_DB_PATH)
    conn.row_factory = sqlite3.Row
    return conn


# ---------------- CREATE TABLES ----------------
def create_db(db_path=None):
    conn = get_db(db_path)
    c = conn.cursor()

    # CHAT LOGS TABLE (with intent & confidence)
    c.execute("""
        CREATE TABLE IF NOT EXISTS chat_logs (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            account TEXT,
            user_message TEXT NOT NULL,
            bot_response TEXT NOT NULL,
            intent TEXT,
            confidence REAL,
            timestamp DATETIME DEFAULT CURRENT_TIMESTAMP
        )
    """)

    conn.commit()
    conn.close()
    logger.debug("Chat log ready at %s", db_path or config.CHAT_DB_PATH)


# ---------------- CHAT LOGS ----------------
def save_chat(account, user_message, bot_response, intent=None, confidence=None, db_path=None):
    conn = get_db(db_path)
    c = conn.cursor()
    c.execute("""
        INSERT INTO chat_logs (account, user_message, bot_response, intent, confidence)
        VALUES (?, ?, ?, ?, ?)
    """, (account, user_message, bot_response, intent, confidence))
    conn.commit()
    conn.close()


def get_recent_chats(limit=10, db_path=None):
    conn = get_db(db_path)
    c = conn.cursor()
    c.execute("""
        SELECT account, user_message, bot_response, intent, confidence, timestamp
        FROM chat_logs
        ORDER BY id DESC
        LIMIT ?
    """, (limit,))
    rows = c.fetchall()
    conn.close()
    return rows


# ---------------- ANALYTICS ----------------
def get_frequent_questions(db_path=None):
    conn = get_db(db_path)
    c = conn.cursor()
    c.execute("""
        SELECT user_message, bot_response, COUNT(*) AS freq
        FROM chat_logs
        WHERE TRIM(user_message) <> ''
        GROUP BY user_message, bot_response
        ORDER BY freq DESC
    """)
    rows = c.fetchall()
    conn.close()
    return rows


def get_total_queries(db_path=None):
    conn = get_db(db_path)
    c = conn.cursor()
    c.execute("SELECT COUNT(*) FROM chat_logs")
    total = c.fetchone()[0]
    conn.close()
    return total


def get_total_intents(db_path=None):
    conn = get_db(db_path)
    c = conn.cursor()
    c.execute("""
        SELECT COUNT(DISTINCT intent)
        FROM chat_logs
        WHERE intent IS NOT NULL AND intent <> ''
    """)
    total = c.fetchone()[0]
    conn.close()
    return total
