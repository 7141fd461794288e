"""Tests for the reply pipeline and chat log."""

import sqlite3

import pytest

from loanbot import config, db, responses
from loanbot.assistant import CONTEXTUAL, FALLBACK, PATTERN, LoanAssistant


class TestReply:
    def test_empty_message(self, assistant):
        for message in ("", "   "):
            reply = assistant.reply(message)
            assert reply.text == config.EMPTY_MESSAGE_RESPONSE
            assert reply.source == FALLBACK

    def test_keyword_free_message_falls_back(self, assistant):
        reply = assistant.reply("xyz")
        assert reply.text == config.FALLBACK_RESPONSE
        assert reply.source == FALLBACK
        assert reply.intent == "general_inquiry"
        assert reply.category is None

    def test_contextual(self, assistant):
        reply = assistant.reply("What documents do I need?")
        assert reply.source == CONTEXTUAL
        assert reply.text == responses.DOCUMENTS_NEEDED
        assert reply.category == "documents"
        assert reply.context.question_type == "what"

    def test_pattern(self, assistant, tables):
        reply = assistant.reply("thnx")
        assert reply.source == PATTERN
        assert reply.text == tables.response_for("thnx")

    def test_pattern_tie_uses_table_order(self, assistant, tables):
        reply = assistant.reply("ok cool")
        assert reply.source == PATTERN
        assert reply.text == tables.response_for("ok")

    def test_diagnostics(self, assistant):
        reply = assistant.reply("call me at 9876543210 or email a@b.com")
        assert reply.entities["contact_info"] == ["9876543210", "a@b.com"]
        assert 0.0 <= reply.confidence <= 1.0

    def test_closest_phrase(self, assistant):
        closest = assistant.reply("what's the maximum amount anyone can get").closest
        assert closest.match == "max loan"
        assert closest.confidence == 0.95
        assert closest.matched_variation == "maximum amount"
        assert assistant.reply("  ").closest is None

    def test_history_changes_reply(self, assistant):
        history = [{"sender": "user", "content": "hi, what is fundobaba"}]
        assert assistant.reply("I need a loan", history).text == responses.LOAN_RANGE_INTRO
        assert assistant.reply("I need a loan").text == responses.LOAN_RANGE


class TestChatLog:
    def test_replies_are_logged(self, tables, extractor, scorer, tmp_path):
        path = str(tmp_path / "chat.db")
        bot = LoanAssistant(tables=tables, extractor=extractor, scorer=scorer, chat_log_path=path)
        bot.reply("hello")
        bot.reply("thank you", account="user-1")

        assert db.get_total_queries(path) == 2
        latest = db.get_recent_chats(1, db_path=path)[0]
        assert latest["account"] == "user-1"
        assert latest["user_message"] == "thank you"
        assert latest["intent"] == "gratitude"

    def test_log_failure_does_not_break_reply(self, tables, extractor, scorer, tmp_path, monkeypatch):
        path = str(tmp_path / "chat.db")
        bot = LoanAssistant(tables=tables, extractor=extractor, scorer=scorer, chat_log_path=path)

        def broken(*args, **kwargs):
            raise sqlite3.OperationalError("disk I/O error")

        monkeypatch.setattr(db, "save_chat", broken)
        reply = bot.reply("What documents do I need?")
        assert reply.text == responses.DOCUMENTS_NEEDED

    def test_unopenable_log_is_disabled(self, tables, extractor, scorer, tmp_path):
        path = str(tmp_path / "missing" / "chat.db")
        bot = LoanAssistant(tables=tables, extractor=extractor, scorer=scorer, chat_log_path=path)
        assert bot.chat_log_path == ""
        assert bot.reply("xyz").source == FALLBACK


class TestChatLogQueries:
    @pytest.fixture
    def log_path(self, tmp_path):
        path = str(tmp_path / "chat.db")
        db.create_db(path)
        db.save_chat("a", "hello", "Hi", "greeting", 1.0, db_path=path)
        db.save_chat("a", "hello", "Hi", "greeting", 1.0, db_path=path)
        db.save_chat("b", "emi?", "No EMI", "repayment", 0.8, db_path=path)
        db.save_chat("b", "  ", "Please type something.", None, None, db_path=path)
        return path

    def test_totals(self, log_path):
        assert db.get_total_queries(log_path) == 4
        assert db.get_total_intents(log_path) == 2

    def test_frequent_questions(self, log_path):
        rows = db.get_frequent_questions(log_path)
        assert (rows[0]["user_message"], rows[0]["freq"]) == ("hello", 2)
        assert all(r["user_message"].strip() for r in rows)

    def test_recent_first(self, log_path):
        rows = db.get_recent_chats(2, db_path=log_path)
        assert [r["user_message"] for r in rows] == ["  ", "emi?"]
