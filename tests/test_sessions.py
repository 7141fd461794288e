"""Tests for chat sessions."""

from dataclasses import FrozenInstanceError

import pytest

from loanbot import config
from loanbot.exceptions import SessionNotFoundError
from loanbot.sessions import ASSISTANT, USER, ChatSession, Message, SessionStore


class TestMessage:
    def test_defaults(self):
        msg = Message(USER, "hello")
        assert msg.message_type == "text"
        assert msg.metadata == {}
        assert msg.to_dict()["messageType"] == "text"

    def test_immutable(self):
        msg = Message(USER, "hello")
        with pytest.raises(FrozenInstanceError):
            msg.content = "changed"

    def test_invalid_type(self):
        with pytest.raises(ValueError):
            Message(USER, "hello", message_type="video")

    def test_invalid_sender(self):
        with pytest.raises(ValueError):
            Message("bot", "hello")


class TestChatSession:
    def test_new_session(self):
        session = ChatSession("u1")
        assert session.title == config.DEFAULT_SESSION_TITLE
        assert session.status == "active"
        assert [(m.sender, m.content) for m in session.messages] == [(ASSISTANT, config.WELCOME_MESSAGE)]

    def test_unique_ids(self):
        assert ChatSession("u1").session_id != ChatSession("u1").session_id

    def test_record_exchange(self):
        session = ChatSession("u1")
        reply = Message(ASSISTANT, "Hi there")
        session.record_exchange(Message(USER, "hello"), reply)
        assert [m.sender for m in session.messages] == [ASSISTANT, USER, ASSISTANT]
        assert session.last_activity == reply.timestamp

    def test_exchange_must_pair(self):
        session = ChatSession("u1")
        with pytest.raises(ValueError):
            session.record_exchange(Message(ASSISTANT, "a"), Message(ASSISTANT, "b"))
        assert len(session.messages) == 1

    def test_messages_are_read_only(self):
        session = ChatSession("u1")
        assert isinstance(session.messages, tuple)
        with pytest.raises(AttributeError):
            session.session_id = "other"


class TestSessionStore:
    def test_send(self, assistant):
        store = SessionStore()
        session = store.start("u1")
        reply = store.send(session.session_id, "u1", "What documents do I need?", assistant)

        assert reply.category == "documents"
        messages = store.get(session.session_id, "u1").messages
        assert [m.sender for m in messages] == [ASSISTANT, USER, ASSISTANT]
        assert messages[-1].content == reply.text
        assert messages[-1].metadata["intent"] == reply.intent

    def test_send_uses_history(self, assistant):
        store = SessionStore()
        session = store.start("u1")
        store.send(session.session_id, "u1", "hi, what is fundobaba", assistant)
        reply = store.send(session.session_id, "u1", "I need a loan", assistant)
        assert reply.context.journey.stage == "awareness"
        assert reply.context.previous_intents == ("greeting",)

    def test_wrong_owner(self):
        store = SessionStore()
        session = store.start("u1")
        with pytest.raises(SessionNotFoundError) as exc:
            store.get(session.session_id, "u2")
        assert exc.value.to_dict()["sessionId"] == session.session_id

    def test_unknown_session(self):
        with pytest.raises(SessionNotFoundError):
            SessionStore().get("nope", "u1")

    def test_update(self):
        store = SessionStore()
        session = store.start("u1", title="Loan questions")
        store.update(session.session_id, "u1", status="completed", tags=["emi"])
        assert session.title == "Loan questions"
        assert session.status == "completed"
        assert session.tags == ["emi"]

    def test_update_invalid_status(self):
        store = SessionStore()
        session = store.start("u1")
        with pytest.raises(ValueError):
            store.update(session.session_id, "u1", status="deleted")
        assert session.status == "active"

    def test_delete(self):
        store = SessionStore()
        session = store.start("u1")
        store.delete(session.session_id, "u1")
        with pytest.raises(SessionNotFoundError):
            store.get(session.session_id, "u1")

    def test_list_filters_and_pages(self):
        store = SessionStore()
        sessions = [store.start("u1") for _ in range(3)]
        store.start("u2")
        store.update(sessions[0].session_id, "u1", status="archived")

        assert len(store.list("u1")) == 3
        assert store.list("u1", status="archived") == [sessions[0]]
        assert len(store.list("u1", page=1, limit=2)) == 2
        assert len(store.list("u1", page=2, limit=2)) == 1
        with pytest.raises(ValueError):
            store.list("u1", status="bogus")

    def test_list_newest_activity_first(self, monkeypatch):
        import loanbot.sessions as sessions_mod
        from datetime import datetime, timedelta, timezone

        clock = iter(datetime(2025, 1, 1, tzinfo=timezone.utc) + timedelta(minutes=i) for i in range(100))
        monkeypatch.setattr(sessions_mod, "_now", lambda: next(clock))

        store = SessionStore()
        older = store.start("u1")
        newer = store.start("u1")
        assert store.list("u1") == [newer, older]

        older.record_exchange(Message(USER, "hi"), Message(ASSISTANT, "hello"))
        assert store.list("u1") == [older, newer]
