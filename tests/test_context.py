"""Tests for conversation context analysis."""

import pytest

from loanbot.context import (
    NEW_CONVERSATION,
    NEW_USER,
    analyze_context,
    analyze_journey,
    conversation_topic,
    determine_stage,
    user_messages,
    user_mood,
)
from loanbot.sessions import ASSISTANT, USER, Message


@pytest.fixture
def analyze(tables, scorer, extractor):
    def _analyze(message, history=()):
        return analyze_context(message, history, tables, scorer, extractor)
    return _analyze


class TestHistory:
    def test_mixed_history_items(self):
        history = [
            Message(ASSISTANT, "Welcome"),
            Message(USER, "hello"),
            {"sender": "assistant", "content": "Hi!"},
            {"sender": "user", "content": "how to apply"},
            "thanks",
        ]
        assert user_messages(history) == ["hello", "how to apply", "thanks"]

    def test_previous_intents(self, analyze):
        history = [Message(USER, "hello"), Message(ASSISTANT, "Hi!"), "how to apply", "thanks", "bye"]
        ctx = analyze("ok", history)
        assert ctx.previous_intents == ("application_process", "gratitude", "farewell")
        assert ctx.is_follow_up is True
        assert ctx.conversation_length == 5


class TestEmptyHistory:
    def test_defaults(self, analyze):
        ctx = analyze("What documents do I need?")
        assert ctx.question_type == "what"
        assert ctx.semantic.category == "documents"
        assert ctx.user_mood == "neutral"
        assert ctx.topic.primary == NEW_CONVERSATION
        assert ctx.journey.stage == NEW_USER
        assert ctx.journey.progression.status == "starting"
        assert ctx.journey.engagement.level == "low"
        assert ctx.is_follow_up is False
        assert ctx.previous_intents == ()


class TestIdempotence:
    def test_same_inputs_same_context(self, analyze):
        history = ["hello", "what is the interest rate", "this is terrible"]
        first = analyze("Can I get a loan of ₹50,000 by 01/02/2025?", history)
        second = analyze("Can I get a loan of ₹50,000 by 01/02/2025?", history)
        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_to_dict(self, analyze):
        d = analyze("phone number 9876543210").to_dict()
        assert d["entities"]["contact_info"] == ["9876543210"]
        assert d["journey"]["stage"] == NEW_USER
        assert d["current_intent"]["intent"] == "contact_support"


class TestMood:
    def test_positive(self, tables):
        assert user_mood(["this is great", "thank you so much"], tables) == "positive"

    def test_negative(self, tables):
        assert user_mood(["this is terrible", "useless"], tables) == "negative"

    def test_only_last_five(self, tables):
        msgs = ["great"] * 5 + ["terrible"] * 5
        assert user_mood(msgs, tables) == "negative"


class TestTopic:
    def test_most_frequent_category(self, tables):
        topic = conversation_topic(["how do i apply", "application steps", "what documents"], tables)
        assert topic.primary == "application_process"
        assert topic.distribution["application_process"] == 2
        assert topic.distribution["documents"] == 1
        assert topic.consistency == pytest.approx(2 / 3)

    def test_tie_goes_to_table_order(self, tables):
        topic = conversation_topic(["what documents", "need money"], tables)
        assert topic.primary == "loan_inquiry"

    def test_nothing_matched(self, tables):
        topic = conversation_topic(["xyz", "abc"], tables)
        assert topic.primary is None
        assert topic.consistency == 0.0


class TestJourney:
    def test_stage_by_keyword_hits(self, tables):
        assert determine_stage(["hi, what is fundobaba"], tables) == "awareness"
        assert determine_stage(["what is the status, is it approved?"], tables) == "post_application"

    def test_no_stage_keywords_is_support(self, tables):
        assert determine_stage(["xyz"], tables) == "support"

    def test_tie_goes_to_later_stage(self, tables):
        # one "loan" hit for interest, one "help" hit for support
        assert determine_stage(["help with loan"], tables) == "support"

    def test_progression(self, tables):
        journey = analyze_journey(["hello", "how much is the loan", "I want to apply"], tables)
        assert journey.stage == "interest"
        assert journey.progression.status == "progressing"
        assert journey.progression.stages == ("awareness", "interest", "consideration")
        assert journey.progression.direction == "forward"
        assert journey.engagement.level == "medium"
        assert journey.engagement.message_count == 3
        assert journey.needs["information"] == 1

    def test_backward(self, tables):
        journey = analyze_journey(["I want to apply", "hello"], tables)
        assert journey.progression.direction == "backward"

    def test_needs(self, tables):
        msgs = ["can I borrow", "please help", "why pan", "is it safe"]
        needs = analyze_journey(msgs, tables).needs
        assert needs == {"information": 0, "guidance": 1, "support": 1, "clarification": 1, "reassurance": 1}
