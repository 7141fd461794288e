"""Tests for TF-IDF intent scoring."""

import pytest

from loanbot.intents import GENERAL_INQUIRY, IntentScorer
from loanbot.tables import build_tables


class TestIntentScorer:
    @pytest.mark.parametrize("message,intent", [
        ("hello", "greeting"),
        ("thank you", "gratitude"),
        ("see you", "farewell"),
        ("eligibility criteria", "eligibility"),
        ("how do I apply?", "application_process"),
        ("customer service please", "contact_support"),
    ])
    def test_examples(self, scorer, message, intent):
        assert scorer.score(message).intent == intent

    def test_single_intent_full_confidence(self, scorer):
        result = scorer.score("hello")
        assert result.confidence == pytest.approx(1.0)
        assert list(result.scores) == ["greeting"]

    def test_no_match(self, scorer):
        result = scorer.score("xyz")
        assert result.intent == GENERAL_INQUIRY
        assert result.confidence == 0.0
        assert result.scores == {}

    def test_empty_message(self, scorer):
        assert scorer.score("").intent == GENERAL_INQUIRY

    def test_repeated_terms_count_again(self, scorer):
        once = scorer.score("namaste").scores["greeting"]
        twice = scorer.score("namaste namaste").scores["greeting"]
        assert twice == pytest.approx(2 * once)

    def test_confidence_is_share_of_total(self, scorer):
        result = scorer.score("loan")
        assert 0 < result.confidence < 1
        assert result.confidence == pytest.approx(result.scores[result.intent] / sum(result.scores.values()))

    def test_tie_goes_to_first_intent(self):
        tables = build_tables({"first": ["open account"], "second": ["open account"]}, [("x", "y")])
        result = IntentScorer(tables).score("open account")
        assert result.intent == "first"
        assert result.confidence == pytest.approx(0.5)

    def test_predict(self, scorer):
        assert scorer.predict(["hi", "bye", "zzz"]) == ["greeting", "farewell", GENERAL_INQUIRY]
