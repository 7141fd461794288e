"""Shared fixtures."""

import pytest

from loanbot.assistant import LoanAssistant
from loanbot.entities import EntityExtractor
from loanbot.intents import IntentScorer
from loanbot.tables import load_tables


@pytest.fixture(scope="session")
def tables():
    return load_tables()


@pytest.fixture(scope="session")
def extractor(tables):
    return EntityExtractor(tables, model_name="")


@pytest.fixture(scope="session")
def scorer(tables):
    return IntentScorer(tables)


@pytest.fixture(scope="session")
def assistant(tables, extractor, scorer):
    return LoanAssistant(tables=tables, extractor=extractor, scorer=scorer, chat_log_path="")
