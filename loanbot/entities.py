import logging
import re
import string
from dataclasses import dataclass, field
from typing import List

import spacy

from loanbot import config

logger = logging.getLogger(__name__)

_STRIP = string.punctuation + "“”‘’"
_CURRENCY_PREFIXES = ("₹", "rs.", "rs", "inr")
_NUMBER = re.compile(r"\d+(?:\.\d+)?|\.\d+")

DATE_PATTERNS = (
    re.compile(r"\d{1,2}/\d{1,2}/\d{4}"),
    re.compile(r"\d{1,2}-\d{1,2}-\d{4}"),
    re.compile(r"\d{4}-\d{1,2}-\d{1,2}"),
)
PHONE_PATTERN = re.compile(r"(?<!\d)(?:\+91\s?)?[789]\d{9}(?!\d)")
EMAIL_PATTERN = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")


@dataclass(frozen=True)
class Entities:
    amounts: List = field(default_factory=list)
    dates: List[str] = field(default_factory=list)
    contact_info: List[str] = field(default_factory=list)
    documents: List[str] = field(default_factory=list)
    organizations: List[str] = field(default_factory=list)
    locations: List[str] = field(default_factory=list)

    def to_dict(self):
        return {
            "amounts": list(self.amounts),
            "dates": list(self.dates),
            "contact_info": list(self.contact_info),
            "documents": list(self.documents),
            "organizations": list(self.organizations),
            "locations": list(self.locations),
        }

    def non_empty(self):
        return {k: v for k, v in self.to_dict().items() if v}


# ========= Pattern extractors =========
def parse_amount(token):
    """Number in a token like ``₹5,000`` or ``rs.2000``; None when it isn't one."""
    t = token.lower().strip(_STRIP)
    for prefix in _CURRENCY_PREFIXES:
        if t.startswith(prefix):
            t = t[len(prefix):]
            break
    t = t.replace(",", "")
    if not _NUMBER.fullmatch(t):
        return None
    value = float(t)
    return int(value) if value.is_integer() else value


def extract_amounts(text):
    amounts = []
    for token in text.split():
        value = parse_amount(token)
        if value is not None:
            amounts.append(value)
    return amounts


def extract_dates(text):
    # no calendar check: 99/99/9999 is a date here
    found = []
    for pattern in DATE_PATTERNS:
        found.extend(pattern.findall(text))
    return found


def extract_contact_info(text):
    return PHONE_PATTERN.findall(text) + EMAIL_PATTERN.findall(text)


def extract_documents(text, keywords):
    lower = text.lower()
    return [k for k in keywords if k in lower]


def _unique(items):
    seen = []
    for item in items:
        if item not in seen:
            seen.append(item)
    return seen


# ========= Extractor =========
class EntityExtractor:
    """Pulls amounts, dates, contacts, documents, organisations and places out of a message.

    Organisations and places come from a spaCy pipeline with an entity ruler
    over the known names in the tables. Without a model name a blank English
    pipeline is used, so no trained model has to be installed.
    """

    def __init__(self, tables, model_name=None):
        self.tables = tables
        self.model_name = model_name if model_name is not None else config.SPACY_MODEL
        self.nlp = self._build_pipeline()

    def _build_pipeline(self):
        if self.model_name:
            nlp = spacy.load(self.model_name)
        else:
            nlp = spacy.blank("en")

        ruler_config = {"phrase_matcher_attr": "LOWER", "overwrite_ents": True}
        if "ner" in nlp.pipe_names:
            ruler = nlp.add_pipe("entity_ruler", before="ner", config=ruler_config)
        else:
            ruler = nlp.add_pipe("entity_ruler", config=ruler_config)

        patterns = [{"label": "ORG", "pattern": name} for name in self.tables.organizations]
        patterns += [{"label": "GPE", "pattern": name} for name in self.tables.locations]
        ruler.add_patterns(patterns)
        logger.debug("spaCy pipeline ready: %s", nlp.pipe_names)
        return nlp

    def _named_entities(self, text):
        doc = self.nlp(text)
        orgs = [ent.text for ent in doc.ents if ent.label_ == "ORG"]
        places = [ent.text for ent in doc.ents if ent.label_ in ("GPE", "LOC")]
        return _unique(orgs), _unique(places)

    def _safely(self, name, fn, *args):
        try:
            return fn(*args)
        except Exception as e:
            logger.debug("%s extraction failed: %s", name, e)
            return None

    def extract(self, text):
        if not isinstance(text, str):
            text = "" if text is None else str(text)

        amounts = self._safely("Amount", extract_amounts, text) or []
        dates = self._safely("Date", extract_dates, text) or []
        contacts = self._safely("Contact", extract_contact_info, text) or []
        documents = self._safely("Document", extract_documents, text, self.tables.document_keywords) or []
        named = self._safely("Named entity", self._named_entities, text) or ([], [])

        return Entities(
            amounts=amounts,
            dates=dates,
            contact_info=contacts,
            documents=documents,
            organizations=named[0],
            locations=named[1],
        )
