"""Static lookup tables.

Everything the classifiers read is built once into an immutable ``NLPTables``
and passed explicitly to each component. The two CSV tables (intent examples
and canned response patterns) are loaded with pandas; the rest are constants.
"""
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple

import pandas as pd

from loanbot import config
from loanbot.exceptions import DataFileError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SemanticCategory:
    keywords: Tuple[str, ...]
    context: str


@dataclass(frozen=True)
class ResponsePattern:
    pattern: str
    response: str


# ========= Semantic categories (order matters for ties) =========
SEMANTIC_CATEGORIES = (
    ("loan_inquiry", SemanticCategory(
        ("loan", "borrow", "money", "amount", "how much", "get loan", "need money", "financial help"),
        "user wants to know about loan options and amounts")),
    ("application_process", SemanticCategory(
        ("apply", "application", "process", "how to apply", "steps", "procedure", "apply for loan"),
        "user wants to understand the application process")),
    ("eligibility", SemanticCategory(
        ("eligible", "qualify", "requirements", "criteria", "can i get", "am i eligible", "qualification"),
        "user wants to check their eligibility")),
    ("documents", SemanticCategory(
        ("documents", "papers", "kyc", "pan", "aadhaar", "bank statement", "salary slip", "proof"),
        "user wants to know about required documents")),
    ("repayment", SemanticCategory(
        ("repay", "payment", "emi", "installment", "due date", "pay back", "repayment"),
        "user wants to understand repayment terms")),
    # "charges" is listed twice and scores twice
    ("interest_charges", SemanticCategory(
        ("interest", "rate", "charges", "fees", "cost", "how much interest", "charges"),
        "user wants to know about interest rates and charges")),
    ("company_info", SemanticCategory(
        ("company", "fundobaba", "about", "what is", "legitimate", "safe", "trust"),
        "user wants to know about the company")),
    ("support_contact", SemanticCategory(
        ("contact", "support", "help", "phone", "email", "customer service", "human"),
        "user wants to contact support")),
    ("technical_issues", SemanticCategory(
        ("problem", "issue", "error", "not working", "technical", "bug", "trouble"),
        "user is facing technical issues")),
    ("loan_status", SemanticCategory(
        ("status", "track", "check", "approved", "disbursed", "pending", "rejected"),
        "user wants to check loan status")),
)

RELATED_TOPICS = {
    "loan_inquiry": ("application_process", "eligibility", "interest_charges"),
    "application_process": ("documents", "eligibility", "loan_inquiry"),
    "documents": ("kyc", "application_process", "eligibility"),
    "repayment": ("interest_charges", "loan_inquiry"),
    "interest_charges": ("loan_inquiry", "repayment"),
    "company_info": ("support_contact", "loan_inquiry"),
}

# ========= Journey =========
JOURNEY_STAGES = (
    ("awareness", ("hello", "hi", "what is", "about", "company")),
    ("interest", ("loan", "amount", "how much", "interest", "charges")),
    ("consideration", ("apply", "process", "documents", "eligibility", "requirements")),
    ("application", ("apply now", "start application", "begin process")),
    ("post_application", ("status", "track", "approved", "disbursed")),
    ("support", ("help", "contact", "problem", "issue")),
)

# funnel order used for progression direction; "support" sits outside it
FUNNEL = ("awareness", "interest", "consideration", "application", "post_application")

# ========= Sentiment / urgency =========
POSITIVE_WORDS = (
    "good", "great", "excellent", "amazing", "wonderful", "happy", "thank", "thanks", "appreciate",
    "love", "like", "perfect", "awesome", "fantastic", "brilliant", "outstanding",
)
NEGATIVE_WORDS = (
    "bad", "terrible", "awful", "horrible", "sad", "angry", "frustrated", "disappointed", "hate",
    "dislike", "worst", "useless", "stupid", "annoying", "problem", "issue", "error",
)
URGENCY_WORDS = ("urgent", "emergency", "asap", "immediately", "now", "quick", "fast", "hurry")

QUESTION_TYPES = (
    "what", "how", "when", "where", "why", "who", "which",
    "can", "could", "would", "should", "is", "are", "do", "does",
)

# ========= Pattern scoring weights =========
def _weights(groups):
    table = {}
    for weight, terms in groups:
        for term in terms:
            table[term] = weight
    return table


COMMON_WORDS = _weights((
    (0.1, ("the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by")),
    (0.2, ("is", "are", "was", "were", "be", "been", "have", "has", "had", "do", "does", "did",
           "will", "would", "could", "should", "may", "might", "can")),
    (0.3, ("this", "that", "these", "those", "i", "you", "he", "she", "it", "we", "they",
           "me", "him", "her", "us", "them")),
    (0.4, ("what", "how", "when", "where", "why", "who", "which")),
))

IMPORTANT_KEYWORDS = _weights((
    (2.0, ("loan", "borrow", "money", "amount", "emi", "installment")),
    (1.8, ("apply", "application", "process", "steps",
           "documents", "papers", "kyc", "pan", "aadhaar", "bank statement",
           "repay", "payment", "repayment", "pay",
           "interest", "rate", "charges", "fees",
           "eligible", "eligibility", "qualify", "requirements", "criteria",
           "max", "maximum", "highest", "min", "minimum", "lowest",
           "salary", "income", "salary requirement",
           "reloan", "another loan", "second loan")),
    (1.5, ("fundobaba", "company", "about", "contact", "support", "help", "phone", "email")),
    (1.0, ("thank", "thanks", "appreciate")),
    (0.8, ("hello", "hi", "hey", "good morning", "good evening", "bye", "goodbye", "see you")),
))

INTERROGATIVES = ("what", "how", "why", "when", "where", "who", "which", "can", "could", "would", "should")

# ========= Entities =========
DOCUMENT_KEYWORDS = ("pan", "aadhaar", "adhar", "bank statement", "salary slip", "passport")

KNOWN_ORGANIZATIONS = (
    "Fundobaba", "UY Fincorp", "RBI", "Reserve Bank of India", "CIBIL", "NBFC",
    "SBI", "HDFC", "ICICI", "Axis Bank", "Kotak", "UIDAI", "Income Tax Department",
)

KNOWN_LOCATIONS = (
    "Mumbai", "Delhi", "New Delhi", "Bengaluru", "Bangalore", "Chennai", "Kolkata", "Hyderabad",
    "Pune", "Ahmedabad", "Jaipur", "Lucknow", "Noida", "Gurugram", "Gurgaon", "Andheri",
    "Maharashtra", "Karnataka", "Tamil Nadu", "West Bengal", "Telangana", "Gujarat",
    "Rajasthan", "Uttar Pradesh", "Kerala", "Punjab", "Haryana", "India",
)

# ========= Fuzzy phrase variations =========
PHRASE_VARIATIONS = (
    ("max loan", ("max loan", "maximum loan", "highest loan", "loan range", "loan amount range",
                  "max amount", "maximum amount", "highest amount", "what max amount",
                  "what maximum amount", "what highest amount", "max amount anyone can get",
                  "maximum amount anyone can get")),
    ("min loan", ("min loan", "minimum loan", "lowest loan", "minimum amount", "lowest amount",
                  "what min amount", "what minimum amount")),
    ("emi", ("emi", "installment", "monthly payment", "partial payment", "monthly emi",
             "installment payment")),
    ("salary", ("salary", "income", "minimum salary", "salary requirement", "income requirement",
                "salary needed", "income needed")),
    ("repayment", ("dont repay", "don't repay", "not repay", "miss payment", "late payment",
                   "default", "what if not repay", "don't pay", "not pay", "repayment", "repay",
                   "payment")),
    ("criteria", ("criteria", "eligibility criteria", "loan criteria", "requirements",
                  "qualification", "what needed", "eligible", "eligibility")),
    ("reloan", ("reloan", "re loan", "another loan", "second loan", "next loan",
                "take another loan", "how to take reloan")),
    ("thank", ("thank", "thank you so much", "appreciate it", "much appreciated", "thnx", "thanks")),
    ("understanding", ("got it", "ok", "okay", "alright", "understood", "makes sense", "i see",
                       "gotcha", "cool", "sounds good", "noted", "copy that")),
    ("closing", ("thats all", "that's all", "no further questions", "that helps", "will check",
                 "will try that", "ill get back", "i'll get back", "talk later")),
    ("help", ("help me", "help", "assist", "support")),
)

# ========= Language =========
HINDI_WORDS = ("namaste", "dhanyavaad", "kya", "kaise", "kahan")
ENGLISH_WORDS = ("hello", "thank", "loan", "apply", "help")

# intent scoring and keyword extraction; "see", "due", "amount", "like", "hi",
# "bye" and "thanks" carry meaning here and must stay out
STOP_WORDS = frozenset((
    "a", "about", "after", "all", "also", "am", "an", "and", "another", "any", "are", "as", "at",
    "be", "because", "been", "before", "being", "between", "both", "but", "by", "came", "can",
    "come", "could", "did", "do", "does", "each", "for", "from", "get", "got", "had", "has",
    "have", "he", "her", "here", "him", "his", "how", "i", "if", "in", "into", "is", "it", "its",
    "many", "me", "might", "more", "most", "much", "must", "my", "never", "now", "of", "on",
    "only", "or", "other", "our", "out", "over", "same", "should", "since", "so", "some",
    "still", "such", "than", "that", "the", "their", "them", "then", "there", "these", "they",
    "this", "those", "through", "to", "too", "under", "up", "very", "was", "way", "we", "well",
    "were", "what", "when", "where", "which", "while", "who", "why", "will", "with", "would",
    "you", "your",
))


@dataclass(frozen=True)
class NLPTables:
    intent_examples: Mapping[str, Tuple[str, ...]]
    response_patterns: Tuple[ResponsePattern, ...]
    categories: Mapping[str, SemanticCategory]
    related_topics: Mapping[str, Tuple[str, ...]]
    journey_stages: Mapping[str, Tuple[str, ...]]
    funnel: Tuple[str, ...]
    positive_words: Tuple[str, ...]
    negative_words: Tuple[str, ...]
    urgency_words: Tuple[str, ...]
    question_types: Tuple[str, ...]
    common_words: Mapping[str, float]
    important_keywords: Mapping[str, float]
    interrogatives: Tuple[str, ...]
    document_keywords: Tuple[str, ...]
    organizations: Tuple[str, ...]
    locations: Tuple[str, ...]
    phrase_variations: Mapping[str, Tuple[str, ...]]
    hindi_words: Tuple[str, ...]
    english_words: Tuple[str, ...]
    stop_words: frozenset

    @property
    def patterns(self):
        return tuple(p.pattern for p in self.response_patterns)

    def response_for(self, pattern):
        for p in self.response_patterns:
            if p.pattern == pattern:
                return p.response
        return None


def build_tables(intent_examples, response_patterns):
    """Freeze the two data tables together with the constant ones.

    ``intent_examples`` is an ordered mapping of intent -> phrases,
    ``response_patterns`` an iterable of ``(pattern, response)`` pairs.
    """
    patterns = tuple(ResponsePattern(p, r) for p, r in response_patterns)
    return NLPTables(
        intent_examples=MappingProxyType({k: tuple(v) for k, v in intent_examples.items()}),
        response_patterns=patterns,
        categories=MappingProxyType(dict(SEMANTIC_CATEGORIES)),
        related_topics=MappingProxyType(dict(RELATED_TOPICS)),
        journey_stages=MappingProxyType(dict(JOURNEY_STAGES)),
        funnel=FUNNEL,
        positive_words=POSITIVE_WORDS,
        negative_words=NEGATIVE_WORDS,
        urgency_words=URGENCY_WORDS,
        question_types=QUESTION_TYPES,
        common_words=MappingProxyType(dict(COMMON_WORDS)),
        important_keywords=MappingProxyType(dict(IMPORTANT_KEYWORDS)),
        interrogatives=INTERROGATIVES,
        document_keywords=DOCUMENT_KEYWORDS,
        organizations=KNOWN_ORGANIZATIONS,
        locations=KNOWN_LOCATIONS,
        phrase_variations=MappingProxyType(dict(PHRASE_VARIATIONS)),
        hindi_words=HINDI_WORDS,
        english_words=ENGLISH_WORDS,
        stop_words=STOP_WORDS,
    )


# ========= CSV loading =========
def _read_csv(path, columns):
    try:
        df = pd.read_csv(path, encoding="utf-8", dtype=str, keep_default_na=False)
    except FileNotFoundError as e:
        raise DataFileError(f"Data file not found: {path}", path=path, cause=e)
    except (pd.errors.EmptyDataError, pd.errors.ParserError, UnicodeDecodeError) as e:
        raise DataFileError(f"Could not parse data file: {path}", path=path, cause=e)

    if not all(col in df.columns for col in columns):
        raise DataFileError(f"CSV must contain columns: {','.join(columns)}", path=path)

    df = df[list(columns)].copy()
    for col in columns:
        df[col] = df[col].str.strip()
    df = df[(df[columns[0]] != "") & (df[columns[1]] != "")].copy()
    if df.empty:
        raise DataFileError(f"Data file has no rows: {path}", path=path)
    return df


def load_intent_examples(path=None):
    path = path or config.INTENT_FILE
    df = _read_csv(path, ("text", "intent"))
    examples = {}
    for text, intent in zip(df["text"], df["intent"]):
        examples.setdefault(intent, []).append(text.lower())
    logger.debug("Loaded %d intent examples across %d intents from %s", len(df), len(examples), path)
    return examples


def load_response_patterns(path=None):
    path = path or config.RESPONSE_FILE
    df = _read_csv(path, ("pattern", "response"))
    df["pattern"] = df["pattern"].str.lower()
    dupes = df[df["pattern"].duplicated()]["pattern"].tolist()
    if dupes:
        raise DataFileError(f"Duplicate response patterns: {', '.join(dupes)}", path=path)
    logger.debug("Loaded %d response patterns from %s", len(df), path)
    return list(zip(df["pattern"], df["response"]))


def load_tables(intent_file=None, response_file=None):
    return build_tables(load_intent_examples(intent_file), load_response_patterns(response_file))
