import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional, Tuple

from loanbot.text import normalize_text, sentences

GENERAL_CONTEXT = "general inquiry"


@dataclass(frozen=True)
class CategoryMatch:
    category: Optional[str]
    confidence: float
    context: str
    related_topics: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Sentiment:
    score: float
    positive: int
    negative: int
    neutral: int


@dataclass(frozen=True)
class Urgency:
    score: float
    level: str


@dataclass(frozen=True)
class Complexity:
    word_count: int
    sentence_count: int
    avg_words_per_sentence: float
    level: str


def _hits(text, keywords):
    return sum(1 for k in keywords if k in text)


# ========= Semantic category =========
def match_category(message, tables):
    lower = normalize_text(message)
    best, best_score = None, 0.0
    for name, category in tables.categories.items():
        score = _hits(lower, category.keywords) / len(category.keywords)
        if score > best_score:
            best, best_score = name, score

    if best is None:
        return CategoryMatch(None, 0.0, GENERAL_CONTEXT, ())
    return CategoryMatch(
        category=best,
        confidence=best_score,
        context=tables.categories[best].context,
        related_topics=tuple(tables.related_topics.get(best, ())),
    )


# ========= Sentiment =========
def analyze_sentiment(message, tables):
    lower = normalize_text(message)
    pos = _hits(lower, tables.positive_words)
    neg = _hits(lower, tables.negative_words)
    total = pos + neg
    score = (pos - neg) / total if total > 0 else 0.0
    return Sentiment(score=score, positive=pos, negative=neg, neutral=1 if total == 0 else 0)


# ========= Question type =========
@lru_cache(maxsize=None)
def _question_regex(word):
    return re.compile(r"^%s\b" % re.escape(word), re.IGNORECASE)


def classify_question_type(message, tables):
    stripped = message.strip()
    for word in tables.question_types:
        if _question_regex(word).search(stripped):
            return word
    return "statement"


# ========= Urgency / complexity =========
def assess_urgency(message, sentiment, tables):
    raw = float(_hits(normalize_text(message), tables.urgency_words))
    if sentiment.score < -0.3:
        raw += 0.5

    if raw > 0.7:
        level = "high"
    elif raw > 0.3:
        level = "medium"
    else:
        level = "low"
    return Urgency(score=min(raw, 1.0), level=level)


def assess_complexity(message):
    word_count = len(message.split())
    sentence_count = len(sentences(message))
    avg = word_count / sentence_count

    if avg > 15:
        level = "high"
    elif avg > 10:
        level = "medium"
    else:
        level = "low"
    return Complexity(word_count, sentence_count, avg, level)


# ========= Language =========
def detect_language(message, tables):
    lower = normalize_text(message)
    hindi = _hits(lower, tables.hindi_words)
    english = _hits(lower, tables.english_words)
    if hindi > english:
        return "hindi"
    if english > hindi:
        return "english"
    return "mixed"
