"""Conversation context derived from the current message and prior user messages.

Everything here is a pure function of (message, history, tables) plus the
already-fitted scorer and extractor, so the same inputs always give equal
contexts.
"""
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from typing import Dict, Optional, Tuple

from loanbot import config
from loanbot.entities import Entities
from loanbot.intents import IntentMatch
from loanbot.semantics import (
    CategoryMatch,
    Complexity,
    Sentiment,
    Urgency,
    analyze_sentiment,
    assess_complexity,
    assess_urgency,
    classify_question_type,
    detect_language,
    match_category,
)
from loanbot.text import extract_keywords, normalize_text

NEW_CONVERSATION = "new_conversation"
NEW_USER = "new_user"


@dataclass(frozen=True)
class ConversationTopic:
    primary: Optional[str]
    distribution: Dict[str, int] = field(default_factory=dict)
    consistency: float = 0.0


@dataclass(frozen=True)
class Progression:
    status: str
    stages: Tuple[str, ...] = ()
    direction: str = "neutral"


@dataclass(frozen=True)
class Engagement:
    message_count: int
    avg_message_length: float
    follow_up_questions: int
    level: str


@dataclass(frozen=True)
class UserJourney:
    stage: str
    progression: Progression
    engagement: Engagement
    needs: Dict[str, int]


@dataclass(frozen=True)
class ConversationContext:
    current_intent: IntentMatch
    entities: Entities
    sentiment: Sentiment
    keywords: Tuple[str, ...]
    semantic: CategoryMatch
    conversation_length: int
    previous_intents: Tuple[str, ...]
    is_follow_up: bool
    user_mood: str
    topic: ConversationTopic
    journey: UserJourney
    question_type: str
    urgency: Urgency
    complexity: Complexity
    language: str

    def to_dict(self):
        return asdict(self)


# ========= History =========
def user_messages(history):
    """Contents of the user-sent items in ``history``.

    Items may be ``Message`` objects, mappings with ``content``/``sender``
    keys, or plain strings (taken as user messages).
    """
    out = []
    for item in history or ():
        if isinstance(item, str):
            out.append(item)
            continue
        if isinstance(item, Mapping):
            sender, content = item.get("sender", "user"), item.get("content", "")
        else:
            sender, content = getattr(item, "sender", "user"), getattr(item, "content", "")
        if sender == "user":
            out.append(content or "")
    return out


# ========= Mood / topic =========
def user_mood(messages, tables):
    window = messages[-config.MOOD_HISTORY:]
    if not window:
        return "neutral"
    avg = sum(analyze_sentiment(m, tables).score for m in window) / len(window)
    if avg > 0.3:
        return "positive"
    if avg < -0.3:
        return "negative"
    return "neutral"


def conversation_topic(messages, tables):
    window = messages[-config.TOPIC_HISTORY:]
    if not window:
        return ConversationTopic(NEW_CONVERSATION)

    distribution = {name: 0 for name in tables.categories}
    for m in window:
        category = match_category(m, tables).category
        if category:
            distribution[category] += 1

    primary, top = None, 0
    for name, count in distribution.items():
        if count > top:
            primary, top = name, count
    return ConversationTopic(primary, distribution, top / len(window))


# ========= Journey =========
def determine_stage(messages, tables):
    scores = {stage: 0 for stage in tables.journey_stages}
    for m in messages:
        lower = normalize_text(m)
        for stage, keywords in tables.journey_stages.items():
            scores[stage] += sum(1 for k in keywords if k in lower)

    # later stages win ties, so a message with no stage keywords lands on "support"
    best, top = None, -1
    for stage, score in scores.items():
        if score >= top:
            best, top = stage, score
    return best


def _direction(stages, funnel):
    if len(stages) < 2:
        return "neutral"
    # stages outside the funnel sort first, like a missing index
    idx = [funnel.index(s) if s in funnel else -1 for s in stages]
    forward = all(b >= a for a, b in zip(idx, idx[1:]))
    return "forward" if forward else "backward"


def analyze_progression(messages, tables):
    if len(messages) < 2:
        return Progression("starting")
    stages = tuple(determine_stage([m], tables) for m in messages[-config.STAGE_HISTORY:])
    status = "progressing" if len(set(stages)) > 1 else "stuck"
    return Progression(status, stages, _direction(stages, tables.funnel))


def calculate_engagement(messages, tables):
    count = len(messages)
    if count > 5:
        level = "high"
    elif count > 2:
        level = "medium"
    else:
        level = "low"

    avg_len = sum(len(m) for m in messages) / count if count else 0.0
    follow_ups = sum(
        1 for m in messages[1:] if classify_question_type(m, tables) != "statement"
    )
    return Engagement(count, avg_len, follow_ups, level)


def identify_needs(messages, tables):
    needs = {"information": 0, "guidance": 0, "support": 0, "clarification": 0, "reassurance": 0}
    for m in messages:
        lower = normalize_text(m)
        qtype = classify_question_type(lower, tables)
        if qtype in ("what", "how"):
            needs["information"] += 1
        elif qtype in ("can", "could"):
            needs["guidance"] += 1
        elif "help" in lower or "support" in lower:
            needs["support"] += 1
        elif qtype == "why" or "clarify" in lower:
            needs["clarification"] += 1
        elif "safe" in lower or "trust" in lower or "legitimate" in lower:
            needs["reassurance"] += 1
    return needs


def analyze_journey(messages, tables):
    stage = determine_stage(messages[-config.STAGE_HISTORY:], tables) if messages else NEW_USER
    return UserJourney(
        stage=stage,
        progression=analyze_progression(messages, tables),
        engagement=calculate_engagement(messages, tables),
        needs=identify_needs(messages, tables),
    )


# ========= Context =========
def analyze_context(message, history, tables, scorer, extractor):
    prior = user_messages(history)
    sentiment = analyze_sentiment(message, tables)

    return ConversationContext(
        current_intent=scorer.score(message),
        entities=extractor.extract(message),
        sentiment=sentiment,
        keywords=tuple(extract_keywords(message, tables.stop_words)),
        semantic=match_category(message, tables),
        conversation_length=len(history or ()),
        previous_intents=tuple(scorer.score(m).intent for m in prior[-config.INTENT_HISTORY:]),
        is_follow_up=len(prior) > 0,
        user_mood=user_mood(prior, tables),
        topic=conversation_topic(prior, tables),
        journey=analyze_journey(prior, tables),
        question_type=classify_question_type(message, tables),
        urgency=assess_urgency(message, sentiment, tables),
        complexity=assess_complexity(message),
        language=detect_language(message, tables),
    )
