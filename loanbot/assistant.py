import logging
import sqlite3
from dataclasses import dataclass
from typing import Optional

from loanbot import config, db
from loanbot.context import ConversationContext, analyze_context
from loanbot.entities import EntityExtractor
from loanbot.intents import IntentScorer
from loanbot.responses import FuzzyMatch, contextual_response, find_pattern_match, select_best_response
from loanbot.tables import load_tables

logger = logging.getLogger(__name__)

CONTEXTUAL = "contextual"
PATTERN = "pattern"
FALLBACK = "fallback"


@dataclass(frozen=True)
class Reply:
    text: str
    intent: str
    confidence: float
    source: str
    entities: dict
    category: Optional[str]
    context: Optional[ConversationContext] = None
    closest: Optional[FuzzyMatch] = None


class LoanAssistant:
    """Message in, canned reply out.

    Tries the contextual decision table first, then pattern scoring over the
    response table, then the generic fallback text.
    """

    def __init__(self, tables=None, extractor=None, scorer=None, chat_log_path=None):
        self.tables = tables if tables is not None else load_tables()
        self.extractor = extractor if extractor is not None else EntityExtractor(self.tables)
        self.scorer = scorer if scorer is not None else IntentScorer(self.tables)
        self.chat_log_path = chat_log_path if chat_log_path is not None else config.CHAT_DB_PATH
        self.pattern_threshold = config.PATTERN_THRESHOLD

        if self.chat_log_path:
            try:
                db.create_db(self.chat_log_path)
            except sqlite3.Error as e:
                logger.warning("Chat log disabled, could not open %s: %s", self.chat_log_path, e)
                self.chat_log_path = ""

    def _respond(self, message, context):
        text = contextual_response(message, context)
        if text is not None:
            return text, CONTEXTUAL

        best = select_best_response(message, self.tables.patterns, self.tables, self.pattern_threshold)
        if best is not None:
            logger.debug("Best match: %r with score %.2f", best.pattern, best.score)
            return self.tables.response_for(best.pattern), PATTERN

        return config.FALLBACK_RESPONSE, FALLBACK

    def reply(self, message, history=(), account=None):
        if not message or not message.strip():
            return Reply(config.EMPTY_MESSAGE_RESPONSE, "general_inquiry", 0.0, FALLBACK, {}, None)

        context = analyze_context(message, history, self.tables, self.scorer, self.extractor)
        logger.debug(
            "Analysis: intent=%s confidence=%.2f entities=%s category=%s mood=%s stage=%s question=%s urgency=%s",
            context.current_intent.intent,
            context.current_intent.confidence,
            context.entities.non_empty(),
            context.semantic.category,
            context.user_mood,
            context.journey.stage,
            context.question_type,
            context.urgency.level,
        )
        closest = find_pattern_match(message, self.tables)

        text, source = self._respond(message, context)
        result = Reply(
            text=text,
            intent=context.current_intent.intent,
            confidence=context.current_intent.confidence,
            source=source,
            entities=context.entities.to_dict(),
            category=context.semantic.category,
            context=context,
            closest=closest,
        )
        self._log_chat(message, result, account)
        return result

    def _log_chat(self, message, result, account=None):
        if not self.chat_log_path:
            return
        try:
            db.save_chat(account, message, result.text, result.intent, result.confidence, db_path=self.chat_log_path)
        except sqlite3.Error as e:
            logger.warning("Could not write chat log to %s: %s", self.chat_log_path, e)
