import logging
from dataclasses import dataclass, field
from typing import Dict

import numpy as np
from sklearn.feature_extraction.text import CountVectorizer, TfidfVectorizer

logger = logging.getLogger(__name__)

GENERAL_INQUIRY = "general_inquiry"


@dataclass(frozen=True)
class IntentMatch:
    intent: str
    confidence: float
    scores: Dict[str, float] = field(default_factory=dict)


class IntentScorer:
    """Bag-of-words nearest-intent scorer over the example phrase table.

    Every example phrase is one TF-IDF document (raw term counts times smoothed
    idf, no normalisation). A message scores against a document by summing the
    document's weight for every message term, repeats included; an intent's
    score is the sum over its documents.
    """

    def __init__(self, tables):
        self.tables = tables
        self.intents = list(tables.intent_examples)

        docs, owners = [], []
        for idx, intent in enumerate(self.intents):
            for phrase in tables.intent_examples[intent]:
                docs.append(phrase)
                owners.append(idx)
        self._owners = np.array(owners)

        stop_words = sorted(tables.stop_words)
        self.vectorizer = TfidfVectorizer(stop_words=stop_words, norm=None, smooth_idf=True)
        self._matrix = self.vectorizer.fit_transform(docs)
        self._counter = CountVectorizer(stop_words=stop_words, vocabulary=self.vectorizer.vocabulary_)
        logger.debug("Intent scorer fitted on %d phrases, %d terms", len(docs), len(self.vectorizer.vocabulary_))

    def _intent_scores(self, message):
        counts = self._counter.transform([message])
        doc_scores = np.asarray((self._matrix @ counts.T).todense()).ravel()
        return np.bincount(self._owners, weights=doc_scores, minlength=len(self.intents))

    def score(self, message):
        per_intent = self._intent_scores(message or "")

        scores = {}
        best_intent, best_score = GENERAL_INQUIRY, 0.0
        for intent, value in zip(self.intents, per_intent):
            value = float(value)
            if value <= 0:
                continue
            scores[intent] = value
            # strict > keeps the first intent on ties
            if value > best_score:
                best_intent, best_score = intent, value

        total = sum(scores.values())
        confidence = best_score / total if total > 0 else 0.0
        return IntentMatch(intent=best_intent, confidence=confidence, scores=scores)

    def predict(self, messages):
        return [self.score(m).intent for m in messages]
