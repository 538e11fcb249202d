from __future__ import annotations

import logging
from typing import Optional

from models.lexicon import NEGATIVE_WORDS, POSITIVE_WORDS, URGENT_WORDS
from models.sentiment import SentimentResult

from .base import SentimentStrategy

LOGGER = logging.getLogger(__name__)
LEXICONS = (POSITIVE_WORDS, NEGATIVE_WORDS, URGENT_WORDS)

FALLBACK_CONFIDENCE = 0.6
FALLBACK_REASONING = "Basic keyword-based analysis"


class KeywordStrategy(SentimentStrategy):
    """Deterministic lexicon-counting classifier used when the model is unavailable.

    Only the body is inspected; the subject is accepted for interface parity.
    """

    name = "keyword"

    def analyze(self, content: Optional[str], subject: Optional[str] = None) -> SentimentResult:  # noqa: ARG002
        text = (content or "").lower()
        scores = {lexicon.name: lexicon.score(text) for lexicon in LEXICONS}
        positive, negative, urgent = scores["positive"], scores["negative"], scores["urgent"]
        LOGGER.debug("Keyword scores %s", scores)

        sentiment, emotion, urgency = "neutral", "neutral", "low"
        if urgent > 0:
            sentiment, emotion, urgency = "urgent", "stressed", "high"
        elif negative > positive:
            sentiment, emotion = "negative", "concerned"
            urgency = "high" if negative > 2 else "medium"
        elif positive > 0:
            sentiment, emotion = "positive", "happy"

        return SentimentResult(
            sentiment=sentiment,
            confidence=FALLBACK_CONFIDENCE,
            emotion=emotion,
            reasoning=FALLBACK_REASONING,
            urgency_level=urgency,
            tone="professional",
            key_phrases=(),
        )
