from __future__ import annotations

from typing import Iterable, List

from models.sentiment import EmailSentimentRecord, SentimentResult, UrgentEmail

URGENT_SCORE_THRESHOLD = 0.7

_LEVEL_WEIGHTS = {"high": 0.4, "medium": 0.2}
_SENTIMENT_WEIGHTS = (("urgent", 0.3), ("frustrated", 0.2), ("negative", 0.1))
_CONFIDENCE_WEIGHT = 0.3


def urgency_score(result: SentimentResult) -> float:
    """Weighted urgency signal in [0, 1] derived from a sentiment result."""

    score = _LEVEL_WEIGHTS.get(result.urgency_level, 0.0)
    for sentiment, weight in _SENTIMENT_WEIGHTS:
        if result.sentiment == sentiment:
            score += weight
    score += result.confidence * _CONFIDENCE_WEIGHT
    return min(1.0, score)


def select_urgent(records: Iterable[EmailSentimentRecord]) -> List[UrgentEmail]:
    """Keep records that need immediate attention, most urgent first."""

    scored = [UrgentEmail(record=record, urgency_score=urgency_score(record.analysis)) for record in records]
    urgent = [
        item
        for item in scored
        if item.record.analysis.urgency_level == "high" or item.urgency_score > URGENT_SCORE_THRESHOLD
    ]
    return sorted(urgent, key=lambda item: item.urgency_score, reverse=True)
