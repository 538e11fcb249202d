from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence

from models.sentiment import EmailSentimentRecord, SentimentInsights, SentimentStatistics
from services.statistics_service import StatisticsService

LOGGER = logging.getLogger(__name__)

MAX_HIGHLIGHTS = 3
HIGHLIGHT_CONFIDENCE = 0.8
ALERT_SENTIMENTS = frozenset({"negative", "frustrated"})


def format_percent(value: float) -> str:
    return str(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class InsightService:
    """Turns sentiment statistics into human-readable insights and recommendations."""

    def __init__(self, statistics: Optional[StatisticsService] = None):
        self._statistics = statistics or StatisticsService()

    def generate(
        self,
        records: Sequence[EmailSentimentRecord],
        stats: Optional[SentimentStatistics] = None,
    ) -> SentimentInsights:
        if stats is None:
            stats = self._statistics.summarize(records)
        result = SentimentInsights()
        if stats.total_analyzed == 0:
            return result

        total = stats.total_analyzed
        positive_pct = stats.positive / total * 100
        negative_pct = stats.negative / total * 100
        urgent_pct = stats.urgent / total * 100

        if positive_pct > 60:
            result.insights.append(
                f"Strong positive communication: {format_percent(positive_pct)}% of emails show positive sentiment"
            )
        if negative_pct > 20:
            result.insights.append(
                f"High negative sentiment detected: {format_percent(negative_pct)}% of emails require attention"
            )
        if urgent_pct > 15:
            result.insights.append(
                f"Many urgent communications: {format_percent(urgent_pct)}% of emails marked as urgent"
            )
            result.recommendations.append(
                "Consider prioritizing urgent email responses to improve communication flow"
            )
        if stats.average_confidence > 0.8:
            result.insights.append(
                f"High confidence analysis: {format_percent(stats.average_confidence * 100)}% average accuracy"
            )

        if negative_pct > 15:
            result.recommendations.append(
                "Review negative sentiment emails for potential issues requiring immediate attention"
            )
        if stats.frustrated > 0:
            result.recommendations.append(
                "Address frustrated communications promptly to maintain positive relationships"
            )

        result.alert_emails = [
            record
            for record in records
            if record.analysis.sentiment in ALERT_SENTIMENTS or record.analysis.urgency_level == "high"
        ]
        result.positive_highlights = [
            record
            for record in records
            if record.analysis.sentiment == "positive" and record.analysis.confidence > HIGHLIGHT_CONFIDENCE
        ][:MAX_HIGHLIGHTS]

        LOGGER.info(
            "Generated %s insights, %s recommendations, %s alerts",
            len(result.insights),
            len(result.recommendations),
            len(result.alert_emails),
        )
        return result
