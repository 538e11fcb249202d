from __future__ import annotations

import logging
from collections import Counter
from datetime import date, datetime, timedelta, timezone
from typing import Dict, Optional, Sequence

from models.sentiment import (
    SENTIMENTS,
    EmailSentimentRecord,
    EmotionCount,
    SentimentStatistics,
    TrendPoint,
)

LOGGER = logging.getLogger(__name__)

TREND_DAYS = 7
TOP_EMOTIONS = 5


def utc_day(timestamp: datetime) -> date:
    if timestamp.tzinfo is None:
        return timestamp.date()
    return timestamp.astimezone(timezone.utc).date()


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


class StatisticsService:
    """Reduces analysed emails into sentiment counts, emotion rankings and a weekly trend."""

    def __init__(self, trend_days: int = TREND_DAYS, top_emotions: int = TOP_EMOTIONS):
        self._trend_days = trend_days
        self._top_emotions = top_emotions

    def summarize(
        self, records: Sequence[EmailSentimentRecord], today: Optional[date] = None
    ) -> SentimentStatistics:
        stats = SentimentStatistics(total_analyzed=len(records))
        emotions: Counter[str] = Counter()
        confidence_total = 0.0

        for record in records:
            analysis = record.analysis
            setattr(stats, analysis.sentiment, stats.count_for(analysis.sentiment) + 1)
            confidence_total += analysis.confidence
            emotions[analysis.emotion] += 1

        if records:
            stats.average_confidence = confidence_total / len(records)
        # Counter keeps insertion order and sorted() is stable, so ties keep first-seen order
        ranked = sorted(emotions.items(), key=lambda item: item[1], reverse=True)
        stats.top_emotions = [EmotionCount(emotion, count) for emotion, count in ranked[: self._top_emotions]]
        stats.trend_data = self._trend(records, today or utc_today())

        LOGGER.debug(
            "Summarized %s records (avg confidence %.2f)", stats.total_analyzed, stats.average_confidence
        )
        return stats

    def _trend(self, records: Sequence[EmailSentimentRecord], today: date) -> list[TrendPoint]:
        window: Dict[date, Dict[str, int]] = {}
        for offset in range(self._trend_days - 1, -1, -1):
            window[today - timedelta(days=offset)] = {sentiment: 0 for sentiment in SENTIMENTS}

        for record in records:
            bucket = window.get(utc_day(record.timestamp))
            if bucket is not None:
                bucket[record.analysis.sentiment] += 1

        return [
            TrendPoint(date=day, sentiment=sentiment, count=count)
            for day, counts in window.items()
            for sentiment, count in counts.items()
        ]
