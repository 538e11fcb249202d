from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, List, Mapping, Tuple

SENTIMENTS: Tuple[str, ...] = ("positive", "neutral", "negative", "urgent", "frustrated")
URGENCY_LEVELS: Tuple[str, ...] = ("low", "medium", "high")
MAX_KEY_PHRASES = 5

DEFAULT_SENTIMENT = "neutral"
DEFAULT_CONFIDENCE = 0.5
DEFAULT_EMOTION = "neutral"
DEFAULT_REASONING = "Analysis completed"
DEFAULT_URGENCY = "low"
DEFAULT_TONE = "professional"


def clamp_confidence(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


@dataclass(frozen=True, slots=True)
class SentimentResult:
    """Structured sentiment judgment for a single email."""

    sentiment: str
    confidence: float
    emotion: str
    reasoning: str
    urgency_level: str
    tone: str
    key_phrases: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.sentiment not in SENTIMENTS:
            raise ValueError(f"Unknown sentiment '{self.sentiment}'")
        if self.urgency_level not in URGENCY_LEVELS:
            raise ValueError(f"Unknown urgency level '{self.urgency_level}'")
        object.__setattr__(self, "confidence", clamp_confidence(self.confidence))
        object.__setattr__(self, "key_phrases", tuple(self.key_phrases)[:MAX_KEY_PHRASES])

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "SentimentResult":
        """Build a result from an untrusted document, defaulting each field.

        A confidence that is present but out of range is clamped, while a
        missing or non-numeric one falls back to the default before clamping.
        """

        sentiment = _choice(payload.get("sentiment"), SENTIMENTS, DEFAULT_SENTIMENT)
        urgency = _choice(
            _first_present(payload, "urgencyLevel", "urgency_level"), URGENCY_LEVELS, DEFAULT_URGENCY
        )
        raw_phrases = _first_present(payload, "keyPhrases", "key_phrases")
        phrases: List[str] = []
        if isinstance(raw_phrases, (list, tuple)):
            phrases = [str(phrase) for phrase in raw_phrases if phrase is not None][:MAX_KEY_PHRASES]
        return cls(
            sentiment=sentiment,
            confidence=_confidence(payload.get("confidence")),
            emotion=_text(payload.get("emotion"), DEFAULT_EMOTION),
            reasoning=_text(payload.get("reasoning"), DEFAULT_REASONING),
            urgency_level=urgency,
            tone=_text(payload.get("tone"), DEFAULT_TONE),
            key_phrases=tuple(phrases),
        )

    def to_dict(self) -> dict:
        return {
            "sentiment": self.sentiment,
            "confidence": self.confidence,
            "emotion": self.emotion,
            "reasoning": self.reasoning,
            "urgencyLevel": self.urgency_level,
            "tone": self.tone,
            "keyPhrases": list(self.key_phrases),
        }


@dataclass(frozen=True, slots=True)
class EmailSentimentRecord:
    """One analysed email together with its sentiment result."""

    email_id: str
    subject: str
    content: str
    sender: str
    timestamp: datetime
    analysis: SentimentResult

    def to_dict(self) -> dict:
        return {
            "emailId": self.email_id,
            "subject": self.subject,
            "content": self.content,
            "sender": self.sender,
            "timestamp": self.timestamp.isoformat(),
            "analysis": self.analysis.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EmailSentimentRecord":
        timestamp = datetime.fromisoformat(data["timestamp"])
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return cls(
            email_id=str(data["emailId"]),
            subject=data.get("subject") or "",
            content=data.get("content") or "",
            sender=data.get("sender") or "",
            timestamp=timestamp,
            analysis=SentimentResult.from_payload(data.get("analysis") or {}),
        )


@dataclass(frozen=True, slots=True)
class EmotionCount:
    emotion: str
    count: int


@dataclass(frozen=True, slots=True)
class TrendPoint:
    date: date
    sentiment: str
    count: int

    def to_dict(self) -> dict:
        return {"date": self.date.isoformat(), "sentiment": self.sentiment, "count": self.count}


@dataclass(slots=True)
class SentimentStatistics:
    positive: int = 0
    neutral: int = 0
    negative: int = 0
    urgent: int = 0
    frustrated: int = 0
    total_analyzed: int = 0
    average_confidence: float = 0.0
    top_emotions: List[EmotionCount] = field(default_factory=list)
    trend_data: List[TrendPoint] = field(default_factory=list)

    def count_for(self, sentiment: str) -> int:
        return getattr(self, sentiment)

    def to_dict(self) -> dict:
        return {
            **{sentiment: self.count_for(sentiment) for sentiment in SENTIMENTS},
            "totalAnalyzed": self.total_analyzed,
            "averageConfidence": self.average_confidence,
            "topEmotions": [{"emotion": item.emotion, "count": item.count} for item in self.top_emotions],
            "trendData": [point.to_dict() for point in self.trend_data],
        }


@dataclass(slots=True)
class SentimentInsights:
    insights: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    alert_emails: List[EmailSentimentRecord] = field(default_factory=list)
    positive_highlights: List[EmailSentimentRecord] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "insights": list(self.insights),
            "recommendations": list(self.recommendations),
            "alertEmails": [record.to_dict() for record in self.alert_emails],
            "positiveHighlights": [record.to_dict() for record in self.positive_highlights],
        }


@dataclass(frozen=True, slots=True)
class UrgentEmail:
    record: EmailSentimentRecord
    urgency_score: float

    def to_dict(self) -> dict:
        return {**self.record.to_dict(), "urgencyScore": self.urgency_score}


def _first_present(payload: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if payload.get(key) is not None:
            return payload[key]
    return None


def _choice(value: Any, allowed: Tuple[str, ...], default: str) -> str:
    if isinstance(value, str) and value.strip().lower() in allowed:
        return value.strip().lower()
    return default


def _text(value: Any, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def _confidence(value: Any) -> float:
    # bool is an int subclass; treat it as missing
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return clamp_confidence(DEFAULT_CONFIDENCE)
    if value != value:  # NaN
        return clamp_confidence(DEFAULT_CONFIDENCE)
    return clamp_confidence(value)
