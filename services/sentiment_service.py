from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional

from models.email_message import EmailMessage
from models.sentiment import EmailSentimentRecord, SentimentResult, UrgentEmail
from services.llm_client import ChatCompletionClient
from services.strategies import KeywordStrategy, LLMStrategy, SentimentStrategy
from services.urgency import select_urgent
from utils.config import AppConfig

LOGGER = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SentimentService:
    """Classify emails with a primary strategy, falling back to keywords on any failure."""

    def __init__(
        self,
        primary: Optional[SentimentStrategy] = None,
        fallback: Optional[SentimentStrategy] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._primary = primary
        self._fallback = fallback or KeywordStrategy()
        self._clock = clock

    def close(self) -> None:
        for strategy in (self._primary, self._fallback):
            if strategy is not None:
                strategy.close()

    def analyze(self, content: Optional[str], subject: Optional[str] = None) -> SentimentResult:
        text = content or ""
        if self._primary is not None:
            try:
                return self._primary.analyze(text, subject)
            except Exception as exc:  # noqa: BLE001
                LOGGER.warning("Sentiment model failed, using keyword fallback: %s", exc)
        return self._fallback.analyze(text, subject)

    def analyze_many(self, emails: Iterable[EmailMessage]) -> List[EmailSentimentRecord]:
        records: List[EmailSentimentRecord] = []
        for email in emails:
            analysis = self.analyze(email.content, email.subject)
            records.append(
                EmailSentimentRecord(
                    email_id=email.id,
                    subject=email.subject or "",
                    content=email.content,
                    sender=email.sender,
                    timestamp=self._clock(),
                    analysis=analysis,
                )
            )
            LOGGER.debug("Email %s classified as %s", email.id, analysis.sentiment)
        LOGGER.info("Analyzed %s email(s)", len(records))
        return records

    def detect_urgent(self, emails: Iterable[EmailMessage]) -> List[UrgentEmail]:
        return select_urgent(self.analyze_many(emails))

    @classmethod
    def from_config(cls, config: AppConfig) -> "SentimentService":
        if not config.openai_api_key:
            LOGGER.info("OPENAI_API_KEY not set; sentiment analysis runs on keywords only")
            return cls()
        client = ChatCompletionClient(
            api_key=config.openai_api_key,
            model=config.openai_model,
            base_url=config.openai_base_url,
            temperature=config.llm_temperature,
            timeout=config.llm_timeout,
        )
        return cls(primary=LLMStrategy(client, max_content_chars=config.max_content_chars))
