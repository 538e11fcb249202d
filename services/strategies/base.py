from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from models.sentiment import SentimentResult


class SentimentStrategy(ABC):
    """Strategy interface for classifying the sentiment of one email."""

    name = "base"

    @abstractmethod
    def analyze(self, content: str, subject: Optional[str] = None) -> SentimentResult:
        """Return a sentiment judgment for the supplied content and subject."""
        raise NotImplementedError

    def close(self) -> None:
        """Release any resources held by the strategy."""
