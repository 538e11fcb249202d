from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True, slots=True)
class Lexicon:
    """Named keyword list used by the keyword fallback classifier."""

    name: str
    keywords: Tuple[str, ...]

    def normalized_keywords(self) -> Tuple[str, ...]:
        return tuple(kw.lower() for kw in self.keywords)

    def score(self, text: str) -> int:
        """Number of keywords that occur anywhere in ``text``."""

        lowered = text.lower()
        return sum(1 for kw in self.normalized_keywords() if kw in lowered)


POSITIVE_WORDS = Lexicon(
    name="positive",
    keywords=("thank", "great", "excellent", "good", "appreciate", "wonderful", "amazing", "perfect"),
)
NEGATIVE_WORDS = Lexicon(
    name="negative",
    keywords=("urgent", "asap", "immediately", "problem", "issue", "error", "wrong", "bad", "terrible"),
)
URGENT_WORDS = Lexicon(
    name="urgent",
    keywords=("urgent", "asap", "immediately", "emergency", "critical", "deadline"),
)
