"""Sentiment classification strategies used by the sentiment service."""

from .base import SentimentStrategy
from .keyword_strategy import KeywordStrategy
from .llm_strategy import LLMStrategy

__all__ = [
    "SentimentStrategy",
    "KeywordStrategy",
    "LLMStrategy",
]
