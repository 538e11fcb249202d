from __future__ import annotations

import logging
from typing import Optional

from models.sentiment import SentimentResult
from services.llm_client import ChatCompletionClient

from .base import SentimentStrategy

LOGGER = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert sentiment analysis AI that provides accurate emotional and tonal "
    "analysis of email communications. Always respond with valid JSON."
)

PROMPT_TEMPLATE = """Analyze the sentiment and emotional tone of this email:

Subject: {subject}
Content: {content}

Provide a detailed sentiment analysis in JSON format with these fields:
- sentiment: "positive", "neutral", "negative", "urgent", or "frustrated"
- confidence: number between 0 and 1
- emotion: primary emotion detected (happy, sad, angry, excited, worried, etc.)
- reasoning: brief explanation of the sentiment classification
- urgencyLevel: "low", "medium", or "high" based on language urgency
- tone: overall communication tone (professional, casual, formal, friendly, etc.)
- keyPhrases: array of 3-5 key phrases that indicate the sentiment

Consider:
- Word choice and emotional language
- Punctuation patterns (exclamation marks, caps)
- Context and implied meaning
- Professional vs personal communication style
- Urgency indicators and action requests"""


def build_prompt(content: str, subject: Optional[str], max_chars: Optional[int] = None) -> str:
    body = content or ""
    if max_chars is not None and len(body) > max_chars:
        body = body[:max_chars]
    return PROMPT_TEMPLATE.format(subject=subject or "No subject", content=body)


class LLMStrategy(SentimentStrategy):
    """Strategy that asks a chat-completion model for a JSON sentiment judgment."""

    name = "llm"

    def __init__(self, client: ChatCompletionClient, max_content_chars: Optional[int] = None):
        self._client = client
        self._max_content_chars = max_content_chars

    def close(self) -> None:
        self._client.close()

    def analyze(self, content: str, subject: Optional[str] = None) -> SentimentResult:
        prompt = build_prompt(content, subject, self._max_content_chars)
        document = self._client.complete_json(SYSTEM_PROMPT, prompt)
        result = SentimentResult.from_payload(document)
        LOGGER.debug("Model classified email as %s (%.2f)", result.sentiment, result.confidence)
        return result
