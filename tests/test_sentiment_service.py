from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from typing import Optional

import httpx

from models.email_message import EmailMessage
from models.sentiment import SentimentResult
from services.llm_client import ChatCompletionClient
from services.sentiment_service import SentimentService
from services.strategies import LLMStrategy, SentimentStrategy


class FixedStrategy(SentimentStrategy):
    def __init__(self, result: SentimentResult):
        self._result = result
        self.calls: list[tuple[str, Optional[str]]] = []

    def analyze(self, content: str, subject: Optional[str] = None) -> SentimentResult:
        self.calls.append((content, subject))
        return self._result


class BrokenStrategy(SentimentStrategy):
    def analyze(self, content: str, subject: Optional[str] = None) -> SentimentResult:
        raise RuntimeError("service unreachable")


def _result(sentiment: str = "positive", confidence: float = 0.9, urgency: str = "low") -> SentimentResult:
    return SentimentResult(
        sentiment=sentiment,
        confidence=confidence,
        emotion="grateful",
        reasoning="test",
        urgency_level=urgency,
        tone="friendly",
    )


def _llm_service(handler) -> SentimentService:
    client = ChatCompletionClient(api_key="sk-test", transport=httpx.MockTransport(handler))
    return SentimentService(primary=LLMStrategy(client, max_content_chars=20))


def test_primary_strategy_result_is_returned() -> None:
    primary = FixedStrategy(_result())
    service = SentimentService(primary=primary)
    assert service.analyze("Thanks!", "Hello") == _result()
    assert primary.calls == [("Thanks!", "Hello")]


def test_failure_falls_back_to_keywords() -> None:
    service = SentimentService(primary=BrokenStrategy())
    result = service.analyze("We have an emergency", None)
    assert result.sentiment == "urgent"
    assert result.reasoning == "Basic keyword-based analysis"


def test_never_raises_for_empty_input_and_broken_model() -> None:
    service = SentimentService(primary=BrokenStrategy())
    result = service.analyze("", None)
    assert result.sentiment == "neutral"
    assert 0.0 <= result.confidence <= 1.0


def test_without_primary_uses_keywords() -> None:
    service = SentimentService()
    assert service.analyze("Thank you so much").sentiment == "positive"


def test_model_reply_is_validated_and_defaulted() -> None:
    reply = {
        "sentiment": "frustrated",
        "confidence": 1.5,
        "keyPhrases": ["a", "b", "c", "d", "e", "f"],
    }

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"choices": [{"message": {"content": json.dumps(reply)}}]})

    result = _llm_service(handler).analyze("Still waiting on my refund", "Refund")
    assert result.sentiment == "frustrated"
    assert result.confidence == 1.0
    assert result.key_phrases == ("a", "b", "c", "d", "e")
    assert result.emotion == "neutral"
    assert result.tone == "professional"
    assert result.urgency_level == "low"


def test_prompt_embeds_subject_and_truncated_content() -> None:
    prompts = []

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        prompts.append(body["messages"])
        return httpx.Response(200, json={"choices": [{"message": {"content": "{}"}}]})

    _llm_service(handler).analyze("x" * 50, None)
    system, user = prompts[0]
    assert system["content"].startswith("You are an expert sentiment analysis AI")
    assert "Subject: No subject" in user["content"]
    assert "Content: " + "x" * 20 + "\n" in user["content"]
    assert "x" * 21 not in user["content"]


def test_malformed_model_reply_uses_fallback() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"choices": [{"message": {"content": "Sure! It's positive."}}]})

    result = _llm_service(handler).analyze("This is a terrible problem", None)
    assert result.sentiment == "negative"
    assert result.confidence == 0.6


def test_analyze_many_preserves_order_and_stamps_analysis_time() -> None:
    start = datetime(2024, 5, 10, 9, 0, tzinfo=timezone.utc)
    ticks = iter(start + timedelta(seconds=offset) for offset in range(10))
    service = SentimentService(clock=lambda: next(ticks))
    emails = [
        EmailMessage(id="b", content="Great work", sender="x@example.com", subject="Kudos"),
        EmailMessage(id="a", content="Server error again", sender="y@example.com"),
        EmailMessage(id="b", content="Great work", sender="x@example.com", subject="Kudos"),
    ]

    records = service.analyze_many(emails)

    assert [record.email_id for record in records] == ["b", "a", "b"]
    assert [record.timestamp for record in records] == [start, start + timedelta(seconds=1), start + timedelta(seconds=2)]
    assert records[1].subject == ""
    assert records[1].analysis.sentiment == "negative"
    assert records[0].sender == "x@example.com"


def test_detect_urgent_filters_and_ranks() -> None:
    service = SentimentService()
    emails = [
        EmailMessage(id="calm", content="Thanks for the update", sender="a@example.com"),
        EmailMessage(id="fire", content="Critical outage, respond immediately", sender="b@example.com"),
    ]
    urgent = service.detect_urgent(emails)
    assert [item.record.email_id for item in urgent] == ["fire"]
    assert 0.0 <= urgent[0].urgency_score <= 1.0


class ClosingStrategy(FixedStrategy):
    def __init__(self, result: SentimentResult):
        super().__init__(result)
        self.closed = False

    def close(self) -> None:
        self.closed = True


def test_close_releases_primary_strategy() -> None:
    primary = ClosingStrategy(_result())
    SentimentService(primary=primary).close()
    assert primary.closed is True


def test_close_shuts_model_http_client() -> None:
    client = ChatCompletionClient(
        api_key="sk-test", transport=httpx.MockTransport(lambda request: httpx.Response(200))
    )
    SentimentService(primary=LLMStrategy(client)).close()
    assert client._client.is_closed
