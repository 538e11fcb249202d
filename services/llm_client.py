from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import httpx

LOGGER = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4o"


class LLMClientError(RuntimeError):
    """Raised when the text-generation service cannot produce a JSON object."""


class ChatCompletionClient:
    """Minimal client for an OpenAI-compatible chat completions endpoint."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        temperature: float = 0.3,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._model = model
        self._temperature = temperature
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def complete_json(self, system: str, user: str) -> Dict[str, Any]:
        """Send one system/user exchange and return the reply parsed as a JSON object."""

        payload = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            "response_format": {"type": "json_object"},
            "temperature": self._temperature,
        }
        try:
            response = self._client.post("/chat/completions", json=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as exc:
            raise LLMClientError(f"Chat completion returned HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise LLMClientError(f"Chat completion request failed: {exc}") from exc
        except ValueError as exc:
            raise LLMClientError("Chat completion response was not JSON") from exc

        try:
            content = body["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise LLMClientError("Chat completion response had no message content") from exc

        try:
            document = json.loads(content or "{}")
        except (TypeError, ValueError) as exc:
            raise LLMClientError("Model reply was not valid JSON") from exc
        if not isinstance(document, dict):
            raise LLMClientError(f"Model reply was {type(document).__name__}, expected an object")
        LOGGER.debug("Chat completion returned keys %s", sorted(document))
        return document
