from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(slots=True)
class EmailMessage:
    """Email submitted for sentiment analysis."""

    id: str
    content: str
    sender: str = ""
    subject: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EmailMessage":
        email_id = data.get("id")
        content = data.get("content")
        if email_id in (None, ""):
            raise ValueError("Email is missing an 'id'")
        if not isinstance(content, str) or not content:
            raise ValueError(f"Email {email_id} is missing 'content'")
        subject = data.get("subject")
        return cls(
            id=str(email_id),
            content=content,
            sender=str(data.get("sender") or ""),
            subject=str(subject) if subject is not None else None,
        )
