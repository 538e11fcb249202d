from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


PROJECT_ROOT = Path(__file__).resolve().parent.parent


@dataclass(slots=True)
class AppConfig:
    openai_api_key: Optional[str]
    openai_model: str
    openai_base_url: str
    llm_temperature: float
    llm_timeout: float
    max_content_chars: int
    log_dir: Path
    log_level: str
    db_path: Path
    default_user: str


def _resolve_path(value: str | None, fallback: str) -> Path:
    candidate = Path(value or fallback)
    if not candidate.is_absolute():
        candidate = PROJECT_ROOT / candidate
    return candidate


def _number(name: str, default: str, cast):
    raw = os.getenv(name, default)
    try:
        return cast(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def load_config(env_file: str | os.PathLike[str] | None = None) -> AppConfig:
    """Load configuration values from a .env file and environment variables."""

    if env_file:
        load_dotenv(env_file, override=False)
    else:
        load_dotenv(override=False)

    log_dir = _resolve_path(os.getenv("LOG_DIR"), "logs")
    db_path = _resolve_path(os.getenv("DB_PATH"), "data/sentiment.db")

    log_dir.mkdir(parents=True, exist_ok=True)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    max_content_chars = _number("MAX_CONTENT_CHARS", "4000", int)
    if max_content_chars <= 0:
        raise ValueError("MAX_CONTENT_CHARS must be positive")

    return AppConfig(
        openai_api_key=os.getenv("OPENAI_API_KEY") or None,
        openai_model=os.getenv("OPENAI_MODEL", "gpt-4o"),
        openai_base_url=os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1"),
        llm_temperature=_number("LLM_TEMPERATURE", "0.3", float),
        llm_timeout=_number("LLM_TIMEOUT_SECONDS", "30", float),
        max_content_chars=max_content_chars,
        log_dir=log_dir,
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        db_path=db_path,
        default_user=os.getenv("DEFAULT_USER", "default"),
    )
