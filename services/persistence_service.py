from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from typing import Iterable, List

from models.sentiment import EmailSentimentRecord

LOGGER = logging.getLogger(__name__)


class AnalysisStore:
    """SQLite-backed store of analysed emails, partitioned by user."""

    def __init__(self, db_path: Path):
        self._db_path = db_path
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self._db_path)

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS email_sentiment (
                    user TEXT NOT NULL,
                    email_id TEXT NOT NULL,
                    analyzed_at TEXT NOT NULL,
                    sentiment TEXT NOT NULL,
                    payload TEXT NOT NULL,
                    PRIMARY KEY (user, email_id)
                )
                """
            )
            conn.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_sentiment_user_time
                ON email_sentiment(user, analyzed_at)
                """
            )

    def save(self, user: str, records: Iterable[EmailSentimentRecord]) -> int:
        rows = [
            (
                user,
                record.email_id,
                record.timestamp.isoformat(),
                record.analysis.sentiment,
                json.dumps(record.to_dict()),
            )
            for record in records
        ]
        if not rows:
            return 0
        with self._connect() as conn:
            conn.executemany(
                """
                INSERT OR REPLACE INTO email_sentiment(user, email_id, analyzed_at, sentiment, payload)
                VALUES (?, ?, ?, ?, ?)
                """,
                rows,
            )
        LOGGER.debug("Stored %s analyses for user %s", len(rows), user)
        return len(rows)

    def records_for(self, user: str, limit: int | None = None) -> List[EmailSentimentRecord]:
        query = "SELECT payload FROM email_sentiment WHERE user=? ORDER BY analyzed_at DESC"
        params: tuple = (user,)
        if limit is not None:
            query += " LIMIT ?"
            params = (user, limit)
        with self._connect() as conn:
            rows = conn.execute(query, params).fetchall()
        return [EmailSentimentRecord.from_dict(json.loads(row[0])) for row in rows]

    def has_records(self, user: str) -> bool:
        with self._connect() as conn:
            row = conn.execute("SELECT 1 FROM email_sentiment WHERE user=? LIMIT 1", (user,)).fetchone()
        return row is not None

    def is_analyzed(self, user: str, email_id: str) -> bool:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT 1 FROM email_sentiment WHERE user=? AND email_id=?",
                (user, email_id),
            ).fetchone()
        return row is not None
