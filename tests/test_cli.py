from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import pytest
from click.testing import CliRunner

from main import auto_process, build_context, cli
from models.email_message import EmailMessage
from models.sentiment import SentimentResult
from services.sentiment_service import SentimentService
from services.strategies import KeywordStrategy, SentimentStrategy


@pytest.fixture
def runner_args(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> list[str]:
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("DB_PATH", str(tmp_path / "sentiment.db"))
    return ["--env-file", str(tmp_path / "missing.env"), "--user", "tester"]


def _write_emails(tmp_path: Path, emails) -> Path:
    path = tmp_path / "emails.json"
    path.write_text(json.dumps(emails), encoding="utf-8")
    return path


def test_analyze_prints_json(runner_args: list[str]) -> None:
    result = CliRunner().invoke(cli, [*runner_args, "analyze", "--json", "We have an emergency, reply ASAP"])
    assert result.exit_code == 0, result.output
    analysis = json.loads(result.stdout)["analysis"]
    assert analysis["sentiment"] == "urgent"
    assert analysis["urgencyLevel"] == "high"


def test_analyze_rejects_blank_content(runner_args: list[str]) -> None:
    result = CliRunner().invoke(cli, [*runner_args, "analyze", "   "])
    assert result.exit_code != 0


def test_batch_save_feeds_overview(tmp_path: Path, runner_args: list[str]) -> None:
    emails = _write_emails(
        tmp_path,
        [
            {"id": "1", "content": "Thank you, excellent work", "sender": "a@example.com", "subject": "Kudos"},
            {"id": "2", "content": "There is a problem with the invoice", "sender": "b@example.com"},
        ],
    )
    runner = CliRunner()

    batch = runner.invoke(cli, [*runner_args, "analyze-batch", str(emails), "--save", "--json"])
    assert batch.exit_code == 0, batch.output
    analyses = json.loads(batch.stdout)["analyses"]
    assert [item["emailId"] for item in analyses] == ["1", "2"]

    overview = runner.invoke(cli, [*runner_args, "overview", "--json"])
    assert overview.exit_code == 0, overview.output
    payload = json.loads(overview.stdout)
    assert payload["stats"]["totalAnalyzed"] == 2
    assert payload["stats"]["positive"] == 1
    assert payload["stats"]["negative"] == 1
    assert len(payload["stats"]["trendData"]) == 35


def test_overview_without_data_uses_demo_records(runner_args: list[str]) -> None:
    result = CliRunner().invoke(cli, [*runner_args, "insights", "--json"])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert [item["emailId"] for item in payload["alertEmails"]] == ["demo-2", "demo-4"]
    assert [item["emailId"] for item in payload["positiveHighlights"]] == ["demo-1"]


def test_urgent_uses_sample_emails(runner_args: list[str]) -> None:
    result = CliRunner().invoke(cli, [*runner_args, "urgent", "--json"])
    assert result.exit_code == 0, result.output
    urgent = json.loads(result.stdout)["urgentEmails"]
    assert [item["emailId"] for item in urgent] == ["urgent-1", "urgent-3"]


def test_batch_rejects_malformed_file(tmp_path: Path, runner_args: list[str]) -> None:
    emails = _write_emails(tmp_path, [{"id": "1", "sender": "a@example.com"}])
    result = CliRunner().invoke(cli, [*runner_args, "analyze-batch", str(emails)])
    assert result.exit_code == 2
    assert "missing 'content'" in result.output


class CountingStrategy(SentimentStrategy):
    def __init__(self) -> None:
        self.calls = 0
        self._keywords = KeywordStrategy()

    def analyze(self, content: str, subject: Optional[str] = None) -> SentimentResult:
        self.calls += 1
        return self._keywords.analyze(content, subject)


def test_trends_json_has_full_window_and_summary(runner_args: list[str]) -> None:
    result = CliRunner().invoke(cli, [*runner_args, "trends", "--json"])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert len(payload["trendData"]) == 35
    assert sum(row["count"] for row in payload["trendData"]) == 5
    summary = payload["summary"]
    assert summary["totalAnalyzed"] == 5
    assert summary["averageConfidence"] == pytest.approx(0.898)
    assert summary["topEmotions"][0] == {"emotion": "grateful", "count": 1}


def test_test_analysis_echoes_input(runner_args: list[str]) -> None:
    result = CliRunner().invoke(
        cli, [*runner_args, "test-analysis", "Thanks, great job", "--subject", "Kudos"]
    )
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["testText"] == "Thanks, great job"
    assert payload["testSubject"] == "Kudos"
    assert payload["analysis"]["sentiment"] == "positive"
    assert "T" in payload["timestamp"]


def test_auto_process_skips_emails_already_analyzed(tmp_path: Path, runner_args: list[str]) -> None:
    app = build_context(str(tmp_path / "missing.env"), "tester")
    strategy = CountingStrategy()
    app.sentiment = SentimentService(primary=strategy)
    emails = [
        EmailMessage(id="1", content="Server down, emergency", sender="ops@example.com"),
        EmailMessage(id="2", content="I am frustrated, this is wrong and a terrible problem"),
        EmailMessage(id="3", content="Thank you for the great help"),
    ]

    first = auto_process(app, emails)
    second = auto_process(app, emails)

    assert first == {"processed": 3, "skipped": 0, "urgent": 1, "negative": 1, "frustrated": 0, "positive": 1}
    assert second == {"processed": 0, "skipped": 3, "urgent": 0, "negative": 0, "frustrated": 0, "positive": 0}
    assert strategy.calls == 3
    assert sorted(record.email_id for record in app.store.records_for("tester")) == ["1", "2", "3"]


def test_auto_process_analyzes_only_new_ids(tmp_path: Path, runner_args: list[str]) -> None:
    app = build_context(str(tmp_path / "missing.env"), "tester")
    strategy = CountingStrategy()
    app.sentiment = SentimentService(primary=strategy)
    auto_process(app, [EmailMessage(id="1", content="Weekly notes")])

    summary = auto_process(
        app,
        [EmailMessage(id="1", content="Weekly notes"), EmailMessage(id="4", content="Weekly notes again")],
    )

    assert summary["processed"] == 1
    assert summary["skipped"] == 1
    assert strategy.calls == 2
    assert len(app.store.records_for("tester")) == 2
