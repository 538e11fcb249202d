from __future__ import annotations

import json
import logging
import time
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Sequence

import click
import schedule
from rich.console import Console
from rich.table import Table

from models.email_message import EmailMessage
from models.sentiment import SENTIMENTS, EmailSentimentRecord, SentimentResult, SentimentStatistics
from services.demo_data import demo_records, demo_urgent_emails
from services.insight_service import InsightService
from services.persistence_service import AnalysisStore
from services.sentiment_service import SentimentService
from services.statistics_service import StatisticsService
from utils.config import AppConfig, load_config
from utils.logger import configure_logging


LOGGER = logging.getLogger(__name__)
PREVIEW_CHARS = 60
RECENT_ANALYSES = 10


@dataclass(slots=True)
class AppContext:
    config: AppConfig
    user: str
    sentiment: SentimentService
    statistics: StatisticsService
    insights: InsightService
    store: AnalysisStore
    console: Console


def build_context(env_file: str, user: str | None) -> AppContext:
    config = load_config(env_file)
    configure_logging(config.log_dir, config.log_level)
    statistics = StatisticsService()
    return AppContext(
        config=config,
        user=user or config.default_user,
        sentiment=SentimentService.from_config(config),
        statistics=statistics,
        insights=InsightService(statistics),
        store=AnalysisStore(config.db_path),
        console=Console(),
    )


@click.group()
@click.option("--env-file", default=".env", show_default=True, help="Path to the .env file")
@click.option("--user", help="User whose stored analyses to use (defaults to DEFAULT_USER)")
@click.pass_context
def cli(ctx: click.Context, env_file: str, user: Optional[str]) -> None:
    """Email sentiment analysis assistant."""

    try:
        ctx.obj = build_context(env_file, user)
    except ValueError as exc:  # bad numeric setting
        raise click.UsageError(str(exc)) from exc
    ctx.call_on_close(ctx.obj.sentiment.close)


@cli.command("analyze")
@click.argument("content")
@click.option("--subject", help="Email subject line")
@click.option("--json", "as_json", is_flag=True, help="Print the raw analysis as JSON")
@click.pass_obj
def analyze(app: AppContext, content: str, subject: Optional[str], as_json: bool) -> None:
    """Analyze the sentiment of a single email."""

    if not content.strip():
        raise click.BadParameter("Email content is required", param_hint="CONTENT")
    result = app.sentiment.analyze(content, subject)
    if as_json:
        app.console.print_json(data={"analysis": result.to_dict()})
        return
    app.console.print(_build_result_table(result))


@cli.command("test-analysis")
@click.argument("text")
@click.option("--subject", help="Optional subject to analyze alongside the text")
@click.pass_obj
def test_analysis(app: AppContext, text: str, subject: Optional[str]) -> None:
    """Analyze ad-hoc text and echo the input with the analysis time."""

    if not text.strip():
        raise click.BadParameter("Test text is required", param_hint="TEXT")
    result = app.sentiment.analyze(text, subject)
    app.console.print_json(
        data={
            "testText": text,
            "testSubject": subject,
            "analysis": result.to_dict(),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
    )


@cli.command("analyze-batch")
@click.argument("emails_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--save/--no-save", default=False, help="Store the analyses for the current user")
@click.option("--json", "as_json", is_flag=True, help="Print the analyses as JSON")
@click.pass_obj
def analyze_batch(app: AppContext, emails_file: Path, save: bool, as_json: bool) -> None:
    """Analyze every email in a JSON file, in order."""

    emails = _load_emails(emails_file)
    if not emails:
        raise click.BadParameter("Array of emails is required", param_hint="EMAILS_FILE")
    records = app.sentiment.analyze_many(emails)
    if save:
        stored = app.store.save(app.user, records)
        LOGGER.info("Saved %s analyses for %s", stored, app.user)
    if as_json:
        app.console.print_json(data={"analyses": [record.to_dict() for record in records]})
        return
    app.console.print(_build_records_table(f"Sentiment for {len(records)} email(s)", records))
    if save:
        app.console.print(f"[dim]Stored {len(records)} analyses for {app.user}.[/dim]")


@cli.command("overview")
@click.option("--json", "as_json", is_flag=True, help="Print the overview as JSON")
@click.pass_obj
def overview(app: AppContext, as_json: bool) -> None:
    """Show sentiment statistics, insights and the most recent analyses."""

    records = _records_for_user(app)
    stats = app.statistics.summarize(records)
    insights = app.insights.generate(records, stats)
    recent = records[:RECENT_ANALYSES]
    if as_json:
        app.console.print_json(
            data={
                "stats": stats.to_dict(),
                "insights": insights.to_dict(),
                "recentAnalyses": [record.to_dict() for record in recent],
            }
        )
        return

    app.console.print(_build_stats_table(stats))
    _print_messages(app, "Insights", insights.insights)
    _print_messages(app, "Recommendations", insights.recommendations)
    app.console.print(_build_records_table("Recent analyses", recent))


@cli.command("trends")
@click.option("--json", "as_json", is_flag=True, help="Print the trend rows as JSON")
@click.pass_obj
def trends(app: AppContext, as_json: bool) -> None:
    """Show per-day sentiment counts for the last seven days."""

    stats = app.statistics.summarize(_records_for_user(app))
    if as_json:
        app.console.print_json(
            data={
                "trendData": [point.to_dict() for point in stats.trend_data],
                "summary": {
                    "totalAnalyzed": stats.total_analyzed,
                    "averageConfidence": stats.average_confidence,
                    "topEmotions": [
                        {"emotion": item.emotion, "count": item.count} for item in stats.top_emotions
                    ],
                },
            }
        )
        return

    table = Table(title="Sentiment trend (last 7 days)")
    table.add_column("Date")
    for sentiment in SENTIMENTS:
        table.add_column(sentiment.capitalize(), justify="right")
    by_day: dict[str, dict[str, int]] = {}
    for point in stats.trend_data:
        by_day.setdefault(point.date.isoformat(), {})[point.sentiment] = point.count
    for day, counts in by_day.items():
        table.add_row(day, *(str(counts[sentiment]) for sentiment in SENTIMENTS))
    app.console.print(table)
    app.console.print(
        f"Analyzed {stats.total_analyzed} email(s), average confidence {stats.average_confidence:.2f}"
    )


@cli.command("insights")
@click.option("--json", "as_json", is_flag=True, help="Print insights as JSON")
@click.pass_obj
def insights(app: AppContext, as_json: bool) -> None:
    """Show insights, recommendations, alert emails and positive highlights."""

    result = app.insights.generate(_records_for_user(app))
    if as_json:
        app.console.print_json(data=result.to_dict())
        return
    _print_messages(app, "Insights", result.insights)
    _print_messages(app, "Recommendations", result.recommendations)
    if result.alert_emails:
        app.console.print(_build_records_table("Alerts", result.alert_emails))
    if result.positive_highlights:
        app.console.print(_build_records_table("Positive highlights", result.positive_highlights))


@cli.command("urgent")
@click.argument("emails_file", required=False, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Print urgent emails as JSON")
@click.pass_obj
def urgent(app: AppContext, emails_file: Optional[Path], as_json: bool) -> None:
    """Rank emails that need immediate attention (sample emails if no file is given)."""

    emails = _load_emails(emails_file) if emails_file else demo_urgent_emails()
    ranked = app.sentiment.detect_urgent(emails)
    if as_json:
        app.console.print_json(data={"urgentEmails": [item.to_dict() for item in ranked]})
        return
    if not ranked:
        app.console.print("[bold green]No urgent emails found.[/bold green]")
        return
    table = Table(title="Urgent emails")
    table.add_column("Score", justify="right")
    table.add_column("ID", overflow="fold")
    table.add_column("Subject")
    table.add_column("Sender")
    table.add_column("Sentiment")
    for item in ranked:
        record = item.record
        table.add_row(
            f"{item.urgency_score:.2f}",
            record.email_id,
            record.subject,
            record.sender or "Unknown",
            _format_sentiment(record.analysis),
        )
    app.console.print(table)


@cli.command("schedule")
@click.argument("emails_file", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--interval", type=int, default=15, show_default=True, help="Interval in minutes")
@click.pass_obj
def schedule_processing(app: AppContext, emails_file: Path, interval: int) -> None:
    """Re-analyze an inbox export on an interval and store the results."""

    def job() -> None:
        if not emails_file.exists():
            LOGGER.warning("Inbox file %s does not exist yet", emails_file)
            return
        try:
            emails = _load_emails(emails_file)
        except click.BadParameter as exc:
            LOGGER.error("Skipping run: %s", exc.message)
            return
        summary = auto_process(app, emails)
        app.console.print(
            f"[scheduler] processed {summary['processed']} new email(s) for {app.user} "
            f"(skipped {summary['skipped']} already analyzed): {summary['urgent']} urgent, "
            f"{summary['negative']} negative, {summary['frustrated']} frustrated, "
            f"{summary['positive']} positive."
        )

    schedule.every(interval).minutes.do(job)

    app.console.print(
        f"Processing '{emails_file}' every {interval} minute(s) for {app.user}. Press Ctrl+C to stop."
    )
    job()
    try:
        while True:
            schedule.run_pending()
            time.sleep(1)
    except KeyboardInterrupt:
        app.console.print("Scheduler stopped.")


def auto_process(app: AppContext, emails: Sequence[EmailMessage]) -> dict[str, int]:
    """Analyze and store emails not seen before for the user, returning counts of the new ones."""

    fresh: List[EmailMessage] = []
    skipped = 0
    seen: set[str] = set()
    for email in emails:
        if email.id in seen or app.store.is_analyzed(app.user, email.id):
            skipped += 1
            continue
        seen.add(email.id)
        fresh.append(email)

    records = app.sentiment.analyze_many(fresh)
    app.store.save(app.user, records)
    if skipped:
        LOGGER.info("Skipped %s already analyzed email(s) for %s", skipped, app.user)
    counts = Counter(record.analysis.sentiment for record in records)
    return {
        "processed": len(records),
        "skipped": skipped,
        "urgent": counts["urgent"],
        "negative": counts["negative"],
        "frustrated": counts["frustrated"],
        "positive": counts["positive"],
    }


def _load_emails(path: Path) -> List[EmailMessage]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise click.BadParameter(f"Could not read {path}: {exc}", param_hint="EMAILS_FILE") from exc
    if isinstance(data, dict):
        data = data.get("emails")
    if not isinstance(data, list):
        raise click.BadParameter("Expected a JSON array of emails", param_hint="EMAILS_FILE")
    emails: List[EmailMessage] = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise click.BadParameter(f"Email #{index} is not an object", param_hint="EMAILS_FILE")
        try:
            emails.append(EmailMessage.from_dict(item))
        except ValueError as exc:
            raise click.BadParameter(str(exc), param_hint="EMAILS_FILE") from exc
    return emails


def _records_for_user(app: AppContext) -> List[EmailSentimentRecord]:
    if app.store.has_records(app.user):
        return app.store.records_for(app.user)
    LOGGER.info("No stored analyses for %s, using demo data", app.user)
    return demo_records()


def _print_messages(app: AppContext, title: str, messages: Sequence[str]) -> None:
    app.console.print(f"[bold]{title}[/bold]")
    if not messages:
        app.console.print("  [dim]none[/dim]")
    for message in messages:
        app.console.print(f"  - {message}")


def _build_result_table(result: SentimentResult) -> Table:
    table = Table(title="Sentiment analysis")
    table.add_column("Field")
    table.add_column("Value")
    table.add_row("Sentiment", result.sentiment)
    table.add_row("Confidence", f"{result.confidence:.2f}")
    table.add_row("Emotion", result.emotion)
    table.add_row("Urgency", result.urgency_level)
    table.add_row("Tone", result.tone)
    table.add_row("Key phrases", ", ".join(result.key_phrases) or "-")
    table.add_row("Reasoning", result.reasoning)
    return table


def _build_stats_table(stats: SentimentStatistics) -> Table:
    table = Table(title="Sentiment overview")
    table.add_column("Metric")
    table.add_column("Value")
    table.add_row("Emails analyzed", str(stats.total_analyzed))
    for sentiment in SENTIMENTS:
        table.add_row(sentiment.capitalize(), str(stats.count_for(sentiment)))
    table.add_row("Average confidence", f"{stats.average_confidence:.2f}")
    emotions = ", ".join(f"{item.emotion}: {item.count}" for item in stats.top_emotions)
    table.add_row("Top emotions", emotions or "-")
    return table


def _build_records_table(title: str, records: Sequence[EmailSentimentRecord]) -> Table:
    table = Table(title=title, show_lines=False)
    table.add_column("ID", overflow="fold")
    table.add_column("Subject")
    table.add_column("Sender")
    table.add_column("Preview")
    table.add_column("Sentiment")
    table.add_column("Urgency")
    for record in records:
        table.add_row(
            record.email_id,
            record.subject or "(no subject)",
            record.sender or "Unknown",
            _preview(record.content),
            _format_sentiment(record.analysis),
            record.analysis.urgency_level,
        )
    return table


def _preview(content: str) -> str:
    flat = " ".join(content.split())
    return flat if len(flat) <= PREVIEW_CHARS else flat[: PREVIEW_CHARS - 1] + "…"


def _format_sentiment(result: SentimentResult) -> str:
    return f"{result.sentiment} ({result.confidence:.2f})"


def main() -> None:
    cli(standalone_mode=True)


if __name__ == "__main__":
    main()
