"""Hand-written sample emails used when a user has no stored analyses."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import List, Optional

from models.email_message import EmailMessage
from models.sentiment import EmailSentimentRecord, SentimentResult


def demo_records(now: Optional[datetime] = None) -> List[EmailSentimentRecord]:
    now = now or datetime.now(timezone.utc)
    return [
        EmailSentimentRecord(
            email_id="demo-1",
            subject="Thank you for the great meeting!",
            content=(
                "Hi there! I wanted to thank you for taking the time to meet with me yesterday. "
                "The discussion was incredibly valuable and I appreciate your insights."
            ),
            sender="client@company.com",
            timestamp=now - timedelta(hours=2),
            analysis=SentimentResult(
                sentiment="positive",
                confidence=0.92,
                emotion="grateful",
                reasoning="Expresses gratitude and appreciation with positive language",
                urgency_level="low",
                tone="friendly",
                key_phrases=("thank you", "great meeting", "incredibly valuable", "appreciate"),
            ),
        ),
        EmailSentimentRecord(
            email_id="demo-2",
            subject="URGENT: System down - need immediate help",
            content=(
                "Our main system is completely down and we need immediate assistance. "
                "This is blocking all our operations and we need this fixed ASAP!"
            ),
            sender="support@emergency.com",
            timestamp=now - timedelta(minutes=30),
            analysis=SentimentResult(
                sentiment="urgent",
                confidence=0.95,
                emotion="stressed",
                reasoning="Contains urgent language, system failure, and demands immediate action",
                urgency_level="high",
                tone="urgent",
                key_phrases=("URGENT", "completely down", "immediate assistance", "ASAP"),
            ),
        ),
        EmailSentimentRecord(
            email_id="demo-3",
            subject="Weekly project update",
            content=(
                "Here is the weekly update on our project progress. Everything is on track "
                "and we should meet our deadlines without any issues."
            ),
            sender="project@team.com",
            timestamp=now - timedelta(hours=6),
            analysis=SentimentResult(
                sentiment="neutral",
                confidence=0.88,
                emotion="professional",
                reasoning="Factual update with neutral tone and positive progress indicators",
                urgency_level="low",
                tone="professional",
                key_phrases=("weekly update", "on track", "meet deadlines", "no issues"),
            ),
        ),
        EmailSentimentRecord(
            email_id="demo-4",
            subject="Frustrated with constant delays",
            content=(
                "I am really frustrated with these constant delays. This is the third time this "
                "month that deadlines have been missed and it's affecting our entire workflow."
            ),
            sender="frustrated@client.com",
            timestamp=now - timedelta(hours=4),
            analysis=SentimentResult(
                sentiment="frustrated",
                confidence=0.89,
                emotion="frustrated",
                reasoning="Explicitly expresses frustration with ongoing issues and missed deadlines",
                urgency_level="medium",
                tone="critical",
                key_phrases=("really frustrated", "constant delays", "third time", "affecting workflow"),
            ),
        ),
        EmailSentimentRecord(
            email_id="demo-5",
            subject="Quick question about invoice",
            content=(
                "Hi! I have a quick question about the invoice you sent. Could you clarify "
                "the payment terms when you have a moment? Thanks!"
            ),
            sender="billing@vendor.com",
            timestamp=now - timedelta(hours=8),
            analysis=SentimentResult(
                sentiment="neutral",
                confidence=0.85,
                emotion="polite",
                reasoning="Polite inquiry with friendly tone and reasonable request",
                urgency_level="low",
                tone="polite",
                key_phrases=("quick question", "when you have a moment", "Thanks"),
            ),
        ),
    ]


def demo_urgent_emails() -> List[EmailMessage]:
    return [
        EmailMessage(
            id="urgent-1",
            content=(
                "URGENT: The server is down and all our systems are offline. We need immediate "
                "assistance to get everything back online. This is blocking all operations!"
            ),
            subject="CRITICAL: Server Down - Need Help NOW",
            sender="support@company.com",
        ),
        EmailMessage(
            id="urgent-2",
            content=(
                "I am extremely frustrated with the delayed response. This issue has been ongoing "
                "for weeks and nobody seems to care about resolving it."
            ),
            subject="Unacceptable service delays",
            sender="angry@client.com",
        ),
        EmailMessage(
            id="urgent-3",
            content=(
                "Emergency meeting required ASAP. Critical decision needed on the project "
                "direction before tomorrow deadline."
            ),
            subject="EMERGENCY: Meeting needed TODAY",
            sender="ceo@company.com",
        ),
    ]
