"""Notifier — format accepted submissions and send them through SES.

All boto3 calls are wrapped with ``asyncio.to_thread()`` to avoid blocking.
"""

from __future__ import annotations

import asyncio
import email.utils
from datetime import UTC, datetime
from typing import Any

import boto3
import structlog

from .config import ContactFormConfig
from .errors import SendError
from .models import Classification, ClassificationResult, Submission

logger = structlog.get_logger()

ATTENTION_MARKER = "🤨"
FAILED_OPEN_WARNING = "⚠️  Bedrock classification failed - failed open"

# LEGITIMATE results below this confidence still get the attention marker.
CLEAN_CONFIDENCE = 0.9


def needs_attention(classification: ClassificationResult | None) -> bool:
    """True for SALES, or LEGITIMATE results the model was not sure about."""
    if classification is None:
        return False
    if classification.classification is Classification.SALES:
        return True
    return (
        classification.classification is Classification.LEGITIMATE
        and classification.confidence < CLEAN_CONFIDENCE
    )


def generate_subject(
    message: str,
    classification: ClassificationResult | None = None,
    word_count: int = 8,
) -> str:
    """Build the subject line from the first *word_count* words of *message*.

    Whitespace is collapsed first; ``...`` is appended whenever the result is
    shorter than the original message.
    """
    words = " ".join(message.split()).split(" ")
    subject = " ".join(words[:word_count])
    if len(subject) < len(message):
        subject = f"{subject}..."
    if needs_attention(classification):
        subject = f"{ATTENTION_MARKER} {subject}"
    return subject


def format_email_body(
    submission: Submission,
    classification: ClassificationResult | None = None,
    submitted_at: datetime | None = None,
) -> str:
    """Render the plain-text notification body."""
    submitted_at = submitted_at or datetime.now(UTC)
    lines = [
        "New Contact Form Submission",
        "",
        f"Name: {submission.name}",
        f"Email: {submission.email}",
        f"Phone: {submission.phone}",
        "",
    ]

    if classification is not None:
        lines += [
            "Spam Detection:",
            f"Classification: {classification.classification.value}",
            f"Confidence: {classification.confidence * 100:.1f}%",
            f"Reason: {classification.reason}",
        ]
        if classification.failed_open:
            lines.append(FAILED_OPEN_WARNING)
        lines.append("")

    lines += [
        "Message:",
        submission.message,
        "",
        "---",
        f"Submitted: {submitted_at.isoformat()}",
    ]
    return "\n".join(lines)


class SesNotifier:
    """Deliver accepted submissions to the site owner via Amazon SES."""

    def __init__(self, config: ContactFormConfig, *, client: Any | None = None) -> None:
        self._config = config
        self._client = client

    async def send(
        self,
        submission: Submission,
        classification: ClassificationResult | None = None,
    ) -> str:
        """Send the notification email and return the SES message ID.

        Raises :class:`SendError` if SES rejects the message or is unreachable.
        """
        subject = generate_subject(
            submission.message,
            classification,
            word_count=self._config.subject_word_count,
        )
        body = format_email_body(submission, classification)
        reply_to = email.utils.formataddr((submission.name, submission.email))

        try:
            if self._client is None:
                self._client = await asyncio.to_thread(
                    boto3.client, "ses", region_name=self._config.aws_region
                )
            response = await asyncio.to_thread(
                self._client.send_email,
                Source=self._config.from_address,
                Destination={"ToAddresses": [self._config.to_address]},
                Message={
                    "Subject": {"Data": subject, "Charset": "UTF-8"},
                    "Body": {"Text": {"Data": body, "Charset": "UTF-8"}},
                },
                ReplyToAddresses=[reply_to],
            )
        except Exception as exc:
            raise SendError(f"SES send_email failed: {exc}") from exc

        message_id = response["MessageId"]
        logger.info("email_sent", message_id=message_id)
        return message_id
