"""Classifier gateway — label submissions with a Bedrock-hosted model.

The gateway fails open: any error while calling the model or reading its
answer yields a ``LEGITIMATE`` result flagged ``failed_open`` so an outage
never blocks real traffic.  All boto3 calls are wrapped with
``asyncio.to_thread()`` to avoid blocking.
"""

from __future__ import annotations

import asyncio
import json
import re
from typing import Any

import boto3
import structlog

from .config import SpamDetectionConfig
from .errors import ClassificationError
from .models import ClassificationResult, Submission

logger = structlog.get_logger()

ANTHROPIC_VERSION = "bedrock-2023-05-31"

PROMPT_TEMPLATE = """You review submissions sent through a personal website's contact form.
Classify the submission below into exactly one of these categories:

- LEGITIMATE: a genuine personal or professional message meant for the site owner
- SPAM: unsolicited bulk content, phishing, scams, malicious links or SEO link spam
- SALES: an unsolicited sales pitch, marketing offer or service solicitation
- GIBBERISH: random characters, keyboard mashing or otherwise meaningless text

Submission:
Name: {name}
Email: {email}
Phone: {phone}
Message:
{message}

Respond with a single JSON object and nothing else, in this format:
{{"classification": "LEGITIMATE", "confidence": 0.95, "reason": "brief explanation"}}
"""

_FENCE_RE = re.compile(r"^```[\w-]*\s*\n?(.*?)\n?\s*```$", re.DOTALL)


def build_prompt(submission: Submission) -> str:
    """Embed the submission fields verbatim in the classification prompt."""
    return PROMPT_TEMPLATE.format(
        name=submission.name,
        email=submission.email,
        phone=submission.phone,
        message=submission.message,
    )


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ```` ``` ```` / ```` ```json ```` fence, if any."""
    stripped = text.strip()
    match = _FENCE_RE.match(stripped)
    return match.group(1).strip() if match else stripped


def parse_classification(text: str) -> ClassificationResult:
    """Parse the model's textual answer into a :class:`ClassificationResult`.

    Raises :class:`ClassificationError` when the text is not a JSON object
    or carries an unknown label or a confidence that is not a number in [0, 1].
    """
    try:
        payload = json.loads(strip_code_fences(text))
    except json.JSONDecodeError as exc:
        raise ClassificationError(f"Model returned invalid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise ClassificationError("Model response is not a JSON object")

    try:
        return ClassificationResult(
            classification=payload.get("classification"),
            confidence=payload.get("confidence"),
            reason=str(payload.get("reason") or ""),
        )
    except ValueError as exc:
        raise ClassificationError(f"Model returned an invalid classification: {exc}") from exc


class BedrockClassifier:
    """Classify submissions with an Anthropic model on Amazon Bedrock."""

    def __init__(
        self,
        config: SpamDetectionConfig,
        *,
        region: str = "us-east-1",
        client: Any | None = None,
    ) -> None:
        self._config = config
        self._region = region
        self._client = client

    async def classify(self, submission: Submission) -> ClassificationResult:
        """Classify *submission*, falling back to a permissive result on any error."""
        try:
            text = await self._invoke(build_prompt(submission))
            result = parse_classification(text)
        except Exception as exc:
            logger.error(
                "classification_failed",
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return ClassificationResult.fail_open(exc)

        logger.info(
            "submission_classified",
            classification=result.classification.value,
            confidence=result.confidence,
            reason=result.reason,
        )
        return result

    async def _invoke(self, prompt: str) -> str:
        """Send *prompt* to the model and return the text of its first content block."""
        if self._client is None:
            self._client = await asyncio.to_thread(
                boto3.client, "bedrock-runtime", region_name=self._region
            )

        body = json.dumps({
            "anthropic_version": ANTHROPIC_VERSION,
            "max_tokens": self._config.max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        })
        response = await asyncio.to_thread(
            self._client.invoke_model,
            modelId=self._config.model_id,
            body=body,
            contentType="application/json",
            accept="application/json",
        )
        raw = await asyncio.to_thread(response["body"].read)

        try:
            envelope = json.loads(raw)
            return envelope["content"][0]["text"]
        except (json.JSONDecodeError, KeyError, IndexError, TypeError) as exc:
            raise ClassificationError(f"Unexpected model response: {exc}") from exc
