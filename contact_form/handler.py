"""ContactFormHandler — decode, validate, classify, then block or forward.

Each invocation runs the pipeline exactly once, in strict sequence::

    decode → validate → classify → decide → (record | notify) → respond

Nothing is retried and nothing is shared between invocations.
"""

from __future__ import annotations

import asyncio
from typing import Any

import structlog

from . import responses
from .classifier import BedrockClassifier
from .config import ContactFormConfig
from .decoder import decode_body, extract_source_ip, is_preflight
from .errors import DecodeError, SendError, ValidationError
from .logging import bind_request_context, setup_logging
from .models import ClassificationResult, Decision, Submission
from .notifier import SesNotifier
from .policy import decide
from .recorder import BlockedSubmissionRecorder
from .validation import rules_from_config, validate_submission

logger = structlog.get_logger()


class ContactFormHandler:
    """Process one contact form request per :meth:`handle` call.

    The three AWS clients can be injected (tests pass mocks); any left as
    ``None`` is created lazily from the configured region on first use.
    """

    def __init__(
        self,
        config: ContactFormConfig,
        *,
        ses_client: Any | None = None,
        bedrock_client: Any | None = None,
        blocked_table: Any | None = None,
    ) -> None:
        self._config = config
        self._rules = rules_from_config(config)
        self._notifier = SesNotifier(config, client=ses_client)
        self._classifier = BedrockClassifier(
            config.spam_detection,
            region=config.aws_region,
            client=bedrock_client,
        )
        self._recorder = BlockedSubmissionRecorder(
            config.blocked_submissions,
            region=config.aws_region,
            table=blocked_table,
        )

    async def handle(self, event: dict[str, Any], context: Any = None) -> dict[str, Any]:
        """Run the pipeline for a single Lambda proxy *event*."""
        bind_request_context(context)
        origin = self._config.allowed_origin

        if is_preflight(event):
            return responses.preflight(origin)

        logger.info("contact_form_received")

        try:
            data = decode_body(event)
        except DecodeError as exc:
            logger.warning("invalid_request_body", error=str(exc))
            return responses.invalid_request(origin)

        try:
            submission = validate_submission(data, self._rules)
        except ValidationError as exc:
            logger.warning("validation_failed", field=exc.field, message=exc.message)
            return responses.validation_failed(exc.field, exc.message, origin)

        try:
            await self._dispatch(submission, event)
        except SendError:
            logger.exception("email_send_failed")
            return responses.send_failed(origin)
        except Exception:
            logger.exception("contact_form_failed")
            return responses.send_failed(origin)

        return responses.success(origin)

    # ------------------------------------------------------------------
    # Classification + routing
    # ------------------------------------------------------------------

    async def _classify(self, submission: Submission) -> ClassificationResult | None:
        if not self._config.spam_detection.enabled:
            return None
        return await self._classifier.classify(submission)

    async def _dispatch(self, submission: Submission, event: dict[str, Any]) -> None:
        """Block or forward *submission*; raises :class:`SendError` if forwarding fails."""
        classification = await self._classify(submission)
        decision = decide(classification, self._config.spam_detection.confidence_threshold)

        if decision is Decision.BLOCK:
            assert classification is not None
            submission_id = await self._recorder.record(
                submission,
                classification,
                source_ip=extract_source_ip(event),
            )
            logger.info(
                "submission_blocked",
                submission_id=submission_id,
                classification=classification.classification.value,
                confidence=classification.confidence,
            )
            return

        await self._notifier.send(submission, classification)


def handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """AWS Lambda entry point."""
    config = ContactFormConfig()
    setup_logging(json=config.log_json, level=config.log_level)
    return asyncio.run(ContactFormHandler(config).handle(event, context))
