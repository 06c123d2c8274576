"""DynamoDB audit log for blocked submissions.

All boto3 calls are wrapped with ``asyncio.to_thread()`` to avoid blocking.
"""

from __future__ import annotations

import asyncio
from typing import Any

import boto3
import structlog

from .config import BlockedSubmissionsConfig
from .errors import RecorderError
from .models import BlockedSubmissionRecord, ClassificationResult, Submission

logger = structlog.get_logger()


class BlockedSubmissionRecorder:
    """Write one immutable record per blocked submission.

    Records expire through the table's TTL attribute; nothing here ever
    updates or deletes them.
    """

    def __init__(
        self,
        config: BlockedSubmissionsConfig,
        *,
        region: str = "us-east-1",
        table: Any | None = None,
    ) -> None:
        self._config = config
        self._region = region
        self._table = table

    async def record(
        self,
        submission: Submission,
        result: ClassificationResult,
        *,
        source_ip: str = "unknown",
    ) -> str | None:
        """Persist a blocked submission.  Returns its ID, or None if the write failed.

        Build and store failures are logged and swallowed: the submission has
        already been blocked and the caller still answers with success.
        """
        record = None
        try:
            record = self._build(submission, result, source_ip)
            await self._put(record)
        except RecorderError as exc:
            logger.error(
                "blocked_submission_record_failed",
                submission_id=record.submission_id if record else None,
                table=self._config.table_name,
                error=str(exc),
            )
            return None

        logger.info(
            "blocked_submission_recorded",
            submission_id=record.submission_id,
            classification=record.classification.value,
            ip_address=record.ip_address,
        )
        return record.submission_id

    def _build(
        self,
        submission: Submission,
        result: ClassificationResult,
        source_ip: str,
    ) -> BlockedSubmissionRecord:
        try:
            return BlockedSubmissionRecord.create(
                submission,
                result,
                ip_address=source_ip,
                retention_days=self._config.retention_days,
            )
        except ValueError as exc:
            raise RecorderError(f"Invalid blocked submission record: {exc}") from exc

    async def _put(self, record: BlockedSubmissionRecord) -> None:
        try:
            if self._table is None:
                resource = await asyncio.to_thread(
                    boto3.resource, "dynamodb", region_name=self._region
                )
                self._table = resource.Table(self._config.table_name)
            await asyncio.to_thread(self._table.put_item, Item=record.to_item())
        except Exception as exc:
            raise RecorderError(str(exc)) from exc
