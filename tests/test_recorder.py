"""Tests for contact_form.recorder."""

from __future__ import annotations

import time
import uuid
from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest
from structlog.testing import capture_logs

from contact_form.config import BlockedSubmissionsConfig
from contact_form.models import ClassificationResult, Submission
from contact_form.recorder import BlockedSubmissionRecorder


@pytest.fixture
def spammer() -> Submission:
    return Submission(
        name="Spammer",
        email="spam@example.com",
        phone="555-9999",
        message="Buy our SEO services!",
    )


class TestBlockedSubmissionRecorder:
    @pytest.mark.asyncio
    async def test_writes_one_record(
        self,
        blocked_config: BlockedSubmissionsConfig,
        blocked_table: MagicMock,
        spammer: Submission,
        spam_result: ClassificationResult,
    ):
        recorder = BlockedSubmissionRecorder(blocked_config, table=blocked_table)

        submission_id = await recorder.record(spammer, spam_result, source_ip="192.168.1.100")

        assert submission_id is not None
        uuid.UUID(submission_id)
        blocked_table.put_item.assert_called_once()
        item = blocked_table.put_item.call_args.kwargs["Item"]
        assert item["submissionId"] == submission_id
        assert item["name"] == "Spammer"
        assert item["email"] == "spam@example.com"
        assert item["phone"] == "555-9999"
        assert item["message"] == "Buy our SEO services!"
        assert item["classification"] == "SPAM"
        assert item["confidence"] == Decimal("0.95")
        assert item["reason"] == "Phishing attempt"
        assert item["ipAddress"] == "192.168.1.100"

    @pytest.mark.asyncio
    async def test_ttl_is_ninety_days_out(
        self,
        blocked_config: BlockedSubmissionsConfig,
        blocked_table: MagicMock,
        spammer: Submission,
        spam_result: ClassificationResult,
    ):
        recorder = BlockedSubmissionRecorder(blocked_config, table=blocked_table)

        before = int(time.time())
        await recorder.record(spammer, spam_result)
        after = int(time.time())

        item = blocked_table.put_item.call_args.kwargs["Item"]
        ninety_days = 90 * 24 * 3600
        assert before + ninety_days <= item["ttl"] <= after + ninety_days
        assert before * 1000 <= item["timestamp"] <= (after + 1) * 1000

    @pytest.mark.asyncio
    async def test_missing_ip_defaults_to_unknown(
        self,
        blocked_config: BlockedSubmissionsConfig,
        blocked_table: MagicMock,
        spammer: Submission,
        spam_result: ClassificationResult,
    ):
        recorder = BlockedSubmissionRecorder(blocked_config, table=blocked_table)

        await recorder.record(spammer, spam_result)

        assert blocked_table.put_item.call_args.kwargs["Item"]["ipAddress"] == "unknown"

    @pytest.mark.asyncio
    async def test_store_failure_is_swallowed(
        self,
        blocked_config: BlockedSubmissionsConfig,
        spammer: Submission,
        spam_result: ClassificationResult,
    ):
        table = MagicMock()
        table.put_item.side_effect = RuntimeError("DynamoDB error")
        recorder = BlockedSubmissionRecorder(blocked_config, table=table)

        with capture_logs() as logs:
            result = await recorder.record(spammer, spam_result)

        assert result is None
        failures = [entry for entry in logs if entry["event"] == "blocked_submission_record_failed"]
        assert len(failures) == 1
        assert failures[0]["log_level"] == "error"
        assert "DynamoDB error" in failures[0]["error"]

    @pytest.mark.asyncio
    async def test_creates_table_lazily(
        self,
        blocked_config: BlockedSubmissionsConfig,
        spammer: Submission,
        spam_result: ClassificationResult,
    ):
        recorder = BlockedSubmissionRecorder(blocked_config, region="eu-west-1")
        with patch("contact_form.recorder.boto3") as mock_boto3:
            await recorder.record(spammer, spam_result)

        mock_boto3.resource.assert_called_once_with("dynamodb", region_name="eu-west-1")
        mock_boto3.resource.return_value.Table.assert_called_once_with("test-blocked")
        mock_boto3.resource.return_value.Table.return_value.put_item.assert_called_once()

    @pytest.mark.asyncio
    async def test_resource_creation_failure_is_swallowed(
        self,
        blocked_config: BlockedSubmissionsConfig,
        spammer: Submission,
        spam_result: ClassificationResult,
    ):
        recorder = BlockedSubmissionRecorder(blocked_config)
        with patch("contact_form.recorder.boto3") as mock_boto3:
            mock_boto3.resource.side_effect = RuntimeError("no credentials")
            assert await recorder.record(spammer, spam_result) is None

    @pytest.mark.asyncio
    async def test_invalid_record_is_swallowed(
        self,
        blocked_config: BlockedSubmissionsConfig,
        blocked_table: MagicMock,
        spammer: Submission,
        spam_result: ClassificationResult,
    ):
        recorder = BlockedSubmissionRecorder(blocked_config, table=blocked_table)

        with capture_logs() as logs:
            result = await recorder.record(spammer, spam_result, source_ip=12345)

        assert result is None
        blocked_table.put_item.assert_not_called()
        failures = [entry for entry in logs if entry["event"] == "blocked_submission_record_failed"]
        assert len(failures) == 1
        assert failures[0]["submission_id"] is None
