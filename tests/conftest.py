"""Shared test fixtures for the contact_form test suite."""

from __future__ import annotations

import base64
import io
import json
from unittest.mock import MagicMock
from urllib.parse import urlencode

import pytest
import structlog

from contact_form.config import (
    BlockedSubmissionsConfig,
    ContactFormConfig,
    SpamDetectionConfig,
)
from contact_form.models import Classification, ClassificationResult, Submission


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Keep logger caching from one test out of the next."""
    structlog.reset_defaults()
    yield
    structlog.reset_defaults()


@pytest.fixture
def spam_config() -> SpamDetectionConfig:
    return SpamDetectionConfig(
        enabled=True,
        confidence_threshold=0.8,
        model_id="test-model",
        max_tokens=200,
    )


@pytest.fixture
def blocked_config() -> BlockedSubmissionsConfig:
    return BlockedSubmissionsConfig(table_name="test-blocked", retention_days=90)


@pytest.fixture
def config(spam_config: SpamDetectionConfig, blocked_config: BlockedSubmissionsConfig) -> ContactFormConfig:
    return ContactFormConfig(
        to_address="Owner <owner@example.com>",
        from_address="Contact Form <hello@example.com>",
        allowed_origin="https://www.example.com",
        aws_region="us-east-1",
        spam_detection=spam_config,
        blocked_submissions=blocked_config,
    )


@pytest.fixture
def submission() -> Submission:
    return Submission(
        name="John Doe",
        email="john@example.com",
        phone="555-1234",
        message="I have a question about your services",
    )


@pytest.fixture
def form_data() -> dict:
    return {
        "name": "John Doe",
        "email": "john@example.com",
        "phone": "555-1234",
        "message": "Test message",
    }


@pytest.fixture
def spam_result() -> ClassificationResult:
    return ClassificationResult(
        classification=Classification.SPAM,
        confidence=0.95,
        reason="Phishing attempt",
    )


@pytest.fixture
def event_factory():
    """Factory to build Lambda proxy events with overrides."""

    def _make(
        data: dict | None = None,
        *,
        form: bool = False,
        base64_encoded: bool = False,
        source_ip: str | None = "192.168.1.100",
        **overrides,
    ) -> dict:
        if form:
            body = urlencode(data or {})
            headers = {"content-type": "application/x-www-form-urlencoded"}
        else:
            body = json.dumps(data or {})
            headers = {"content-type": "application/json"}
        if base64_encoded:
            body = base64.b64encode(body.encode("utf-8")).decode("ascii")

        event: dict = {
            "body": body,
            "headers": headers,
            "isBase64Encoded": base64_encoded,
            "requestContext": {"http": {"method": "POST"}},
        }
        if source_ip is not None:
            event["requestContext"]["http"]["sourceIp"] = source_ip
        event.update(overrides)
        return event

    return _make


def bedrock_response(text: str) -> dict:
    """An ``invoke_model`` response whose first content block is *text*."""
    payload = json.dumps({"content": [{"type": "text", "text": text}]})
    return {"body": io.BytesIO(payload.encode("utf-8"))}


@pytest.fixture
def bedrock_client_factory():
    """Factory for a mock bedrock-runtime client answering with *text*."""

    def _make(
        classification: str = "LEGITIMATE",
        confidence: float = 0.95,
        reason: str = "Genuine inquiry",
        *,
        text: str | None = None,
    ) -> MagicMock:
        if text is None:
            text = json.dumps({
                "classification": classification,
                "confidence": confidence,
                "reason": reason,
            })
        client = MagicMock()
        client.invoke_model.side_effect = lambda **kwargs: bedrock_response(text)
        return client

    return _make


@pytest.fixture
def ses_client() -> MagicMock:
    client = MagicMock()
    client.send_email.return_value = {"MessageId": "test-message-id"}
    return client


@pytest.fixture
def blocked_table() -> MagicMock:
    table = MagicMock()
    table.put_item.return_value = {}
    return table
