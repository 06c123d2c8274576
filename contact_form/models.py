"""Data models for the contact form pipeline."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator
from pydantic.alias_generators import to_camel


class Submission(BaseModel):
    """A contact form submission whose fields have all passed validation.

    Only :func:`contact_form.validation.validate_submission` builds these;
    partially-validated data stays an untyped mapping.
    """

    model_config = {"frozen": True}

    name: str
    email: str
    phone: str
    message: str


class Classification(str, Enum):
    """Label assigned to a submission by the classification model."""

    LEGITIMATE = "LEGITIMATE"
    SPAM = "SPAM"
    SALES = "SALES"
    GIBBERISH = "GIBBERISH"


class Decision(str, Enum):
    """What the pipeline does with a validated submission."""

    FORWARD = "forward"
    BLOCK = "block"


class ClassificationResult(BaseModel):
    """Outcome of classifying one submission.

    ``failed_open`` marks the fallback produced when the model could not be
    reached or its answer could not be parsed.  Such a result is always
    ``LEGITIMATE`` with zero confidence so it can never block.
    """

    model_config = {"frozen": True}

    classification: Classification = Field(description="Assigned label")
    confidence: float = Field(
        strict=True, ge=0.0, le=1.0, description="Model confidence in the label"
    )
    reason: str = Field(default="", description="Short explanation from the model")
    failed_open: bool = Field(
        default=False,
        description="True when classification failed and the safe fallback was used",
    )

    @model_validator(mode="after")
    def _check_fallback(self) -> ClassificationResult:
        if self.failed_open and (
            self.classification is not Classification.LEGITIMATE or self.confidence != 0.0
        ):
            raise ValueError("a failed-open result must be LEGITIMATE with zero confidence")
        return self

    @classmethod
    def fail_open(cls, error: BaseException) -> ClassificationResult:
        """Build the permissive fallback for a classification failure."""
        return cls(
            classification=Classification.LEGITIMATE,
            confidence=0.0,
            reason=f"Classification error: {error}",
            failed_open=True,
        )


class BlockedSubmissionRecord(BaseModel):
    """Audit record for a submission that was silently blocked.

    Serialized with camelCase attribute names.  ``ttl`` is the epoch-seconds
    expiry read by the DynamoDB TTL mechanism.
    """

    model_config = {"alias_generator": to_camel, "populate_by_name": True}

    submission_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: int = Field(description="Epoch milliseconds when the record was created")
    ttl: int = Field(description="Epoch seconds after which the record expires")
    name: str
    email: str
    phone: str
    message: str
    classification: Classification
    confidence: Decimal
    reason: str
    ip_address: str = "unknown"
    blocked_at: str = Field(description="ISO-8601 time the submission was blocked")

    @classmethod
    def create(
        cls,
        submission: Submission,
        result: ClassificationResult,
        *,
        ip_address: str,
        retention_days: int,
        now: datetime | None = None,
    ) -> BlockedSubmissionRecord:
        now = now or datetime.now(UTC)
        return cls(
            timestamp=int(now.timestamp() * 1000),
            ttl=int((now + timedelta(days=retention_days)).timestamp()),
            name=submission.name,
            email=submission.email,
            phone=submission.phone,
            message=submission.message,
            classification=result.classification,
            # DynamoDB rejects floats
            confidence=Decimal(str(result.confidence)),
            reason=result.reason,
            ip_address=ip_address,
            blocked_at=now.isoformat(),
        )

    def to_item(self) -> dict[str, Any]:
        """Return the DynamoDB item for this record."""
        item = self.model_dump(by_alias=True)
        item["classification"] = self.classification.value
        return item
