"""Contact form configuration loaded from environment variables.

Uses pydantic-settings so every field can be overridden via the Lambda
function's environment.  Every field has a default, so a bare environment
still starts.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class SpamDetectionConfig(BaseSettings):
    """Bedrock-backed spam classification settings."""

    model_config = {"env_prefix": "SPAM_DETECTION_"}

    enabled: bool = Field(
        default=True,
        description="Classify submissions before forwarding them",
    )
    confidence_threshold: float = Field(
        default=0.8,
        ge=0.0,
        le=1.0,
        description="Minimum confidence for a SPAM/GIBBERISH label to block a submission",
    )
    model_id: str = Field(
        default="anthropic.claude-3-haiku-20240307-v1:0",
        description="Bedrock model identifier used for classification",
    )
    max_tokens: int = Field(default=200, description="Maximum tokens in the model response")


class BlockedSubmissionsConfig(BaseSettings):
    """DynamoDB table holding blocked submissions."""

    model_config = {"env_prefix": "BLOCKED_SUBMISSIONS_"}

    table_name: str = Field(
        default="contact-form-blocked-submissions",
        description="DynamoDB table name",
    )
    retention_days: int = Field(
        default=90,
        description="Days before a record expires via the table's TTL attribute",
    )


class ContactFormConfig(BaseSettings):
    """Root configuration for the contact form handler.

    Field names map directly onto the env vars set by the deployment
    (``TO_ADDRESS``, ``MAX_MESSAGE_LENGTH``, ...).  Nested configs are
    populated from their own env-var prefixes.
    """

    model_config = {"env_prefix": ""}

    to_address: str = Field(
        default="Site Owner <owner@example.com>",
        description="Recipient of forwarded submissions",
    )
    from_address: str = Field(
        default="Contact Form <hello@example.com>",
        description="Verified SES sender address",
    )
    allowed_origin: str = Field(default="*", description="CORS Access-Control-Allow-Origin")
    aws_region: str = Field(default="us-east-1", description="AWS region for SES/Bedrock/DynamoDB")

    max_email_length: int = Field(default=255, description="Maximum email length")
    max_name_length: int = Field(default=100, description="Maximum name length")
    max_phone_length: int = Field(default=20, description="Maximum phone length")
    max_message_length: int = Field(default=2048, description="Maximum message length")
    subject_word_count: int = Field(
        default=8,
        description="Number of message words used for the email subject",
    )

    log_level: str = Field(default="INFO", description="Log level")
    log_json: bool = Field(
        default=True,
        description="Use JSON log output (True for Lambda, False for local runs)",
    )

    spam_detection: SpamDetectionConfig = Field(default_factory=SpamDetectionConfig)
    blocked_submissions: BlockedSubmissionsConfig = Field(
        default_factory=BlockedSubmissionsConfig,
    )
