"""Narrow the decoded form mapping into a :class:`Submission`."""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from .config import ContactFormConfig
from .errors import ValidationError
from .models import Submission

# Validated in this order; the first failure wins.
FIELD_ORDER = ("email", "name", "phone", "message")

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_PHONE_RE = re.compile(r"^[0-9\s+()-]+$")


def is_valid_email(value: str) -> bool:
    return _EMAIL_RE.match(value) is not None


def is_valid_name(value: str) -> bool:
    """Unicode letters, whitespace, hyphens and apostrophes."""
    return all(
        unicodedata.category(ch).startswith("L") or ch.isspace() or ch in "'-"
        for ch in value
    )


def is_valid_phone(value: str) -> bool:
    return _PHONE_RE.match(value) is not None


def is_valid_message(value: str) -> bool:
    """Unicode letters, numbers, punctuation, separators and line breaks."""
    return all(
        unicodedata.category(ch)[0] in "LNPZ" or ch in "\n\r"
        for ch in value
    )


@dataclass(frozen=True)
class FieldRule:
    """Constraints applied to a single form field."""

    max_length: int
    predicate: Callable[[str], bool]


def rules_from_config(config: ContactFormConfig) -> dict[str, FieldRule]:
    """Build the per-field rule table from the configured length limits."""
    return {
        "email": FieldRule(config.max_email_length, is_valid_email),
        "name": FieldRule(config.max_name_length, is_valid_name),
        "phone": FieldRule(config.max_phone_length, is_valid_phone),
        "message": FieldRule(config.max_message_length, is_valid_message),
    }


def validate_field(value: Any, field: str, rule: FieldRule) -> str:
    """Validate one field and return its trimmed value.

    Raises :class:`ValidationError` tagged with *field* on failure.
    """
    if not value or not isinstance(value, str):
        raise ValidationError(field, f"{field} is required")

    trimmed = value.strip()
    if not trimmed:
        raise ValidationError(field, f"{field} cannot be empty")

    if len(trimmed) > rule.max_length:
        raise ValidationError(field, f"{field} must be less than {rule.max_length} characters")

    if not rule.predicate(trimmed):
        raise ValidationError(field, f"{field} contains invalid characters")

    return trimmed


def validate_submission(data: Mapping[str, Any], rules: Mapping[str, FieldRule]) -> Submission:
    """Validate every field of *data* in :data:`FIELD_ORDER`.

    Stops at the first failing field.  A :class:`Submission` is only built
    once all four fields have passed.
    """
    cleaned = {field: validate_field(data.get(field), field, rules[field]) for field in FIELD_ORDER}
    return Submission(**cleaned)
