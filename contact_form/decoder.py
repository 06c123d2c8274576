"""Request decoder — turn a Lambda proxy event into an untyped field mapping.

Handles both the API Gateway REST (v1) and HTTP API / Function URL (v2)
event shapes.
"""

from __future__ import annotations

import base64
import binascii
import json
from collections.abc import Mapping
from typing import Any
from urllib.parse import parse_qsl

import structlog

from .errors import DecodeError

logger = structlog.get_logger()

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def is_preflight(event: Mapping[str, Any]) -> bool:
    """Return True for a CORS preflight (``OPTIONS``) request."""
    if event.get("httpMethod") == "OPTIONS":
        return True
    http = (event.get("requestContext") or {}).get("http") or {}
    return http.get("method") == "OPTIONS"


def decode_body(event: Mapping[str, Any]) -> dict[str, Any]:
    """Extract the submitted key/value pairs from *event*.

    URL-encoded bodies are parsed when the content type says so; anything
    else is parsed as JSON.  Raises :class:`DecodeError` if the body is
    missing or malformed, or if JSON decodes to something other than an
    object.
    """
    body = event.get("body")
    if isinstance(body, Mapping):
        logger.info("request_body_parsed", format="json")
        return dict(body)
    if body is None:
        raise DecodeError("Request body is missing")

    if event.get("isBase64Encoded"):
        try:
            body = base64.b64decode(body, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as exc:
            raise DecodeError(f"Invalid base64 body: {exc}") from exc

    if FORM_CONTENT_TYPE in _content_type(event):
        data = dict(parse_qsl(body, keep_blank_values=True))
        logger.info("request_body_parsed", format="form")
        return data

    try:
        data = json.loads(body)
    except json.JSONDecodeError as exc:
        raise DecodeError(f"Invalid JSON body: {exc}") from exc
    if not isinstance(data, dict):
        raise DecodeError(f"Expected a JSON object, got {type(data).__name__}")
    logger.info("request_body_parsed", format="json")
    return data


def extract_source_ip(event: Mapping[str, Any]) -> str:
    """Return the caller's IP address, or ``"unknown"`` if the event lacks one."""
    request_context = event.get("requestContext") or {}
    for key in ("http", "identity"):
        source_ip = (request_context.get(key) or {}).get("sourceIp")
        if source_ip:
            return source_ip
    return "unknown"


def _content_type(event: Mapping[str, Any]) -> str:
    """Case-insensitive lookup of the Content-Type header."""
    headers = event.get("headers") or {}
    for name, value in headers.items():
        if name.lower() == "content-type" and value:
            return value.lower()
    return ""
