"""Lambda proxy responses for every pipeline outcome.

The blocked and sent paths both end in :func:`success`, so a caller can
never tell a silently blocked submission from a delivered one.
"""

from __future__ import annotations

import json
from typing import Any

SUCCESS_MESSAGE = "Thank you for contacting us! Your message has been sent."
SEND_FAILED_MESSAGE = "Unable to send message. Please try again later."
INVALID_REQUEST_MESSAGE = "Invalid request format"


def build_response(status_code: int, body: dict[str, Any], allowed_origin: str) -> dict[str, Any]:
    """Wrap *body* with JSON and CORS headers."""
    return {
        "statusCode": status_code,
        "headers": {
            "Content-Type": "application/json",
            "Access-Control-Allow-Origin": allowed_origin,
            "Access-Control-Allow-Headers": "Content-Type",
            "Access-Control-Allow-Methods": "POST, OPTIONS",
        },
        "body": json.dumps(body),
    }


def preflight(allowed_origin: str) -> dict[str, Any]:
    return build_response(200, {"message": "OK"}, allowed_origin)


def invalid_request(allowed_origin: str) -> dict[str, Any]:
    return build_response(400, {"error": INVALID_REQUEST_MESSAGE}, allowed_origin)


def validation_failed(field: str, message: str, allowed_origin: str) -> dict[str, Any]:
    return build_response(400, {"error": message, "field": field}, allowed_origin)


def success(allowed_origin: str) -> dict[str, Any]:
    return build_response(200, {"message": SUCCESS_MESSAGE, "success": True}, allowed_origin)


def send_failed(allowed_origin: str) -> dict[str, Any]:
    return build_response(500, {"error": SEND_FAILED_MESSAGE}, allowed_origin)
