"""
Control Plane Error Decoding.

The control plane does not always signal failure through the status code:
an HTTP 200 may carry an error envelope, and a non-2xx may carry a
structured body. Two envelope shapes are recognised:

    {"message": "access denied"}                               (engine API)
    {"errors": [{"code": "UNAUTHORIZED", "message": "..."}]}   (UCP API)

Usage:
    from diver.ucp.errors import decode_body, raise_for_response

    raise_for_response(response, resource="service 'web'")
    services = decode_body(response.content, list[Service])
"""

import json
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from diver.core.exceptions import (
    ApplicationError,
    AuthenticationError,
    DecodeError,
    NotFoundError,
)

ENVELOPE_KEYS = frozenset({"message", "code", "detail"})


def _envelope_message(payload: Any) -> str | None:
    """Return the error message if payload is an error envelope, else None."""
    if not isinstance(payload, dict):
        return None

    errors = payload.get("errors")
    if isinstance(errors, list):
        messages = [
            entry["message"]
            for entry in errors
            if isinstance(entry, dict) and isinstance(entry.get("message"), str)
        ]
        if messages:
            return "; ".join(messages)

    message = payload.get("message")
    if isinstance(message, str) and set(payload) <= ENVELOPE_KEYS:
        return message
    return None


def decode_error(body: bytes, status_code: int = 200) -> ApplicationError | None:
    """
    Inspect a response body for an embedded error envelope.

    Args:
        body: Raw response bytes
        status_code: HTTP status the body arrived with

    Returns:
        ApplicationError when the body is an error envelope, None otherwise

    Raises:
        DecodeError: If status_code signals an error and the body is not JSON
    """
    if not body.strip():
        return None

    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        if status_code >= 400:
            raise DecodeError(f"Malformed error body (HTTP {status_code}): {e}") from e
        return None

    message = _envelope_message(payload)
    if message is None:
        return None
    return ApplicationError(message, status_code=status_code)


def parse_ucp_error(body: bytes) -> ApplicationError:
    """Turn any body into an ApplicationError, using the envelope message when there is one."""
    error = decode_error(body)
    if error is not None:
        return error
    text = body.decode("utf-8", errors="replace").strip()
    return ApplicationError(text or "Unknown error")


def raise_for_response(response: httpx.Response, resource: str = "resource") -> None:
    """
    Raise the typed failure a response represents, if any.

    404 is checked before the body is looked at, so a missing resource is
    always a NotFoundError even when the body is garbage.
    """
    status = response.status_code

    if status == 404:
        envelope = decode_error(response.content)
        detail = f": {envelope.message}" if envelope else ""
        raise NotFoundError(f"No such {resource}{detail}")

    error = decode_error(response.content, status)
    if error is not None:
        raise error

    if status in (401, 403):
        raise AuthenticationError(f"Server rejected credentials (HTTP {status})")
    if status >= 400:
        raise ApplicationError(f"Request failed (HTTP {status})", status_code=status)


def decode_body(body: bytes, model: Any) -> Any:
    """
    Unmarshal a response body into model (a pydantic model or typing alias).

    Raises:
        DecodeError: If the bytes do not match the expected schema
    """
    try:
        return TypeAdapter(model).validate_json(body)
    except ValidationError as e:
        raise DecodeError(f"Unexpected response shape: {e}") from e
