"""Small payload helpers shared by the request layer and managers."""

from __future__ import annotations

import json
from typing import Any, Mapping


def compact_payload(payload: Mapping[str, Any] | None) -> dict[str, Any]:
    """Drop unset top-level fields from a request payload.

    Args:
        payload: Mapping of request fields, or `None`.

    Returns:
        A new dict without the keys whose value is `None`. Unset fields are
        omitted from the request rather than sent as JSON null.
    """
    if not payload:
        return {}
    return {key: value for key, value in payload.items() if value is not None}


def decode_json_body(body: str) -> Any:
    """Decode a response body.

    Returns:
        The decoded JSON value, or `None` for an empty body.

    Raises:
        json.JSONDecodeError: When the body is not valid JSON.
    """
    if not body or not body.strip():
        return None
    return json.loads(body)


def response_field(response: Any, key: str) -> Any:
    """Return `response[key]` when the response is a mapping, else `None`."""
    if isinstance(response, Mapping):
        return response.get(key)
    return None


def is_empty_response(response: Any) -> bool:
    """Return True for responses that carry nothing.

    Only `None`, `False`, numeric zero and the empty string count as empty;
    empty objects and arrays are still valid responses.
    """
    if response is None or response is False or response == "":
        return True
    if isinstance(response, (int, float)) and not isinstance(response, bool):
        return response == 0 or response != response
    return False


def form_value(value: Any) -> str:
    """Render a payload value the way a browser form input would."""
    if isinstance(value, str):
        return value
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
