"""SDK exception types.

Every failure surfaced by the request layer is one of the tagged
`AcrosureError` kinds below. Managers add only local precondition errors on
top of those.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Tag identifying the shape of a normalized error."""

    TRANSPORT_ABSENT = "transport_absent"
    REMOTE_STRUCTURED = "remote_structured"
    REMOTE_OPAQUE = "remote_opaque"
    LOCAL = "local"


class AcrosureError(Exception):
    """Base exception for Acrosure SDK failures."""

    kind: ErrorKind = ErrorKind.LOCAL


class AcrosureTransportAbsentError(AcrosureError):
    """The transport produced no response object at all."""

    kind = ErrorKind.TRANSPORT_ABSENT

    def __init__(self, message: str = "no response") -> None:
        super().__init__(message)


class AcrosureRemoteStructuredError(AcrosureError):
    """The API answered with a structured JSON error body.

    Attributes:
        payload: The decoded error body, exactly as the server sent it.
        status: HTTP status of the response, when known.
    """

    kind = ErrorKind.REMOTE_STRUCTURED

    def __init__(self, payload: Any, *, status: int | None = None) -> None:
        super().__init__(_describe_payload(payload, status))
        self.payload = payload
        self.status = status


class AcrosureRemoteOpaqueError(AcrosureError):
    """The API failed without a structured body.

    Attributes:
        status: HTTP status of the response, when known.
    """

    kind = ErrorKind.REMOTE_OPAQUE

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class AcrosureLocalError(AcrosureError):
    """A precondition checked by the SDK itself was not met."""

    kind = ErrorKind.LOCAL


class AcrosureEmptyResponseError(AcrosureLocalError):
    """Application create returned an empty response."""

    def __init__(self, message: str = "no response") -> None:
        super().__init__(message)


class AcrosureNoRenderingEnvironmentError(AcrosureLocalError):
    """A payment redirect was requested without a form rendering environment."""

    def __init__(
        self, message: str = "no rendering environment for payment form"
    ) -> None:
        super().__init__(message)


class AcrosurePaymentPayloadError(AcrosureLocalError):
    """The payment hash payload cannot be turned into a form."""


def _describe_payload(payload: Any, status: int | None) -> str:
    message: Any = None
    if isinstance(payload, dict):
        message = payload.get("message") or payload.get("code")
    text = str(message) if message else "remote error"
    return f"{text} (HTTP {status})" if status is not None else text
