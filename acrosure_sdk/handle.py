"""Application identity helpers.

A manager never mutates identity in place. Each operation derives the next
`ApplicationHandle` from the previous one plus the API response, and returns it
inside an immutable `ApplicationResult`.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from .util import response_field


@dataclass(frozen=True)
class ApplicationHandle:
    """The current application identity.

    Attributes:
        id: Application id used by id-scoped operations.
        status: Last status reported by the API; mirrored, never computed.
    """

    id: str | None = None
    status: str | None = None

    def with_id(self, application_id: str | None) -> "ApplicationHandle":
        """Adopt an explicit id when one is given."""
        if not application_id:
            return self
        return replace(self, id=application_id)

    def mirror_status(self, response: Any) -> "ApplicationHandle":
        """Mirror a truthy `status` field from an API response."""
        status = response_field(response, "status")
        if not status:
            return self
        return replace(self, status=status)

    def adopt_response(self, response: Any) -> "ApplicationHandle":
        """Adopt both `id` and `status` from an API response."""
        handle = self.with_id(response_field(response, "id"))
        return handle.mirror_status(response)


@dataclass(frozen=True)
class ApplicationResult:
    """Raw API response paired with the handle that follows from it."""

    data: Any
    handle: ApplicationHandle

    @property
    def id(self) -> str | None:
        return self.handle.id

    @property
    def status(self) -> str | None:
        return self.handle.status
