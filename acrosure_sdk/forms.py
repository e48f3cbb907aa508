"""Form rendering environments for the payment handoff.

The payment redirect is a browser concern. The SDK builds a form description
and hands it to a `FormSink`, which knows how to render and submit it in the
host environment.
"""

from __future__ import annotations

import html
from typing import Any, Callable, Protocol, runtime_checkable

from .exceptions import AcrosureLocalError, AcrosureNoRenderingEnvironmentError


@runtime_checkable
class FormSink(Protocol):
    """Capability to render and submit an HTML form."""

    def create_form(self, action: str, method: str) -> None:
        """Start a new form targeting `action`."""

    def add_hidden_field(self, name: str, value: str) -> None:
        """Append a hidden input to the current form."""

    def submit(self) -> Any:
        """Submit the current form."""


class HeadlessFormSink:
    """Sink for environments that cannot render a form.

    Every use fails fast instead of silently doing nothing.
    """

    def create_form(self, action: str, method: str) -> None:
        raise AcrosureNoRenderingEnvironmentError()

    def add_hidden_field(self, name: str, value: str) -> None:
        raise AcrosureNoRenderingEnvironmentError()

    def submit(self) -> Any:
        raise AcrosureNoRenderingEnvironmentError()


class HtmlFormSink:
    """Render the form as an auto-submitting HTML document.

    Web backends return the document to the browser, which posts the form to
    the payment page as soon as it loads.

    Args:
        on_submit: Optional callback receiving the rendered document, e.g. a
            function writing it to an HTTP response.
    """

    def __init__(self, on_submit: Callable[[str], Any] | None = None) -> None:
        self._on_submit = on_submit
        self._action: str | None = None
        self._method = "POST"
        self._fields: list[tuple[str, str]] = []

    def create_form(self, action: str, method: str) -> None:
        self._action = action
        self._method = method
        self._fields = []

    def add_hidden_field(self, name: str, value: str) -> None:
        if self._action is None:
            raise AcrosureLocalError("create_form must be called first")
        self._fields.append((name, value))

    def render(self) -> str:
        """Return the current form as an HTML document."""
        if self._action is None:
            raise AcrosureLocalError("create_form must be called first")

        inputs = "".join(
            '<input type="hidden" name="{}" value="{}">'.format(
                html.escape(name, quote=True), html.escape(value, quote=True)
            )
            for name, value in self._fields
        )
        return (
            "<!DOCTYPE html><html><body>"
            f'<form method="{html.escape(self._method, quote=True)}" '
            f'action="{html.escape(self._action, quote=True)}">'
            f"{inputs}</form>"
            "<script>document.forms[0].submit();</script>"
            "</body></html>"
        )

    def submit(self) -> str:
        document = self.render()
        if self._on_submit is not None:
            self._on_submit(document)
        return document
