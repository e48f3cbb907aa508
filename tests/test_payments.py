"""Tests for the 2C2P payment handoff."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock

import pytest

from acrosure_sdk.applications import ApplicationManager
from acrosure_sdk.exceptions import (
    AcrosureLocalError,
    AcrosureNoRenderingEnvironmentError,
    AcrosurePaymentPayloadError,
)
from acrosure_sdk.forms import FormSink, HeadlessFormSink, HtmlFormSink
from acrosure_sdk.payments import SubmittableForm, build_payment_form

_HASH = {"payment_url": "https://pay.example/x", "amount": "100", "ref": "R1"}


class _RecordingSink:
    def __init__(self) -> None:
        self.events: list[tuple[Any, ...]] = []

    def create_form(self, action: str, method: str) -> None:
        self.events.append(("create", action, method))

    def add_hidden_field(self, name: str, value: str) -> None:
        self.events.append(("field", name, value))

    def submit(self) -> str:
        self.events.append(("submit",))
        return "submitted"


def test_build_payment_form_excludes_url_key() -> None:
    form = build_payment_form(_HASH)

    assert form.action == "https://pay.example/x"
    assert form.method == "POST"
    assert form.as_dict() == {"amount": "100", "ref": "R1"}


def test_build_payment_form_keeps_payload_order() -> None:
    form = build_payment_form(
        {"z": "1", "payment_url": "https://pay.example/x", "a": "2"}
    )
    assert form.fields == (("z", "1"), ("a", "2"))


@pytest.mark.parametrize(
    "payload",
    [
        None,
        ["https://pay.example/x"],
        {"amount": "100"},
        {"payment_url": ""},
        {"payment_url": "/relative/path"},
    ],
)
def test_build_payment_form_rejects_unusable_payloads(payload) -> None:
    with pytest.raises(AcrosurePaymentPayloadError):
        build_payment_form(payload)


def test_render_drives_sink_in_order() -> None:
    sink = _RecordingSink()

    result = build_payment_form(_HASH).render(sink)

    assert result == "submitted"
    assert sink.events == [
        ("create", "https://pay.example/x", "POST"),
        ("field", "amount", "100"),
        ("field", "ref", "R1"),
        ("submit",),
    ]


def test_sinks_satisfy_form_sink_protocol() -> None:
    assert isinstance(HtmlFormSink(), FormSink)
    assert isinstance(HeadlessFormSink(), FormSink)
    assert isinstance(_RecordingSink(), FormSink)


def test_headless_sink_fails_fast() -> None:
    with pytest.raises(AcrosureNoRenderingEnvironmentError):
        build_payment_form(_HASH).render(HeadlessFormSink())


def test_html_sink_renders_escaped_auto_submitting_form() -> None:
    written: list[str] = []
    sink = HtmlFormSink(on_submit=written.append)
    form = SubmittableForm(
        action="https://pay.example/x?a=1&b=2", fields=(("note", '"<hi>"'),)
    )

    document = form.render(sink)

    assert written == [document]
    assert 'action="https://pay.example/x?a=1&amp;b=2"' in document
    assert 'method="POST"' in document
    hidden = '<input type="hidden" name="note" value="&quot;&lt;hi&gt;&quot;">'
    assert hidden in document
    assert "document.forms[0].submit()" in document


def test_html_sink_requires_create_form_first() -> None:
    with pytest.raises(AcrosureLocalError):
        HtmlFormSink().add_hidden_field("a", "1")


async def test_get_payment_hash_sends_id_and_frontend_url() -> None:
    call_api = AsyncMock(return_value=_HASH)
    manager = ApplicationManager(call_api=call_api, id="A1")

    payload = await manager.async_get_payment_hash("https://shop.example/return")

    assert payload == _HASH
    call_api.assert_awaited_once_with(
        "/payments/2c2p/get-hash",
        {"application_id": "A1", "frontend_url": "https://shop.example/return"},
    )


async def test_build_payment_form_fetches_fresh_payload_each_time() -> None:
    call_api = AsyncMock(return_value=_HASH)
    manager = ApplicationManager(call_api=call_api, id="A1")

    first = await manager.async_build_payment_form("https://shop.example/return")
    second = await manager.async_build_payment_form("https://shop.example/return")

    assert first == second
    assert call_api.await_count == 2


async def test_redirect_without_sink_fails_before_calling_api() -> None:
    call_api = AsyncMock(return_value=_HASH)
    manager = ApplicationManager(call_api=call_api, id="A1")

    with pytest.raises(AcrosureNoRenderingEnvironmentError):
        await manager.async_redirect_to_payment("https://shop.example/return")

    call_api.assert_not_called()


async def test_redirect_submits_through_configured_sink() -> None:
    sink = _RecordingSink()
    manager = ApplicationManager(
        call_api=AsyncMock(return_value=_HASH), id="A1", form_sink=sink
    )

    result = await manager.async_redirect_to_payment("https://shop.example/return")

    assert result == "submitted"
    assert sink.events[-1] == ("submit",)


async def test_redirect_sink_argument_overrides_configured_sink() -> None:
    configured = _RecordingSink()
    manager = ApplicationManager(
        call_api=AsyncMock(return_value=_HASH), id="A1", form_sink=configured
    )

    document = await manager.async_redirect_to_payment(
        "https://shop.example/return", form_sink=HtmlFormSink()
    )

    assert document.startswith("<!DOCTYPE html>")
    assert configured.events == []


def test_build_payment_form_renders_values_like_browser_inputs() -> None:
    form = build_payment_form(
        {  # type: ignore[dict-item]
            "payment_url": "https://pay.example/x",
            "recurring": True,
            "promo": False,
            "amount": 100,
            "note": None,
            "ref": " R1 ",
        }
    )

    assert form.fields == (
        ("recurring", "true"),
        ("promo", "false"),
        ("amount", "100"),
        ("note", ""),
        ("ref", " R1 "),
    )
