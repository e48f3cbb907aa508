"""Acrosure Python SDK.

The package provides:
    - An async request layer with a single normalized error contract
    - An application manager that tracks one application's id and status
    - Helpers turning a signed 2C2P payload into a submittable payment form
"""

from __future__ import annotations

# -----------------------------------------------------------------------------
# Public API
# -----------------------------------------------------------------------------
from .applications import ApplicationManager
from .client import AcrosureApiClient, AcrosureClient
from .exceptions import (
    AcrosureEmptyResponseError,
    AcrosureError,
    AcrosureLocalError,
    AcrosureNoRenderingEnvironmentError,
    AcrosurePaymentPayloadError,
    AcrosureRemoteOpaqueError,
    AcrosureRemoteStructuredError,
    AcrosureTransportAbsentError,
    ErrorKind,
)
from .forms import FormSink, HeadlessFormSink, HtmlFormSink
from .handle import ApplicationHandle, ApplicationResult
from .payments import PaymentHashPayload, SubmittableForm, build_payment_form

__all__ = [
    "AcrosureApiClient",
    "AcrosureClient",
    "AcrosureEmptyResponseError",
    "AcrosureError",
    "AcrosureLocalError",
    "AcrosureNoRenderingEnvironmentError",
    "AcrosurePaymentPayloadError",
    "AcrosureRemoteOpaqueError",
    "AcrosureRemoteStructuredError",
    "AcrosureTransportAbsentError",
    "ApplicationHandle",
    "ApplicationManager",
    "ApplicationResult",
    "ErrorKind",
    "FormSink",
    "HeadlessFormSink",
    "HtmlFormSink",
    "PaymentHashPayload",
    "SubmittableForm",
    "build_payment_form",
]
