"""2C2P payment handoff helpers.

The API signs a set of form fields for the payment gateway. These helpers turn
that payload into a `SubmittableForm` and push it through a `FormSink`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, cast

from yarl import URL

from .const import PAYMENT_FORM_METHOD, PAYMENT_URL_KEY
from .exceptions import AcrosurePaymentPayloadError
from .forms import FormSink
from .util import form_value

PaymentHashPayload = dict[str, str]


@dataclass(frozen=True)
class SubmittableForm:
    """A POST form ready to be rendered in a browser.

    Attributes:
        action: Payment page URL the form posts to.
        fields: Hidden `(name, value)` pairs in payload order.
        method: Always `POST`.
    """

    action: str
    fields: tuple[tuple[str, str], ...]
    method: str = PAYMENT_FORM_METHOD

    def as_dict(self) -> dict[str, str]:
        """Return the hidden fields as a mapping."""
        return dict(self.fields)

    def render(self, sink: FormSink) -> Any:
        """Render and submit this form through `sink`.

        Returns:
            Whatever the sink's `submit` returns.
        """
        sink.create_form(self.action, self.method)
        for name, value in self.fields:
            sink.add_hidden_field(name, value)
        return sink.submit()


def build_payment_form(payload: PaymentHashPayload) -> SubmittableForm:
    """Build a payment form from a 2C2P hash payload.

    Args:
        payload: Mapping returned by the payment hash endpoint. String values
            are used as-is; other values are rendered like browser inputs.

    Returns:
        A form posting every non-URL key as a hidden field.

    Raises:
        AcrosurePaymentPayloadError: If the payload is not a mapping or has no
            usable `payment_url`.
    """
    payload_any: Any = payload
    if not isinstance(payload_any, Mapping):
        raise AcrosurePaymentPayloadError("Payment hash payload was not an object")
    payload_map = cast(Mapping[str, Any], payload_any)

    action_any: Any = payload_map.get(PAYMENT_URL_KEY)
    if not isinstance(action_any, str) or not action_any.strip():
        raise AcrosurePaymentPayloadError(
            f"Payment hash payload has no {PAYMENT_URL_KEY}"
        )
    if not URL(action_any.strip()).is_absolute():
        raise AcrosurePaymentPayloadError(
            f"Payment URL is not absolute: {action_any!r}"
        )

    fields = tuple(
        (str(key), form_value(value))
        for key, value in payload_map.items()
        if key != PAYMENT_URL_KEY
    )
    return SubmittableForm(action=action_any.strip(), fields=fields)
