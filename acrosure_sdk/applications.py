"""Application resource manager.

`ApplicationManager` drives one insurance application through the API. Each
method issues exactly one call and returns an `ApplicationResult`. The manager
also keeps a current handle so callers can rely on an implicit "current
application"; each call applies only its own change to that handle once the
response arrives.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Mapping, Optional

from .const import (
    APPLICATION_FIELDS,
    LOGGER_NAME,
    PATH_APPLICATIONS_CONFIRM,
    PATH_APPLICATIONS_CREATE,
    PATH_APPLICATIONS_GET,
    PATH_APPLICATIONS_GET_PACKAGE,
    PATH_APPLICATIONS_GET_PACKAGES,
    PATH_APPLICATIONS_LIST,
    PATH_APPLICATIONS_SELECT_PACKAGE,
    PATH_APPLICATIONS_SUBMIT,
    PATH_APPLICATIONS_UPDATE,
    PATH_PAYMENTS_2C2P_GET_HASH,
)
from .exceptions import (
    AcrosureEmptyResponseError,
    AcrosureNoRenderingEnvironmentError,
)
from .forms import FormSink
from .handle import ApplicationHandle, ApplicationResult
from .payments import PaymentHashPayload, SubmittableForm, build_payment_form
from .util import compact_payload, is_empty_response

_LOGGER = logging.getLogger(LOGGER_NAME)

CallApi = Callable[[str, Optional[Mapping[str, Any]]], Awaitable[Any]]
HandleUpdate = Callable[[ApplicationHandle], ApplicationHandle]


def _application_fields(**values: Any) -> dict[str, Any]:
    unknown = set(values) - set(APPLICATION_FIELDS)
    if unknown:
        raise TypeError(f"Unknown application fields: {sorted(unknown)}")
    return {name: values.get(name) for name in APPLICATION_FIELDS}


class ApplicationManager:
    """Manage one Acrosure application.

    Args:
        call_api: Coroutine function `(path, payload) -> response`, normally
            `AcrosureClient.async_call_api`.
        id: Application id to start from.
        form_sink: Rendering environment used by `async_redirect_to_payment`.

    Every id-scoped method accepts an optional `handle` keyword. When omitted,
    the manager's current handle is used. Concurrent calls on one manager are
    not serialized; a successful call applies its id/status change to the
    current handle as it is when the response arrives.
    """

    def __init__(
        self,
        *,
        call_api: CallApi,
        id: str | None = None,
        form_sink: FormSink | None = None,
    ) -> None:
        self.call_api = call_api
        self.form_sink = form_sink
        self._handle = ApplicationHandle(id=id)

    @property
    def handle(self) -> ApplicationHandle:
        return self._handle

    @property
    def id(self) -> str | None:
        return self._handle.id

    @property
    def status(self) -> str | None:
        return self._handle.status

    def set_id(self, id: str | None) -> None:
        """Set the current application id without calling the API."""
        self._handle = ApplicationHandle(id=id, status=self._handle.status)

    def _resolve(self, handle: ApplicationHandle | None) -> ApplicationHandle:
        return handle if handle is not None else self._handle

    def _commit(
        self,
        data: Any,
        handle: ApplicationHandle | None,
        update: HandleUpdate | None = None,
    ) -> ApplicationResult:
        # Resolved after the await so concurrent changes are not overwritten.
        base = self._resolve(handle)
        if update is None:
            return ApplicationResult(data=data, handle=base)

        new_handle = update(base)
        if new_handle != self._handle:
            _LOGGER.debug(
                "Application handle changed id=%s status=%s",
                new_handle.id,
                new_handle.status,
            )
        self._handle = new_handle
        return ApplicationResult(data=data, handle=new_handle)

    async def _async_call_scoped(
        self,
        path: str,
        handle: ApplicationHandle,
        extra: Mapping[str, Any] | None = None,
    ) -> Any:
        payload: dict[str, Any] = {"application_id": handle.id}
        if extra:
            payload.update(extra)
        return await self.call_api(path, compact_payload(payload))

    async def async_get(
        self, id: str | None = None, *, handle: ApplicationHandle | None = None
    ) -> ApplicationResult:
        """Fetch an application, by explicit id or the current one."""
        current = self._resolve(handle).with_id(id)
        resp = await self._async_call_scoped(PATH_APPLICATIONS_GET, current)
        return self._commit(resp, handle, lambda h: h.with_id(id).mirror_status(resp))

    async def async_list(self, query: Mapping[str, Any] | None = None) -> Any:
        """List applications.

        The query is sent as-is and the raw response is returned. The current
        application is neither read nor changed.
        """
        return await self.call_api(PATH_APPLICATIONS_LIST, query)

    async def async_create(
        self,
        product_id: str,
        *,
        basic_data: Mapping[str, Any] | None = None,
        package_options: Mapping[str, Any] | None = None,
        additional_data: Mapping[str, Any] | None = None,
        attachments: list[Any] | None = None,
        package_code: str | None = None,
        ref1: str | None = None,
        ref2: str | None = None,
        ref3: str | None = None,
        group_policy_id: str | None = None,
        step: int | None = None,
        handle: ApplicationHandle | None = None,
    ) -> ApplicationResult:
        """Create an application and make it the current one.

        Raises:
            AcrosureEmptyResponseError: If the API returned an empty response.
        """
        payload: dict[str, Any] = {"product_id": product_id}
        payload.update(
            _application_fields(
                basic_data=basic_data,
                package_options=package_options,
                additional_data=additional_data,
                attachments=attachments,
                package_code=package_code,
                ref1=ref1,
                ref2=ref2,
                ref3=ref3,
                group_policy_id=group_policy_id,
                step=step,
            )
        )
        resp = await self.call_api(
            PATH_APPLICATIONS_CREATE, compact_payload(payload)
        )
        if is_empty_response(resp):
            raise AcrosureEmptyResponseError()
        return self._commit(resp, handle, lambda h: h.adopt_response(resp))

    async def async_update(
        self,
        *,
        application_id: str | None = None,
        basic_data: Mapping[str, Any] | None = None,
        package_options: Mapping[str, Any] | None = None,
        additional_data: Mapping[str, Any] | None = None,
        attachments: list[Any] | None = None,
        package_code: str | None = None,
        ref1: str | None = None,
        ref2: str | None = None,
        ref3: str | None = None,
        group_policy_id: str | None = None,
        step: int | None = None,
        handle: ApplicationHandle | None = None,
    ) -> ApplicationResult:
        """Update the current application, or the one named by `application_id`.

        Unset fields are left out of the request, so they are not cleared.
        """
        current = self._resolve(handle).with_id(application_id)
        fields = _application_fields(
            basic_data=basic_data,
            package_options=package_options,
            additional_data=additional_data,
            attachments=attachments,
            package_code=package_code,
            ref1=ref1,
            ref2=ref2,
            ref3=ref3,
            group_policy_id=group_policy_id,
            step=step,
        )
        resp = await self._async_call_scoped(PATH_APPLICATIONS_UPDATE, current, fields)
        return self._commit(
            resp, handle, lambda h: h.with_id(application_id).mirror_status(resp)
        )

    async def async_get_packages(
        self, *, handle: ApplicationHandle | None = None
    ) -> ApplicationResult:
        """Fetch the packages available to the current application."""
        current = self._resolve(handle)
        resp = await self._async_call_scoped(PATH_APPLICATIONS_GET_PACKAGES, current)
        return self._commit(resp, handle)

    async def async_get_package(
        self, *, handle: ApplicationHandle | None = None
    ) -> ApplicationResult:
        """Fetch the package selected for the current application."""
        current = self._resolve(handle)
        resp = await self._async_call_scoped(PATH_APPLICATIONS_GET_PACKAGE, current)
        return self._commit(resp, handle)

    async def async_select_package(
        self, package_code: str, *, handle: ApplicationHandle | None = None
    ) -> ApplicationResult:
        """Select a package for the current application.

        The returned application's status is not mirrored here, unlike the
        other mutating calls.
        """
        current = self._resolve(handle)
        resp = await self._async_call_scoped(
            PATH_APPLICATIONS_SELECT_PACKAGE,
            current,
            {"package_code": package_code},
        )
        return self._commit(resp, handle)

    async def async_submit(
        self, *, handle: ApplicationHandle | None = None
    ) -> ApplicationResult:
        """Submit the current application."""
        current = self._resolve(handle)
        resp = await self._async_call_scoped(PATH_APPLICATIONS_SUBMIT, current)
        return self._commit(resp, handle, lambda h: h.mirror_status(resp))

    async def async_confirm(
        self, *, handle: ApplicationHandle | None = None
    ) -> ApplicationResult:
        """Confirm the current application."""
        current = self._resolve(handle)
        resp = await self._async_call_scoped(PATH_APPLICATIONS_CONFIRM, current)
        return self._commit(resp, handle, lambda h: h.mirror_status(resp))

    # -------------------------------------------------------------------------
    # Payment handoff
    # -------------------------------------------------------------------------

    async def async_get_payment_hash(
        self, frontend_url: str, *, handle: ApplicationHandle | None = None
    ) -> PaymentHashPayload:
        """Fetch the signed 2C2P payload for the current application.

        Args:
            frontend_url: URL the payment gateway returns the user to.

        Returns:
            The raw payload, including `payment_url`.
        """
        return await self._async_call_scoped(
            PATH_PAYMENTS_2C2P_GET_HASH,
            self._resolve(handle),
            {"frontend_url": frontend_url},
        )

    async def async_build_payment_form(
        self, frontend_url: str, *, handle: ApplicationHandle | None = None
    ) -> SubmittableForm:
        """Fetch the signed payload and build the payment form from it."""
        payload = await self.async_get_payment_hash(frontend_url, handle=handle)
        return build_payment_form(payload)

    async def async_redirect_to_payment(
        self,
        frontend_url: str,
        *,
        form_sink: FormSink | None = None,
        handle: ApplicationHandle | None = None,
    ) -> Any:
        """Build the payment form and submit it through a `FormSink`.

        Returns:
            Whatever the sink's `submit` returns.

        Raises:
            AcrosureNoRenderingEnvironmentError: If no sink is available. This
                is checked before any API call.
        """
        sink = form_sink if form_sink is not None else self.form_sink
        if sink is None:
            raise AcrosureNoRenderingEnvironmentError()
        form = await self.async_build_payment_form(frontend_url, handle=handle)
        return form.render(sink)
