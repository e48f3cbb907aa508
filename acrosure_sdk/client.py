"""Async Acrosure API clients.

`AcrosureApiClient` is the request layer: it owns the HTTP session, issues one
authenticated POST per call, and normalizes every failure into an
`AcrosureError` kind. `AcrosureClient` is the top-level entry point that holds
the credential and hands a bound request function to resource managers.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from typing import Any, Mapping

import aiohttp
import async_timeout
from yarl import URL

from .applications import ApplicationManager
from .const import (
    CONTENT_TYPE_JSON,
    DEFAULT_API_URL,
    DEFAULT_TIMEOUT_SECONDS,
    ENV_API_URL,
    ENV_TIMEOUT_SECONDS,
    ENV_TOKEN,
    LOGGER_NAME,
)
from .exceptions import (
    AcrosureError,
    AcrosureRemoteOpaqueError,
    AcrosureRemoteStructuredError,
    AcrosureTransportAbsentError,
)
from .forms import FormSink
from .util import compact_payload, decode_json_body

_LOGGER = logging.getLogger(LOGGER_NAME)


def build_base_url(api_url: str | None) -> str:
    """Validate an API base URL.

    Args:
        api_url: Absolute http(s) URL, optionally with a path prefix.

    Returns:
        Base URL without trailing slash.

    Raises:
        ValueError: If the URL is not an absolute http(s) URL.
    """
    raw = (api_url or "").strip() or DEFAULT_API_URL
    url = URL(raw)
    if not url.is_absolute() or url.scheme not in ("http", "https"):
        raise ValueError(f"api_url must be an absolute http(s) URL: {raw!r}")
    return str(url).rstrip("/")


def build_api_url(base_url: str, path: str) -> str:
    """Join a base URL and an endpoint path."""
    if not path.startswith("/"):
        path = "/" + path
    return base_url.rstrip("/") + path


def _remote_error(status: int, body: str) -> AcrosureError:
    try:
        data: Any = decode_json_body(body)
    except json.JSONDecodeError:
        data = None
    # A structured server body takes precedence over the HTTP wrapper.
    if data is not None:
        return AcrosureRemoteStructuredError(data, status=status)
    return AcrosureRemoteOpaqueError(f"HTTP {status}", status=status)


async def _read_body(resp: aiohttp.ClientResponse, *, path: str) -> str:
    # A response exists at this point, so read failures are not transport-absent.
    try:
        return await resp.text()
    except (aiohttp.ClientPayloadError, UnicodeDecodeError) as err:
        raise AcrosureRemoteOpaqueError(
            f"Response body from {path} could not be read: {err}",
            status=resp.status,
        ) from err


class AcrosureApiClient:
    """Async request layer for the Acrosure JSON API."""

    def __init__(
        self,
        *,
        api_url: str | None = None,
        timeout_seconds: float | None = DEFAULT_TIMEOUT_SECONDS,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self.base_url = build_base_url(api_url)
        self.timeout_seconds = (
            float(timeout_seconds) if timeout_seconds is not None else None
        )

        self._session = session
        self._owns_session = session is None

    @property
    def session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession()
        return self._session

    async def async_close(self) -> None:
        """Close any internally-owned aiohttp session."""
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    async def async_call(
        self,
        path: str,
        payload: Mapping[str, Any] | None = None,
        *,
        token: str | None = None,
    ) -> Any:
        """POST a JSON payload to an API endpoint.

        Args:
            path: Endpoint path, e.g. `/applications/get`.
            payload: Request fields. `None` values are omitted.
            token: Optional bearer token.

        Returns:
            The decoded JSON response, unvalidated. `None` for an empty body.

        Raises:
            AcrosureTransportAbsentError: If no response was received.
            AcrosureRemoteStructuredError: If the API returned a JSON error body.
            AcrosureRemoteOpaqueError: If the API failed without a JSON body, or
                a successful response was not valid JSON.
        """
        url = build_api_url(self.base_url, path)
        headers: dict[str, str] = {"Content-Type": CONTENT_TYPE_JSON}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        _LOGGER.debug("POST %s", url)
        try:
            body = json.dumps(compact_payload(payload))
            try:
                async with async_timeout.timeout(self.timeout_seconds):
                    async with self.session.post(
                        url, data=body, headers=headers
                    ) as resp:
                        status = resp.status
                        text = await _read_body(resp, path=path)
            except (asyncio.TimeoutError, aiohttp.ClientError) as err:
                raise AcrosureTransportAbsentError() from err

            if status >= 400:
                raise _remote_error(status, text)

            try:
                return decode_json_body(text)
            except json.JSONDecodeError as err:
                raise AcrosureRemoteOpaqueError(
                    f"Response from {path} was not valid JSON: {err}", status=status
                ) from err
        except Exception as err:
            _LOGGER.warning("Acrosure API call %s failed: %r", path, err)
            raise


class AcrosureClient:
    """Top-level Acrosure SDK client.

    Holds the bearer token and the request layer, and builds resource managers
    that call the API through `async_call_api`.
    """

    def __init__(
        self,
        *,
        token: str | None = None,
        api_url: str | None = None,
        timeout_seconds: float | None = DEFAULT_TIMEOUT_SECONDS,
        session: aiohttp.ClientSession | None = None,
        application_id: str | None = None,
        form_sink: FormSink | None = None,
    ) -> None:
        self.token = token
        self.api = AcrosureApiClient(
            api_url=api_url, timeout_seconds=timeout_seconds, session=session
        )
        self.form_sink = form_sink
        self.application = self.application_manager(application_id)

    @classmethod
    def from_env(cls, **kwargs: Any) -> "AcrosureClient":
        """Create a client from `ACROSURE_*` environment variables.

        Keyword arguments override values read from the environment.
        """
        timeout_raw = (os.environ.get(ENV_TIMEOUT_SECONDS) or "").strip()
        try:
            timeout_env = float(timeout_raw) if timeout_raw else None
        except ValueError as err:
            raise ValueError(
                f"{ENV_TIMEOUT_SECONDS} must be a number of seconds"
            ) from err

        kwargs.setdefault("token", os.environ.get(ENV_TOKEN) or None)
        kwargs.setdefault("api_url", os.environ.get(ENV_API_URL) or None)
        kwargs.setdefault("timeout_seconds", timeout_env)
        return cls(**kwargs)

    async def async_call_api(
        self, path: str, payload: Mapping[str, Any] | None = None
    ) -> Any:
        """Call an API endpoint with this client's credential."""
        return await self.api.async_call(path, payload, token=self.token)

    def application_manager(
        self, application_id: str | None = None
    ) -> ApplicationManager:
        """Build a new manager for one application."""
        return ApplicationManager(
            call_api=self.async_call_api,
            id=application_id,
            form_sink=self.form_sink,
        )

    async def async_close(self) -> None:
        await self.api.async_close()
