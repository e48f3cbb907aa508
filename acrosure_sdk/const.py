"""Constants for the Acrosure SDK.

This module centralizes endpoint paths, configuration defaults, and the
environment variable names read by `AcrosureClient.from_env`.
"""

from __future__ import annotations

from typing import Final

# Use a stable logger name so applications can configure SDK logging with
# `logging.getLogger("acrosure_sdk").setLevel(...)`.
LOGGER_NAME: Final = "acrosure_sdk"

DEFAULT_API_URL: Final = "https://api.acrosure.com"

# No timeout is enforced unless the caller configures one.
DEFAULT_TIMEOUT_SECONDS: Final[float | None] = None

ENV_API_URL: Final = "ACROSURE_API_URL"
ENV_TOKEN: Final = "ACROSURE_TOKEN"
ENV_TIMEOUT_SECONDS: Final = "ACROSURE_TIMEOUT_SECONDS"

CONTENT_TYPE_JSON: Final = "application/json"

# -----------------------------------------------------------------------------
# Endpoint paths
# -----------------------------------------------------------------------------

PATH_APPLICATIONS_GET: Final = "/applications/get"
PATH_APPLICATIONS_LIST: Final = "/applications/list"
PATH_APPLICATIONS_CREATE: Final = "/applications/create"
PATH_APPLICATIONS_UPDATE: Final = "/applications/update"
PATH_APPLICATIONS_GET_PACKAGES: Final = "/applications/get-packages"
PATH_APPLICATIONS_GET_PACKAGE: Final = "/applications/get-package"
PATH_APPLICATIONS_SELECT_PACKAGE: Final = "/applications/select-package"
PATH_APPLICATIONS_SUBMIT: Final = "/applications/submit"
PATH_APPLICATIONS_CONFIRM: Final = "/applications/confirm"
PATH_PAYMENTS_2C2P_GET_HASH: Final = "/payments/2c2p/get-hash"

# -----------------------------------------------------------------------------
# Payment handoff
# -----------------------------------------------------------------------------

# Key in the 2C2P hash payload holding the form target; every other key is a
# hidden form field.
PAYMENT_URL_KEY: Final = "payment_url"
PAYMENT_FORM_METHOD: Final = "POST"

# Optional application fields accepted by create and update, in wire order.
APPLICATION_FIELDS: Final[tuple[str, ...]] = (
    "basic_data",
    "package_options",
    "additional_data",
    "attachments",
    "package_code",
    "ref1",
    "ref2",
    "ref3",
    "group_policy_id",
    "step",
)
