"""
Scan error taxonomy and error message helpers.

Only :class:`ScanValidationError` and the :class:`NavigationFailure`
family ever reach a caller of the scan pipeline; every other
irregularity is logged and degrades into a partial result.
"""

from __future__ import annotations

from typing import Literal

NavigationFailureKind = Literal["dns", "connection", "other"]


class ScanError(Exception):
    """Base class for errors surfaced by a cookie scan."""


class ScanValidationError(ScanError):
    """The scan request was malformed. Raised before any browser activity."""


class NavigationFailure(ScanError):
    """The primary URL could not be loaded, so the scan was aborted."""

    kind: NavigationFailureKind = "other"

    def __init__(self, message: str, url: str = "", cause: str = "") -> None:
        super().__init__(message)
        self.url = url
        self.cause = cause


class DnsResolutionFailure(NavigationFailure):
    kind: NavigationFailureKind = "dns"


class ConnectionFailure(NavigationFailure):
    kind: NavigationFailureKind = "connection"


class OtherNavigationFailure(NavigationFailure):
    kind: NavigationFailureKind = "other"


# Chromium network error codes as they appear in Playwright error text.
_DNS_ERROR_CODES: tuple[str, ...] = (
    "ERR_NAME_NOT_RESOLVED",
    "ERR_NAME_RESOLUTION_FAILED",
)

_CONNECTION_ERROR_CODES: tuple[str, ...] = (
    "ERR_CONNECTION_REFUSED",
    "ERR_CONNECTION_TIMED_OUT",
    "ERR_CONNECTION_RESET",
    "ERR_CONNECTION_CLOSED",
    "ERR_ADDRESS_UNREACHABLE",
)

DNS_FAILURE_MESSAGE = "Could not resolve domain. Check that the URL is correct and the site is online."
CONNECTION_FAILURE_MESSAGE = "Could not connect to the site. The server may be down or unreachable."


def classify_navigation_error(url: str, error_message: str) -> NavigationFailure:
    """Map a raw browser navigation error onto the failure taxonomy.

    Args:
        url: The URL whose navigation failed.
        error_message: Text of the underlying browser error.

    Returns:
        A :class:`DnsResolutionFailure`, :class:`ConnectionFailure`
        or :class:`OtherNavigationFailure` carrying a human-readable
        message and the raw cause.
    """
    if any(code in error_message for code in _DNS_ERROR_CODES):
        return DnsResolutionFailure(DNS_FAILURE_MESSAGE, url=url, cause=error_message)
    if any(code in error_message for code in _CONNECTION_ERROR_CODES):
        return ConnectionFailure(CONNECTION_FAILURE_MESSAGE, url=url, cause=error_message)
    first_line = error_message.strip().splitlines()[0] if error_message.strip() else "Unknown error"
    return OtherNavigationFailure(f"Could not load the page: {first_line}", url=url, cause=error_message)


def get_error_message(error: BaseException | object) -> str:
    """
    Safely extract an error message from an unknown error type.
    Falls back to the exception class name when the message is empty.
    """
    if isinstance(error, BaseException):
        return str(error) or type(error).__name__
    return "Unknown error"
