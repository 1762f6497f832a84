"""Pydantic models for scan requests, per-page outcomes, and stored scan results."""

from __future__ import annotations

from typing import Literal

import pydantic

from cookie_scanner.models import cookies as cookie_models
from cookie_scanner.utils import errors, serialization
from cookie_scanner.utils import url as url_mod

MAX_ADDITIONAL_URLS = 10
MIN_WAIT_TIME_MS = 1000
MAX_WAIT_TIME_MS = 10000
DEFAULT_WAIT_TIME_MS = 3000


def clamp_wait_time(value: object) -> int:
    """Clamp a caller-supplied wait time into the allowed range.

    Non-numeric and zero values fall back to the default before
    clamping, so ``None`` and ``"abc"`` both become 3000 ms.
    """
    try:
        wait = int(float(value))  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        wait = DEFAULT_WAIT_TIME_MS
    if wait == 0:
        wait = DEFAULT_WAIT_TIME_MS
    return min(max(wait, MIN_WAIT_TIME_MS), MAX_WAIT_TIME_MS)


class ScanRequest(pydantic.BaseModel):
    """A validated, immutable scan request.

    Build with :meth:`create`, which raises
    :class:`~cookie_scanner.utils.errors.ScanValidationError`
    for every malformed input before any browser work happens.
    """

    model_config = pydantic.ConfigDict(frozen=True)

    primary_url: str
    additional_urls: tuple[str, ...] = ()
    wait_time_ms: int = DEFAULT_WAIT_TIME_MS

    @classmethod
    def create(
        cls,
        primary_url: object,
        additional_urls: object = None,
        wait_time_ms: object = None,
    ) -> ScanRequest:
        """Validate raw request values and return a :class:`ScanRequest`.

        Args:
            primary_url: Absolute URL of the page to scan.
            additional_urls: A list of URLs, or one newline-separated
                string of URLs. Blank entries are ignored.
            wait_time_ms: Milliseconds to wait for asynchronous
                scripts; clamped into ``[1000, 10000]``.

        Raises:
            ScanValidationError: If the primary URL is missing or not
                absolute, if more than ten additional URLs are given,
                or if any additional URL is not absolute.
        """
        if not primary_url or not isinstance(primary_url, str) or not primary_url.strip():
            raise errors.ScanValidationError("A valid URL is required.")
        primary = primary_url.strip()
        if not url_mod.is_absolute_url(primary):
            raise errors.ScanValidationError("Invalid URL format. Include the scheme (https://).")

        extras = _split_additional_urls(additional_urls)
        if len(extras) > MAX_ADDITIONAL_URLS:
            raise errors.ScanValidationError(f"Maximum {MAX_ADDITIONAL_URLS} additional URLs allowed.")
        for extra in extras:
            if not url_mod.is_absolute_url(extra):
                raise errors.ScanValidationError(f"Invalid additional URL: {extra}")

        return cls(
            primary_url=primary,
            additional_urls=tuple(extras),
            wait_time_ms=clamp_wait_time(wait_time_ms),
        )

    @property
    def visit_order(self) -> list[str]:
        """URLs in the order they are navigated, primary first."""
        return [self.primary_url, *self.additional_urls]


def _split_additional_urls(value: object) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        lines = value.split("\n")
    elif isinstance(value, (list, tuple)):
        lines = [str(v) for v in value]
    else:
        raise errors.ScanValidationError("Additional URLs must be a list or newline-separated string.")
    return [line.strip() for line in lines if line.strip()]


# ============================================================================
# Per-page outcomes
# ============================================================================

VisitStatus = Literal["visited", "skipped", "fatal"]


class PageVisit(pydantic.BaseModel):
    """Outcome of navigating one URL of the visit list."""

    index: int
    url: str
    status: VisitStatus
    reason: str | None = None
    consent_selector: str | None = None


# ============================================================================
# Stored results
# ============================================================================


class ScanResult(pydantic.BaseModel):
    """A completed scan as returned by, and stored behind, the scan API."""

    model_config = pydantic.ConfigDict(alias_generator=serialization.snake_to_camel, populate_by_name=True)

    id: str
    domain: str
    scan_date: str
    cookies: list[cookie_models.ClassifiedCookie]


class CookieUpdate(pydantic.BaseModel):
    """Metadata edits for one cookie of a stored scan."""

    name: str | None = None
    domain: str | None = None
    category: str | None = None
    provider: str | None = None
    description: str | None = None

    @pydantic.field_validator("category", "provider", "description", mode="before")
    @classmethod
    def _coerce_to_text(cls, value: object) -> object:
        """Accept JSON numbers and booleans as their text form."""
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)

    def changes(self) -> dict[str, str | None]:
        """Metadata fields present in the request body, ``null`` included."""
        return self.model_dump(include={"category", "provider", "description"}, exclude_unset=True)
