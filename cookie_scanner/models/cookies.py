"""Pydantic models for raw browser cookies, classification rules, and classified cookies."""

from __future__ import annotations

import re
from typing import Literal

import pydantic

from cookie_scanner.utils import serialization

CookieCategory = Literal["necessary", "analytics", "marketing", "preferences", "unknown"]

PartyType = Literal["first", "third"]

COOKIE_CATEGORIES: tuple[str, ...] = ("necessary", "analytics", "marketing", "preferences", "unknown")

SESSION_EXPIRY = -1


class RawCookie(pydantic.BaseModel):
    """A cookie as read from the browser context's cookie jar."""

    model_config = pydantic.ConfigDict(
        alias_generator=serialization.snake_to_camel,
        populate_by_name=True,
        frozen=True,
    )

    name: str
    domain: str
    path: str = "/"
    http_only: bool = False
    secure: bool = False
    same_site: str = "None"
    expires: int = SESSION_EXPIRY

    @property
    def key(self) -> tuple[str, str]:
        """Identity of the cookie within a scan."""
        return (self.name, self.domain)

    @classmethod
    def from_browser(cls, cookie: dict[str, object]) -> RawCookie:
        """Build from a Playwright ``context.cookies()`` entry.

        Playwright reports session cookies with ``expires == -1``
        and omits nothing, but other drivers may leave keys out
        or set them to ``None``.
        """
        return cls(
            name=str(cookie.get("name", "")),
            domain=str(cookie.get("domain", "")),
            path=str(cookie.get("path") or "/"),
            http_only=bool(cookie.get("httpOnly", False)),
            secure=bool(cookie.get("secure", False)),
            same_site=str(cookie.get("sameSite") or "None"),
            expires=_normalize_expires(cookie.get("expires")),
        )


def _normalize_expires(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return SESSION_EXPIRY
    return int(value) if value > 0 else SESSION_EXPIRY


class ClassificationRule(pydantic.BaseModel):
    """A cookie-name pattern and the metadata it assigns.

    ``pattern`` is the source regex; ``compiled`` is built once
    with ``re.IGNORECASE`` so matching never depends on the
    case of the cookie name.
    """

    model_config = pydantic.ConfigDict(arbitrary_types_allowed=True, frozen=True)

    pattern: str
    category: CookieCategory
    provider: str = ""
    description: str = ""
    compiled: re.Pattern[str] = pydantic.Field(exclude=True)

    @classmethod
    def build(
        cls,
        pattern: str,
        category: CookieCategory,
        provider: str = "",
        description: str = "",
    ) -> ClassificationRule:
        """Compile *pattern* case-insensitively and return the rule.

        Raises:
            ValueError: If *pattern* is not a valid regular expression.
        """
        try:
            compiled = re.compile(pattern, re.IGNORECASE)
        except re.error as exc:
            raise ValueError(f"Invalid cookie rule pattern {pattern!r}: {exc}") from exc
        return cls(
            pattern=pattern,
            category=category,
            provider=provider,
            description=description,
            compiled=compiled,
        )

    def matches(self, cookie_name: str) -> bool:
        """Return ``True`` if *cookie_name* matches this rule."""
        return self.compiled.search(cookie_name) is not None


class ClassifiedCookie(pydantic.BaseModel):
    """A deduplicated cookie with party type and compliance metadata.

    Serialises with camelCase keys (``httpOnly``, ``sameSite``,
    ``partyType``) to match what the scan API returns.
    """

    model_config = pydantic.ConfigDict(alias_generator=serialization.snake_to_camel, populate_by_name=True)

    name: str
    domain: str
    path: str = "/"
    party_type: PartyType
    http_only: bool = False
    secure: bool = False
    same_site: str = "None"
    expires: int = SESSION_EXPIRY
    category: CookieCategory = "unknown"
    provider: str = ""
    description: str = ""

    @property
    def key(self) -> tuple[str, str]:
        """Identity of the cookie within a scan."""
        return (self.name, self.domain)
