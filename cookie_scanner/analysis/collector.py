"""
Cookie collection from a browser session's cookie jar.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from cookie_scanner.models import cookies
from cookie_scanner.utils import logger

log = logger.create_logger("Collector")


class CookieJarSource(Protocol):
    """Anything that can report the accumulated cookies of a session."""

    async def get_cookies(self) -> list[dict[str, object]]: ...


def dedupe_cookies(raw_cookies: Iterable[cookies.RawCookie]) -> list[cookies.RawCookie]:
    """Keep the first cookie seen for each ``(name, domain)`` key.

    Order of first occurrence is preserved; later duplicates are
    dropped silently.
    """
    by_key: dict[tuple[str, str], cookies.RawCookie] = {}
    for cookie in raw_cookies:
        by_key.setdefault(cookie.key, cookie)
    return list(by_key.values())


async def collect(session: CookieJarSource) -> list[cookies.RawCookie]:
    """Read the session's full cookie jar and deduplicate it."""
    jar = await session.get_cookies()
    collected = dedupe_cookies(cookies.RawCookie.from_browser(entry) for entry in jar)
    log.debug("Collected cookies", {"jar": len(jar), "unique": len(collected)})
    return collected
