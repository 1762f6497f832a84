"""
In-memory store for completed scan results.

Results live for the lifetime of the process only; durable
persistence is left to whatever deploys the scanner.
"""

from __future__ import annotations

import secrets
import string
import time
from datetime import UTC, datetime

from cookie_scanner.models import cookies, scan
from cookie_scanner.utils import url as url_mod

MAX_DESCRIPTION_LENGTH = 500

EDITABLE_FIELDS = frozenset({"category", "provider", "description"})

_BASE36 = string.digits + string.ascii_lowercase


class CookieNotFoundError(LookupError):
    """No cookie with the given name and domain exists in the scan."""


class ScanNotFoundError(LookupError):
    """No scan with the given id exists."""


def _to_base36(value: int) -> str:
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits)) or "0"


def new_scan_id() -> str:
    """Return a short id: base-36 millisecond timestamp plus six random characters."""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(6))
    return _to_base36(int(time.time() * 1000)) + suffix


class ScanStore:
    """Scan results keyed by id."""

    def __init__(self) -> None:
        self._results: dict[str, scan.ScanResult] = {}

    def __len__(self) -> int:
        return len(self._results)

    def add(self, scanned_url: str, classified: list[cookies.ClassifiedCookie]) -> scan.ScanResult:
        """Wrap *classified* in a new :class:`ScanResult` and store it."""
        result = scan.ScanResult(
            id=new_scan_id(),
            domain=url_mod.extract_domain(scanned_url),
            scan_date=datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            cookies=classified,
        )
        self._results[result.id] = result
        return result

    def get(self, scan_id: str) -> scan.ScanResult | None:
        return self._results.get(scan_id)

    def update_cookie(
        self,
        scan_id: str,
        name: str,
        domain: str,
        **changes: str | None,
    ) -> cookies.ClassifiedCookie:
        """Edit the metadata of one stored cookie and return it.

        Only the keywords passed are changed. An explicit ``None``
        category is rejected; a ``None`` provider or description
        clears the field.

        Raises:
            TypeError: If a keyword other than ``category``,
                ``provider`` or ``description`` is passed.
            ScanNotFoundError: If *scan_id* is unknown.
            CookieNotFoundError: If the scan has no such cookie.
            ValueError: If *category* is not a known category.
        """
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise TypeError(f"Cannot edit cookie field(s): {', '.join(sorted(unknown))}")

        result = self._results.get(scan_id)
        if result is None:
            raise ScanNotFoundError(scan_id)

        cookie = next((c for c in result.cookies if c.name == name and c.domain == domain), None)
        if cookie is None:
            raise CookieNotFoundError(f"{name} @ {domain}")

        if "category" in changes:
            category = changes["category"]
            if category not in cookies.COOKIE_CATEGORIES:
                raise ValueError(f"Invalid category. Must be one of: {', '.join(cookies.COOKIE_CATEGORIES)}")
            cookie.category = category  # type: ignore[assignment]
        if "provider" in changes:
            cookie.provider = changes["provider"] or ""
        if "description" in changes:
            cookie.description = (changes["description"] or "")[:MAX_DESCRIPTION_LENGTH]
        return cookie
