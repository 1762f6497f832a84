"""Shared fixtures and fakes for the test suite.

No test launches a real browser: the orchestrator and the consent
acceptor are driven through the small fakes defined here.
"""

from __future__ import annotations

import contextlib
from collections.abc import AsyncIterator
from types import SimpleNamespace

import pytest

from cookie_scanner.models import browser, consent, cookies

# ── Cookie Factories ────────────────────────────────────────────


@pytest.fixture()
def ga_cookie() -> cookies.RawCookie:
    """A Google Analytics cookie set on the scanned site."""
    return cookies.RawCookie(
        name="_ga",
        domain=".example.com",
        path="/",
        http_only=False,
        secure=False,
        same_site="Lax",
        expires=1893456000,
    )


@pytest.fixture()
def fbp_cookie() -> cookies.RawCookie:
    """A Facebook Pixel cookie set on facebook.com."""
    return cookies.RawCookie(name="_fbp", domain=".facebook.com", expires=1893456000)


@pytest.fixture()
def session_cookie() -> cookies.RawCookie:
    """An unrecognised first-party session cookie."""
    return cookies.RawCookie(name="app_state", domain="www.example.com", http_only=True, secure=True)


def jar_entry(name: str, domain: str, **extra: object) -> dict[str, object]:
    """A cookie dict shaped like Playwright's ``context.cookies()`` output."""
    entry: dict[str, object] = {
        "name": name,
        "value": "v",
        "domain": domain,
        "path": "/",
        "expires": -1,
        "httpOnly": False,
        "secure": False,
        "sameSite": "Lax",
    }
    entry.update(extra)
    return entry


# ── Consent Page Fakes ──────────────────────────────────────────


class FakeLocator:
    """Stands in for a Playwright ``Locator``."""

    def __init__(
        self,
        *,
        visible: bool = False,
        probe_error: Exception | None = None,
        click_error: Exception | None = None,
    ) -> None:
        self.visible = visible
        self.probe_error = probe_error
        self.click_error = click_error
        self.clicks = 0
        self.probe_timeouts: list[float | None] = []

    async def is_visible(self, *, timeout: float | None = None) -> bool:
        self.probe_timeouts.append(timeout)
        if self.probe_error is not None:
            raise self.probe_error
        return self.visible

    async def click(self) -> None:
        if self.click_error is not None:
            raise self.click_error
        self.clicks += 1


class FakePage:
    """Stands in for a Playwright ``Page``; unknown selectors are invisible."""

    def __init__(self, locators: dict[str, FakeLocator] | None = None, url: str = "https://example.com") -> None:
        self.locators = locators or {}
        self.url = url
        self.probed: list[str] = []

    def locator(self, selector: str) -> SimpleNamespace:
        self.probed.append(selector)
        return SimpleNamespace(first=self.locators.setdefault(selector, FakeLocator()))


# ── Browser Session Fake ────────────────────────────────────────


class FakeScanSession:
    """Records every call the orchestrator makes.

    ``cookies_by_url`` lists the jar entries each URL sets when it
    loads; ``failures`` maps a URL to the browser error it raises.
    """

    def __init__(
        self,
        cookies_by_url: dict[str, list[dict[str, object]]] | None = None,
        failures: dict[str, str] | None = None,
    ) -> None:
        self.cookies_by_url = cookies_by_url or {}
        self.failures = failures or {}
        self.jar: list[dict[str, object]] = []
        self.events: list[tuple[str, object]] = []
        self.closed_pages = 0
        self.closes = 0

    async def new_page(self) -> FakePage:
        self.events.append(("new_page", None))
        return FakePage()

    async def navigate(self, page: FakePage, url: str) -> browser.NavigationResult:
        self.events.append(("navigate", url))
        if url in self.failures:
            return browser.NavigationResult(success=False, error_message=self.failures[url])
        page.url = url
        self.jar.extend(self.cookies_by_url.get(url, []))
        return browser.NavigationResult(success=True, status_code=200, final_url=url)

    async def close_page(self, page: FakePage) -> None:
        self.events.append(("close_page", page.url))
        self.closed_pages += 1

    async def wait(self, ms: int) -> None:
        self.events.append(("wait", ms))

    async def get_cookies(self) -> list[dict[str, object]]:
        self.events.append(("get_cookies", None))
        return list(self.jar)

    def factory(self):
        """Return a session factory yielding this fake and counting teardowns."""

        @contextlib.asynccontextmanager
        async def _open() -> AsyncIterator[FakeScanSession]:
            try:
                yield self
            finally:
                self.closes += 1

        return _open


class RecordingAcceptor:
    """Consent acceptor that records the pages it was given."""

    def __init__(self, outcome: consent.ConsentOutcome | None = None) -> None:
        self.outcome = outcome or consent.ConsentOutcome.not_found()
        self.pages: list[FakePage] = []

    async def __call__(self, page: FakePage) -> consent.ConsentOutcome:
        self.pages.append(page)
        return self.outcome
