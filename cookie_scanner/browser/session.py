"""
Browser session management for cookie scans.
Each BrowserSession owns one Playwright browser and one isolated
context, so concurrent scans never share cookies or pages.
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import AsyncIterator
from typing import Literal

from playwright import async_api

from cookie_scanner import config
from cookie_scanner.models import browser
from cookie_scanner.utils import errors, logger

log = logger.create_logger("BrowserSession")

NAVIGATION_TIMEOUT_MS = 60000


class BrowserSession:
    """
    Manages an isolated browser session for a single scan.
    """

    def __init__(self, settings: config.ScannerSettings | None = None) -> None:
        self._settings = settings or config.get_settings()
        self._playwright: async_api.Playwright | None = None
        self._browser: async_api.Browser | None = None
        self._context: async_api.BrowserContext | None = None
        self._closed = False

    @property
    def is_open(self) -> bool:
        return self._context is not None and not self._closed

    # ==========================================================================
    # Browser Lifecycle
    # ==========================================================================

    async def launch(self) -> None:
        """Launch Chromium and create a fresh context.

        The context presents a desktop user agent and ignores TLS
        certificate errors so misconfigured sites can still be
        scanned.
        """
        if self._context is not None:
            raise RuntimeError("Browser session already launched")
        if self._closed:
            raise RuntimeError("Browser session already closed")

        log.debug("Launching browser", {"headless": self._settings.headless})
        self._playwright = await async_api.async_playwright().start()
        self._browser = await self._playwright.chromium.launch(headless=self._settings.headless)
        self._context = await self._browser.new_context(
            ignore_https_errors=True,
            user_agent=self._settings.user_agent,
        )

    # ==========================================================================
    # Pages and Navigation
    # ==========================================================================

    async def new_page(self) -> async_api.Page:
        """Open a new page in the session's context."""
        if not self._context:
            raise RuntimeError("No browser session active")
        return await self._context.new_page()

    async def navigate(
        self,
        page: async_api.Page,
        url: str,
        wait_until: Literal["commit", "domcontentloaded", "load", "networkidle"] = "networkidle",
        timeout: int = NAVIGATION_TIMEOUT_MS,
    ) -> browser.NavigationResult:
        """Navigate *page* to *url* and report how it went.

        Browser errors are returned in the result rather than
        raised, so the caller decides whether a failure is fatal.
        """
        log.debug("Navigating", {"url": url, "waitUntil": wait_until, "timeout": timeout})
        try:
            response = await page.goto(url, wait_until=wait_until, timeout=timeout)
        except async_api.Error as error:
            return browser.NavigationResult(success=False, error_message=error.message)

        final_url = page.url
        if final_url != url:
            log.info("Redirected", {"from": url, "to": final_url})
        return browser.NavigationResult(
            success=True,
            status_code=response.status if response else None,
            final_url=final_url,
        )

    async def close_page(self, page: async_api.Page) -> None:
        try:
            await page.close()
        except async_api.Error as exc:
            log.debug("Page close error (non-fatal)", {"error": exc.message})

    async def wait(self, ms: int) -> None:
        """Wait for *ms* milliseconds.

        Uses ``asyncio.sleep`` instead of Playwright's
        ``page.wait_for_timeout``, which is meant for debugging.
        """
        await asyncio.sleep(ms / 1000)

    # ==========================================================================
    # Data Capture
    # ==========================================================================

    async def get_cookies(self) -> list[dict[str, object]]:
        """Return every cookie in the context, across all domains visited."""
        if not self._context:
            raise RuntimeError("No browser session active")
        jar = await self._context.cookies()
        log.debug("Read cookie jar", {"count": len(jar)})
        return [dict(entry) for entry in jar]

    # ==========================================================================
    # Cleanup
    # ==========================================================================

    async def close(self) -> None:
        """Close the browser and release all resources.

        Safe to call more than once; only the first call does work.
        Cleanup errors are logged and never raised.
        """
        if self._closed:
            return
        self._closed = True

        # innermost first: context, then browser, then the driver
        teardown = [
            ("context", self._context.close if self._context else None),
            ("browser", self._browser.close if self._browser else None),
            ("playwright", self._playwright.stop if self._playwright else None),
        ]
        self._context = self._browser = self._playwright = None

        for name, release in teardown:
            if release is None:
                continue
            try:
                await release()
            except Exception as exc:
                log.warn(f"Failed to release {name}", {"error": errors.get_error_message(exc)})
        log.debug("Browser session released")


@contextlib.asynccontextmanager
async def open_session(settings: config.ScannerSettings | None = None) -> AsyncIterator[BrowserSession]:
    """Launch a fresh :class:`BrowserSession` and close it on every exit path."""
    session = BrowserSession(settings)
    try:
        await session.launch()
        yield session
    finally:
        await asyncio.shield(session.close())
