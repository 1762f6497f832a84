"""
Best-effort acceptance of cookie-consent banners.

Walks a priority-ordered list of selectors and clicks the first one
that is visible. A selector that cannot be probed or clicked is
skipped; nothing here ever raises into the scan.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import Protocol

from cookie_scanner.consent import constants
from cookie_scanner.models import consent
from cookie_scanner.utils import logger

log = logger.create_logger("Consent-Click")


class ConsentLocator(Protocol):
    """The slice of a Playwright ``Locator`` the acceptor relies on."""

    async def is_visible(self, *, timeout: float | None = None) -> bool: ...

    async def click(self) -> None: ...


class ConsentPage(Protocol):
    """The slice of a Playwright ``Page`` the acceptor relies on."""

    def locator(self, selector: str) -> object: ...


def _first(page: ConsentPage, selector: str) -> ConsentLocator:
    return page.locator(selector).first  # type: ignore[attr-defined,no-any-return]


async def _probe_visible(locator: ConsentLocator, timeout_ms: int) -> bool:
    """Check visibility, giving up after *timeout_ms*.

    Playwright ignores the ``timeout`` argument of ``is_visible``,
    so the probe is bounded explicitly as well.
    """
    return await asyncio.wait_for(locator.is_visible(timeout=timeout_ms), timeout=timeout_ms / 1000)


async def try_accept(
    page: ConsentPage,
    selectors: Sequence[str] = constants.CONSENT_ACCEPT_SELECTORS,
    *,
    probe_timeout_ms: int = constants.PROBE_TIMEOUT_MS,
    post_click_pause_ms: int = constants.POST_CLICK_PAUSE_MS,
) -> consent.ConsentOutcome:
    """Click the first visible consent "accept" control on *page*.

    Args:
        page: The page to search, usually a Playwright ``Page``.
        selectors: Strategies in priority order.
        probe_timeout_ms: Upper bound for each visibility probe.
        post_click_pause_ms: Pause after a successful click.

    Returns:
        ``clicked`` with the winning selector, or ``not_found``
        when no strategy matched.
    """
    for selector in selectors:
        try:
            element = _first(page, selector)
            if not await _probe_visible(element, probe_timeout_ms):
                continue
            log.info("Clicking consent button", {"selector": selector})
            await element.click()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            log.debug("Consent selector skipped", {"selector": selector, "error": str(exc)[:120]})
            continue
        await asyncio.sleep(post_click_pause_ms / 1000)
        return consent.ConsentOutcome.clicked_on(selector)

    log.debug("No consent button found", {"strategies": len(selectors)})
    return consent.ConsentOutcome.not_found()
