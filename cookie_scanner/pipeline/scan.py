"""
Scan orchestration: visit every URL of a scan in order inside one
browser session, accept the consent banner on the primary page, then
collect and classify the accumulated cookies.

Page visits are strictly sequential. Cookies accumulate in the
session's shared context, and accepting consent on the primary page
is meant to change what later pages set.

Failure policy per URL:

* primary URL (index 0): a navigation failure aborts the scan with a
  :class:`~cookie_scanner.utils.errors.NavigationFailure`;
* additional URLs: a navigation failure, or any other browser error
  while handling the page, is logged and the page is
  skipped, contributing no cookies.

The browser session is released exactly once whichever way the scan
ends, including cancellation.
"""

from __future__ import annotations

import contextlib
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, Protocol

from cookie_scanner.analysis import classifier as classifier_mod
from cookie_scanner.analysis import collector
from cookie_scanner.browser import session as browser_session
from cookie_scanner.consent import click
from cookie_scanner.models import browser, consent, cookies, scan
from cookie_scanner.utils import errors, logger
from cookie_scanner.utils import url as url_mod

log = logger.create_logger("Scan")


class ScanSession(Protocol):
    """Operations the orchestrator needs from a browser session."""

    async def new_page(self) -> Any: ...

    async def navigate(self, page: Any, url: str) -> browser.NavigationResult: ...

    async def close_page(self, page: Any) -> None: ...

    async def wait(self, ms: int) -> None: ...

    async def get_cookies(self) -> list[dict[str, object]]: ...


SessionFactory = Callable[[], contextlib.AbstractAsyncContextManager[ScanSession]]
ConsentAcceptor = Callable[[Any], Awaitable[consent.ConsentOutcome]]


async def _visit(
    session: ScanSession,
    index: int,
    url: str,
    wait_time_ms: int,
    accept_consent: ConsentAcceptor,
) -> scan.PageVisit:
    """Navigate one URL and return its outcome.

    Only a failure at index 0 is reported as ``fatal``.
    """
    page = await session.new_page()
    try:
        nav = await session.navigate(page, url)
        if not nav.success:
            reason = nav.error_message or "Unknown navigation error"
            if index == 0:
                return scan.PageVisit(index=index, url=url, status="fatal", reason=reason)
            log.warn("Skipping page that failed to load", {"url": url, "error": reason[:200]})
            return scan.PageVisit(index=index, url=url, status="skipped", reason=reason)

        await session.wait(wait_time_ms)

        selector: str | None = None
        if index == 0:
            outcome = await accept_consent(page)
            selector = outcome.selector
            if outcome.clicked:
                log.success("Consent accepted", {"selector": selector})
            else:
                log.info("No consent banner matched")
            # the consent click itself may set further cookies
            await session.wait(wait_time_ms)

        return scan.PageVisit(index=index, url=url, status="visited", consent_selector=selector)
    finally:
        await session.close_page(page)


async def visit_pages(
    session: ScanSession,
    urls: Sequence[str],
    wait_time_ms: int,
    accept_consent: ConsentAcceptor = click.try_accept,
) -> list[scan.PageVisit]:
    """Visit *urls* in order, stopping early only on a fatal primary failure."""
    visits: list[scan.PageVisit] = []
    for index, url in enumerate(urls):
        log.info("Navigating", {"index": index, "url": url})
        try:
            visit = await _visit(session, index, url, wait_time_ms, accept_consent)
        except Exception as exc:
            if index == 0:
                raise
            reason = errors.get_error_message(exc)
            log.warn("Skipping page after browser error", {"url": url, "error": reason[:200]})
            visit = scan.PageVisit(index=index, url=url, status="skipped", reason=reason)
        visits.append(visit)
        if visit.status == "fatal":
            break
    return visits


async def run_scan(
    primary_url: str,
    additional_urls: Sequence[str] | str = (),
    wait_time_ms: int = scan.DEFAULT_WAIT_TIME_MS,
    *,
    classifier: classifier_mod.CookieClassifier | None = None,
    session_factory: SessionFactory | None = None,
    accept_consent: ConsentAcceptor = click.try_accept,
) -> list[cookies.ClassifiedCookie]:
    """Scan *primary_url* (and any additional URLs) for cookies.

    Args:
        primary_url: Absolute URL of the site being audited. Party
            type is resolved against its hostname.
        additional_urls: Up to ten more absolute URLs, as a sequence
            or one newline-separated string, visited after the
            primary page in the given order.
        wait_time_ms: Time given to asynchronous scripts after each
            navigation, clamped into ``[1000, 10000]``.
        classifier: Classifier to use; defaults to the bundled rules.
        session_factory: Returns an async context manager yielding a
            fresh session; defaults to a real Chromium session.
        accept_consent: Consent acceptor run on the primary page.

    Returns:
        Classified cookies, deduplicated by ``(name, domain)``, in
        cookie-jar order.

    Raises:
        ScanValidationError: If the request is malformed. Raised
            before any browser is launched.
        NavigationFailure: If the primary URL could not be loaded.
    """
    request = scan.ScanRequest.create(primary_url, additional_urls, wait_time_ms)
    factory: SessionFactory = session_factory or browser_session.open_session  # type: ignore[assignment]
    engine = classifier or classifier_mod.CookieClassifier()

    logger.start_log_file(url_mod.extract_domain(request.primary_url))
    log.section(f"Scanning: {request.primary_url}")
    log.info(
        "Scan parameters",
        {"pages": len(request.visit_order), "waitTimeMs": request.wait_time_ms},
    )
    log.start_timer("scan")
    summary = "Scan aborted"
    try:
        async with factory() as session:
            log.subsection("Visiting pages")
            visits = await visit_pages(session, request.visit_order, request.wait_time_ms, accept_consent)

            primary = visits[0]
            if primary.status == "fatal":
                failure = errors.classify_navigation_error(primary.url, primary.reason or "")
                log.error("Primary page failed to load", {"url": primary.url, "kind": failure.kind})
                raise failure

            log.subsection("Collecting cookies")
            raw_cookies = await collector.collect(session)

        classified = engine.classify(raw_cookies, request.primary_url)
        skipped = sum(1 for v in visits if v.status == "skipped")
        log.success(
            "Cookies classified",
            {"cookies": len(classified), "pagesVisited": len(visits) - skipped, "pagesSkipped": skipped},
        )
        summary = "Scan complete"
        return classified
    finally:
        log.end_timer("scan", summary)
        logger.end_log_file()


async def run_scan_request(
    request: scan.ScanRequest,
    **kwargs: Any,
) -> list[cookies.ClassifiedCookie]:
    """Run :func:`run_scan` for an already validated :class:`ScanRequest`."""
    return await run_scan(
        request.primary_url,
        request.additional_urls,
        request.wait_time_ms,
        **kwargs,
    )
