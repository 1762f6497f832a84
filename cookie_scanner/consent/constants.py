"""Ordered selector strategies for clicking a cookie-consent "accept" control."""

from __future__ import annotations

# Order: platform-specific button ids, then button text (English,
# then Italian), then attribute substrings. The attribute matches
# can hit unrelated elements and must stay last.
CMP_ACCEPT_SELECTORS: tuple[str, ...] = (
    "#onetrust-accept-btn-handler",  # OneTrust
    "#CybotCookiebotDialogBodyLevelButtonLevelOptinAllowAll",  # Cookiebot
    "#CybotCookiebotDialogBodyButtonAccept",  # Cookiebot (legacy)
    "#didomi-notice-agree-button",  # Didomi
    ".qc-cmp2-summary-buttons button[mode='primary']",  # Quantcast
    ".cky-btn-accept",  # CookieYes
    ".cc-accept",  # Cookie Consent (Osano)
    ".cc-allow",  # Cookie Consent (Osano)
)

TEXT_ACCEPT_SELECTORS: tuple[str, ...] = (
    'button:has-text("Accept all")',
    'button:has-text("Accept")',
    'button:has-text("Agree")',
    'button:has-text("Allow all")',
    'button:has-text("Accetta tutti")',
    'button:has-text("Accetta tutto")',
    'button:has-text("Accetta")',
    'button:has-text("Accetto")',
    'button:has-text("Consenti")',
    'button:has-text("OK")',
    'a:has-text("Accept")',
    'a:has-text("Accetta")',
)

ATTRIBUTE_ACCEPT_SELECTORS: tuple[str, ...] = (
    '[id*="accept" i]',
    '[class*="accept" i]',
    '[id*="consent" i][role="button"]',
)

CONSENT_ACCEPT_SELECTORS: tuple[str, ...] = (
    CMP_ACCEPT_SELECTORS + TEXT_ACCEPT_SELECTORS + ATTRIBUTE_ACCEPT_SELECTORS
)

# Visibility probe bound per strategy.
PROBE_TIMEOUT_MS = 500

# Pause after a successful click so the page can react to the new
# consent state before cookies are read.
POST_CLICK_PAUSE_MS = 1500
