"""
Cookie classification and party-type resolution.

Maps each cookie name to a compliance category, provider and
description through an ordered rule table (first match wins) and
decides whether the cookie is first- or third-party relative to the
scanned URL. Everything here is pure: no I/O and no randomness.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from cookie_scanner.data import loader
from cookie_scanner.models import cookies
from cookie_scanner.utils import url as url_mod


def get_party_type(cookie_domain: str, scanned_url: str) -> cookies.PartyType:
    """Return ``"first"`` if *cookie_domain* belongs to the scanned site.

    The cookie domain is compared after stripping one leading
    ``.``; it is first-party when it equals the scanned hostname or
    the hostname is a subdomain of it.

    Examples:
        >>> get_party_type(".example.com", "https://www.example.com")
        'first'
        >>> get_party_type("facebook.com", "https://example.com")
        'third'
    """
    hostname = url_mod.extract_domain(scanned_url)
    domain = url_mod.normalize_cookie_domain(cookie_domain)
    if domain and (hostname == domain or hostname.endswith("." + domain)):
        return "first"
    return "third"


class CookieClassifier:
    """Rule-driven cookie classifier.

    The rule sequence is fixed at construction so tests (or
    deployments with their own rule file) can supply a custom
    table without touching module state.
    """

    def __init__(self, rules: Sequence[cookies.ClassificationRule] | None = None) -> None:
        self._rules: tuple[cookies.ClassificationRule, ...] = (
            tuple(rules) if rules is not None else loader.get_default_rules()
        )

    @property
    def rules(self) -> tuple[cookies.ClassificationRule, ...]:
        return self._rules

    def match(self, cookie_name: str) -> cookies.ClassificationRule | None:
        """Return the first rule matching *cookie_name*, if any."""
        for rule in self._rules:
            if rule.matches(cookie_name):
                return rule
        return None

    def classify_one(self, cookie: cookies.RawCookie, scanned_url: str) -> cookies.ClassifiedCookie:
        rule = self.match(cookie.name)
        return cookies.ClassifiedCookie(
            name=cookie.name,
            domain=cookie.domain,
            path=cookie.path or "/",
            party_type=get_party_type(cookie.domain, scanned_url),
            http_only=cookie.http_only,
            secure=cookie.secure,
            same_site=cookie.same_site or "None",
            expires=cookie.expires if cookie.expires > 0 else cookies.SESSION_EXPIRY,
            category=rule.category if rule else "unknown",
            provider=rule.provider if rule else "",
            description=rule.description if rule else "",
        )

    def classify(
        self,
        raw_cookies: Iterable[cookies.RawCookie],
        scanned_url: str,
    ) -> list[cookies.ClassifiedCookie]:
        """Classify every cookie, preserving input order and length."""
        return [self.classify_one(cookie, scanned_url) for cookie in raw_cookies]


def classify_cookies(
    raw_cookies: Iterable[cookies.RawCookie],
    scanned_url: str,
) -> list[cookies.ClassifiedCookie]:
    """Classify *raw_cookies* with the bundled rule table."""
    return CookieClassifier().classify(raw_cookies, scanned_url)
