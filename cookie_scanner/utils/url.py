"""
URL and domain utility functions for cookie scanning.
"""

from __future__ import annotations

from urllib import parse


def extract_domain(url: str) -> str:
    """Extract the hostname from a URL string."""
    try:
        parsed = parse.urlparse(url)
        return parsed.hostname or "unknown"
    except ValueError:
        return "unknown"


def is_absolute_url(url: str) -> bool:
    """Return ``True`` if *url* carries a scheme and a network location.

    ``mailto:`` style URLs without a host are rejected, as are bare
    hostnames such as ``example.com``.
    """
    if not url or any(ch.isspace() for ch in url.strip()):
        return False
    try:
        parsed = parse.urlparse(url.strip())
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.netloc)


def ensure_scheme(url: str, default_scheme: str = "https") -> str:
    """Prefix *url* with ``default_scheme://`` when it has no scheme."""
    url = url.strip()
    if url.startswith(("http://", "https://")):
        return url
    return f"{default_scheme}://{url}"


def normalize_cookie_domain(domain: str) -> str:
    """Strip a single leading ``.`` from a cookie domain attribute."""
    return domain[1:] if domain.startswith(".") else domain
