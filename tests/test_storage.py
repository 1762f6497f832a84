"""Tests for cookie_scanner.storage — in-memory scan results."""

from __future__ import annotations

import re

import pytest

from cookie_scanner import storage
from cookie_scanner.models.cookies import ClassifiedCookie


def _cookies() -> list[ClassifiedCookie]:
    return [
        ClassifiedCookie(name="_ga", domain=".example.com", party_type="first", category="analytics", provider="Google"),
        ClassifiedCookie(name="_fbp", domain=".facebook.com", party_type="third", category="marketing"),
    ]


class TestNewScanId:
    def test_format(self) -> None:
        assert re.fullmatch(r"[0-9a-z]{7,}", storage.new_scan_id())

    def test_unique(self) -> None:
        assert len({storage.new_scan_id() for _ in range(50)}) == 50


class TestScanStore:
    def test_add_and_get(self) -> None:
        store = storage.ScanStore()
        result = store.add("https://www.example.com/page", _cookies())
        assert result.domain == "www.example.com"
        assert result.scan_date.endswith("Z")
        assert store.get(result.id) is result
        assert len(store) == 1

    def test_get_unknown(self) -> None:
        assert storage.ScanStore().get("missing") is None

    def test_update_cookie(self) -> None:
        store = storage.ScanStore()
        result = store.add("https://example.com", _cookies())
        cookie = store.update_cookie(result.id, "_fbp", ".facebook.com", category="preferences", provider="Meta")
        assert cookie.category == "preferences"
        assert cookie.provider == "Meta"
        assert store.get(result.id).cookies[1] is cookie

    def test_update_leaves_unset_fields(self) -> None:
        store = storage.ScanStore()
        result = store.add("https://example.com", _cookies())
        cookie = store.update_cookie(result.id, "_ga", ".example.com", description="Visitor id")
        assert (cookie.category, cookie.provider, cookie.description) == ("analytics", "Google", "Visitor id")

    def test_description_truncated(self) -> None:
        store = storage.ScanStore()
        result = store.add("https://example.com", _cookies())
        cookie = store.update_cookie(result.id, "_ga", ".example.com", description="x" * 800)
        assert len(cookie.description) == storage.MAX_DESCRIPTION_LENGTH

    def test_invalid_category(self) -> None:
        store = storage.ScanStore()
        result = store.add("https://example.com", _cookies())
        with pytest.raises(ValueError, match="Invalid category. Must be one of: necessary, "):
            store.update_cookie(result.id, "_ga", ".example.com", category="tracking")

    def test_unknown_scan(self) -> None:
        with pytest.raises(storage.ScanNotFoundError):
            storage.ScanStore().update_cookie("nope", "_ga", ".example.com")

    def test_unknown_cookie(self) -> None:
        store = storage.ScanStore()
        result = store.add("https://example.com", _cookies())
        with pytest.raises(storage.CookieNotFoundError):
            store.update_cookie(result.id, "_ga", "example.com")

    def test_explicit_null_category_rejected(self) -> None:
        store = storage.ScanStore()
        result = store.add("https://example.com", _cookies())
        with pytest.raises(ValueError, match="Invalid category"):
            store.update_cookie(result.id, "_ga", ".example.com", category=None)
        assert store.get(result.id).cookies[0].category == "analytics"

    def test_null_provider_clears(self) -> None:
        store = storage.ScanStore()
        result = store.add("https://example.com", _cookies())
        cookie = store.update_cookie(result.id, "_ga", ".example.com", provider=None)
        assert cookie.provider == ""

    def test_unknown_field_rejected(self) -> None:
        store = storage.ScanStore()
        result = store.add("https://example.com", _cookies())
        with pytest.raises(TypeError, match="party_type"):
            store.update_cookie(result.id, "_ga", ".example.com", party_type="third")
