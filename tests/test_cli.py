"""Tests for the cookie-scanner command line."""

from __future__ import annotations

import json
from unittest import mock

import pytest

from cookie_scanner import cli
from cookie_scanner.models.cookies import ClassifiedCookie
from cookie_scanner.pipeline import scan as scan_pipeline
from cookie_scanner.utils import errors


def _classified() -> list[ClassifiedCookie]:
    return [
        ClassifiedCookie(
            name="_ga",
            domain=".example.com",
            party_type="first",
            expires=1893456000,
            category="analytics",
            provider="Google",
        ),
        ClassifiedCookie(name="app_state", domain="www.example.com", party_type="first"),
    ]


class TestBuildParser:
    def test_defaults(self) -> None:
        args = cli.build_parser().parse_args(["example.com"])
        assert args.urls == ["example.com"]
        assert args.additional == []
        assert args.wait == 3000
        assert not args.json

    def test_repeatable_additional(self) -> None:
        args = cli.build_parser().parse_args(["example.com", "-a", "/a", "--additional", "/b", "-w", "5000", "-j"])
        assert args.additional == ["/a", "/b"]
        assert args.wait == 5000
        assert args.json


class TestFormatTable:
    def test_rows(self) -> None:
        table = cli.format_table("https://example.com", _classified())
        lines = table.splitlines()
        assert lines[0] == "https://example.com: 2 cookies"
        assert lines[1].split() == ["NAME", "DOMAIN", "PARTY", "CATEGORY", "PROVIDER", "EXPIRES"]
        assert lines[2].split() == ["_ga", ".example.com", "first", "analytics", "Google", "1893456000"]
        assert lines[3].split() == ["app_state", "www.example.com", "first", "unknown", "-", "session"]

    def test_empty(self) -> None:
        assert cli.format_table("https://example.com", []) == "https://example.com: 0 cookies"


class TestCli:
    def test_json_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        with mock.patch.object(scan_pipeline, "run_scan", new=mock.AsyncMock(return_value=_classified())) as run:
            code = cli.cli(["example.com", "--json", "-a", "example.com/shop"])
        assert code == 0
        run.assert_awaited_once_with("https://example.com", ["https://example.com/shop"], 3000)
        [result] = json.loads(capsys.readouterr().out)
        assert result["url"] == "https://example.com"
        assert result["cookies"][0]["partyType"] == "first"

    def test_additional_urls_only_for_first_site(self) -> None:
        with mock.patch.object(scan_pipeline, "run_scan", new=mock.AsyncMock(return_value=[])) as run:
            cli.cli(["a.com", "b.com", "-a", "a.com/x", "--json"])
        assert run.await_args_list == [
            mock.call("https://a.com", ["https://a.com/x"], 3000),
            mock.call("https://b.com", [], 3000),
        ]

    def test_table_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        with mock.patch.object(scan_pipeline, "run_scan", new=mock.AsyncMock(return_value=_classified())):
            assert cli.cli(["https://example.com"]) == 0
        assert "https://example.com: 2 cookies" in capsys.readouterr().out

    def test_failure_sets_exit_code(self, capsys: pytest.CaptureFixture[str]) -> None:
        failure = errors.classify_navigation_error("https://nope.invalid", "net::ERR_NAME_NOT_RESOLVED")
        with mock.patch.object(
            scan_pipeline, "run_scan", new=mock.AsyncMock(side_effect=[failure, _classified()])
        ):
            code = cli.cli(["nope.invalid", "example.com"])
        assert code == 1
        captured = capsys.readouterr()
        assert "Error scanning https://nope.invalid" in captured.err
        assert "https://example.com: 2 cookies" in captured.out

    def test_unexpected_error_does_not_stop_later_urls(self, capsys: pytest.CaptureFixture[str]) -> None:
        crash = RuntimeError("Executable doesn't exist at /ms-playwright/chromium")
        with mock.patch.object(
            scan_pipeline, "run_scan", new=mock.AsyncMock(side_effect=[crash, _classified()])
        ) as run:
            code = cli.cli(["a.example", "b.example", "--json"])
        assert code == 1
        assert [c.args[0] for c in run.await_args_list] == ["https://a.example", "https://b.example"]
        captured = capsys.readouterr()
        assert "Error scanning https://a.example: Executable doesn't exist" in captured.err
        [result] = json.loads(captured.out)
        assert result["url"] == "https://b.example"
