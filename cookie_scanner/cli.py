"""
Command-line cookie scanner.

    cookie-scanner https://example.com --additional https://example.com/shop --json
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections.abc import Sequence

from cookie_scanner.models import cookies, scan
from cookie_scanner.pipeline import scan as scan_pipeline
from cookie_scanner.utils import errors, logger
from cookie_scanner.utils import url as url_mod

log = logger.create_logger("CLI")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cookie-scanner",
        description="Scan websites for the cookies they set and classify them.",
    )
    parser.add_argument("urls", nargs="+", help="URLs to scan (https:// is assumed when no scheme is given)")
    parser.add_argument(
        "--additional",
        "-a",
        action="append",
        default=[],
        metavar="URL",
        help="Extra page of the first site to visit in the same session (repeatable, max 10)",
    )
    parser.add_argument(
        "--wait",
        "-w",
        type=int,
        default=scan.DEFAULT_WAIT_TIME_MS,
        help="Milliseconds to wait for asynchronous scripts after each page load (1000-10000)",
    )
    parser.add_argument("--json", "-j", action="store_true", help="Output results as JSON")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def format_table(url: str, classified: Sequence[cookies.ClassifiedCookie]) -> str:
    """Render one scan as a plain-text table."""
    lines = [f"{url}: {len(classified)} cookies"]
    if not classified:
        return lines[0]
    headers = ("NAME", "DOMAIN", "PARTY", "CATEGORY", "PROVIDER", "EXPIRES")
    rows = [
        (
            c.name,
            c.domain,
            c.party_type,
            c.category,
            c.provider or "-",
            "session" if c.expires < 0 else str(c.expires),
        )
        for c in classified
    ]
    widths = [max(len(h), *(len(r[i]) for r in rows)) for i, h in enumerate(headers)]
    lines.append("  ".join(h.ljust(w) for h, w in zip(headers, widths)))
    lines.extend("  ".join(v.ljust(w) for v, w in zip(row, widths)) for row in rows)
    return "\n".join(lines)


async def _scan_all(args: argparse.Namespace) -> tuple[list[dict[str, object]], bool]:
    results: list[dict[str, object]] = []
    failed = False
    for position, raw_url in enumerate(args.urls):
        target = url_mod.ensure_scheme(raw_url)
        extras = [url_mod.ensure_scheme(u) for u in args.additional] if position == 0 else []
        try:
            classified = await scan_pipeline.run_scan(target, extras, args.wait)
        except errors.ScanError as exc:
            print(f"Error scanning {target}: {exc}", file=sys.stderr)
            failed = True
            continue
        except Exception as exc:
            log.error("Unexpected scan error", {"url": target, "error": errors.get_error_message(exc)})
            print(f"Error scanning {target}: {errors.get_error_message(exc)}", file=sys.stderr)
            failed = True
            continue
        results.append(
            {
                "url": target,
                "cookies": [c.model_dump(mode="json", by_alias=True) for c in classified],
            }
        )
        if not args.json:
            print(format_table(target, classified))
            print()
    return results, failed


def cli(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.debug:
        logger.set_level("debug")

    results, failed = asyncio.run(_scan_all(args))
    if args.json:
        print(json.dumps(results, indent=2))
    return 1 if failed else 0


def main() -> None:
    sys.exit(cli())


if __name__ == "__main__":
    main()
