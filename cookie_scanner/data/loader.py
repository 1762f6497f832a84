"""
Data loader for the cookie classification rule table.
Loads the ordered JSON rule list and compiles each pattern into a
case-insensitive regex once.

The default table lives alongside this module in ``cookie-rules.json``.
Rule order is significant: the classifier takes the first match.
"""

from __future__ import annotations

import json
import pathlib
from typing import Any

import pydantic

from cookie_scanner.models import cookies

# Resolve path to the data directory (same directory as this module)
_DATA_DIR = pathlib.Path(__file__).resolve().parent

DEFAULT_RULES_FILE = "cookie-rules.json"


def _load_json(path: pathlib.Path) -> Any:
    """Load and parse a JSON file.

    Raises:
        FileNotFoundError: If the JSON file does not exist.
        json.JSONDecodeError: If the file contains invalid JSON.
    """
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path.name}")
    with open(path, encoding="utf-8") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as exc:
            raise json.JSONDecodeError(
                f"Invalid JSON in {path.name}: {exc.msg}",
                exc.doc,
                exc.pos,
            ) from exc


def parse_rules(raw: list[dict[str, str]]) -> tuple[cookies.ClassificationRule, ...]:
    """Compile raw rule entries into an ordered, immutable rule table.

    Raises:
        ValueError: If an entry is missing ``pattern`` or
            ``category``, names an unknown category, or carries an
            invalid regex.
    """
    rules: list[cookies.ClassificationRule] = []
    for position, entry in enumerate(raw):
        try:
            rules.append(
                cookies.ClassificationRule.build(
                    pattern=entry["pattern"],
                    category=entry["category"],  # type: ignore[arg-type]
                    provider=entry.get("provider", ""),
                    description=entry.get("description", ""),
                )
            )
        except KeyError as exc:
            raise ValueError(f"Cookie rule #{position} is missing {exc.args[0]!r}") from exc
        except pydantic.ValidationError as exc:
            raise ValueError(f"Cookie rule #{position} is invalid: {exc.errors()[0]['msg']}") from exc
    return tuple(rules)


def load_rules(path: str | pathlib.Path) -> tuple[cookies.ClassificationRule, ...]:
    """Load and compile a rule table from a JSON file at *path*."""
    return parse_rules(_load_json(pathlib.Path(path)))


_default_rules: tuple[cookies.ClassificationRule, ...] | None = None


def get_default_rules() -> tuple[cookies.ClassificationRule, ...]:
    """Get the bundled cookie rule table (lazy loaded and cached)."""
    global _default_rules
    if _default_rules is None:
        _default_rules = load_rules(_DATA_DIR / DEFAULT_RULES_FILE)
    return _default_rules
