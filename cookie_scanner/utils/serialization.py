"""Serialization helpers for the camelCase JSON the scan API returns.

Provides the ``snake_to_camel`` alias generator shared by the
Pydantic models in :mod:`cookie_scanner.models`.
"""

from __future__ import annotations


def snake_to_camel(name: str) -> str:
    """Convert a snake_case string to camelCase.

    Args:
        name: A snake_case identifier such as ``"same_site"``.

    Returns:
        The camelCase equivalent, e.g. ``"sameSite"``.
    """
    head, *rest = name.split("_")
    return head + "".join(w.capitalize() for w in rest)
