"""
Response-shape probing for list endpoints.

InfluxDB builds disagree on how collections come back: bare arrays, nested
under a key, or nested one level deeper under "data"/"result". Each matcher
is a pure function payload -> list | None; the first match wins and no match
is a MalformedResponseError, never an empty list.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Optional, Sequence

from .errors import MalformedResponseError

Matcher = Callable[[Any], Optional[List[Any]]]

LEGACY_DATABASE_KEY = "iox::database"


def bare_list(payload: Any) -> Optional[List[Any]]:
    return payload if isinstance(payload, list) else None


def keyed(key: str) -> Matcher:
    def match(payload: Any) -> Optional[List[Any]]:
        if isinstance(payload, dict) and isinstance(payload.get(key), list):
            return payload[key]
        return None

    match.__name__ = f"keyed_{key}"
    return match


def nested(outer: str, key: str) -> Matcher:
    inner = keyed(key)

    def match(payload: Any) -> Optional[List[Any]]:
        if isinstance(payload, dict):
            return inner(payload.get(outer))
        return None

    match.__name__ = f"nested_{outer}_{key}"
    return match


DATABASE_LIST_SHAPES: Sequence[Matcher] = (
    bare_list,
    keyed("databases"),
    nested("data", "databases"),
    nested("result", "databases"),
)

ROW_LIST_SHAPES: Sequence[Matcher] = (
    bare_list,
    keyed("data"),
    keyed("result"),
    keyed("results"),
)


def _snippet(payload: Any) -> str:
    try:
        text = json.dumps(payload)
    except (TypeError, ValueError):
        text = repr(payload)
    return text[:300]


def match_collection(
    payload: Any, matchers: Sequence[Matcher], *, what: str
) -> List[Any]:
    for matcher in matchers:
        found = matcher(payload)
        if found is not None:
            return found
    raise MalformedResponseError(
        f"Unexpected {what} response structure: {_snippet(payload)}"
    )


def database_name(item: Any) -> Optional[str]:
    """Name from a database entry: bare string, legacy tagged object or {name}."""
    if isinstance(item, str):
        return item
    if isinstance(item, dict):
        for key in (LEGACY_DATABASE_KEY, "name", "db"):
            value = item.get(key)
            if isinstance(value, str) and value:
                return value
    return None


def database_names(payload: Any) -> List[Dict[str, str]]:
    items = match_collection(payload, DATABASE_LIST_SHAPES, what="database list")
    names: List[Dict[str, str]] = []
    for item in items:
        name = database_name(item)
        if name is None:
            raise MalformedResponseError(
                f"Unrecognized database entry: {_snippet(item)}"
            )
        names.append({"name": name})
    return names


def rows(payload: Any) -> List[Dict[str, Any]]:
    """Row dicts from a JSON query response."""
    found = match_collection(payload, ROW_LIST_SHAPES, what="query")
    return [r for r in found if isinstance(r, dict)]


__all__ = [
    "Matcher",
    "LEGACY_DATABASE_KEY",
    "DATABASE_LIST_SHAPES",
    "ROW_LIST_SHAPES",
    "bare_list",
    "keyed",
    "nested",
    "match_collection",
    "database_name",
    "database_names",
    "rows",
]
