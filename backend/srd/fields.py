"""Typed accessors for loosely-shaped SRD documents.

Every accessor takes the raw record plus a path of mapping keys (str) and
list positions (int). None of them raise on a missing key or a value of the
wrong shape: they report "not present" or return the caller's default.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

DESCRIPTION_LIMIT = 500

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


@dataclass(frozen=True)
class Extracted:
    value: Any = None
    present: bool = False


MISSING = Extracted()


def lookup(record: Any, *path: str | int) -> Extracted:
    current = record
    for step in path:
        if isinstance(step, int):
            if not isinstance(current, list) or not -len(current) <= step < len(current):
                return MISSING
            current = current[step]
        else:
            if not isinstance(current, dict) or step not in current:
                return MISSING
            current = current[step]
    if current is None:
        return MISSING
    return Extracted(current, True)


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def get_int(record: Any, *path: str | int, default: int) -> int:
    found = lookup(record, *path)
    if not found.present or not is_number(found.value):
        return default
    try:
        return int(found.value)
    except (OverflowError, ValueError):
        # inf / nan
        return default


def get_float(record: Any, *path: str | int, default: float) -> float:
    found = lookup(record, *path)
    if not found.present or not is_number(found.value):
        return default
    return float(found.value)


def get_str(record: Any, *path: str | int, default: str) -> str:
    found = lookup(record, *path)
    if not found.present or not isinstance(found.value, str):
        return default
    return found.value


def get_lower(record: Any, *path: str | int, default: str) -> str:
    found = lookup(record, *path)
    if not found.present or not isinstance(found.value, str):
        return default
    return found.value.lower()


def get_upper(record: Any, *path: str | int, default: str) -> str:
    found = lookup(record, *path)
    if not found.present or not isinstance(found.value, str):
        return default
    return found.value.upper()


def get_bool(record: Any, *path: str | int, default: bool = False) -> bool:
    found = lookup(record, *path)
    if not found.present or not isinstance(found.value, bool):
        return default
    return found.value


def get_list(record: Any, *path: str | int) -> list:
    found = lookup(record, *path)
    if not found.present or not isinstance(found.value, list):
        return []
    return found.value


def first(record: Any, *path: str | int) -> Extracted:
    """Element 0 of a list field; the remaining elements are ignored."""
    items = get_list(record, *path)
    if not items:
        return MISSING
    return lookup(items, 0)


def first_value(record: Any, *path: str | int) -> Extracted:
    """One representative value of a mapping field.

    Used for per-slot-level maps (``{"1": "3d6", "2": "4d6"}``) where only a
    single entry is kept. The first entry in source order is chosen, which for
    SRD documents is the lowest slot level.
    """
    found = lookup(record, *path)
    if not found.present or not isinstance(found.value, dict) or not found.value:
        return MISSING
    return lookup(next(iter(found.value.values())))


def names(
    record: Any,
    *path: str | int,
    key: str = "name",
    transform: Callable[[str], str] | None = None,
) -> list[str]:
    collected = []
    for entry in get_list(record, *path):
        value = get_str(entry, key, default="")
        if not value:
            continue
        collected.append(transform(value) if transform else value)
    return collected


def leading_int(text: Any, default: int) -> int:
    if not isinstance(text, str):
        return default
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else default


def truncate(text: str, limit: int = DESCRIPTION_LIMIT) -> str:
    return text[:limit]


def join(values: Iterable[str]) -> str:
    return ", ".join(values)


def format_number(value: Any, default: str) -> str:
    if isinstance(value, str) and value:
        return value
    if not is_number(value):
        return default
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return default
        text = repr(value)
        return text[:-2] if text.endswith(".0") else text
    return str(value)
