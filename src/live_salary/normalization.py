"""Utilities to normalize user-entered salary and day-list text."""

from __future__ import annotations

import math
import operator
import re
from typing import Any, Iterable, Optional

MAX_DAY_OF_MONTH = 31

_DAY_RANGE_PATTERN = re.compile(r"^(\d{1,2})\s*-\s*(\d{1,2})$")


def parse_salary_text(text: Optional[str]) -> Optional[float]:
    """Turn salary text such as ``"22,000.50"`` into a float.

    Returns ``None`` for anything that is not a finite, non-negative number
    so half-typed input never reaches the store.
    """
    if text is None:
        return None
    cleaned = text.replace(",", "").strip()
    if not cleaned:
        return None
    try:
        value = float(cleaned)
    except ValueError:
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return value


def parse_day_list(text: str) -> set[int]:
    """Parse ``"6,7,13-14"`` into ``{6, 7, 13, 14}``."""
    days: set[int] = set()
    for raw_token in re.split(r"[,\s]+", text.strip()):
        if not raw_token:
            continue
        match = _DAY_RANGE_PATTERN.match(raw_token)
        if match:
            first, last = int(match.group(1)), int(match.group(2))
            if first > last:
                raise ValueError(f"Descending day range: {raw_token!r}")
            days.update(range(first, last + 1))
        elif raw_token.isdigit():
            days.add(int(raw_token))
        else:
            raise ValueError(f"Not a day of month: {raw_token!r}")
    return validate_days(days)


def validate_days(days: set[int]) -> set[int]:
    out_of_range = sorted(day for day in days if not 1 <= day <= MAX_DAY_OF_MONTH)
    if out_of_range:
        raise ValueError(
            f"Days must be between 1 and {MAX_DAY_OF_MONTH}: {out_of_range}"
        )
    return days


def coerce_days(values: Iterable[Any]) -> set[int]:
    """Convert day numbers to ints, refusing fractional or non-numeric ones."""
    days: set[int] = set()
    for value in values:
        if isinstance(value, bool):
            raise ValueError(f"Not a day of month: {value!r}")
        if isinstance(value, float):
            if not value.is_integer():
                raise ValueError(f"Not a whole day of month: {value!r}")
            value = int(value)
        try:
            days.add(operator.index(value))
        except TypeError as exc:
            raise ValueError(f"Not a day of month: {value!r}") from exc
    return days
