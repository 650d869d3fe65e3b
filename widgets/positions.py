from __future__ import annotations

import re
from collections.abc import Iterable
from typing import TypeVar

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

_INTEGER_RE = re.compile(r"\s*[+-]?[0-9]+\s*", re.ASCII)

T = TypeVar("T")


def parse_position(value) -> int:
    """Sort key of a widget position.

    Accepts a widget (anything with a ``position`` attribute) or the raw
    value. Positions are stored as strings; anything that is not a 32-bit
    integer ("", None, "abc", "1.5", "99999999999") counts as 0.
    """
    raw = getattr(value, "position", value)
    if isinstance(raw, bool):
        return 0
    if isinstance(raw, int):
        number = raw
    elif isinstance(raw, str) and _INTEGER_RE.fullmatch(raw):
        number = int(raw)
    else:
        return 0
    if not INT32_MIN <= number <= INT32_MAX:
        return 0
    return number


def format_position(number: int) -> str:
    return str(number)


def sort_by_position(widgets: Iterable[T], *, descending: bool = False) -> list[T]:
    # sorted() is stable, so widgets with equal positions keep their query order.
    return sorted(widgets, key=parse_position, reverse=descending)
