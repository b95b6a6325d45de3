"""Small helpers for building user-facing sentences."""

from __future__ import annotations

from typing import Iterable


def join_with(items: Iterable[str], separator: str = ", ", last_separator: str = " or ") -> str:
    """
    Join items as a natural-language list.

    ``join_with(["x", "y", "z"], ", ", " or ")`` gives ``"x, y or z"``.
    """
    items = list(items)
    if not items:
        return ""
    if len(items) == 1:
        return items[0]
    return separator.join(items[:-1]) + last_separator + items[-1]
