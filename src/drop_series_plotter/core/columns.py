from __future__ import annotations

import numbers
from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class ColumnPair:
    x: int = 0
    y: int = 1

    def as_tuple(self) -> tuple[int, int]:
        return (self.x, self.y)

    def describe(self) -> str:
        return f"X:C{self.x + 1} / Y:C{self.y + 1}"


def default_y_column(column_count: int) -> int:
    return 1 if column_count > 1 else 0


def coerce_column_index(candidate: Any) -> Optional[int]:
    """Return ``candidate`` as an int, or None when it is not an integer.

    Selector widgets hand back strings, so integral strings are accepted.
    """
    if candidate is None or isinstance(candidate, bool):
        return None
    if isinstance(candidate, numbers.Integral):
        return int(candidate)
    if isinstance(candidate, str):
        try:
            return int(candidate.strip())
        except ValueError:
            return None
    return None


def _pick(candidate: Any, column_count: int, fallback: int) -> int:
    idx = coerce_column_index(candidate)
    if idx is None or idx < 0 or idx >= column_count:
        return fallback
    return idx


def normalize_columns(column_count: int, candidate_x: Any = None, candidate_y: Any = None) -> ColumnPair:
    """Resolve a candidate (x, y) pair against ``column_count`` columns.

    Invalid or out-of-range candidates reset to the defaults (x=0, y=1 or 0
    for single-column data); they are not clamped to the last column.
    """
    if column_count <= 0:
        raise ValueError("Cannot choose columns for data without columns.")
    if column_count == 1:
        return ColumnPair(0, 0)
    return ColumnPair(
        x=_pick(candidate_x, column_count, 0),
        y=_pick(candidate_y, column_count, default_y_column(column_count)),
    )


def default_columns(column_count: int) -> ColumnPair:
    return normalize_columns(column_count, 0, default_y_column(column_count))


def column_options(column_count: int) -> list[tuple[int, str]]:
    return [(idx, f"Column {idx + 1}") for idx in range(max(1, column_count))]
