from __future__ import annotations

from typing import Iterable, NamedTuple, Optional, Sequence

import numpy as np

from drop_series_plotter.core.columns import ColumnPair
from drop_series_plotter.core.parsing import Row


class Point(NamedTuple):
    x: float
    y: float


def _cell(row: Row, idx: int) -> Optional[float]:
    if idx < len(row):
        return row[idx]
    return None


def project_points(rows: Sequence[Row], columns: ColumnPair, column_count: int) -> tuple[Point, ...]:
    """Map rows onto (x, y) points for the given column pair.

    Single-column data is plotted against the row index. Otherwise a row
    needs a Y value; a missing X falls back to the row index.
    """
    points: list[Point] = []
    if column_count == 1:
        for idx, row in enumerate(rows):
            y = _cell(row, 0)
            if y is not None:
                points.append(Point(float(idx), y))
        return tuple(points)

    for idx, row in enumerate(rows):
        y = _cell(row, columns.y)
        if y is None:
            continue
        x = _cell(row, columns.x)
        points.append(Point(float(idx) if x is None else x, y))
    return tuple(points)


def points_to_arrays(points: Iterable[Point]) -> tuple[np.ndarray, np.ndarray]:
    pts = list(points)
    if not pts:
        return np.array([], dtype=float), np.array([], dtype=float)
    arr = np.asarray(pts, dtype=float)
    return arr[:, 0], arr[:, 1]
