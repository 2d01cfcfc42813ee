from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from drop_series_plotter.core.columns import ColumnPair
from drop_series_plotter.core.parsing import Row
from drop_series_plotter.core.projection import Point, points_to_arrays

PALETTE: tuple[str, ...] = (
    "#000000",  # black
    "#FF0000",  # red
    "#0000FF",  # blue
    "#008000",  # green
    "#800080",  # purple
    "#FF8C00",  # dark orange
    "#008080",  # teal
    "#8B4513",  # saddle brown
)

DATASET_ID_PREFIX = "ds"


@dataclass
class ChartSettings:
    title: str = "Graph"
    x_label: str = "X"
    y_label: str = "Y"


@dataclass
class Dataset:
    """One dropped file: its parsed rows and the current projection.

    ``points`` is owned by the dataset and only replaced through
    ``datasets.set_columns``.
    """

    dataset_id: str
    label: str
    color: str
    raw_rows: tuple[Row, ...]
    column_count: int
    columns: ColumnPair
    points: tuple[Point, ...] = ()

    def x_values(self) -> np.ndarray:
        return points_to_arrays(self.points)[0]

    def y_values(self) -> np.ndarray:
        return points_to_arrays(self.points)[1]

    @property
    def point_count(self) -> int:
        return len(self.points)


@dataclass
class ProjectState:
    """Shared, UI-agnostic state: loaded datasets, display order and selection."""

    datasets: dict[str, Dataset] = field(default_factory=dict)
    dataset_order: list[str] = field(default_factory=list)
    active_id: Optional[str] = None
    dataset_counter: int = 0
    chart: ChartSettings = field(default_factory=ChartSettings)

    def clear(self) -> None:
        # The counter survives so ids are never handed out twice.
        self.datasets.clear()
        self.dataset_order.clear()
        self.active_id = None
        self.chart = ChartSettings()

    def next_dataset_id(self) -> str:
        self.dataset_counter += 1
        return f"{DATASET_ID_PREFIX}::{self.dataset_counter}"


def palette_color(insertion_index: int) -> str:
    return PALETTE[insertion_index % len(PALETTE)]


def set_chart_labels(
    state: ProjectState,
    title: Optional[str] = None,
    x_label: Optional[str] = None,
    y_label: Optional[str] = None,
) -> None:
    if title is not None:
        state.chart.title = str(title)
    if x_label is not None:
        state.chart.x_label = str(x_label)
    if y_label is not None:
        state.chart.y_label = str(y_label)
