from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from drop_series_plotter.core.datasets import list_datasets
from drop_series_plotter.core.state import ProjectState


@dataclass
class PlotTrace:
    label: str
    x: np.ndarray
    y: np.ndarray
    color: str
    dataset_id: Optional[str] = None
    is_active: bool = False


@dataclass
class SeriesPlotData:
    traces: list[PlotTrace] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    title: str = ""
    x_label: str = ""
    y_label: str = ""

    @property
    def empty(self) -> bool:
        return not self.traces


def prepare_series_plot(state: ProjectState) -> SeriesPlotData:
    data = SeriesPlotData(
        title=state.chart.title,
        x_label=state.chart.x_label,
        y_label=state.chart.y_label,
    )
    for ds in list_datasets(state):
        if not ds.points:
            data.errors.append(f"{ds.label}: no points for {ds.columns.describe()}")
            continue
        data.traces.append(
            PlotTrace(
                label=ds.label,
                x=ds.x_values(),
                y=ds.y_values(),
                color=ds.color,
                dataset_id=ds.dataset_id,
                is_active=ds.dataset_id == state.active_id,
            )
        )
    return data
