from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable, Optional

from drop_series_plotter.core import datasets
from drop_series_plotter.core.parsing import parse_rows
from drop_series_plotter.core.state import Dataset, ProjectState, set_chart_labels
from drop_series_plotter.utils.log import log_event

RenderCallback = Callable[[list[Dataset], Optional[str]], None]


@dataclass(frozen=True)
class Status:
    message: str
    is_error: bool = False
    dataset_id: Optional[str] = None


class SelectionController:
    """Translate UI events into store commands.

    Every handler issues at most one store call and then asks the view to
    re-render from ``list_datasets`` and the active id. Column and color
    edits target the active dataset.
    """

    def __init__(
        self,
        state: ProjectState,
        render: Optional[RenderCallback] = None,
        log_path: Optional[Path] = None,
    ) -> None:
        self.state = state
        self.render = render
        self.log_path = log_path

    def _rerender(self) -> None:
        if self.render is not None:
            self.render(datasets.list_datasets(self.state), self.state.active_id)

    def file_dropped(self, name: str, text: str) -> Status:
        result = parse_rows(text)
        dataset_id = datasets.add_dataset(self.state, name, result)
        if dataset_id is None:
            log_event("ingest.empty", name, self.log_path, rows=len(result), columns=result.column_count)
            status = Status(f"{name}: no numeric data found", is_error=True)
        else:
            ds = self.state.datasets[dataset_id]
            log_event(
                "ingest.ok",
                name,
                self.log_path,
                dataset_id=dataset_id,
                points=ds.point_count,
                columns=ds.column_count,
            )
            status = Status(f"{name}: {ds.point_count} points loaded", dataset_id=dataset_id)
        self._rerender()
        return status

    def files_dropped(self, files: Iterable[tuple[str, str]]) -> list[Status]:
        return [self.file_dropped(name, text) for name, text in files]

    def column_changed(self, candidate_x: Any, candidate_y: Any) -> Optional[Status]:
        ds = datasets.active_dataset(self.state)
        if ds is None:
            return None
        columns = datasets.set_columns(self.state, ds.dataset_id, candidate_x, candidate_y)
        self._rerender()
        return Status(f"{ds.label}: {columns.describe()}, {ds.point_count} points", dataset_id=ds.dataset_id)

    def color_changed(self, color: Any) -> Optional[Status]:
        ds = datasets.active_dataset(self.state)
        if ds is None:
            return None
        try:
            datasets.set_color(self.state, ds.dataset_id, color)
        except ValueError as exc:
            return Status(str(exc), is_error=True, dataset_id=ds.dataset_id)
        self._rerender()
        return Status(f"{ds.label}: color {ds.color}", dataset_id=ds.dataset_id)

    def dataset_clicked(self, dataset_id: str) -> Status:
        if dataset_id not in self.state.datasets:
            return Status(f"Unknown dataset: {dataset_id}", is_error=True)
        datasets.set_active(self.state, dataset_id)
        self._rerender()
        return Status(f"Selected {self.state.datasets[dataset_id].label}", dataset_id=dataset_id)

    def delete_clicked(self, dataset_id: str) -> Status:
        ds = self.state.datasets.get(dataset_id)
        if ds is None:
            return Status(f"Unknown dataset: {dataset_id}", is_error=True)
        datasets.remove_dataset(self.state, dataset_id)
        log_event("dataset.remove", ds.label, self.log_path, dataset_id=dataset_id)
        self._rerender()
        return Status(f"Removed {ds.label}", dataset_id=self.state.active_id)

    def clear_clicked(self) -> Status:
        datasets.clear_datasets(self.state)
        self._rerender()
        return Status("Cleared all datasets.")

    def labels_changed(
        self,
        title: Optional[str] = None,
        x_label: Optional[str] = None,
        y_label: Optional[str] = None,
    ) -> None:
        set_chart_labels(self.state, title=title, x_label=x_label, y_label=y_label)
        self._rerender()
