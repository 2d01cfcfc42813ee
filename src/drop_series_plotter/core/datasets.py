from __future__ import annotations

from typing import Any, Optional

from drop_series_plotter.core.columns import ColumnPair, default_y_column, normalize_columns
from drop_series_plotter.core.parsing import ParseResult
from drop_series_plotter.core.projection import project_points
from drop_series_plotter.core.state import Dataset, ProjectState, palette_color
from drop_series_plotter.plotting.helpers import normalize_color


def ordered_dataset_ids(state: ProjectState) -> list[str]:
    return [did for did in state.dataset_order if did in state.datasets]


def list_datasets(state: ProjectState) -> list[Dataset]:
    """Datasets in display order. The list is a fresh copy."""
    return [state.datasets[did] for did in ordered_dataset_ids(state)]


def get_dataset(state: ProjectState, dataset_id: str) -> Dataset:
    try:
        return state.datasets[dataset_id]
    except KeyError:
        raise KeyError(f"Unknown dataset: {dataset_id}") from None


def active_dataset(state: ProjectState) -> Optional[Dataset]:
    if state.active_id is None:
        return None
    return state.datasets.get(state.active_id)


def add_dataset(state: ProjectState, label: str, parse_result: ParseResult) -> Optional[str]:
    """Create a dataset from parsed rows and make it active.

    Returns the new id, or None (state untouched) when the rows project to
    no points at all.
    """
    if parse_result.empty or parse_result.column_count <= 0:
        return None
    count = parse_result.column_count
    columns = normalize_columns(count, 0, default_y_column(count))
    points = project_points(parse_result.rows, columns, count)
    if not points:
        return None

    label = str(label or "").strip() or "Dataset"
    dataset_id = state.next_dataset_id()
    state.datasets[dataset_id] = Dataset(
        dataset_id=dataset_id,
        label=label,
        color=palette_color(len(ordered_dataset_ids(state))),
        raw_rows=parse_result.rows,
        column_count=count,
        columns=columns,
        points=points,
    )
    state.dataset_order.append(dataset_id)
    state.active_id = dataset_id
    return dataset_id


def remove_dataset(state: ProjectState, dataset_id: str) -> None:
    if dataset_id not in state.datasets:
        return
    state.datasets.pop(dataset_id, None)
    if dataset_id in state.dataset_order:
        state.dataset_order.remove(dataset_id)
    if state.active_id == dataset_id or state.active_id not in state.datasets:
        remaining = ordered_dataset_ids(state)
        state.active_id = remaining[0] if remaining else None


def set_active(state: ProjectState, dataset_id: str) -> None:
    get_dataset(state, dataset_id)
    state.active_id = dataset_id


def set_columns(state: ProjectState, dataset_id: str, candidate_x: Any, candidate_y: Any) -> ColumnPair:
    ds = get_dataset(state, dataset_id)
    columns = normalize_columns(ds.column_count, candidate_x, candidate_y)
    points = project_points(ds.raw_rows, columns, ds.column_count)
    ds.columns = columns
    ds.points = points
    return columns


def set_color(state: ProjectState, dataset_id: str, color: Any) -> str:
    ds = get_dataset(state, dataset_id)
    ds.color = normalize_color(color)
    return ds.color


def clear_datasets(state: ProjectState) -> None:
    state.datasets.clear()
    state.dataset_order.clear()
    state.active_id = None
