from __future__ import annotations

import math
from typing import Any, Optional

from drop_series_plotter.core.columns import normalize_columns
from drop_series_plotter.core.datasets import ordered_dataset_ids
from drop_series_plotter.core.parsing import Row
from drop_series_plotter.core.projection import project_points
from drop_series_plotter.core.state import ChartSettings, Dataset, ProjectState, palette_color
from drop_series_plotter.plotting.helpers import normalize_color

SESSION_VERSION = 1


def _cell_to_json(value: Optional[float]) -> Any:
    if value is None:
        return None
    value = float(value)
    # JSON has no infinities; keep them as strings so they survive the trip.
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    return value


def _cell_from_json(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        out = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(out) else out


def build_session_payload(state: ProjectState) -> dict[str, Any]:
    """JSON-safe snapshot of the store for the page's in-memory session."""
    out_datasets = []
    for did in ordered_dataset_ids(state):
        ds = state.datasets[did]
        out_datasets.append(
            {
                "id": ds.dataset_id,
                "label": ds.label,
                "color": ds.color,
                "column_count": ds.column_count,
                "columns": [ds.columns.x, ds.columns.y],
                "rows": [[_cell_to_json(v) for v in row] for row in ds.raw_rows],
            }
        )
    return {
        "version": SESSION_VERSION,
        "dataset_counter": state.dataset_counter,
        "active_id": state.active_id,
        "chart": {
            "title": state.chart.title,
            "x_label": state.chart.x_label,
            "y_label": state.chart.y_label,
        },
        "datasets": out_datasets,
    }


def _counter_from_id(dataset_id: str) -> int:
    try:
        return int(str(dataset_id).rsplit("::", 1)[1])
    except (IndexError, ValueError):
        return 0


def _dataset_from_payload(item: dict[str, Any], index: int) -> Optional[Dataset]:
    dataset_id = str(item.get("id") or "").strip()
    raw_rows = item.get("rows")
    if not dataset_id or not isinstance(raw_rows, list):
        return None
    rows: tuple[Row, ...] = tuple(
        tuple(_cell_from_json(v) for v in row) for row in raw_rows if isinstance(row, list)
    )
    rows = tuple(row for row in rows if any(v is not None for v in row))
    if not rows:
        return None
    column_count = max(len(row) for row in rows)
    cols = item.get("columns") if isinstance(item.get("columns"), list) else []
    columns = normalize_columns(
        column_count,
        cols[0] if len(cols) > 0 else None,
        cols[1] if len(cols) > 1 else None,
    )
    try:
        color = normalize_color(item.get("color"))
    except ValueError:
        color = palette_color(index)
    points = project_points(rows, columns, column_count)
    return Dataset(
        dataset_id=dataset_id,
        label=str(item.get("label") or "Dataset"),
        color=color,
        raw_rows=rows,
        column_count=column_count,
        columns=columns,
        points=points,
    )


def state_from_session(payload: Optional[dict[str, Any]]) -> ProjectState:
    """Rebuild a store from ``build_session_payload`` output.

    Points are recomputed from rows and columns, and may be empty when the
    chosen Y column is blank. Entries without any numeric row are
    skipped rather than trusted.
    """
    state = ProjectState()
    if not isinstance(payload, dict):
        return state

    chart = payload.get("chart")
    if isinstance(chart, dict):
        defaults = ChartSettings()
        state.chart = ChartSettings(
            title=str(chart.get("title", defaults.title) or ""),
            x_label=str(chart.get("x_label", defaults.x_label) or ""),
            y_label=str(chart.get("y_label", defaults.y_label) or ""),
        )

    try:
        max_counter = int(payload.get("dataset_counter", 0))
    except (TypeError, ValueError):
        max_counter = 0

    items = payload.get("datasets")
    for item in items if isinstance(items, list) else []:
        if not isinstance(item, dict):
            continue
        ds = _dataset_from_payload(item, len(state.dataset_order))
        if ds is None or ds.dataset_id in state.datasets:
            continue
        state.datasets[ds.dataset_id] = ds
        state.dataset_order.append(ds.dataset_id)
        max_counter = max(max_counter, _counter_from_id(ds.dataset_id))

    state.dataset_counter = max_counter
    active_id = payload.get("active_id")
    if isinstance(active_id, str) and active_id in state.datasets:
        state.active_id = active_id
    else:
        state.active_id = state.dataset_order[0] if state.dataset_order else None
    return state
