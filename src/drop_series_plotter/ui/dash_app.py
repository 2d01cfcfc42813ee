from __future__ import annotations

import argparse
from typing import Any

import dash_bootstrap_components as dbc
import plotly.graph_objects as go
from dash import Dash, Input, Output, State, ctx, dash_table, dcc, html, no_update
from dash.exceptions import PreventUpdate

from drop_series_plotter.core.columns import column_options
from drop_series_plotter.core.controller import SelectionController, Status
from drop_series_plotter.core.datasets import active_dataset, list_datasets
from drop_series_plotter.core.plotting import prepare_series_plot
from drop_series_plotter.core.session import build_session_payload, state_from_session
from drop_series_plotter.core.state import ProjectState
from drop_series_plotter.data.loaders import decode_upload_contents, pair_uploads
from drop_series_plotter.plotting.figures import build_series_figure, render_series_png
from drop_series_plotter.utils.log import log_event, log_exception

APP_TITLE = "Drop Series Plotter"
PLACEHOLDER_TEXT = "Drop one or more data files to plot them."
DELETE_MARK = "×"

DATASET_TABLE_COLUMNS = [
    {"name": "", "id": "swatch"},
    {"name": "Dataset", "id": "dataset"},
    {"name": "Columns", "id": "columns"},
    {"name": "Points", "id": "points"},
    {"name": "", "id": "delete"},
]


def _status_alert(message: str, kind: str = "info"):
    return dbc.Alert(message, color=kind, className="py-1 px-2 mb-0 small")


def _status_from_result(status: Status | None):
    if status is None:
        return no_update
    return _status_alert(status.message, "danger" if status.is_error else "success")


def _dataset_table_rows(state: ProjectState) -> list[dict[str, Any]]:
    return [
        {
            "swatch": "●",
            "dataset": ds.label,
            "columns": ds.columns.describe(),
            "points": ds.point_count,
            "delete": DELETE_MARK,
            "dataset_id": ds.dataset_id,
        }
        for ds in list_datasets(state)
    ]


def _dataset_table_styles(state: ProjectState) -> list[dict[str, Any]]:
    styles: list[dict[str, Any]] = []
    for ds in list_datasets(state):
        styles.append(
            {
                "if": {"filter_query": f'{{dataset_id}} = "{ds.dataset_id}"', "column_id": "swatch"},
                "color": ds.color,
                "fontSize": "1.2em",
            }
        )
    return styles


def _selected_dataset_id_from_rows(rows: list[dict[str, Any]] | None, selected_rows: list[int] | None) -> str | None:
    rows = rows or []
    idxs = list(selected_rows or [])
    if not rows or not idxs:
        return None
    idx = int(idxs[0])
    if idx < 0 or idx >= len(rows):
        return None
    sid = rows[idx].get("dataset_id")
    return str(sid) if sid else None


def _empty_figure(message: str = PLACEHOLDER_TEXT) -> go.Figure:
    fig = go.Figure()
    fig.update_layout(
        paper_bgcolor="white",
        plot_bgcolor="white",
        xaxis=dict(visible=False),
        yaxis=dict(visible=False),
        annotations=[dict(text=message, showarrow=False, font=dict(size=16, color="#6c757d"))],
    )
    return fig


def _column_controls(state: ProjectState) -> tuple[list[dict[str, Any]], int, int, bool]:
    ds = active_dataset(state)
    count = ds.column_count if ds is not None else 2
    options = [{"label": label, "value": idx} for idx, label in column_options(count)]
    if ds is None:
        return options, 0, 1, True
    return options, ds.columns.x, ds.columns.y, ds.column_count <= 1


def _render(state: ProjectState) -> tuple:
    plot_data = prepare_series_plot(state)
    figure = _empty_figure() if plot_data.empty else build_series_figure(plot_data)
    rows = _dataset_table_rows(state)
    order = [row["dataset_id"] for row in rows]
    selected = [order.index(state.active_id)] if state.active_id in order else []
    options, x_value, y_value, disabled = _column_controls(state)
    ds = active_dataset(state)
    color = ds.color if ds is not None else "#000000"
    return (
        figure,
        rows,
        _dataset_table_styles(state),
        selected,
        options,
        x_value,
        disabled,
        options,
        y_value,
        disabled,
        color,
    )


def _card(title: str, children: list) -> dbc.Card:
    return dbc.Card([dbc.CardHeader(title), dbc.CardBody(children)], className="mb-3")


def _sidebar(state: ProjectState) -> html.Div:
    return html.Div(
        [
            _card(
                "Data",
                [
                    dcc.Upload(
                        id="file-upload",
                        multiple=True,
                        children=html.Div(["Drop data files here or ", html.A("browse")]),
                        style={
                            "borderWidth": "2px",
                            "borderStyle": "dashed",
                            "borderRadius": "6px",
                            "padding": "24px 8px",
                            "textAlign": "center",
                            "cursor": "pointer",
                        },
                    ),
                    html.Div(id="file-status", className="mt-2"),
                ],
            ),
            _card(
                "Datasets",
                [
                    dash_table.DataTable(
                        id="dataset-table",
                        columns=DATASET_TABLE_COLUMNS,
                        data=_dataset_table_rows(state),
                        row_selectable="single",
                        selected_rows=[],
                        style_as_list_view=True,
                        style_cell={"textAlign": "left", "padding": "4px", "fontSize": "0.9em"},
                        style_data_conditional=_dataset_table_styles(state),
                    ),
                    html.Div(
                        [
                            dbc.Button("Remove selected", id="remove-btn", color="secondary", size="sm", className="me-2"),
                            dbc.Button("Clear all", id="clear-btn", color="danger", size="sm", outline=True),
                        ],
                        className="mt-2",
                    ),
                ],
            ),
            _card(
                "Active dataset",
                [
                    dbc.Label("X column"),
                    dcc.Dropdown(id="x-column-select", clearable=False),
                    dbc.Label("Y column", className="mt-2"),
                    dcc.Dropdown(id="y-column-select", clearable=False),
                    dbc.Label("Line color", className="mt-2"),
                    dbc.Input(id="line-color", type="color", value="#000000", debounce=True),
                ],
            ),
            _card(
                "Chart",
                [
                    dbc.Label("Title"),
                    dbc.Input(id="chart-title", value=state.chart.title, debounce=True),
                    dbc.Label("X label", className="mt-2"),
                    dbc.Input(id="x-label", value=state.chart.x_label, debounce=True),
                    dbc.Label("Y label", className="mt-2"),
                    dbc.Input(id="y-label", value=state.chart.y_label, debounce=True),
                    dbc.Button("Save PNG", id="save-btn", color="primary", size="sm", className="mt-3"),
                    dcc.Download(id="download-png"),
                ],
            ),
        ]
    )


def _root_layout() -> dbc.Container:
    state = ProjectState()
    return dbc.Container(
        [
            dcc.Store(id="project-session", storage_type="memory", data=build_session_payload(state)),
            html.H3(APP_TITLE, className="my-3"),
            dbc.Row(
                [
                    dbc.Col(_sidebar(state), md=4, lg=3),
                    dbc.Col(
                        dcc.Graph(id="main-chart", figure=_empty_figure(), style={"height": "80vh"}),
                        md=8,
                        lg=9,
                    ),
                ]
            ),
        ],
        fluid=True,
    )


def create_app() -> Dash:
    app = Dash(
        __name__,
        external_stylesheets=[dbc.themes.LUX],
        suppress_callback_exceptions=True,
        title=APP_TITLE,
    )
    app.layout = _root_layout()
    _register_callbacks(app)
    return app


def _ingest_uploads(controller: SelectionController, contents, filenames) -> list[Status]:
    statuses: list[Status] = []
    for name, payload in pair_uploads(contents, filenames):
        try:
            text = decode_upload_contents(payload)
        except ValueError as exc:
            log_event("ingest.decode_failed", name, controller.log_path, error=exc)
            statuses.append(Status(f"{name}: {exc}", is_error=True))
            continue
        statuses.append(controller.file_dropped(name, text))
    return statuses


def _table_cell_action(controller: SelectionController, rows: list[dict[str, Any]] | None, cell: dict[str, Any] | None):
    rows = rows or []
    if not cell:
        return None
    idx = cell.get("row")
    if idx is None or idx < 0 or idx >= len(rows):
        return None
    sid = rows[idx].get("dataset_id")
    if not sid:
        return None
    if cell.get("column_id") == "delete":
        return controller.delete_clicked(str(sid))
    if sid == controller.state.active_id:
        return None
    return controller.dataset_clicked(str(sid))


def _dispatch(controller: SelectionController, trigger: str | None, values: dict[str, Any]):
    if trigger == "file-upload":
        statuses = _ingest_uploads(controller, values["contents"], values["filenames"])
        if not statuses:
            return None
        return statuses[-1] if len(statuses) == 1 else Status(
            "; ".join(s.message for s in statuses),
            is_error=all(s.is_error for s in statuses),
        )
    if trigger in ("x-column-select", "y-column-select"):
        return controller.column_changed(values["x_column"], values["y_column"])
    if trigger == "line-color":
        return controller.color_changed(values["color"])
    if trigger == "dataset-cell":
        return _table_cell_action(controller, values["table_rows"], values["active_cell"])
    if trigger == "dataset-table":
        sid = _selected_dataset_id_from_rows(values["table_rows"], values["selected_rows"])
        if sid is None or sid == controller.state.active_id:
            return None
        return controller.dataset_clicked(sid)
    if trigger == "remove-btn":
        if controller.state.active_id is None:
            return Status("No dataset selected.", is_error=True)
        return controller.delete_clicked(controller.state.active_id)
    if trigger == "clear-btn":
        return controller.clear_clicked()
    if trigger in ("chart-title", "x-label", "y-label"):
        controller.labels_changed(values["title"], values["x_label"], values["y_label"])
        return None
    return None


def _register_callbacks(app: Dash) -> None:
    @app.callback(
        Output("project-session", "data"),
        Output("file-status", "children"),
        Output("file-upload", "contents"),
        Output("dataset-table", "active_cell"),
        Output("main-chart", "figure"),
        Output("dataset-table", "data"),
        Output("dataset-table", "style_data_conditional"),
        Output("dataset-table", "selected_rows"),
        Output("x-column-select", "options"),
        Output("x-column-select", "value"),
        Output("x-column-select", "disabled"),
        Output("y-column-select", "options"),
        Output("y-column-select", "value"),
        Output("y-column-select", "disabled"),
        Output("line-color", "value"),
        Input("file-upload", "contents"),
        Input("x-column-select", "value"),
        Input("y-column-select", "value"),
        Input("line-color", "value"),
        Input("dataset-table", "selected_rows"),
        Input("dataset-table", "active_cell"),
        Input("remove-btn", "n_clicks"),
        Input("clear-btn", "n_clicks"),
        Input("chart-title", "value"),
        Input("x-label", "value"),
        Input("y-label", "value"),
        State("file-upload", "filename"),
        State("dataset-table", "data"),
        State("project-session", "data"),
    )
    def _handle_event(
        contents,
        x_column,
        y_column,
        color,
        selected_rows,
        active_cell,
        _remove_clicks,
        _clear_clicks,
        title,
        x_label,
        y_label,
        filenames,
        table_rows,
        project_session,
    ):
        trigger = ctx.triggered_id
        if trigger == "dataset-table" and "dataset-table.active_cell" in ctx.triggered_prop_ids:
            trigger = "dataset-cell"
        state = state_from_session(project_session)
        controller = SelectionController(state)
        status = no_update
        try:
            result = _dispatch(
                controller,
                trigger,
                {
                    "contents": contents,
                    "filenames": filenames,
                    "x_column": x_column,
                    "y_column": y_column,
                    "color": color,
                    "table_rows": table_rows,
                    "selected_rows": selected_rows,
                    "active_cell": active_cell,
                    "title": title,
                    "x_label": x_label,
                    "y_label": y_label,
                },
            )
            status = _status_from_result(result)
        except Exception as exc:
            log_exception(f"dash.handle_event trigger={trigger}")
            status = _status_alert(f"{type(exc).__name__}: {exc}", "danger")
        return (build_session_payload(state), status, None, None) + _render(state)

    @app.callback(
        Output("download-png", "data"),
        Input("save-btn", "n_clicks"),
        State("project-session", "data"),
        prevent_initial_call=True,
    )
    def _save_png(n_clicks, project_session):
        if not n_clicks:
            raise PreventUpdate
        state = state_from_session(project_session)
        png = render_series_png(prepare_series_plot(state))
        return dcc.send_bytes(png, filename="graph.png")


def main(**run_kwargs) -> None:
    app = create_app()
    app.run(**run_kwargs)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=f"{APP_TITLE} Dash UI")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8050)
    parser.add_argument("--debug", dest="debug", action="store_true", default=False)
    parser.add_argument("--no-debug", dest="debug", action="store_false")
    args = parser.parse_args()
    main(host=args.host, port=args.port, debug=args.debug)
