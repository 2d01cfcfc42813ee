import base64

import pytest

pytest.importorskip("dash")
pytest.importorskip("dash_bootstrap_components")

from drop_series_plotter.core.controller import SelectionController  # noqa: E402
from drop_series_plotter.core.session import build_session_payload, state_from_session  # noqa: E402
from drop_series_plotter.core.state import ProjectState  # noqa: E402
from drop_series_plotter.ui import dash_app  # noqa: E402


def _payload(text: str) -> str:
    return "data:text/plain;base64," + base64.b64encode(text.encode("utf-8")).decode("ascii")


def _values(**overrides):
    values = {
        "contents": None,
        "filenames": None,
        "x_column": None,
        "y_column": None,
        "color": None,
        "table_rows": [],
        "selected_rows": [],
        "active_cell": None,
        "title": None,
        "x_label": None,
        "y_label": None,
    }
    values.update(overrides)
    return values


def test_create_app_builds_layout():
    app = dash_app.create_app()

    assert app.title == dash_app.APP_TITLE
    assert app.layout is not None


def test_upload_then_select_and_remove():
    state = ProjectState()
    controller = SelectionController(state)

    status = dash_app._dispatch(
        controller,
        "file-upload",
        _values(contents=[_payload("1 2\n2 4"), _payload("7\n8\n9")], filenames=["a.txt", "b.txt"]),
    )
    assert status.message == "a.txt: 2 points loaded; b.txt: 3 points loaded"

    rows = dash_app._dataset_table_rows(state)
    assert [row["dataset"] for row in rows] == ["a.txt", "b.txt"]
    assert rows[1]["columns"] == "X:C1 / Y:C1"

    dash_app._dispatch(controller, "dataset-table", _values(table_rows=rows, selected_rows=[0]))
    assert state.active_id == rows[0]["dataset_id"]

    dash_app._dispatch(controller, "remove-btn", _values())
    assert [row["dataset"] for row in dash_app._dataset_table_rows(state)] == ["b.txt"]


def test_render_outputs_match_active_dataset():
    state = ProjectState()
    controller = SelectionController(state)
    controller.file_dropped("three.txt", "1 2 3\n4 5 6")
    controller.column_changed(2, 1)

    figure, rows, _styles, selected, options, x_value, x_disabled, _yo, y_value, _yd, color = dash_app._render(state)

    assert len(figure.data) == 1
    assert selected == [0]
    assert [opt["label"] for opt in options] == ["Column 1", "Column 2", "Column 3"]
    assert (x_value, y_value, x_disabled) == (2, 1, False)
    assert color == "#000000"


def test_invalid_color_input_reports_error():
    state = ProjectState()
    controller = SelectionController(state)
    controller.file_dropped("a.txt", "1 2")

    status = dash_app._dispatch(controller, "line-color", _values(color="???"))

    assert status.is_error
    assert status.message == "Invalid color: '???'"
    assert dash_app._render(state)[-1] == "#000000"


def test_selected_dataset_id_from_rows():
    rows = [{"dataset_id": "ds::1"}, {"dataset_id": "ds::2"}]

    assert dash_app._selected_dataset_id_from_rows(rows, [1]) == "ds::2"
    assert dash_app._selected_dataset_id_from_rows(rows, [5]) is None
    assert dash_app._selected_dataset_id_from_rows(rows, None) is None


def _next_event(session, trigger, **overrides):
    state = state_from_session(session)
    status = dash_app._dispatch(SelectionController(state), trigger, _values(**overrides))
    return build_session_payload(state), status


def test_blank_y_column_keeps_dataset_across_callbacks():
    session = build_session_payload(ProjectState())
    session, _ = _next_event(session, "file-upload", contents=[_payload("1,2,\n3,4")], filenames=["a.txt"])
    session, status = _next_event(session, "y-column-select", x_column=0, y_column=2)
    assert status.message == "a.txt: X:C1 / Y:C3, 0 points"

    session, _ = _next_event(session, "chart-title", title="After", x_label="X", y_label="Y")

    state = state_from_session(session)
    rows = dash_app._dataset_table_rows(state)
    assert [(row["dataset"], row["columns"], row["points"]) for row in rows] == [("a.txt", "X:C1 / Y:C3", 0)]
    assert state.active_id == rows[0]["dataset_id"]


def test_broken_upload_does_not_block_the_rest():
    state = ProjectState()
    controller = SelectionController(state)

    status = dash_app._dispatch(
        controller,
        "file-upload",
        _values(contents=[_payload("1 2"), "garbage", _payload("3 4\n5 6")], filenames=["a.txt", "bad.txt", "c.txt"]),
    )

    assert [row["dataset"] for row in dash_app._dataset_table_rows(state)] == ["a.txt", "c.txt"]
    assert status.message.startswith("a.txt: 1 points loaded; bad.txt: Invalid upload payload")
    assert status.message.endswith("; c.txt: 2 points loaded")
    assert not status.is_error


def test_single_broken_upload_is_an_error():
    state = ProjectState()

    status = dash_app._dispatch(SelectionController(state), "file-upload", _values(contents="garbage", filenames="x.txt"))

    assert status.is_error
    assert status.message == "x.txt: Invalid upload payload."
    assert state.datasets == {}


def test_delete_cell_removes_that_row():
    state = ProjectState()
    controller = SelectionController(state)
    controller.file_dropped("a.txt", "1 2")
    controller.file_dropped("b.txt", "3 4")
    controller.file_dropped("c.txt", "5 6")
    rows = dash_app._dataset_table_rows(state)
    assert rows[0]["delete"] == dash_app.DELETE_MARK

    status = dash_app._dispatch(
        controller,
        "dataset-cell",
        _values(table_rows=rows, active_cell={"row": 1, "column": 4, "column_id": "delete"}),
    )

    assert status.message == "Removed b.txt"
    assert [row["dataset"] for row in dash_app._dataset_table_rows(state)] == ["a.txt", "c.txt"]
    assert state.active_id == rows[2]["dataset_id"]


def test_clicking_other_cells_selects_the_row():
    state = ProjectState()
    controller = SelectionController(state)
    controller.file_dropped("a.txt", "1 2")
    controller.file_dropped("b.txt", "3 4")
    rows = dash_app._dataset_table_rows(state)

    status = dash_app._dispatch(
        controller,
        "dataset-cell",
        _values(table_rows=rows, active_cell={"row": 0, "column": 1, "column_id": "dataset"}),
    )
    assert status.message == "Selected a.txt"
    assert state.active_id == rows[0]["dataset_id"]

    stale = dash_app._dispatch(
        controller,
        "dataset-cell",
        _values(table_rows=rows, active_cell={"row": 7, "column": 4, "column_id": "delete"}),
    )
    assert stale is None
    assert len(state.datasets) == 2
