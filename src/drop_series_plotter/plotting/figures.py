import io

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import plotly.graph_objects as go  # noqa: E402

from drop_series_plotter.core.plotting import SeriesPlotData  # noqa: E402

LINE_WIDTH = 1.5
MARKER_SIZE = 4
PNG_DPI = 200
GRID_COLOR = "#e0e0e0"


def build_series_figure(data: SeriesPlotData) -> go.Figure:
    """Line-with-markers chart on a linear X axis, one trace per dataset."""
    fig = go.Figure()
    for tr in data.traces:
        fig.add_trace(
            go.Scatter(
                x=tr.x,
                y=tr.y,
                mode="lines+markers",
                name=tr.label,
                line=dict(color=tr.color, width=LINE_WIDTH * (2 if tr.is_active else 1)),
                marker=dict(color=tr.color, size=MARKER_SIZE),
            )
        )
    axis = dict(
        type="linear",
        showline=True,
        linecolor="#000000",
        ticks="outside",
        gridcolor=GRID_COLOR,
        zeroline=False,
    )
    fig.update_layout(
        title=dict(text=data.title, font=dict(size=16)),
        xaxis=dict(title=dict(text=data.x_label), **axis),
        yaxis=dict(title=dict(text=data.y_label), **axis),
        paper_bgcolor="white",
        plot_bgcolor="white",
        hovermode="closest",
        showlegend=True,
        margin=dict(l=60, r=20, t=60, b=50),
    )
    return fig


def render_series_png(data: SeriesPlotData, dpi: int = PNG_DPI) -> bytes:
    """Render the chart with matplotlib and return PNG bytes."""
    fig, ax = plt.subplots(figsize=(8, 5))
    try:
        for tr in data.traces:
            ax.plot(
                tr.x,
                tr.y,
                color=tr.color,
                linewidth=LINE_WIDTH,
                marker="o",
                markersize=MARKER_SIZE / 2,
                label=tr.label,
            )
        ax.set_title(data.title, fontsize=16, fontweight="bold")
        ax.set_xlabel(data.x_label, fontsize=14, fontweight="bold")
        ax.set_ylabel(data.y_label, fontsize=14, fontweight="bold")
        ax.grid(True, color=GRID_COLOR)
        if data.traces:
            ax.legend()
        fig.patch.set_facecolor("white")
        buf = io.BytesIO()
        fig.savefig(buf, format="png", dpi=dpi, bbox_inches="tight", facecolor="white")
        return buf.getvalue()
    finally:
        plt.close(fig)
