"""Plotly 图表工厂"""
from pathlib import Path

import pandas as pd
import plotly.graph_objects as go

from config.constants import EventKind
from config.settings import COLORS


def _get_x_labels(schedule: pd.DataFrame) -> list:
    """横轴标签，格式为「第N期 YYYY-MM-DD」，提前还款行加标记"""
    labels = []
    for _, row in schedule.iterrows():
        label = f"第{int(row['period'])}期 {row['date']}"
        if row["kind"] == EventKind.EXTRA.value:
            label += " (提前)"
        labels.append(label)
    return labels


def create_principal_interest_area(schedule: pd.DataFrame, title: str = "每期本金/利息构成") -> go.Figure:
    """本金/利息面积图"""
    fig = go.Figure()
    x_labels = _get_x_labels(schedule)

    fig.add_trace(go.Scatter(
        x=x_labels,
        y=schedule["principal"],
        mode="lines",
        name="本金",
        fill="tozeroy",
        line=dict(color=COLORS["principal"]),
        hovertemplate="%{x}<br>本金: %{y:,.2f}<extra></extra>",
    ))

    fig.add_trace(go.Scatter(
        x=x_labels,
        y=schedule["interest"],
        mode="lines",
        name="利息",
        fill="tozeroy",
        line=dict(color=COLORS["interest"]),
        hovertemplate="%{x}<br>利息: %{y:,.2f}<extra></extra>",
    ))

    extra = schedule[schedule["kind"] == EventKind.EXTRA.value]
    if not extra.empty:
        extra_labels = [x_labels[i] for i, kind in enumerate(schedule["kind"]) if kind == EventKind.EXTRA.value]
        fig.add_trace(go.Scatter(
            x=extra_labels,
            y=extra["payment"],
            mode="markers",
            name="提前还款",
            marker=dict(color=COLORS["extra"], size=12, symbol="star"),
        ))

    fig.update_layout(
        title=title,
        xaxis_title="期数",
        yaxis_title="金额",
        hovermode="x unified",
        margin=dict(t=60, b=60, l=60, r=20),
        height=400,
        xaxis=dict(
            tickmode="auto",
            nticks=15,
            tickangle=45,
        ),
    )
    return fig


def save_chart_html(fig: go.Figure, path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.write_html(str(path), include_plotlyjs="cdn")
    return path
