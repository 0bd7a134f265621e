# ufo_timeline/views/donut_fig.py
import math
from typing import Sequence

import plotly.graph_objects as go

from ufo_timeline.core.donut import INNER_RATIO, ArcFrame


def _rgba(hex_color: str, alpha: float) -> str:
    h = hex_color.lstrip("#")
    r, g, b = (int(h[i:i + 2], 16) for i in (0, 2, 4))
    return f"rgba({r},{g},{b},{alpha:.3f})"


def build_donut_figure(frames: Sequence[ArcFrame], total: int, size: int = 300) -> go.Figure:
    """Ring chart from arc frames; slice values are the arcs' angular extents."""
    shown = [f for f in frames if f.extent > 0 and f.opacity > 0]
    if shown:
        labels = [f.category for f in shown]
        values = [f.extent / (2 * math.pi) for f in shown]
        colors = [_rgba(f.color, f.opacity) for f in shown]
    else:
        labels, values, colors = ["No events"], [1], ["rgba(80,80,80,0.4)"]

    fig = go.Figure(go.Pie(
        labels=labels,
        values=values,
        hole=INNER_RATIO,
        sort=False,
        direction="clockwise",
        rotation=0,
        textinfo="none",
        hovertemplate="%{label}<extra></extra>",
        marker=dict(colors=colors, line=dict(color="#05070f", width=1)),
    ))
    fig.update_layout(
        height=size,
        width=size,
        margin=dict(l=10, r=10, t=10, b=10),
        paper_bgcolor="#05070f",
        showlegend=False,
        annotations=[dict(text=f"<b>{total}</b><br>events", x=0.5, y=0.5, showarrow=False,
                          font=dict(size=20, color="#d8e1ff"))],
    )
    return fig
