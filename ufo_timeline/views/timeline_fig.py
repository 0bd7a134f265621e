# ufo_timeline/views/timeline_fig.py
from typing import Dict, List, Optional, Sequence, Tuple

import plotly.graph_objects as go

from ufo_timeline.core.dates import decimal_year, parse_event_date
from ufo_timeline.core.keys import event_key
from ufo_timeline.core.timeline import (
    DECADE_ZOOM_DURATION,
    EVENT_BOX,
    HEIGHT,
    MARGIN,
    Tick,
    TimelineLayout,
    TimelineMark,
    TimeScale,
)
from ufo_timeline.models.taxonomy import FAVORITE_COLORS


def _hover(m: TimelineMark) -> str:
    e = m.event
    where = ", ".join(p for p in (e.city, e.state, e.country) if p)
    return f"<b>{e.title}</b><br>{e.date}{'<br>' + where if where else ''}"


def build_timeline_figure(
    layout: TimelineLayout,
    scale: TimeScale,
    ticks: Sequence[Tick],
    connections: Sequence[Tuple[str, List[Tuple[float, float]]]] = (),
    height: int = HEIGHT,
) -> go.Figure:
    """Category rows, one marker per event, the selected one drawn as a labelled box.

    x is in decimal years so the axis range equals the zoomed domain; every
    point carries its event id in ``customdata`` for click selection.
    """
    fig = go.Figure()

    for color, pts in connections:
        fig.add_trace(go.Scatter(
            x=[scale.invert(px) for px, _ in pts],
            y=[py for _, py in pts],
            mode="lines",
            line=dict(color=FAVORITE_COLORS[color], width=2, dash="dash"),
            hoverinfo="skip",
            showlegend=False,
        ))

    by_color: Dict[str, List[TimelineMark]] = {}
    selected: Optional[TimelineMark] = None
    for m in layout.marks:
        if m.selected:
            selected = m
            continue
        by_color.setdefault(m.color, []).append(m)

    for color, marks in by_color.items():
        fig.add_trace(go.Scatter(
            x=[decimal_year(parse_event_date(m.event.date).value) for m in marks],
            y=[m.y for m in marks],
            mode="markers",
            customdata=[event_key(m.event) for m in marks],
            hovertext=[_hover(m) for m in marks],
            hoverinfo="text",
            marker=dict(
                size=10,
                color=color,
                line=dict(
                    color=[FAVORITE_COLORS.get(m.favorite, color) for m in marks],
                    width=[3 if m.favorite else 0.5 for m in marks],
                ),
            ),
            showlegend=False,
        ))

    if selected is not None:
        fig.add_trace(go.Scatter(
            x=[decimal_year(parse_event_date(selected.event.date).value)],
            y=[selected.y],
            mode="markers+text",
            customdata=[event_key(selected.event)],
            text=[selected.event.title],
            textposition="top center",
            hovertext=[_hover(selected)],
            hoverinfo="text",
            marker=dict(
                symbol="square",
                size=EVENT_BOX[1],
                color=selected.color,
                line=dict(color=FAVORITE_COLORS.get(selected.favorite, "#FFFFFF"), width=3),
            ),
            showlegend=False,
        ))

    fig.update_layout(
        height=height,
        margin=dict(l=MARGIN["left"], r=MARGIN["right"], t=MARGIN["top"], b=MARGIN["bottom"]),
        plot_bgcolor="#05070f",
        paper_bgcolor="#05070f",
        font=dict(color="#d8e1ff"),
        dragmode="pan",
        clickmode="event+select",
        transition=dict(duration=int(DECADE_ZOOM_DURATION * 1000), easing="cubic-in-out"),
    )
    fig.update_xaxes(
        range=[scale.start, scale.end],
        tickvals=[decimal_year(t.value) for t in ticks],
        ticktext=[f"<b>{t.label}</b>" if t.bold else t.label for t in ticks],
        showgrid=True,
        gridcolor="#1b2240",
        zeroline=False,
    )
    fig.update_yaxes(
        tickvals=[r.y for r in layout.rows],
        ticktext=[r.category for r in layout.rows],
        range=[height - MARGIN["top"] - MARGIN["bottom"], 0],
        showgrid=False,
        zeroline=False,
        fixedrange=True,
    )
    return fig
