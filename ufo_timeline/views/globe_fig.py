# ufo_timeline/views/globe_fig.py
from typing import Dict, List, Optional, Sequence

import plotly.graph_objects as go

from ufo_timeline.core.globe import Arc, GlobePoint, Pulse
from ufo_timeline.core.keys import event_key
from ufo_timeline.models.taxonomy import category_color


def _wrap(lon: float) -> float:
    return (lon + 180.0) % 360.0 - 180.0


def build_globe_figure(
    points: Sequence[GlobePoint],
    rotation: Sequence[float],
    zoom: float = 1.0,
    arcs: Sequence[Arc] = (),
    pulse: Optional[Pulse] = None,
    size: int = 420,
) -> go.Figure:
    """Orthographic globe with near-side points, favorite arcs and the selection pulse."""
    fig = go.Figure()

    for arc in arcs:
        pts = arc.visible_points(rotation)
        fig.add_trace(go.Scattergeo(
            lon=[p[0] if p else None for p in pts],
            lat=[p[1] if p else None for p in pts],
            mode="lines",
            line=dict(color=arc.hex, width=2),
            hoverinfo="skip",
            showlegend=False,
        ))

    by_cat: Dict[str, List[GlobePoint]] = {}
    for p in points:
        if p.visible and not p.selected:
            by_cat.setdefault(p.event.category, []).append(p)
    for cat, pts in by_cat.items():
        fig.add_trace(go.Scattergeo(
            lon=[p.lon for p in pts],
            lat=[p.lat for p in pts],
            customdata=[event_key(p.event) for p in pts],
            hovertext=[f"<b>{p.event.title}</b><br>{p.event.date}" for p in pts],
            hoverinfo="text",
            mode="markers",
            marker=dict(size=7, color=category_color(cat), line=dict(width=0.5, color="#FFFFFF")),
            name=cat,
            showlegend=False,
        ))

    for p in points:
        if p.selected and p.visible:
            fig.add_trace(go.Scattergeo(
                lon=[p.lon], lat=[p.lat],
                customdata=[event_key(p.event)],
                hovertext=[f"<b>{p.event.title}</b>"],
                hoverinfo="text",
                mode="markers",
                marker=dict(size=12, color=category_color(p.event.category), line=dict(width=2, color="#FFFFFF")),
                showlegend=False,
            ))

    if pulse is not None:
        fig.add_trace(go.Scattergeo(
            lon=[pulse.lon], lat=[pulse.lat],
            mode="markers",
            marker=dict(size=pulse.radius * 2, color="rgba(0,0,0,0)", line=dict(width=2, color="#FFFFFF")),
            opacity=pulse.opacity,
            hoverinfo="skip",
            showlegend=False,
        ))

    fig.update_layout(
        height=size,
        margin=dict(l=0, r=0, t=0, b=0),
        paper_bgcolor="#05070f",
        geo=dict(
            projection_type="orthographic",
            projection_rotation=dict(lon=_wrap(-rotation[0]), lat=-rotation[1], roll=rotation[2]),
            projection_scale=zoom,
            showland=True, landcolor="#1c2a4a",
            showocean=True, oceancolor="#070b1a",
            showcountries=True, countrycolor="#3a4f80",
            coastlinecolor="#5c77b8",
            bgcolor="#05070f",
            showframe=False,
        ),
    )
    return fig
