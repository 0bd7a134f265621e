# tests/test_figures.py
from datetime import date

from ufo_timeline.core.donut import DonutChart
from ufo_timeline.core.favorites import FavoriteRegistry
from ufo_timeline.core.globe import RotationDriver, favorite_arcs, globe_points
from ufo_timeline.core.timeline import TimeScale, axis_ticks, layout_timeline, timeline_connections
from ufo_timeline.models.taxonomy import CATEGORIES
from ufo_timeline.views.details import deep_dive_tabs, detail_rows, location_text, search_stats
from ufo_timeline.views.donut_fig import build_donut_figure
from ufo_timeline.views.globe_fig import build_globe_figure
from ufo_timeline.views.timeline_fig import build_timeline_figure


def test_timeline_figure_puts_selected_last(make_event):
    a = make_event(title="A", category="Tech", date="1960", city="Reno")
    b = make_event(title="B", category="Tech", date="1970")
    reg = FavoriteRegistry().toggle(a.id, "red").toggle(b.id, "red")
    scale = TimeScale.from_dates(date(1940, 1, 1), date(2027, 12, 31), 950)
    layout = layout_timeline([a, b], CATEGORIES, scale, selected_id=a.id, favorites=reg)

    fig = build_timeline_figure(layout, scale, axis_ticks(scale), timeline_connections(layout, reg, ["red"]))
    assert fig.data[0].line.dash == "dash"
    assert list(fig.data[-1].customdata) == [a.id]
    assert list(fig.data[-1].text) == ["A"]
    assert fig.layout.xaxis.range == (scale.start, scale.end)


def test_globe_figure_drops_far_side(make_event, clock):
    near = make_event(category="Beings", latitude="10", longitude="10")
    far = make_event(category="Beings", latitude="0", longitude="170")
    driver = RotationDriver(clock)
    reg = FavoriteRegistry().toggle(near.id, "yellow").toggle(far.id, "yellow")
    pts = globe_points([near, far], driver.projection_rotation)
    fig = build_globe_figure(pts, driver.projection_rotation, 2.0, favorite_arcs([near, far], reg, ["yellow"]))

    markers = [t for t in fig.data if t.mode == "markers"]
    assert [list(t.customdata) for t in markers] == [[near.id]]
    assert fig.layout.geo.projection.type == "orthographic"
    assert fig.layout.geo.projection.scale == 2.0


def test_donut_figure(make_event, clock):
    chart = DonutChart(clock)
    chart.update([make_event(category="Tech"), make_event(category="Beings")], {"Tech", "Beings", "Sighting"})
    frames, total = chart.settle()
    fig = build_donut_figure(frames, total)
    assert list(fig.data[0].labels) == ["Tech", "Beings"]
    assert fig.data[0].hole == 0.6
    assert "<b>2</b>" in fig.layout.annotations[0].text

    empty = build_donut_figure([], 0)
    assert list(empty.data[0].labels) == ["No events"]


def test_detail_rows_default_to_unknown(make_event):
    e = make_event(city="Phoenix", state="Arizona", country="USA", craft_type="V-Shaped")
    rows = dict(detail_rows(e))
    assert rows["Location"] == "Phoenix, Arizona, USA"
    assert rows["Craft Type"] == "V-Shaped"
    assert rows["Radar"] == "Unknown"
    assert location_text(make_event()) == "Unknown"


def test_deep_dive_tabs(make_event):
    e = make_event(deep_dive_content={
        "Videos": [{"type": "video", "content": {"video": [{"video_link": "https://v"}]}}],
        "Images": [],
    })
    assert deep_dive_tabs(e) == ["Videos"]
    assert deep_dive_tabs(make_event()) == []
    assert deep_dive_tabs(make_event(deep_dive_content={"Images": [{"type": "bogus"}]})) == []


def test_search_stats(make_event):
    assert search_stats([make_event()], 21) == "Showing 1 of 21 events"
