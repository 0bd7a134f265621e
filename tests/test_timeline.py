# tests/test_timeline.py
from datetime import date

import pytest

from ufo_timeline.core.favorites import FavoriteRegistry
from ufo_timeline.core.timeline import (
    DEFAULT_WIDTH,
    SCALE_EXTENT,
    TimeScale,
    TimelineViewport,
    axis_ticks,
    category_rows,
    layout_timeline,
    tick_months,
    timeline_connections,
)
from ufo_timeline.models.taxonomy import CATEGORIES, category_color

DOMAIN = (date(1940, 1, 1), date(2027, 12, 31))


@pytest.fixture
def viewport(clock):
    return TimelineViewport(DEFAULT_WIDTH, DOMAIN, clock)


@pytest.mark.parametrize("ppy,months", [(200, 3), (151, 3), (150, 12), (60, 12), (30, 24), (25, 120), (5, 120)])
def test_tick_months(ppy, months):
    assert tick_months(ppy) == months


def test_scale_maps_domain_to_width():
    s = TimeScale.from_dates(*DOMAIN, 950)
    assert s.x(date(1940, 1, 1)) == pytest.approx(0)
    assert s.x(date(2027, 12, 31)) == pytest.approx(950)
    assert s.invert(s.x(1970.0)) == pytest.approx(1970.0)


def test_decade_zoom_animates_then_fills_width(viewport, clock, make_event):
    viewport.zoom_to_decade(1980)
    assert viewport.animating
    clock.advance(0.4)
    assert viewport.animating
    clock.advance(0.4)
    assert not viewport.animating

    start, end = viewport.visible_range()
    assert start == pytest.approx(1980.0)
    assert end == pytest.approx(1990.0)

    tehran = make_event(title="Tehran", category="Military Contact", date="September 19, 1976")
    jal = make_event(title="JAL 1628", category="Sighting", date="November 17, 1986")
    layout = layout_timeline([tehran, jal], CATEGORIES, viewport.scale())
    assert [m.event.title for m in layout.marks] == ["JAL 1628"]


def test_decade_ticks_are_yearly(viewport):
    viewport.zoom_to_decade(1980)
    viewport.settle()
    ticks = viewport.ticks()
    labels = [t.label for t in ticks]
    assert "1985" in labels
    assert not any(t.label == "Jun" for t in ticks)
    assert next(t for t in ticks if t.label == "1980").decade == 1980


def test_default_ticks_are_decades(viewport):
    ticks = viewport.ticks()
    assert all(int(t.label) % 10 == 0 for t in ticks)
    assert [t.decade for t in ticks if t.bold][:2] == [1940, 1950]


def test_fine_zoom_has_quarter_ticks():
    s = TimeScale(1980.0, 1982.0, 950)
    labels = [t.label for t in axis_ticks(s)]
    assert labels[:4] == ["1980", "Apr", "Jul", "Oct"]


def test_wheel_zoom_is_clamped(viewport, clock):
    for _ in range(100):
        viewport.wheel(-1)
        clock.advance(0.3)
    assert viewport.transform.k == pytest.approx(SCALE_EXTENT[1])
    for _ in range(100):
        viewport.wheel(1)
        clock.advance(0.3)
    assert viewport.transform.k == pytest.approx(SCALE_EXTENT[0])


def test_pan_and_reset(viewport):
    start, _ = viewport.visible_range()
    viewport.pan(-95)
    assert viewport.visible_range()[0] > start
    viewport.reset()
    assert viewport.visible_range()[0] == pytest.approx(start)


def test_rows_follow_category_order():
    rows = category_rows(["Community", "Tech", "Unknown"], 360)
    assert [r.category for r in rows] == ["Tech", "Community"]
    assert rows[0].y < rows[1].y
    assert category_rows([], 360) == []


def test_layout_stagger_undated_and_selected_last(make_event):
    s = TimeScale.from_dates(*DOMAIN, 950)
    evs = [make_event(category="Sighting", date=f"June 1, {1950 + i}") for i in range(4)]
    undated = make_event(category="Sighting", date="sometime")
    hidden = make_event(category="Beings", date="1960")
    layout = layout_timeline(evs + [undated, hidden], ["Sighting"], s, selected_id=evs[1].id)

    assert layout.undated == [undated]
    assert layout.marks[-1].event.id == evs[1].id
    assert layout.marks[-1].selected
    ys = {m.event.id: m.y for m in layout.marks}
    row_y = layout.rows[0].y
    assert [ys[e.id] - row_y for e in evs] == pytest.approx([-8, 0, 8, -8])
    assert all(m.color == category_color("Sighting") for m in layout.marks)


def test_connections_between_favorites(make_event):
    s = TimeScale.from_dates(*DOMAIN, 950)
    a = make_event(category="Tech", date="1960")
    b = make_event(category="Beings", date="1950")
    c = make_event(category="Tech", date="1970")
    reg = FavoriteRegistry().toggle(a.id, "red").toggle(b.id, "red").toggle(c.id, "yellow")
    layout = layout_timeline([a, b, c], CATEGORIES, s, favorites=reg)
    assert layout.mark_for(a.id).favorite == "red"

    paths = timeline_connections(layout, reg, ["red", "yellow"])
    assert len(paths) == 1
    color, pts = paths[0]
    assert color == "red"
    assert pts[0][0] < pts[1][0]


def test_pan_stops_at_translate_extent(viewport, clock):
    span = viewport.base.end - viewport.base.start
    for _ in range(3):
        viewport.wheel(1)
        clock.advance(0.3)
    for _ in range(500):
        viewport.pan(viewport.inner_width / 5)
    start, _ = viewport.visible_range()
    assert start == pytest.approx(viewport.base.start - span)
    assert viewport.ticks()

    for _ in range(1000):
        viewport.pan(-viewport.inner_width / 5)
    _, end = viewport.visible_range()
    assert end == pytest.approx(viewport.base.end + span)
    assert viewport.ticks()


def test_wheel_target_is_constrained(viewport, clock):
    for _ in range(40):
        viewport.pan(viewport.inner_width / 5)
    for _ in range(20):
        viewport.wheel(1)
        clock.advance(0.3)
    start, end = viewport.visible_range()
    span = viewport.base.end - viewport.base.start
    assert start >= viewport.base.start - span - 1e-6
    assert end <= viewport.base.end + span + 1e-6
