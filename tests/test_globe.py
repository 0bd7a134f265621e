# tests/test_globe.py
import pytest

from ufo_timeline.core.favorites import FavoriteRegistry
from ufo_timeline.core.globe import (
    ZOOM_EXTENT,
    Projection,
    RotationDriver,
    RotationMode,
    event_coordinates,
    favorite_arcs,
    globe_points,
    great_circle_arc,
    is_visible,
)


def test_visibility_is_near_hemisphere():
    rot = (0.0, 0.0, 0.0)
    assert is_visible(0, 0, rot)
    assert is_visible(45, 30, rot)
    assert not is_visible(180, 0, rot)
    assert not is_visible(90, 0, rot)  # exactly on the limb

    # centering on a point makes it visible and its antipode hidden
    rot = (-120.0, -35.0, 0.0)
    assert is_visible(120, 35, rot)
    assert not is_visible(-60, -35, rot)


def test_projection_hides_far_side():
    proj = Projection(rotation=(0.0, 0.0, 0.0), radius=100, center=(100, 100))
    assert proj.project(0, 0) == pytest.approx((100, 100))
    assert proj.project(180, 10) is None
    x, y = proj.project(0, 45)
    assert y < 100


def test_event_coordinates(make_event):
    assert event_coordinates(make_event(latitude="33.4", longitude="-104.5")) == (-104.5, 33.4)
    assert event_coordinates(make_event(latitude=None, longitude="1")) is None
    assert event_coordinates(make_event(latitude="nan", longitude="1")) is None
    assert event_coordinates(make_event(latitude="95", longitude="1")) is None


def test_globe_points_skip_missing_coordinates(make_event):
    a = make_event(latitude="10", longitude="10")
    b = make_event(latitude="", longitude="")
    c = make_event(latitude="-10", longitude="170")
    pts = globe_points([a, b, c], (0.0, 0.0, 0.0), selected_id=c.id)
    assert [p.event.id for p in pts] == [a.id, c.id]
    assert pts[0].visible and not pts[1].visible
    assert pts[1].selected


def test_auto_rotation_advances(clock):
    d = RotationDriver(clock)
    clock.advance(0.5)
    d.tick()
    assert d.rotation[0] == pytest.approx(2.0)
    assert d.mode is RotationMode.AUTO_ROTATING


def test_drag_pauses_then_resumes(clock):
    d = RotationDriver(clock)
    d.start_drag()
    d.drag(10, 4)
    assert d.rotation[0] == pytest.approx(5.0)
    assert d.rotation[1] == pytest.approx(-2.0)

    clock.advance(1)
    d.tick()
    assert d.mode is RotationMode.DRAGGING
    d.end_drag()
    assert d.mode is RotationMode.COOLDOWN

    clock.advance(2)
    before = list(d.rotation)
    d.tick()
    assert d.rotation == before
    clock.advance(1.1)
    d.tick()
    assert d.mode is RotationMode.AUTO_ROTATING


def test_drag_sensitivity_scales_with_zoom(clock):
    d = RotationDriver(clock, zoom=4.0)
    d.start_drag()
    d.drag(8, 0)
    assert d.rotation[0] == pytest.approx(1.0)


def test_center_on_tweens_then_holds_with_pulse(clock):
    d = RotationDriver(clock)
    d.center_on(100, 20)
    assert d.mode is RotationMode.TWEENING

    clock.advance(0.5)
    d.tick()
    assert d.rotation[0] == pytest.approx(-50.0)
    assert d.pulse() is None

    clock.advance(0.5)
    assert d.tick() == pytest.approx((-100.0, -20.0, 0.0))
    assert d.mode is RotationMode.HOLDING
    p = d.pulse()
    assert (p.radius, p.opacity) == pytest.approx((4.0, 1.0))

    clock.advance(1.0)
    p = d.pulse()
    assert (p.radius, p.opacity) == pytest.approx((10.0, 0.25))

    # holding does not auto-rotate
    d.tick()
    assert d.rotation[0] == pytest.approx(-100.0)

    clock.advance(1.0)
    assert d.pulse() is None

    d.release()
    assert d.mode is RotationMode.AUTO_ROTATING


def test_center_on_takes_shortest_path(clock):
    d = RotationDriver(clock, rotation=(710.0, 0.0, 0.0))
    d.center_on(0, 0)
    clock.advance(1.0)
    lam, phi, _ = d.tick()
    assert lam == pytest.approx(720.0)
    assert is_visible(0, 0, (lam, phi, 0.0))


def test_zoom_clamps(clock):
    d = RotationDriver(clock)
    for _ in range(50):
        d.wheel(-1)
    assert d.zoom == ZOOM_EXTENT[1]
    for _ in range(50):
        d.wheel(1)
    assert d.zoom == ZOOM_EXTENT[0]
    assert d.pinch(2.0, 1.5) == pytest.approx(3.0)
    d.reset()
    assert d.zoom == 1.0 and d.rotation == [0.0, 0.0, 0.0]


def test_great_circle_arc():
    pts = great_circle_arc((0.0, 0.0), (90.0, 0.0))
    assert len(pts) == 101
    assert pts[0] == pytest.approx((0.0, 0.0))
    assert pts[-1] == pytest.approx((90.0, 0.0))
    assert pts[50] == pytest.approx((45.0, 0.0))
    assert len(great_circle_arc((5.0, 5.0), (5.0, 5.0))) == 101


def test_favorite_arcs_follow_chronology(make_event):
    a = make_event(date="1990", latitude="0", longitude="0")
    b = make_event(date="1950", latitude="0", longitude="60")
    c = make_event(date="1970", latitude=None, longitude=None)
    d = make_event(date="2000", latitude="10", longitude="-30")
    reg = FavoriteRegistry()
    for e in (a, b, c, d):
        reg = reg.toggle(e.id, "orange")
    arcs = favorite_arcs([a, b, c, d], reg, ["orange", "red"])
    assert [(x.source_id, x.target_id) for x in arcs] == [(b.id, a.id), (a.id, d.id)]
    assert arcs[0].hex == "#FFA500"

    far = arcs[0].visible_points((180.0, 0.0, 0.0))
    assert all(p is None for p in far)
