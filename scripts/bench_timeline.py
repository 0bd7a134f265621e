# scripts/bench_timeline.py
"""Per-frame cost of the views: timeline layout and globe visibility culling."""
import itertools
import time

from ufo_timeline.client import load_bundled_events
from ufo_timeline.core.filters import FilterState, visible_events
from ufo_timeline.core.globe import RotationDriver, globe_points
from ufo_timeline.core.timeline import TimelineViewport, layout_timeline

if __name__ == "__main__":
    evs = load_bundled_events() * 50  # a few thousand marks
    filters = FilterState()
    viewport = TimelineViewport()

    t0 = time.perf_counter()
    vis = visible_events(evs, filters)
    layout = layout_timeline(vis, filters.categories, viewport.scale())
    dt_ms = (time.perf_counter() - t0) * 1000.0
    print(f"filter+layout: {len(evs)} events -> {len(layout.marks)} marks in {dt_ms:.1f} ms")

    driver = RotationDriver(clock=itertools.count(0.0, 0.05).__next__)
    t0 = time.perf_counter()
    frames = 60
    for _ in range(frames):
        driver.tick()
        globe_points(vis, driver.projection_rotation)
    dt_ms = (time.perf_counter() - t0) * 1000.0 / frames
    print(f"globe culling: {len(vis)} points -> {dt_ms:.2f} ms/frame")
