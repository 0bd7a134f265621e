# ufo_timeline/core/easing.py


def ease_cubic_in_out(t: float) -> float:
    t *= 2
    if t <= 1:
        return t * t * t / 2
    t -= 2
    return (t * t * t + 2) / 2


def ease_quad_out(t: float) -> float:
    return t * (2 - t)


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t
