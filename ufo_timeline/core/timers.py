# ufo_timeline/core/timers.py
"""Clock-driven debounce and long-press detection.

Nothing here spawns threads. Callers poll on their own loop (a Streamlit
rerun, a test) and the injected clock decides what is due.
"""
from __future__ import annotations

import time
from typing import Any, Callable, Optional

Clock = Callable[[], float]

SEARCH_DEBOUNCE = 0.3
LONG_PRESS = 0.5


class Debouncer:
    def __init__(
        self,
        wait: float = SEARCH_DEBOUNCE,
        clock: Clock = time.monotonic,
        on_commit: Optional[Callable[[Any], None]] = None,
    ):
        self.wait = wait
        self.clock = clock
        self.on_commit = on_commit
        self._value: Any = None
        self._deadline: Optional[float] = None

    @property
    def pending(self) -> bool:
        return self._deadline is not None

    def remaining(self) -> float:
        if self._deadline is None:
            return 0.0
        return max(0.0, self._deadline - self.clock())

    def submit(self, value: Any) -> None:
        """Replace the pending value and restart the window."""
        self._value = value
        self._deadline = self.clock() + self.wait

    def poll(self) -> bool:
        """Commit the pending value if its window has elapsed."""
        if self._deadline is None or self.clock() < self._deadline:
            return False
        self._commit()
        return True

    def flush(self) -> bool:
        if self._deadline is None:
            return False
        self._commit()
        return True

    def cancel(self) -> None:
        self._value = None
        self._deadline = None

    def _commit(self) -> None:
        value = self._value
        self.cancel()
        if self.on_commit is not None:
            self.on_commit(value)


class LongPress:
    """Tells a click from a hold on the same target.

    The timer is always cleared on release, so a long press can never fire
    after the pointer has come up.
    """

    def __init__(
        self,
        threshold: float = LONG_PRESS,
        clock: Clock = time.monotonic,
        on_long_press: Optional[Callable[[Any], None]] = None,
    ):
        self.threshold = threshold
        self.clock = clock
        self.on_long_press = on_long_press
        self._target: Any = None
        self._started: Optional[float] = None
        self._fired = False

    @property
    def active(self) -> bool:
        return self._started is not None

    def press(self, target: Any) -> None:
        self._target = target
        self._started = self.clock()
        self._fired = False

    def poll(self) -> Optional[Any]:
        if self._started is None or self._fired:
            return None
        if self.clock() - self._started < self.threshold:
            return None
        self._fired = True
        if self.on_long_press is not None:
            self.on_long_press(self._target)
        return self._target

    def release(self) -> Optional[str]:
        """``"click"`` for a short press; ``None`` when the hold became a long press."""
        if self._started is None:
            return None
        self.poll()
        fired = self._fired
        self.cancel()
        return None if fired else "click"

    def cancel(self) -> None:
        self._target = None
        self._started = None
        self._fired = False


class SearchBox:
    """Raw search text plus focus state; commits terms through a debouncer."""

    def __init__(
        self,
        on_commit: Callable[[str], None],
        wait: float = SEARCH_DEBOUNCE,
        clock: Clock = time.monotonic,
    ):
        self.text = ""
        self.focused = False
        self._on_commit = on_commit
        self._debouncer = Debouncer(wait, clock, on_commit)

    @property
    def pending(self) -> bool:
        return self._debouncer.pending

    def remaining(self) -> float:
        return self._debouncer.remaining()

    def type(self, text: str) -> None:
        self.text = text
        self.focused = True
        self._debouncer.submit(text)

    def poll(self) -> bool:
        return self._debouncer.poll()

    def flush(self) -> bool:
        return self._debouncer.flush()

    def blur(self) -> None:
        self.focused = False

    def clear(self) -> None:
        self.text = ""
        self._debouncer.cancel()
        self._on_commit("")
