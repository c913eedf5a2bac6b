import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable, Iterator, Optional


def format_elapsed(ms: int) -> str:
    """Render milliseconds as MM:SS."""
    total_seconds = max(0, int(ms)) // 1000
    return f"{total_seconds // 60:02d}:{total_seconds % 60:02d}"


@dataclass
class ClockHandle:
    started_at: float
    stopped_at: Optional[float] = None

    @property
    def running(self) -> bool:
        return self.stopped_at is None


@dataclass(frozen=True)
class Tick:
    index: int
    elapsed_ms: int

    @property
    def display(self) -> str:
        return format_elapsed(self.elapsed_ms)


class GameClock:
    """Round timer backed by a monotonic time source.

    Elapsed time is always derived from the handle's single start timestamp,
    so tick pacing never accumulates drift.
    """

    def __init__(self, now: Callable[[], float] = time.monotonic):
        self._now = now

    def start(self) -> ClockHandle:
        return ClockHandle(started_at=self._now())

    def stop(self, handle: ClockHandle) -> None:
        if handle.running:
            handle.stopped_at = self._now()

    def elapsed_ms(self, handle: ClockHandle) -> int:
        end = handle.stopped_at if handle.stopped_at is not None else self._now()
        return int(round((end - handle.started_at) * 1000))

    def elapsed(self, handle: ClockHandle) -> timedelta:
        return timedelta(milliseconds=self.elapsed_ms(handle))

    def ticks(self, handle: ClockHandle) -> Iterator[Tick]:
        """Yield one tick per ``next()`` for as long as the handle runs.

        The generator does not sleep; whoever consumes it sets the pace.
        """
        index = 0
        while handle.running:
            index += 1
            yield Tick(index=index, elapsed_ms=self.elapsed_ms(handle))
