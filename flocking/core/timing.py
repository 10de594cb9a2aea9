import time
from dataclasses import dataclass, field
from typing import Callable


@dataclass
class FixedStep:
    """
    Paces flock ticks against a wall clock.

    Real time accumulates between calls to `due_ticks`; every full `dt` in
    the accumulator is one tick to run. A stalled frame contributes at most
    `max_frame_time`, and anything beyond `max_ticks_per_frame` is dropped
    so a slow host falls behind instead of snowballing.
    """

    target_fps: int
    max_frame_time: float = 0.25
    max_ticks_per_frame: int = 6
    clock: Callable[[], float] = field(default=time.perf_counter, repr=False)

    _last_time: float = field(default=0.0, init=False, repr=False)
    _backlog: float = field(default=0.0, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.target_fps <= 0:
            raise ValueError(f"target_fps must be positive, got {self.target_fps}")

    @property
    def dt(self) -> float:
        return 1.0 / self.target_fps

    def start(self) -> None:
        self._last_time = self.clock()
        self._backlog = 0.0

    def due_ticks(self) -> int:
        """Number of ticks owed since the previous call."""
        now = self.clock()
        elapsed = min(now - self._last_time, self.max_frame_time)
        self._last_time = now

        self._backlog += elapsed
        ticks = min(int(self._backlog // self.dt), self.max_ticks_per_frame)
        self._backlog -= ticks * self.dt

        if ticks == self.max_ticks_per_frame:
            self._backlog = 0.0
        return ticks

    def until_next_tick(self) -> float:
        """Seconds of wall time before another tick is due."""
        return max(0.0, self.dt - self._backlog)
