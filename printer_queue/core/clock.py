from .config import (
    MILLISECONDS_PER_SECOND,
    SECONDS_PER_MINUTE,
    MINUTES_PER_HOUR,
    MILLISECONDS_PER_DAY,
)
from .errors import InvariantViolationError

MICROSECONDS_PER_MILLISECOND = 1000


def format_sim_time(timestamp_ms: int) -> str:
    """Format a simulated timestamp as HH:MM:SS of its time of day."""
    today_time = timestamp_ms % MILLISECONDS_PER_DAY
    hours, today_time = divmod(today_time, MILLISECONDS_PER_SECOND * SECONDS_PER_MINUTE * MINUTES_PER_HOUR)
    minutes, today_time = divmod(today_time, MILLISECONDS_PER_SECOND * SECONDS_PER_MINUTE)
    seconds = today_time // MILLISECONDS_PER_SECOND
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


class SimulationClock:
    """Virtual clock driven by scaled real elapsed time.

    Simulated time is held in integer microseconds so repeated scaling of
    small real-time deltas never drifts. Updates are gated to one per
    simulated second on a fixed grid anchored at the start time.
    """

    def __init__(self, speed: int, start_time_ms: int = 0):
        self.speed = speed
        self.start_time_ms = start_time_ms
        self.simulated_time_us = start_time_ms * MICROSECONDS_PER_MILLISECOND
        self.last_update_ms = start_time_ms

    @property
    def now_ms(self) -> int:
        return self.simulated_time_us // MICROSECONDS_PER_MILLISECOND

    @property
    def elapsed_ms(self) -> int:
        return self.now_ms - self.start_time_ms

    def advance(self, real_elapsed_us: int) -> int:
        """Add ``real_elapsed_us`` scaled by the speed factor; returns the new time in ms."""
        if real_elapsed_us < 0:
            raise InvariantViolationError(f"Real elapsed time must not be negative, got {real_elapsed_us}us")
        self.simulated_time_us += real_elapsed_us * self.speed
        return self.now_ms

    def should_tick(self) -> bool:
        """Check if 1 simulated second has passed since the last update."""
        if self.now_ms - self.last_update_ms >= MILLISECONDS_PER_SECOND:
            self.last_update_ms += MILLISECONDS_PER_SECOND
            return True
        return False

    def time_of_day(self) -> str:
        return format_sim_time(self.now_ms)
