import pytest

from printer_queue.core.clock import SimulationClock
from printer_queue.core.events import EventLog
from printer_queue.core.printer import Printer


class FixedRng:
    """Stand-in for random.Random that always lands on the same page count."""

    def __init__(self, pages: int, roll: int = 0):
        self.pages = pages
        self.roll = roll

    def randrange(self, stop):
        return self.roll

    def randint(self, a, b):
        assert a <= self.pages <= b, f"{self.pages} pages is outside of the {a}-{b} band"
        return self.pages


class FakeTimeSource:
    """Monotonic nanosecond clock that moves forward a fixed step on every read."""

    def __init__(self, step_ns: int = 1_000_000):
        self.now_ns = 0
        self.step_ns = step_ns

    def __call__(self):
        self.now_ns += self.step_ns
        return self.now_ns


@pytest.fixture
def clock():
    return SimulationClock(speed=300, start_time_ms=0)


@pytest.fixture
def event_log():
    return EventLog(log_events=False)


@pytest.fixture
def printer(clock, event_log):
    return Printer(0, clock, event_log)


@pytest.fixture
def fake_time():
    return FakeTimeSource()


def advance_ms(clock: SimulationClock, ms: int):
    """Move a clock forward by a number of simulated milliseconds."""
    clock.simulated_time_us += ms * 1000
