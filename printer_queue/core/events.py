from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional
import logging

from .clock import format_sim_time
from .job import Job

logger = logging.getLogger(__name__)


class EventKind(Enum):
    CREATED = "created"
    QUEUED = "queued"
    STARTED = "started"
    COMPLETED = "completed"


@dataclass(frozen=True)
class SimulationEvent:
    kind: EventKind
    timestamp_ms: int
    job: Job
    printer_id: Optional[int] = None

    def describe(self) -> str:
        """Render the event as a console line, prefixed with the simulated time of day."""
        printer = f"Printer {self.printer_id}"
        if self.kind is EventKind.CREATED:
            message = f"created {self.job}"
        elif self.kind is EventKind.QUEUED:
            message = f"{printer} added job to the queue {self.job}"
        elif self.kind is EventKind.STARTED:
            message = f"{printer} started printing {self.job}"
        else:
            message = f"{printer} finished printing {self.job}"
        return f"{format_sim_time(self.timestamp_ms)} {message}"


EventSink = Callable[[SimulationEvent], None]


class EventLog:
    """Collects simulation events in emission order and writes each one to the log."""

    def __init__(self, log_events: bool = True):
        self.events: List[SimulationEvent] = []
        self.log_events = log_events

    def __call__(self, event: SimulationEvent) -> None:
        self.events.append(event)
        if self.log_events:
            logger.info(event.describe())

    def __len__(self):
        return len(self.events)

    def of_kind(self, kind: EventKind) -> List[SimulationEvent]:
        return [event for event in self.events if event.kind is kind]

    def for_printer(self, printer_id: int) -> List[SimulationEvent]:
        return [event for event in self.events if event.printer_id == printer_id]
