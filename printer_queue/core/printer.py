from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Optional, Tuple
import logging

from .clock import SimulationClock
from .config import MILLISECONDS_PER_SHEET
from .errors import InvariantViolationError
from .events import EventKind, EventSink, SimulationEvent
from .job import Job

logger = logging.getLogger(__name__)

# Page counters are bounded the way a 32-bit counter would be
MAX_PAGE_COUNTER = 2**31 - 1


@dataclass(frozen=True)
class QueuedJobView:
    job: Job
    remaining_pages: int

    def __str__(self):
        if self.remaining_pages != self.job.pages:
            return f"Job {self.job.job_id} ({self.job.pages} Pages, {self.remaining_pages} Remaining)"
        return str(self.job)


@dataclass(frozen=True)
class PrinterSnapshot:
    """Read-only view of a printer's queue at one point in simulated time."""
    printer_id: int
    total_pages_left: int
    is_printing: bool
    jobs: Tuple[QueuedJobView, ...]

    @property
    def name(self) -> str:
        return f"Printer {self.printer_id}"

    def describe_jobs(self) -> str:
        if not self.jobs:
            return "No jobs remaining."
        return ", ".join(str(view) for view in self.jobs)


class Printer:
    """A printer with its own FIFO queue, printing the head job at a fixed sheet rate.

    Progress on the head job is derived from the simulated time since it
    started, so ``update`` can be called any number of times per tick.
    ``total_pages`` counts every queued job in full; the head job's pages are
    only deducted once it completes.
    """

    def __init__(self, printer_id: int, clock: SimulationClock, emit: EventSink,
                 milliseconds_per_sheet: int = MILLISECONDS_PER_SHEET):
        self.printer_id = printer_id
        self.clock = clock
        self.emit = emit
        self.milliseconds_per_sheet = milliseconds_per_sheet
        self.queue: Deque[Job] = deque()
        self.print_start_ms: Optional[int] = None
        self.pages_printed = 0  # pages printed for the head job only
        self.total_pages = 0
        self.is_printing = False

    @property
    def name(self) -> str:
        return f"Printer {self.printer_id}"

    def __repr__(self):
        return (f"Printer(id={self.printer_id}, jobs={len(self.queue)}, "
                f"printing={self.is_printing}, pages_left={self.total_pages_remaining()})")

    def no_jobs(self) -> bool:
        return not self.queue

    def is_idle(self) -> bool:
        return not self.is_printing

    def pages_left(self) -> int:
        """Pages still to print on the head job."""
        if self.no_jobs():
            return 0
        return self.queue[0].pages - self.pages_printed

    def job_complete(self) -> bool:
        return self.pages_left() == 0

    def total_pages_remaining(self) -> int:
        """Pages still to print across the whole queue, including head job progress."""
        if self.no_jobs():
            return 0
        return self.total_pages - self.pages_printed

    def update(self):
        """Refresh head job progress and complete it once every page is out."""
        if self.no_jobs():
            return

        current_job = self.queue[0]
        elapsed_ms = self.clock.now_ms - self.print_start_ms
        self.pages_printed = min(max(elapsed_ms, 0) // self.milliseconds_per_sheet, current_job.pages)

        if self.job_complete():
            self._emit(EventKind.COMPLETED, current_job)
            self.total_pages -= current_job.pages
            self.queue.popleft()
            self.is_printing = False
            self.pages_printed = 0
            self._check_invariants()
            self.start_next_if_idle()

    def start_next_if_idle(self):
        if self.no_jobs() or not self.is_idle():
            return

        self.print_start_ms = self.clock.now_ms
        self.is_printing = True
        self._emit(EventKind.STARTED, self.queue[0])

    def enqueue(self, job: Job):
        """Append a job to the queue; an empty printer starts it right away."""
        if self.total_pages + job.pages > MAX_PAGE_COUNTER:
            raise InvariantViolationError(
                f"{self.name} page counter would overflow adding {job} to {self.total_pages} queued pages")

        self.queue.append(job)
        self._emit(EventKind.QUEUED, job)
        self.total_pages += job.pages
        if len(self.queue) == 1:
            self.start_next_if_idle()

    def snapshot(self) -> PrinterSnapshot:
        views: List[QueuedJobView] = []
        for position, job in enumerate(self.queue):
            remaining = job.pages - self.pages_printed if position == 0 else job.pages
            views.append(QueuedJobView(job, remaining))
        return PrinterSnapshot(
            printer_id=self.printer_id,
            total_pages_left=self.total_pages_remaining(),
            is_printing=self.is_printing,
            jobs=tuple(views),
        )

    def _emit(self, kind: EventKind, job: Job):
        self.emit(SimulationEvent(kind, self.clock.now_ms, job, self.printer_id))

    def _check_invariants(self):
        queued_pages = sum(job.pages for job in self.queue)
        if self.total_pages != queued_pages or self.total_pages < 0:
            raise InvariantViolationError(
                f"{self.name} tracks {self.total_pages} pages but its queue holds {queued_pages}")
        if not 0 <= self.pages_printed <= (self.queue[0].pages if self.queue else 0):
            raise InvariantViolationError(
                f"{self.name} progress {self.pages_printed} is outside of the head job's page range")


def create_printer_pool(count: int, clock: SimulationClock, emit: EventSink,
                        milliseconds_per_sheet: int = MILLISECONDS_PER_SHEET) -> List[Printer]:
    """Create ``count`` printers numbered from 0 in index order."""
    printers = [Printer(printer_id, clock, emit, milliseconds_per_sheet) for printer_id in range(count)]
    logger.debug(f"Created {len(printers)} printers at {milliseconds_per_sheet}ms per sheet")
    return printers
