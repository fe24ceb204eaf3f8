from typing import List, Optional, Sequence
import logging

from .clock import SimulationClock
from .events import EventKind, EventSink, SimulationEvent
from .job import Job, JobFactory
from .printer import Printer

logger = logging.getLogger(__name__)


def select_printer(printers: Sequence[Printer]) -> int:
    """
    Pick the printer that should receive the next job.

    Printers are scanned in index order. The first one with an empty queue
    wins outright; otherwise the printer with the strictly smallest total
    remaining pages is kept, so ties go to the lowest index.

    Args:
        printers: The printer pool, in index order

    Returns:
        Index of the selected printer
    """
    if not printers:
        raise ValueError("Cannot select a printer from an empty pool")

    selected = 0
    selected_pages_left = printers[0].total_pages_remaining()
    for index, printer in enumerate(printers):
        if printer.no_jobs():
            return index

        pages_left = printer.total_pages_remaining()
        if pages_left < selected_pages_left:
            selected = index
            selected_pages_left = pages_left

    return selected


class Dispatcher:
    """Creates a new job every fixed interval and routes it to the least loaded printer."""

    def __init__(self, clock: SimulationClock, printers: List[Printer], job_factory: JobFactory,
                 emit: EventSink, job_interval_ms: int):
        self.clock = clock
        self.printers = printers
        self.job_factory = job_factory
        self.emit = emit
        self.job_interval_ms = job_interval_ms
        # Advances by exactly one interval per job so coarse ticking never drifts the schedule
        self.next_job_due_ms = clock.now_ms + job_interval_ms

    def tick(self) -> Optional[Job]:
        """Create and route at most one job if it is due; returns the routed job."""
        if self.clock.now_ms < self.next_job_due_ms:
            return None

        self.next_job_due_ms += self.job_interval_ms
        job = self.job_factory.create()
        self.emit(SimulationEvent(EventKind.CREATED, self.clock.now_ms, job))

        target = select_printer(self.printers)
        logger.debug(f"Routing {job} to Printer {self.printers[target].printer_id} "
                     f"({self.printers[target].total_pages_remaining()} pages queued)")
        self.printers[target].enqueue(job)
        return job
