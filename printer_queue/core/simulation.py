from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional
import csv
import json
import logging
import random
import time

from .clock import SimulationClock, format_sim_time
from .config import SimulationConfig
from .dispatcher import Dispatcher
from .errors import SimulationError
from .events import EventKind, EventLog, SimulationEvent
from .job import JobFactory
from .printer import Printer, PrinterSnapshot, create_printer_pool

logger = logging.getLogger(__name__)

NANOSECONDS_PER_MICROSECOND = 1000


@dataclass
class SimulationState:
    """Everything one simulation run mutates, owned by the driver."""
    config: SimulationConfig
    clock: SimulationClock
    printers: List[Printer]
    job_factory: JobFactory
    dispatcher: Dispatcher
    event_log: EventLog

    @staticmethod
    def create(config: SimulationConfig, rng: random.Random, start_time_ms: int,
               log_events: bool = True) -> 'SimulationState':
        clock = SimulationClock(config.simulation_speed, start_time_ms)
        event_log = EventLog(log_events=log_events)
        printers = create_printer_pool(config.printer_count, clock, event_log, config.milliseconds_per_sheet)
        job_factory = JobFactory(rng)
        dispatcher = Dispatcher(clock, printers, job_factory, event_log, config.job_interval_ms)
        return SimulationState(config, clock, printers, job_factory, dispatcher, event_log)


@dataclass
class JobRecord:
    """Lifecycle of a single job, rebuilt from the event log."""
    job_id: int
    pages: int
    created_ms: Optional[int] = None
    printer_id: Optional[int] = None
    queued_ms: Optional[int] = None
    started_ms: Optional[int] = None
    completed_ms: Optional[int] = None

    @property
    def is_completed(self) -> bool:
        return self.completed_ms is not None

    def get_waiting_time_ms(self) -> Optional[int]:
        """Time between queueing and the first printed sheet's start."""
        if self.queued_ms is None or self.started_ms is None:
            return None
        return self.started_ms - self.queued_ms

    def get_print_time_ms(self) -> Optional[int]:
        if self.started_ms is None or self.completed_ms is None:
            return None
        return self.completed_ms - self.started_ms


def build_job_records(events: List[SimulationEvent]) -> List[JobRecord]:
    records: Dict[int, JobRecord] = {}
    for event in events:
        record = records.get(event.job.job_id)
        if record is None:
            record = JobRecord(event.job.job_id, event.job.pages)
            records[event.job.job_id] = record

        if event.kind is EventKind.CREATED:
            record.created_ms = event.timestamp_ms
        elif event.kind is EventKind.QUEUED:
            record.queued_ms = event.timestamp_ms
            record.printer_id = event.printer_id
        elif event.kind is EventKind.STARTED:
            record.started_ms = event.timestamp_ms
        elif event.kind is EventKind.COMPLETED:
            record.completed_ms = event.timestamp_ms

    return sorted(records.values(), key=lambda r: r.job_id)


@dataclass
class SimulationReport:
    """Final state of a finished run: printer snapshots plus the full event history."""
    config: SimulationConfig
    start_time_ms: int
    end_time_ms: int
    printers: List[PrinterSnapshot]
    events: List[SimulationEvent] = field(default_factory=list)

    @property
    def end_time(self) -> str:
        return format_sim_time(self.end_time_ms)

    @property
    def simulated_ms(self) -> int:
        return self.end_time_ms - self.start_time_ms

    def job_records(self) -> List[JobRecord]:
        return build_job_records(self.events)

    def events_of_kind(self, kind: EventKind) -> List[SimulationEvent]:
        return [event for event in self.events if event.kind is kind]

    def get_printer_metrics(self) -> Dict[int, Dict[str, int]]:
        """Per printer: jobs routed and completed, and pages printed for finished jobs."""
        metrics = {
            snapshot.printer_id: {'jobs_queued': 0, 'jobs_completed': 0, 'pages_printed': 0}
            for snapshot in self.printers
        }
        for event in self.events:
            if event.printer_id is None:
                continue
            if event.kind is EventKind.QUEUED:
                metrics[event.printer_id]['jobs_queued'] += 1
            elif event.kind is EventKind.COMPLETED:
                metrics[event.printer_id]['jobs_completed'] += 1
                metrics[event.printer_id]['pages_printed'] += event.job.pages
        return metrics

    def get_execution_report_data(self) -> Dict[str, Any]:
        """
        Get comprehensive execution report data for this simulation.

        Returns:
            Dictionary containing configuration, timing, per-printer and per-job summaries
        """
        records = self.job_records()
        completed = [r for r in records if r.is_completed]
        waiting_times = [r.get_waiting_time_ms() for r in records if r.get_waiting_time_ms() is not None]
        metrics = self.get_printer_metrics()

        return {
            "simulation_config": self.config.to_dict(),
            "start_time": format_sim_time(self.start_time_ms),
            "end_time": self.end_time,
            "simulated_seconds": self.simulated_ms / 1000,
            "job_summary": {
                "jobs_created": len(records),
                "jobs_completed": len(completed),
                "pages_created": sum(r.pages for r in records),
                "pages_completed": sum(r.pages for r in completed),
                "average_wait_seconds": (sum(waiting_times) / len(waiting_times) / 1000) if waiting_times else 0.0,
            },
            "printers": [
                {
                    "printer_id": snapshot.printer_id,
                    "total_pages_left": snapshot.total_pages_left,
                    "is_printing": snapshot.is_printing,
                    "remaining_jobs": [
                        {"job_id": view.job.job_id, "pages": view.job.pages, "remaining_pages": view.remaining_pages}
                        for view in snapshot.jobs
                    ],
                    **metrics[snapshot.printer_id],
                }
                for snapshot in self.printers
            ],
        }

    def export_execution_report_data(self, output_file: str):
        """Export execution report data as JSON."""
        with open(output_file, 'w', encoding='utf-8') as f:
            json.dump(self.get_execution_report_data(), f, indent=2)

        logger.info(f"Execution report data exported to {output_file}")

    def export_data_to_csv(self, base_filename: str = "printer_queue_data"):
        """Export job and printer data to CSV files for automated analysis."""
        jobs_file = f"{base_filename}_jobs.csv"
        with open(jobs_file, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)
            writer.writerow([
                'Job_ID', 'Pages', 'Printer_ID', 'Created', 'Queued', 'Started', 'Completed',
                'Wait_Seconds', 'Print_Seconds'
            ])
            for record in self.job_records():
                wait_ms = record.get_waiting_time_ms()
                print_ms = record.get_print_time_ms()
                writer.writerow([
                    record.job_id,
                    record.pages,
                    record.printer_id if record.printer_id is not None else '',
                    format_sim_time(record.created_ms) if record.created_ms is not None else '',
                    format_sim_time(record.queued_ms) if record.queued_ms is not None else '',
                    format_sim_time(record.started_ms) if record.started_ms is not None else '',
                    format_sim_time(record.completed_ms) if record.completed_ms is not None else '',
                    f"{wait_ms / 1000:.2f}" if wait_ms is not None else '',
                    f"{print_ms / 1000:.2f}" if print_ms is not None else '',
                ])

        printers_file = f"{base_filename}_printers.csv"
        metrics = self.get_printer_metrics()
        with open(printers_file, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)
            writer.writerow([
                'Printer_ID', 'Total_Pages_Left', 'Jobs_Remaining', 'Jobs_Queued', 'Jobs_Completed', 'Pages_Printed'
            ])
            for snapshot in self.printers:
                writer.writerow([
                    snapshot.printer_id,
                    snapshot.total_pages_left,
                    len(snapshot.jobs),
                    metrics[snapshot.printer_id]['jobs_queued'],
                    metrics[snapshot.printer_id]['jobs_completed'],
                    metrics[snapshot.printer_id]['pages_printed'],
                ])

        logger.info(f"Data exported to CSV files: {jobs_file}, {printers_file}")
        return jobs_file, printers_file


class PrintQueueSimulation:
    """Drives the printer pool and dispatcher from a time-scaled virtual clock."""

    def __init__(self, config: SimulationConfig,
                 rng: Optional[random.Random] = None,
                 time_source: Optional[Callable[[], int]] = None,
                 sleep: Optional[Callable[[float], None]] = None,
                 start_time_ms: Optional[int] = None,
                 log_events: bool = True):
        """
        Args:
            config: Validated simulation settings
            rng: Random source for job sizes; seeded from ``config.seed`` when omitted
            time_source: Monotonic real clock returning integer nanoseconds
            sleep: Called with seconds between loop iterations
            start_time_ms: Simulated start timestamp; defaults to the current wall clock
            log_events: Write every job event to the log as it happens
        """
        self.config = config
        self.time_source = time_source or time.perf_counter_ns
        self.sleep = sleep or time.sleep
        if start_time_ms is None:
            start_time_ms = int(time.time() * 1000)
        self.state = SimulationState.create(config, rng or random.Random(config.seed), start_time_ms, log_events)
        self.simulation_completed = False

    @property
    def clock(self) -> SimulationClock:
        return self.state.clock

    @property
    def printers(self) -> List[Printer]:
        return self.state.printers

    def step(self):
        """Run one simulated second: update every printer, then let the dispatcher route a job."""
        for printer in self.state.printers:
            printer.update()
        self.state.dispatcher.tick()

    def snapshot(self) -> List[PrinterSnapshot]:
        return [printer.snapshot() for printer in self.state.printers]

    def run(self) -> SimulationReport:
        """
        Run the simulation until the configured simulated duration has elapsed.

        Returns:
            SimulationReport with the final printer state and every emitted event
        """
        if self.simulation_completed:
            raise SimulationError("Simulation has already run; create a new instance to run again")

        clock = self.state.clock
        end_time_ms = clock.start_time_ms + self.config.duration_ms
        sleep_seconds = self.config.tick_sleep_ms / 1000

        logger.info(f"Starting simulation of {self.config.printer_count} printers for "
                    f"{self.config.seconds_to_simulate} simulated seconds at {self.config.simulation_speed}x speed")

        real_time_ns = self.time_source()
        while clock.now_ms < end_time_ms:
            now_ns = self.time_source()
            # Carry the sub-microsecond remainder into the next sample
            elapsed_us = (now_ns - real_time_ns) // NANOSECONDS_PER_MICROSECOND
            real_time_ns += elapsed_us * NANOSECONDS_PER_MICROSECOND
            clock.advance(elapsed_us)
            if clock.should_tick():
                self.step()

            self.sleep(sleep_seconds)

        self.simulation_completed = True
        logger.info(f"Simulation ended at {clock.time_of_day()}")
        return SimulationReport(
            config=self.config,
            start_time_ms=clock.start_time_ms,
            end_time_ms=clock.now_ms,
            printers=self.snapshot(),
            events=list(self.state.event_log.events),
        )
