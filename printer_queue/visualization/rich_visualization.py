from typing import Optional
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich import box

from ..core.simulation import SimulationReport


def create_printer_status_table(report: SimulationReport) -> Table:
    """Create the end-of-run table: pages left and queued jobs per printer."""
    table = Table(
        box=box.MINIMAL,
        show_header=True,
        header_style="bold",
        show_edge=False,
        expand=True
    )
    table.add_column("Printer", ratio=1)
    table.add_column("Total pages left", ratio=1, justify="right")
    table.add_column("Remaining jobs", ratio=6)

    for snapshot in report.printers:
        jobs_text = Text(snapshot.describe_jobs(), style="dim" if not snapshot.jobs else "")
        table.add_row(snapshot.name, str(snapshot.total_pages_left), jobs_text)

    return table


def create_throughput_table(report: SimulationReport) -> Table:
    """Create a summary table of jobs routed to and finished by each printer."""
    table = Table(
        box=box.MINIMAL,
        show_header=True,
        header_style="bold",
        show_edge=False,
        expand=True
    )
    table.add_column("Printer", ratio=1)
    table.add_column("Jobs queued", ratio=1, justify="right")
    table.add_column("Jobs completed", ratio=1, justify="right")
    table.add_column("Pages printed", ratio=1, justify="right")

    metrics = report.get_printer_metrics()
    for snapshot in report.printers:
        printer_metrics = metrics[snapshot.printer_id]
        table.add_row(
            snapshot.name,
            str(printer_metrics['jobs_queued']),
            str(printer_metrics['jobs_completed']),
            str(printer_metrics['pages_printed'])
        )

    return table


def print_final_report(report: SimulationReport, console: Optional[Console] = None, show_details: bool = True):
    """Print the status of every printer at the end of the simulation."""
    console = console or Console()

    console.print(Panel(f"Simulation ended at {report.end_time}", style="bold"))
    console.print(Panel(create_printer_status_table(report), title="Status of Printers"))

    if show_details:
        console.line()
        console.print(Panel(create_throughput_table(report), title="Printer Throughput"))
