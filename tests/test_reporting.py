import csv
import json

from rich.console import Console

from printer_queue.core.config import SimulationConfig
from printer_queue.core.simulation import PrintQueueSimulation
from printer_queue.visualization.plotly_visualization import (
    create_timeline_visualization,
    save_timeline_visualization,
)
from printer_queue.visualization.rich_visualization import print_final_report

from conftest import FakeTimeSource, FixedRng


def run_report(printer_count=2, seconds=121):
    simulation = PrintQueueSimulation(
        SimulationConfig(printer_count=printer_count, seconds_to_simulate=seconds, tick_sleep_ms=0),
        rng=FixedRng(pages=7),
        time_source=FakeTimeSource(step_ns=1_000_000),
        sleep=lambda seconds: None,
        start_time_ms=0,
        log_events=False,
    )
    return simulation.run()


def test_printer_metrics():
    report = run_report()
    metrics = report.get_printer_metrics()

    # Jobs at 30s, 60s, 90s and 120s alternate between the two printers
    assert metrics[0] == {'jobs_queued': 2, 'jobs_completed': 1, 'pages_printed': 7}
    assert metrics[1]['jobs_queued'] == 2
    assert metrics[1]['jobs_completed'] == 1


def test_execution_report_json(tmp_path):
    report = run_report()
    output_file = tmp_path / "report.json"
    report.export_execution_report_data(str(output_file))

    data = json.loads(output_file.read_text(encoding="utf-8"))
    assert data["job_summary"]["jobs_created"] == 4
    assert data["job_summary"]["jobs_completed"] == 2
    assert data["simulation_config"]["printer_count"] == 2
    assert data["end_time"] == report.end_time
    assert [p["printer_id"] for p in data["printers"]] == [0, 1]


def test_csv_export(tmp_path):
    report = run_report()
    jobs_file, printers_file = report.export_data_to_csv(str(tmp_path / "results"))

    with open(jobs_file, newline='', encoding='utf-8') as f:
        rows = list(csv.DictReader(f))
    assert [row['Job_ID'] for row in rows] == ['0', '1', '2', '3']
    assert rows[0]['Completed'] == "00:01:30"
    assert rows[-1]['Completed'] == ''

    with open(printers_file, newline='', encoding='utf-8') as f:
        printer_rows = list(csv.DictReader(f))
    assert len(printer_rows) == 2
    assert sum(int(row['Total_Pages_Left']) for row in printer_rows) == sum(
        snapshot.total_pages_left for snapshot in report.printers)


def test_final_report_lists_every_printer():
    report = run_report(printer_count=3, seconds=31)
    console = Console(record=True, width=160)
    print_final_report(report, console=console)
    output = console.export_text()

    assert f"Simulation ended at {report.end_time}" in output
    for printer_id in range(3):
        assert f"Printer {printer_id}" in output
    assert "No jobs remaining." in output
    assert "Job 0 (7 Pages" in output


def test_timeline_has_a_bar_per_started_job(tmp_path):
    report = run_report()
    fig = create_timeline_visualization(report)
    started = [r for r in report.job_records() if r.started_ms is not None]
    assert len(fig.data) == len(started)

    output_path = save_timeline_visualization(report, str(tmp_path / "timeline.html"))
    assert (tmp_path / "timeline.html").exists()
    assert output_path.endswith("timeline.html")
