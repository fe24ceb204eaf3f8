import logging
import plotly.express as px
import plotly.graph_objects as go

from ..core.simulation import SimulationReport

logger = logging.getLogger(__name__)


def create_timeline_visualization(report: SimulationReport) -> go.Figure:
    """Create an interactive Plotly timeline of the jobs each printer worked on."""
    fig = go.Figure()
    records = [r for r in report.job_records() if r.started_ms is not None and r.printer_id is not None]

    if not records:
        logger.warning("No printed jobs to visualize")
        return fig

    colors = px.colors.qualitative.Set3
    start_ms = report.start_time_ms

    for i, record in enumerate(records):
        # Jobs still printing at the end of the run are drawn up to the end time
        end_ms = record.completed_ms if record.completed_ms is not None else report.end_time_ms
        status = "completed" if record.is_completed else "printing"
        fig.add_trace(go.Bar(
            x=[(end_ms - record.started_ms) / 1000],
            y=[record.printer_id],
            orientation='h',
            base=[(record.started_ms - start_ms) / 1000],
            width=0.7,
            marker_color=colors[record.job_id % len(colors)],
            marker_line_width=0 if record.is_completed else 2,
            text=[str(record.job_id)],
            textposition='inside',
            insidetextanchor='middle',
            hovertemplate="<br>".join([
                f"Job: {record.job_id}",
                f"Pages: {record.pages}",
                f"Printer: {record.printer_id}",
                "Start: %{base:.0f}s",
                f"Status: {status}",
                "<extra></extra>"
            ]),
            showlegend=False
        ))

    printer_ids = [snapshot.printer_id for snapshot in report.printers]
    fig.update_layout(
        title={
            'text': f"Printer Queue Simulation<br><sup>Jobs printed per printer, numbers are job IDs. "
                    f"Run ended at {report.end_time}.</sup>",
            'x': 0.5,
            'xanchor': 'center'
        },
        height=max(300, len(printer_ids) * 60),
        barmode='overlay',
        xaxis=dict(
            title="Simulated seconds",
            rangemode='tozero',
            range=[0, report.simulated_ms / 1000]
        ),
        yaxis=dict(
            title="Printers",
            ticktext=[f"Printer {pid}" for pid in printer_ids],
            tickvals=printer_ids,
            range=[-0.5, len(printer_ids) - 0.5]
        ),
        plot_bgcolor='rgba(240, 245, 250, 0.95)',
        margin=dict(l=60, r=20, t=80, b=60)
    )

    return fig


def save_timeline_visualization(report: SimulationReport, output_path: str = "printer_timeline.html") -> str:
    """Save the timeline visualization to an HTML file."""
    fig = create_timeline_visualization(report)
    fig.write_html(output_path)
    logger.info(f"Printer timeline visualization saved to {output_path}")
    return output_path
