from .core.config import SimulationConfig, create_sample_config
from .core.errors import InvalidConfigurationError
from .core.simulation import PrintQueueSimulation
from .visualization.rich_visualization import print_final_report
from .visualization.plotly_visualization import save_timeline_visualization
import argparse
import logging
import os
import sys
from datetime import datetime

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_NAME = 'printer_queue_results'


def save_configuration(args, config, config_file, end_time):
    """Save the simulation configuration to a file."""
    defaults = SimulationConfig()
    with open(config_file, 'w', encoding='utf-8') as f:
        f.write("Printer Queue Simulation Configuration\n")
        f.write("=" * 38 + "\n\n")

        f.write(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n\n")

        f.write("Printer Configuration:\n")
        f.write("-" * 22 + "\n")
        f.write(f"Printers: {config.printer_count}\n")
        f.write(f"Sheets per minute: {config.sheets_per_minute} ({config.milliseconds_per_sheet}ms per sheet)\n\n")

        f.write("Simulation Configuration:\n")
        f.write("-" * 25 + "\n")
        f.write(f"Simulation speed: {config.simulation_speed}x realtime\n")
        f.write(f"Simulated duration: {config.seconds_to_simulate} seconds\n")
        f.write(f"Job interval: {config.job_interval_seconds} seconds\n")
        f.write(f"Seed: {config.seed if config.seed is not None else 'random'}\n\n")

        f.write("Simulation Results:\n")
        f.write("-" * 19 + "\n")
        f.write(f"Simulation ended at: {end_time}\n\n")

        f.write("Equivalent Command Line:\n")
        f.write("-" * 25 + "\n")
        cmd_parts = ["python -m printer_queue.run_simulation"]

        # Add non-default arguments
        if config.printer_count != defaults.printer_count:
            cmd_parts.append(f"--printers {config.printer_count}")
        if config.simulation_speed != defaults.simulation_speed:
            cmd_parts.append(f"--speed {config.simulation_speed}")
        if config.seconds_to_simulate != defaults.seconds_to_simulate:
            cmd_parts.append(f"--seconds {config.seconds_to_simulate}")
        if config.job_interval_seconds != defaults.job_interval_seconds:
            cmd_parts.append(f"--job-interval {config.job_interval_seconds}")
        if config.sheets_per_minute != defaults.sheets_per_minute:
            cmd_parts.append(f"--sheets-per-minute {config.sheets_per_minute}")
        if config.seed is not None:
            cmd_parts.append(f"--seed {config.seed}")
        if args.output_name != DEFAULT_OUTPUT_NAME:
            cmd_parts.append(f"--output-name {args.output_name}")
        if args.output_dir:
            cmd_parts.append(f"--output-dir {args.output_dir}")
        if args.no_csv:
            cmd_parts.append("--no-csv")
        if args.no_plotly:
            cmd_parts.append("--no-plotly")

        # Format command line nicely (break long lines)
        if len(" ".join(cmd_parts)) > 80:
            f.write(" \\\n    ".join(cmd_parts) + "\n")
        else:
            f.write(" ".join(cmd_parts) + "\n")

    logger.info(f"Configuration saved to {config_file}")


def build_config(args) -> SimulationConfig:
    """Load the config file if given, then apply command line overrides."""
    if args.config:
        data = SimulationConfig.from_yaml(args.config).to_dict()
    else:
        data = SimulationConfig().to_dict()

    overrides = {
        'printer_count': args.printers,
        'simulation_speed': args.speed,
        'seconds_to_simulate': args.seconds,
        'job_interval_seconds': args.job_interval,
        'sheets_per_minute': args.sheets_per_minute,
        'seed': args.seed,
    }
    data.update({key: value for key, value in overrides.items() if value is not None})
    return SimulationConfig.from_dict(data)


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Simulate print jobs dispatched to the least loaded printer')
    parser.add_argument('--config', '-c', help='YAML configuration file (command line options override it)')
    parser.add_argument('--printers', type=int, help='Number of printers (default: 4)')
    parser.add_argument('--speed', type=int, help='Simulated seconds per real second (default: 300)')
    parser.add_argument('--seconds', type=int, help='Simulated seconds to run (default: 1800)')
    parser.add_argument('--job-interval', type=int, help='Simulated seconds between new jobs (default: 30)')
    parser.add_argument('--sheets-per-minute', type=int, help='Printer sheet rate (default: 7)')
    parser.add_argument('--seed', type=int, help='Seed for job sizes (default: random)')
    parser.add_argument('--output-dir', type=str, default=None,
                        help='Directory to store CSV, JSON and HTML results (default: no files written)')
    parser.add_argument('--output-name', type=str, default=DEFAULT_OUTPUT_NAME,
                        help=f'Base name for output files (default: {DEFAULT_OUTPUT_NAME})')
    parser.add_argument('--no-csv', action='store_true', help='Skip CSV data export')
    parser.add_argument('--no-plotly', action='store_true', help='Skip the HTML timeline')
    parser.add_argument('--summary-only', action='store_true', help='Show only the printer status table')
    parser.add_argument('--create-sample-config', action='store_true', help='Create a sample configuration file')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable verbose logging')
    return parser


def main(argv=None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format='%(message)s')
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.create_sample_config:
        path = create_sample_config()
        logger.info(f"Sample configuration file created: {path}")
        return 0

    try:
        config = build_config(args)
    except (InvalidConfigurationError, FileNotFoundError) as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    simulation = PrintQueueSimulation(config)
    report = simulation.run()
    print_final_report(report, show_details=not args.summary_only)

    if args.output_dir:
        os.makedirs(args.output_dir, exist_ok=True)
        output_base = os.path.join(args.output_dir, args.output_name)

        save_configuration(args, config, os.path.join(args.output_dir, f"config_{args.output_name}.txt"),
                           report.end_time)
        if not args.no_csv:
            report.export_data_to_csv(output_base)
        if not args.no_plotly:
            save_timeline_visualization(report, f"{output_base}.html")
        report.export_execution_report_data(f"{output_base}_execution_report.json")

    return 0


if __name__ == "__main__":
    sys.exit(main())
