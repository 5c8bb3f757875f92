"""Command-line interface for the financial dashboard."""

import argparse
import sys
from datetime import date
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape

from financial_dashboard import __version__
from financial_dashboard.config import (
    DEFAULT_CONFIG_PATH,
    VALID_SOURCES,
    Config,
    ConfigError,
    load_config,
)
from financial_dashboard.models.filters import DateRange, FilterConfig
from financial_dashboard.utils.logging_config import get_logger, setup_logging

# Load environment variables from .env file (if it exists)
load_dotenv()

console = Console()
logger = get_logger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser.

    Returns:
        Configured ArgumentParser.
    """
    parser = argparse.ArgumentParser(
        prog="financial-dashboard",
        description="Category x month financial dashboard for a multi-unit company",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --year 2024
  %(prog)s --year 2024 --unit Matriz --unit "Filial BH" --search receita
  %(prog)s --source file --input postings.json --details Salários
  %(prog)s --start-date 2024-03-01 --end-date 2024-06-30 --xlsx out/dashboard.xlsx
        """,
    )

    # Version
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "-y", "--year",
        type=int,
        default=None,
        help="Year to show (default: current year)",
    )

    # Data source
    parser.add_argument(
        "--source",
        choices=VALID_SOURCES,
        default=None,
        help="Posting source (default: data_source.source from settings)",
    )

    parser.add_argument(
        "-i", "--input",
        type=Path,
        default=None,
        help="JSON file with postings (for --source file)",
    )

    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for the generated dataset (for --source mock)",
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"Path to settings.yaml (default: {DEFAULT_CONFIG_PATH})",
    )

    # Filters
    parser.add_argument(
        "-u", "--unit",
        action="append",
        default=None,
        metavar="UNIT",
        help="Show only this unit (repeatable; default: all units)",
    )

    parser.add_argument(
        "--start-date",
        type=lambda s: date.fromisoformat(s),
        default=None,
        help="First date included (YYYY-MM-DD)",
    )

    parser.add_argument(
        "--end-date",
        type=lambda s: date.fromisoformat(s),
        default=None,
        help="Last date included (YYYY-MM-DD)",
    )

    parser.add_argument(
        "-s", "--search",
        default="",
        metavar="TEXT",
        help="Show only categories whose name contains TEXT",
    )

    parser.add_argument(
        "-d", "--details",
        action="append",
        default=None,
        metavar="CATEGORY",
        help="Also list the postings of CATEGORY (repeatable)",
    )

    # Output options
    parser.add_argument(
        "--csv",
        type=Path,
        default=None,
        metavar="DIR",
        help="Export pivot.csv, postings.csv and metrics.csv to DIR",
    )

    parser.add_argument(
        "--xlsx",
        type=Path,
        default=None,
        metavar="FILE",
        help="Export an Excel workbook to FILE",
    )

    # Verbosity
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase output verbosity (-v, -vv)",
    )

    parser.add_argument(
        "--validate-only",
        action="store_true",
        help="Validate the configuration file only",
    )

    return parser


def get_log_level(verbosity: int) -> str:
    """Convert verbosity count to log level.

    Args:
        verbosity: Number of -v flags.

    Returns:
        Log level string.
    """
    if verbosity >= 2:
        return "DEBUG"
    elif verbosity >= 1:
        return "INFO"
    else:
        return "WARNING"


def validate_output_path(path: Path, base_dir: Path | None = None) -> Path:
    """Validate that output path is within allowed directory.

    Prevents path traversal by ensuring the resolved path is within the
    base directory (defaults to current working directory).

    Args:
        path: The path to validate.
        base_dir: Base directory to constrain paths within (default: cwd).

    Returns:
        The resolved, validated path.

    Raises:
        ValueError: If the path escapes the allowed directory.
    """
    if base_dir is None:
        base_dir = Path.cwd()

    resolved_base = base_dir.resolve()
    resolved_path = (base_dir / path).resolve()

    try:
        resolved_path.relative_to(resolved_base)
    except ValueError:
        raise ValueError(
            f"Invalid path: '{path}' escapes the allowed directory. "
            f"Paths must be within '{resolved_base}'"
        ) from None

    return resolved_path


def validate_config(args: argparse.Namespace) -> int:
    """Validate the configuration file.

    Args:
        args: Parsed command-line arguments.

    Returns:
        0 if valid, 1 if errors found.
    """
    console.print("[bold]Validating configuration...[/bold]\n")

    settings_path = args.config or DEFAULT_CONFIG_PATH
    if settings_path.exists():
        console.print(f"[green]✓[/green] Settings: {settings_path}")
    else:
        console.print(f"[yellow]Settings file not found: {settings_path} (defaults apply)[/yellow]")

    try:
        config = load_config(settings_path)
    except (ConfigError, ValueError) as e:
        console.print(f"\n[red]Errors:[/red]\n  - {escape(str(e))}")
        return 1

    console.print("\n[green]✓[/green] Configuration loaded successfully")
    console.print(f"  - {len(config.dashboard.units)} units: {', '.join(config.dashboard.units)}")
    console.print(f"  - adjustment category: {config.dashboard.adjustment_category}")
    console.print(f"  - primary revenue category: {config.dashboard.primary_revenue_category}")
    console.print(f"  - data source: {config.data_source.source}")

    console.print("\n[green]Configuration is valid.[/green]")
    return 0


def build_filters(args: argparse.Namespace, config: Config, year: int) -> FilterConfig:
    """Build the filter selection from command-line arguments.

    Args:
        args: Parsed command-line arguments.
        config: Loaded configuration.
        year: Year being shown.

    Returns:
        FilterConfig for the requested view.

    Raises:
        ValueError: If a requested unit is not configured.
    """
    known_units = config.dashboard.units
    date_range = DateRange(start=args.start_date, end=args.end_date)
    filters = FilterConfig.all_units(
        year, known_units, date_range=date_range, category_search=args.search or ""
    )

    if args.unit:
        unknown = [unit for unit in args.unit if unit not in known_units]
        if unknown:
            raise ValueError(
                f"Unknown unit(s): {', '.join(unknown)}. Configured: {', '.join(known_units)}"
            )
        filters = filters.with_units(args.unit)

    return filters


def main() -> int:
    """Main entry point for the CLI.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = create_parser()
    args = parser.parse_args()

    # Set up logging
    log_level = get_log_level(args.verbose)
    setup_logging(level=log_level, console_output=args.verbose > 0)

    # Validate only mode
    if args.validate_only:
        return validate_config(args)

    # Load configuration
    try:
        config = load_config(args.config)
    except (ConfigError, FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        console.print("Run with --validate-only to check the configuration file.")
        return 1

    # Settings choose the level unless -v was given
    setup_logging(
        level=log_level if args.verbose else config.logging.level,
        log_file=config.logging.file,
        console_output=args.verbose > 0,
    )

    year = args.year or date.today().year

    try:
        filters = build_filters(args, config, year)
        csv_dir = validate_output_path(args.csv) if args.csv else None
        xlsx_path = validate_output_path(args.xlsx) if args.xlsx else None
    except ValueError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1

    if filters.date_range.start and filters.date_range.end:
        if filters.date_range.start > filters.date_range.end:
            console.print("[yellow]Start date is after end date; no posting will match.[/yellow]")

    # Import processing and output modules
    from financial_dashboard.output import CSVExporter, ExcelWriter, TerminalRenderer
    from financial_dashboard.processing.pipeline import DashboardSession, DataState
    from financial_dashboard.providers import ProviderError, create_provider

    try:
        provider = create_provider(
            config,
            source=args.source,
            input_file=str(args.input) if args.input else None,
            seed=args.seed,
        )
    except ProviderError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1

    session = DashboardSession(provider, config)
    with console.status(f"[bold green]Loading postings for {year}..."):
        state = session.load(year)

    if state is DataState.FAILED:
        console.print(f"[red]Error: {escape(session.error or '')}[/red]")
        return 1

    view = session.view(filters)

    console.print(f"[bold]Financial Dashboard {year}[/bold]")
    if filters.restricts_units:
        console.print(f"[dim]Units: {', '.join(sorted(filters.units))}[/dim]")
    if not filters.date_range.is_open:
        console.print(f"[dim]Period: {filters.date_range}[/dim]")
    console.print()

    renderer = TerminalRenderer(config, console)
    renderer.render(view)

    for category in args.details or []:
        console.print()
        renderer.render_details(view, category)

    if csv_dir is not None:
        CSVExporter(config).export(csv_dir, view)
        console.print(f"\n[green]CSV files written to {csv_dir}[/green]")

    if xlsx_path is not None:
        try:
            writer = ExcelWriter(config)
        except ImportError as e:
            console.print(f"[red]Error: {escape(str(e))}[/red]")
            return 1
        writer.write(xlsx_path, view)
        console.print(f"[green]Excel file written to {xlsx_path}[/green]")

    return 0


if __name__ == "__main__":
    sys.exit(main())
