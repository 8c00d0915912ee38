"""
Command line entry point for the intraday tick scraper.
"""

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

from pydantic import ValidationError
from rich.console import Console
from rich.prompt import Prompt

from intraday_tick.client import IntradayTickClient, RunResult, SessionFactory
from intraday_tick.config import TickClientConfig
from intraday_tick.exceptions import NoTradingDayFoundError
from intraday_tick.models import TickRequest

logger = logging.getLogger(__name__)

console = Console(stderr=True)

EPILOG = """Notes:
1) All times are in GMT.
2) Only one security can be specified."""


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="intraday-tick",
        description="Retrieve intraday raw ticks",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-n", dest="non_interactive", action="store_true", help="non-interactive")
    parser.add_argument("-s", dest="security", help="security, e.g. 'IBM US Equity'")
    parser.add_argument(
        "-e", dest="events", action="append", default=[], help="event type (repeatable), default TRADE/BID/ASK"
    )
    parser.add_argument("-sd", dest="start", help="startDateTime, e.g. 2008-08-11T15:30:00")
    parser.add_argument("-ed", dest="end", help="endDateTime, e.g. 2008-08-11T15:35:00")
    parser.add_argument("-ip", dest="host", help="ipAddress, default localhost")
    parser.add_argument("-p", dest="port", type=int, help="tcpPort, default 8194")
    parser.add_argument("-o", dest="output_dir", type=Path, help="directory for the CSV files")
    return parser


def apply_overrides(config: TickClientConfig, args: argparse.Namespace) -> TickClientConfig:
    """Return a copy of ``config`` with the values given on the command line."""
    overrides = {}
    if args.host:
        overrides["host"] = args.host
    if args.port is not None:
        overrides["port"] = args.port
    if args.output_dir is not None:
        overrides["output_dir"] = args.output_dir
    return config.model_copy(update=overrides) if overrides else config


def prompt_missing(args: argparse.Namespace, config: TickClientConfig) -> argparse.Namespace:
    """Ask for security and date range when they were not given on the command line."""
    if not args.security:
        args.security = Prompt.ask("Provide ticker", default=config.default_security, console=console)
    if not args.start:
        args.start = Prompt.ask("Provide start date", default="", show_default=False, console=console)
    if not args.end:
        args.end = Prompt.ask("Provide end date", default="", show_default=False, console=console)
    return args


def build_request(args: argparse.Namespace, config: TickClientConfig) -> TickRequest:
    """
    Build the tick request from parsed arguments.

    Blank start and end dates mean "use the default window".

    Raises:
        ValidationError: If the arguments do not form a valid request
    """
    return TickRequest(
        security=args.security or config.default_security,
        event_types=args.events or list(config.default_event_types),
        start_datetime=args.start or None,
        end_datetime=args.end or None,
    )


def report(result: RunResult) -> None:
    if result.ok:
        console.print(f"[green]Wrote {result.ticks_written} ticks to {len(result.files)} file(s)[/green]")
    else:
        console.print(f"[red]Run ended with {result.status.value}: {result.detail}[/red]")
    for path in result.files:
        console.print(f"  {path}")
    if result.errors_reported or result.records_skipped:
        console.print(
            f"[yellow]{result.errors_reported} error message(s), {result.records_skipped} record(s) skipped[/yellow]"
        )


def wait_for_exit(non_interactive: bool) -> None:
    if non_interactive:
        console.print("Directly exiting...")
        return
    console.input("Press ENTER to quit")


def main(argv: Optional[Sequence[str]] = None, session_factory: Optional[SessionFactory] = None) -> int:
    """
    Run one intraday tick request.

    Args:
        argv: Command line arguments, sys.argv[1:] if None
        session_factory: Builds the transport session, Bloomberg if None

    Returns:
        Process exit code
    """
    parser = build_parser()
    args, unknown = parser.parse_known_args(argv)
    if unknown:
        parser.print_help()
        return 2

    try:
        config = apply_overrides(TickClientConfig(), args)
    except ValidationError as e:
        configure_logging()
        logger.error(f"Invalid configuration: {e}")
        return 2

    configure_logging(config.log_level)
    console.print("[bold]Intraday Tick Scraper[/bold]")

    if not args.non_interactive:
        args = prompt_missing(args, config)

    try:
        request = build_request(args, config)
    except ValidationError as e:
        logger.error(f"Invalid request: {e}")
        return 2

    client = IntradayTickClient(config, session_factory=session_factory)

    try:
        result = client.run(request)
    except NoTradingDayFoundError as e:
        logger.error(str(e))
        return 2

    report(result)
    wait_for_exit(args.non_interactive)
    return 0
