"""
Command-line interface for statusmon.

Three subcommands share one configuration and one set of services:

- snapshot: poll the selected data sources once and print the records
- watch: run the poll scheduler and print every published record
- logs: run the log retrieval state machine once, optionally elevated
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

from ..collectors.factory import RESOLVER_NAMES
from ..config import get_config, set_config_path
from ..models.logs import LogOutcome
from ..monitoring.coordinator import SOURCE_NAMES, TelemetryCoordinator
from ..services.logs import SYSTEM_FILTERS, USER_FILTERS, PRIORITIES
from ..validation import ValidationError, handle_cli_error, validate_positive_integer
from .render import render_json, render_table, render_tables, record_tables

LOG_FORMAT = "%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s"

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="statusmon",
        description="Poll local system tools and print normalized telemetry.",
    )
    parser.add_argument("--config", type=Path, help="Path to config.toml (defaults to conf/config.toml).")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")

    subparsers = parser.add_subparsers(dest="command", required=True)

    snapshot = subparsers.add_parser("snapshot", help="Poll data sources once.")
    snapshot.add_argument(
        "--section",
        dest="sections",
        action="append",
        choices=RESOLVER_NAMES,
        help="Data source to poll; repeat for several. Defaults to all.",
    )
    snapshot.add_argument("--format", choices=("table", "json"), default="table")

    watch = subparsers.add_parser("watch", help="Run the poll scheduler and print updates.")
    watch.add_argument(
        "--section",
        dest="sections",
        action="append",
        choices=SOURCE_NAMES,
        help="Data source to watch; repeat for several. Defaults to all.",
    )
    watch.add_argument("--duration", type=float, help="Seconds to run before stopping. Runs until interrupted by default.")
    watch.add_argument("--format", choices=("table", "json"), default="table")

    logs = subparsers.add_parser("logs", help="Retrieve journal logs once.")
    logs.add_argument("--scope", choices=("system", "user"), default="system")
    logs.add_argument("--filter", dest="filter_id", type=int, default=0, help="Filter id (0 = all).")
    logs.add_argument(
        "--priority",
        dest="priority_id",
        type=int,
        default=0,
        help=f"Priority id, 0 = all, 1..{len(PRIORITIES)} = {','.join(PRIORITIES)}.",
    )
    logs.add_argument("--lines", type=int, help="Maximum number of lines.")
    logs.add_argument("--elevate", action="store_true", help="Request elevated system logs through the launcher.")

    return parser


def _run_snapshot(coordinator: TelemetryCoordinator, args: argparse.Namespace) -> int:
    results = coordinator.poll_once(args.sections)
    if args.format == "json":
        print(render_json(results))
    else:
        print(render_tables(results))
    return 0


def _run_watch(coordinator: TelemetryCoordinator, args: argparse.Namespace) -> int:
    if args.duration is not None and args.duration <= 0:
        raise ValidationError("--duration must be positive", field_name="--duration", value=args.duration)

    def print_update(name: str, record: Any) -> None:
        if args.format == "json":
            print(render_json({name: record}), flush=True)
            return
        for title, rows in record_tables(name, record):
            print(render_table(title, rows), flush=True)

    coordinator.setup(args.sections)
    coordinator.subscribe_all(print_update)
    try:
        asyncio.run(coordinator.run_for(args.duration))
    except KeyboardInterrupt:
        logger.info("Interrupted, stopping")
    return 0


def _run_logs(coordinator: TelemetryCoordinator, args: argparse.Namespace) -> int:
    config = coordinator.config.logs
    lines = args.lines if args.lines is not None else config.default_lines
    validate_positive_integer(lines, min_value=config.min_lines, max_value=config.max_lines, field_name="--lines")

    filters = SYSTEM_FILTERS if args.scope == "system" else USER_FILTERS
    validate_positive_integer(args.filter_id, min_value=0, max_value=len(filters) - 1, field_name="--filter")
    validate_positive_integer(args.priority_id, min_value=0, max_value=len(PRIORITIES), field_name="--priority")

    service = coordinator.log_service
    query = service.system_query if args.scope == "system" else service.user_query
    query.filter_id = args.filter_id
    query.priority_id = args.priority_id
    query.max_lines = lines

    data = None
    if args.elevate and args.scope == "system":
        result = service.request_elevation()
        if result is not None and result.outcome is LogOutcome.CANCELLED:
            logger.warning("Authentication was cancelled; showing unprivileged logs")
        else:
            data = service.published
    if data is None:
        data = service.refresh()
    if data is None:
        logger.error("No log data retrieved")
        return 1

    print(data.system_logs if args.scope == "system" else data.user_logs)
    return 0


_COMMANDS = {
    "snapshot": _run_snapshot,
    "watch": _run_watch,
    "logs": _run_logs,
}


def main_cli(argv: Optional[List[str]] = None) -> None:
    """
    Main command-line interface for statusmon.

    Parses arguments, loads configuration, configures logging and dispatches
    to the selected subcommand.

    Raises:
        SystemExit: With the subcommand's status, or 1 on configuration or
            validation errors.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.config is not None:
        set_config_path(args.config)

    try:
        app_config = get_config()
    except Exception as e:
        _configure_logging("INFO")
        handle_cli_error(error=e, context="configuration loading", exit_code=1, logger=logger)

    _configure_logging("DEBUG" if args.verbose else app_config.general.log_level)
    logger.debug(f"Running '{args.command}' command")

    coordinator = TelemetryCoordinator(app_config)
    try:
        status = _COMMANDS[args.command](coordinator, args)
    except ValidationError as e:
        handle_cli_error(error=e, context=f"{args.command} arguments", exit_code=2, logger=logger)
    except ValueError as e:
        handle_cli_error(error=e, context=args.command, exit_code=1, logger=logger)
    sys.exit(status)


if __name__ == "__main__":
    main_cli()
