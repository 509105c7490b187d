"""CLI entry point for remit.

Parses the event name and payload from command-line arguments, loads the
project's routing configuration and emits the event once.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from loguru import logger

from remitter.config import build_emitter, load_config
from remitter.exceptions import EmitError, RemitterError

log = logger.bind(source=__name__)

EXIT_DELIVERED = 0
EXIT_NOT_DELIVERED = 1
EXIT_CONFIG_ERROR = 2


def _build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="remit",
        description="Emit one event through a project's remitter routing.",
    )
    parser.add_argument("event_name", help="Name of the event to emit.")
    parser.add_argument(
        "--data",
        default="null",
        help="Event payload as JSON (defaults to null).",
    )
    parser.add_argument(
        "--project",
        dest="project_path",
        type=Path,
        default=Path("."),
        help="Path to the project directory containing pyproject.toml "
        "(defaults to current directory).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Enable remitter debug logging on stderr.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point: load routing, emit the event, exit with its outcome.

    Exit status is 0 when at least one listener received the event, 1 when
    none did, and 2 for configuration or usage errors.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:]).
    """
    parser = _build_parser()
    args = parser.parse_args(argv if argv is not None else sys.argv[1:])

    try:
        payload = json.loads(args.data)
    except json.JSONDecodeError as exc:
        parser.error(f"--data is not valid JSON: {exc}")

    if args.verbose:
        logger.enable("remitter")

    project_path: Path = args.project_path.resolve()
    pyproject_path = project_path / "pyproject.toml"
    if not pyproject_path.is_file():
        log.error("No pyproject.toml found in {}", project_path)
        sys.exit(EXIT_CONFIG_ERROR)

    try:
        emitter = build_emitter(load_config(pyproject_path))
    except RemitterError as exc:
        log.error("Invalid routing configuration: {}", exc)
        print(f"remit: {exc}", file=sys.stderr)
        sys.exit(EXIT_CONFIG_ERROR)

    log.info("Emitting {} from {}", args.event_name, project_path)
    try:
        delivered = asyncio.run(emitter.emit(args.event_name, payload))
    except EmitError as exc:
        print(f"remit: {exc}", file=sys.stderr)
        sys.exit(EXIT_NOT_DELIVERED)

    sys.exit(EXIT_DELIVERED if delivered else EXIT_NOT_DELIVERED)
