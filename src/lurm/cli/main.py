from __future__ import annotations

import argparse
import logging
from pathlib import Path

from rich.console import Console

from lurm.cli.commands import (
    delete_cmd,
    init_cmd,
    resources_cmd,
    upload_cmd,
    web_cmd,
)
from lurm.cli.context import CLIContext
from lurm.core.config import load_paths
from lurm.core.errors import LurmError
from lurm.core.logging import configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lurm",
        description="University resource listing CLI",
    )
    parser.add_argument(
        "--project-root",
        type=Path,
        default=Path.cwd(),
        help="Project root to use for .lurm data (default: current working directory)",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0)

    subparsers = parser.add_subparsers(dest="command", required=True)
    init_cmd.register(subparsers)
    resources_cmd.register(subparsers)
    upload_cmd.register(subparsers)
    delete_cmd.register(subparsers)
    web_cmd.register(subparsers)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    console = Console()

    paths = load_paths(args.project_root)
    ctx = CLIContext(paths=paths, console=console)

    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help()
        return 2

    try:
        return handler(args, ctx)
    except LurmError as exc:
        logger.error(str(exc))
        return 1
