from __future__ import annotations

import argparse

from lurm.application.services.project_service import ProjectService
from lurm.cli.context import CLIContext


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("init", help="Initialize the resource database and storage bucket")
    parser.set_defaults(handler=run)


def run(args: argparse.Namespace, ctx: CLIContext) -> int:
    service = ProjectService(ctx.paths)
    result = service.init_project()

    if result.paths_created:
        for path in result.paths_created:
            ctx.console.print(f"[green]Created[/green] {path}")
    else:
        ctx.console.print("[yellow]Project paths already existed[/yellow]")

    state = "created" if result.database_created else "ready"
    ctx.console.print(f"[green]Database {state}[/green] {result.db_path}")
    ctx.console.print(f"[green]Bucket ready[/green] {result.bucket} ({result.bucket_dir})")
    return 0
