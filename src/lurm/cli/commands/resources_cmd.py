from __future__ import annotations

import argparse

from rich.table import Table

from lurm.application.services.catalog_service import CatalogService
from lurm.cli.commands._common import require_initialized
from lurm.cli.context import CLIContext
from lurm.domain.models.filtering import FilterCriteria
from lurm.infrastructure.db.repos.resource_repo import ResourceRepo


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("resources", help="List and filter resources")
    parser.add_argument("--search", default="", help="Case-insensitive match on name, description or keywords")
    parser.add_argument("--year", default="")
    parser.add_argument("--type", dest="resource_type", default="")
    parser.add_argument("--course", default="")
    parser.add_argument("--facets", action="store_true", help="Also print the available filter values")
    parser.set_defaults(handler=run)


def run(args: argparse.Namespace, ctx: CLIContext) -> int:
    require_initialized(ctx)

    criteria = FilterCriteria(
        search=args.search,
        year=args.year,
        resource_type=args.resource_type,
        course=args.course,
    )
    result = CatalogService(ResourceRepo(ctx.paths.db_path)).browse(criteria)

    table = Table(title=f"Resources ({len(result.visible)})")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Course")
    table.add_column("Year")
    table.add_column("File", overflow="fold")

    for r in result.visible:
        table.add_row(r.id, r.name, r.type, r.course, str(r.year), r.file_name or "")

    ctx.console.print(table)

    if args.facets:
        ctx.console.print(f"Years: {', '.join(str(y) for y in result.available_years) or '-'}")
        ctx.console.print(f"Types: {', '.join(result.available_types) or '-'}")
        ctx.console.print(f"Courses: {', '.join(result.available_courses) or '-'}")
    if not result.visible:
        ctx.console.print("[yellow]No resources found.[/yellow] Try adjusting your search terms or filters.")
    return 0
