from __future__ import annotations

import argparse

from lurm.application.services.deletion_service import ResourceDeletionService
from lurm.cli.commands._common import bucket_store, print_notification, require_initialized
from lurm.cli.context import CLIContext
from lurm.infrastructure.db.repos.resource_repo import ResourceRepo
from lurm.infrastructure.storage.paths import BucketSegmentPathResolver


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("delete", help="Delete a resource and its stored file")
    parser.add_argument("resource_id")
    parser.set_defaults(handler=run)


def run(args: argparse.Namespace, ctx: CLIContext) -> int:
    require_initialized(ctx)

    repo = ResourceRepo(ctx.paths.db_path)
    resource = repo.get_by_id(args.resource_id)
    if resource is None:
        ctx.console.print(f"[yellow]Resource not found[/yellow] {args.resource_id} (already deleted?)")
        return 0

    service = ResourceDeletionService(
        resource_repo=repo,
        blob_store=bucket_store(ctx),
        path_resolver=BucketSegmentPathResolver(ctx.paths.storage_bucket),
    )
    result = service.delete(resource, ctx.auth)
    print_notification(ctx, result.notification)
    return 0 if result.succeeded else 1
