from __future__ import annotations

import argparse
import mimetypes
from pathlib import Path

from lurm.application.services.upload_service import (
    ResourceDraft,
    ResourceUploadService,
    UploadedFile,
    upload_failure_notification,
)
from lurm.cli.commands._common import bucket_store, print_notification, require_initialized
from lurm.cli.context import CLIContext
from lurm.core.errors import UploadError, ValidationError
from lurm.domain.models.resource import RESOURCE_TYPES
from lurm.infrastructure.db.repos.resource_repo import ResourceRepo


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("upload", help="Add a resource, optionally with a file")
    parser.add_argument("--name", required=True)
    parser.add_argument("--type", dest="resource_type", choices=RESOURCE_TYPES, default="Other")
    parser.add_argument("--course", required=True)
    parser.add_argument("--year", required=True)
    parser.add_argument("--description", required=True)
    parser.add_argument("--keywords", default="", help="Comma-separated keywords")
    parser.add_argument("--file", type=Path, default=None)
    parser.set_defaults(handler=run)


def run(args: argparse.Namespace, ctx: CLIContext) -> int:
    require_initialized(ctx)

    uploaded = None
    if args.file is not None:
        path = args.file.expanduser().resolve()
        if not path.is_file():
            raise ValidationError(f"File not found: {path}")
        uploaded = UploadedFile(
            filename=path.name,
            content=path.read_bytes(),
            content_type=mimetypes.guess_type(path.name)[0],
        )

    draft = ResourceDraft(
        name=args.name,
        type=args.resource_type,
        course=args.course,
        year=args.year,
        description=args.description,
        keywords=args.keywords,
    )
    service = ResourceUploadService(ResourceRepo(ctx.paths.db_path), bucket_store(ctx))
    try:
        result = service.upload(draft, ctx.auth, file=uploaded)
    except UploadError as exc:
        print_notification(ctx, upload_failure_notification(exc))
        return 1

    print_notification(ctx, result.notification)
    ctx.console.print(f"ID: {result.resource.id}")
    if result.resource.file_url:
        ctx.console.print(f"File URL: {result.resource.file_url}")
    return 0
