from __future__ import annotations

from dataclasses import asdict, is_dataclass
from enum import Enum
from typing import Any

from fastapi import Depends, FastAPI, File, Form, Header, HTTPException, Query, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse

from lurm.application.services.auth_service import AuthContext
from lurm.application.services.catalog_service import CatalogService
from lurm.application.services.deletion_service import InFlightRegistry, ResourceDeletionService
from lurm.application.services.project_service import ProjectService
from lurm.application.services.upload_service import (
    ResourceDraft,
    ResourceUploadService,
    UploadedFile,
    upload_failure_notification,
)
from lurm.core.config import AppPaths
from lurm.core.errors import (
    AuthorizationError,
    CatalogLoadError,
    DeletionInProgressError,
    RemoteWriteError,
    UploadError,
    ValidationError,
)
from lurm.domain.models.filtering import FilterCriteria
from lurm.domain.models.notification import Notification
from lurm.infrastructure.db.repos.resource_repo import ResourceRepo
from lurm.infrastructure.identity.token_provider import IdentityProvider, StaticTokenIdentityProvider
from lurm.infrastructure.storage.paths import BucketSegmentPathResolver
from lurm.infrastructure.storage.store import BucketStore


def _jsonable(value: Any) -> Any:
    if is_dataclass(value):
        return _jsonable(asdict(value))
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, list):
        return [_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    return value


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def _authorization_http_error(auth: AuthContext, exc: AuthorizationError) -> HTTPException:
    status_code = 403 if auth.is_authenticated else 401
    return HTTPException(status_code=status_code, detail=str(exc))


def _failure_response(notification: Notification, status_code: int = 502) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"ok": False, "detail": notification.description, "notification": _jsonable(notification)},
    )


def create_app(paths: AppPaths, identity_provider: IdentityProvider | None = None) -> FastAPI:
    app = FastAPI(title="LURM", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    project_service = ProjectService(paths)
    project_service.init_project()
    identity = identity_provider or StaticTokenIdentityProvider(
        admin_tokens=paths.admin_tokens,
        user_tokens=paths.user_tokens,
    )
    in_flight = InFlightRegistry()

    def get_resource_repo() -> ResourceRepo:
        return ResourceRepo(paths.db_path)

    def get_blob_store() -> BucketStore:
        return project_service.bucket_store()

    def get_deletion_service() -> ResourceDeletionService:
        return ResourceDeletionService(
            resource_repo=get_resource_repo(),
            blob_store=get_blob_store(),
            path_resolver=BucketSegmentPathResolver(paths.storage_bucket),
            in_flight=in_flight,
        )

    def get_auth(authorization: str | None = Header(default=None)) -> AuthContext:
        auth = AuthContext()
        principal = identity.authenticate(_bearer_token(authorization))
        if principal is not None:
            auth.start(principal)
        return auth

    @app.post("/api/init")
    def api_init() -> dict[str, Any]:
        result = project_service.init_project()
        return {
            "ok": True,
            "db_path": str(result.db_path),
            "bucket": result.bucket,
            "database_created": result.database_created,
            "paths_created": [str(p) for p in result.paths_created],
        }

    @app.get("/api/resources")
    def api_resources(
        search: str = Query(default=""),
        year: str = Query(default=""),
        resource_type: str = Query(default="", alias="type"),
        course: str = Query(default=""),
    ) -> dict[str, Any]:
        criteria = FilterCriteria(search=search, year=year, resource_type=resource_type, course=course)
        try:
            result = CatalogService(get_resource_repo()).browse(criteria)
        except CatalogLoadError as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc
        return {
            "ok": True,
            "count": len(result.visible),
            "resources": _jsonable(result.visible),
            "facets": {
                "years": result.available_years,
                "types": result.available_types,
                "courses": result.available_courses,
            },
        }

    @app.get("/api/resources/{resource_id}")
    def api_resource_detail(resource_id: str) -> dict[str, Any]:
        resource = get_resource_repo().get_by_id(resource_id)
        if resource is None:
            raise HTTPException(status_code=404, detail=f"Resource not found: {resource_id}")
        return {"ok": True, "resource": _jsonable(resource)}

    @app.post("/api/resources")
    async def api_resource_upload(
        name: str = Form(default=""),
        resource_type: str = Form(default="Other", alias="type"),
        course: str = Form(default=""),
        year: str = Form(default=""),
        description: str = Form(default=""),
        keywords: str = Form(default=""),
        file: UploadFile | None = File(default=None),
        auth: AuthContext = Depends(get_auth),
    ) -> Any:
        uploaded = None
        if file is not None and file.filename:
            uploaded = UploadedFile(
                filename=file.filename,
                content=await file.read(),
                content_type=file.content_type,
            )
        draft = ResourceDraft(
            name=name,
            type=resource_type,
            course=course,
            year=year,
            description=description,
            keywords=keywords,
        )
        service = ResourceUploadService(get_resource_repo(), get_blob_store())
        try:
            result = service.upload(draft, auth, file=uploaded)
        except AuthorizationError as exc:
            raise _authorization_http_error(auth, exc) from exc
        except ValidationError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except UploadError as exc:
            return _failure_response(upload_failure_notification(exc))
        return {
            "ok": True,
            "resource": _jsonable(result.resource),
            "notification": _jsonable(result.notification),
        }

    @app.delete("/api/resources/{resource_id}")
    def api_resource_delete(resource_id: str, auth: AuthContext = Depends(get_auth)) -> Any:
        try:
            auth.require_admin()
        except AuthorizationError as exc:
            raise _authorization_http_error(auth, exc) from exc

        resource = get_resource_repo().get_by_id(resource_id)
        if resource is None:
            raise HTTPException(status_code=404, detail=f"Resource not found: {resource_id}")

        try:
            result = get_deletion_service().delete(resource, auth)
        except DeletionInProgressError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        if not result.succeeded:
            return _failure_response(result.notification)
        return {
            "ok": True,
            "status": result.status.value,
            "storage_outcome": result.storage_outcome.value,
            "notification": _jsonable(result.notification),
        }

    @app.get("/storage/v1/object/public/{bucket}/{object_path:path}")
    def storage_object(bucket: str, object_path: str) -> FileResponse:
        store = get_blob_store()
        if bucket != store.bucket:
            raise HTTPException(status_code=404, detail=f"Bucket not found: {bucket}")
        try:
            target = store.object_abspath(object_path)
        except RemoteWriteError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        if not target.is_file():
            raise HTTPException(status_code=404, detail=f"Object not found: {object_path}")
        return FileResponse(path=str(target), filename=target.name)

    return app
