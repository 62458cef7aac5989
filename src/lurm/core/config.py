from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_LURM_DIRNAME = ".lurm"
DEFAULT_STORAGE_BUCKET = "resource-files"
DEFAULT_PUBLIC_BASE_URL = "http://127.0.0.1:8765"


@dataclass(frozen=True)
class AppPaths:
    project_root: Path
    lurm_dir: Path
    db_path: Path
    storage_dir: Path
    storage_bucket: str = DEFAULT_STORAGE_BUCKET
    public_base_url: str = DEFAULT_PUBLIC_BASE_URL
    admin_tokens: tuple[str, ...] = field(default_factory=tuple)
    user_tokens: tuple[str, ...] = field(default_factory=tuple)


def _read_token_list(name: str) -> tuple[str, ...]:
    raw = os.getenv(name) or ""
    return tuple(token.strip() for token in raw.split(",") if token.strip())


def load_paths(project_root: Path | None = None) -> AppPaths:
    root = (project_root or Path.cwd()).expanduser().resolve()

    lurm_home_raw = os.getenv("LURM_HOME")
    if lurm_home_raw:
        lurm_dir = Path(lurm_home_raw).expanduser().resolve()
    else:
        lurm_dir = root / DEFAULT_LURM_DIRNAME

    bucket = (os.getenv("LURM_STORAGE_BUCKET") or DEFAULT_STORAGE_BUCKET).strip().strip("/")
    public_base_url = (os.getenv("LURM_PUBLIC_BASE_URL") or DEFAULT_PUBLIC_BASE_URL).strip().rstrip("/")

    return AppPaths(
        project_root=root,
        lurm_dir=lurm_dir,
        db_path=lurm_dir / "lurm.db",
        storage_dir=lurm_dir / "storage",
        storage_bucket=bucket or DEFAULT_STORAGE_BUCKET,
        public_base_url=public_base_url or DEFAULT_PUBLIC_BASE_URL,
        admin_tokens=_read_token_list("LURM_ADMIN_TOKENS"),
        user_tokens=_read_token_list("LURM_USER_TOKENS"),
    )
