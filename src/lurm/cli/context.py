from __future__ import annotations

import getpass
from dataclasses import dataclass, field

from rich.console import Console

from lurm.application.services.auth_service import AuthContext
from lurm.core.config import AppPaths
from lurm.domain.models.identity import Principal


def local_operator_auth() -> AuthContext:
    """Whoever runs the CLI against a local data dir administers it."""
    try:
        user = getpass.getuser()
    except (KeyError, OSError):
        user = "operator"
    return AuthContext(Principal(id=f"cli:{user}", name=user, is_admin=True))


@dataclass(slots=True)
class CLIContext:
    paths: AppPaths
    console: Console
    auth: AuthContext = field(default_factory=local_operator_auth)
