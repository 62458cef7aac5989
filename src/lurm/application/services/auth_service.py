from __future__ import annotations

import logging

from lurm.core.errors import AuthorizationError
from lurm.domain.models.identity import Principal

logger = logging.getLogger(__name__)


class AuthContext:
    """Session state handed explicitly to services.

    Started when a session begins, refreshed when the identity provider issues
    a new principal for the same session, torn down at logout.
    """

    def __init__(self, principal: Principal | None = None) -> None:
        self._principal: Principal | None = None
        self._active = False
        if principal is not None:
            self.start(principal)

    @property
    def principal(self) -> Principal | None:
        return self._principal if self._active else None

    @property
    def is_authenticated(self) -> bool:
        return self.principal is not None

    @property
    def is_admin(self) -> bool:
        principal = self.principal
        return bool(principal and principal.is_admin)

    def start(self, principal: Principal) -> None:
        self._principal = principal
        self._active = True
        logger.debug("Session started for %s", principal.id)

    def refresh(self, principal: Principal) -> None:
        if not self._active:
            raise AuthorizationError("Cannot refresh a session that has not started.")
        if principal.id != self._principal.id:
            raise AuthorizationError("Refreshed principal does not match the active session.")
        self._principal = principal

    def teardown(self) -> None:
        if self._principal is not None:
            logger.debug("Session ended for %s", self._principal.id)
        self._principal = None
        self._active = False

    def require_admin(self) -> Principal:
        principal = self.principal
        if principal is None:
            raise AuthorizationError("You must be signed in to perform this action.")
        if not principal.is_admin:
            raise AuthorizationError("You do not have permission to perform this action.")
        return principal
