from __future__ import annotations

import hashlib
import hmac
from typing import Protocol

from lurm.domain.models.identity import Principal


class IdentityProvider(Protocol):
    def authenticate(self, token: str | None) -> Principal | None: ...


def _token_fingerprint(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()[:12]


class StaticTokenIdentityProvider:
    """Bearer tokens configured up front, each mapped to a principal."""

    def __init__(self, admin_tokens: tuple[str, ...] = (), user_tokens: tuple[str, ...] = ()) -> None:
        self._principals: dict[str, Principal] = {}
        for token in user_tokens:
            self._principals[token] = Principal(id=f"user-{_token_fingerprint(token)}", is_admin=False)
        for token in admin_tokens:
            self._principals[token] = Principal(id=f"admin-{_token_fingerprint(token)}", is_admin=True)

    def authenticate(self, token: str | None) -> Principal | None:
        if not token:
            return None
        for known, principal in self._principals.items():
            if hmac.compare_digest(known.encode("utf-8"), token.encode("utf-8")):
                return principal
        return None
