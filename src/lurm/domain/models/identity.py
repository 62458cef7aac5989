from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Principal:
    id: str
    email: str | None = None
    name: str | None = None
    is_admin: bool = False
