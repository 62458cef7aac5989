from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Severity(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Notification:
    severity: Severity
    title: str
    description: str
