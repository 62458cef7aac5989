from __future__ import annotations

from dataclasses import dataclass, field

from lurm.domain.models.resource import Resource


@dataclass(frozen=True, slots=True)
class FilterCriteria:
    search: str = ""
    year: str = ""
    resource_type: str = ""
    course: str = ""


@dataclass(slots=True)
class FilterResult:
    visible: list[Resource]
    available_years: list[int] = field(default_factory=list)
    available_types: list[str] = field(default_factory=list)
    available_courses: list[str] = field(default_factory=list)
