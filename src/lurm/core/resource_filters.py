from __future__ import annotations

from collections.abc import Iterable, Sequence

from lurm.domain.models.filtering import FilterCriteria, FilterResult
from lurm.domain.models.resource import Resource


def available_years(resources: Iterable[Resource]) -> list[int]:
    return sorted({r.year for r in resources}, reverse=True)


def available_types(resources: Iterable[Resource]) -> list[str]:
    return sorted({r.type for r in resources})


def available_courses(resources: Iterable[Resource]) -> list[str]:
    return sorted({r.course for r in resources})


def matches_search(resource: Resource, search: str) -> bool:
    if not search:
        return True
    needle = search.lower()
    if needle in (resource.name or "").lower():
        return True
    if needle in (resource.description or "").lower():
        return True
    return any(needle in keyword.lower() for keyword in resource.keywords or [])


def matches_criteria(resource: Resource, criteria: FilterCriteria) -> bool:
    if not matches_search(resource, criteria.search):
        return False
    if criteria.year and str(resource.year) != criteria.year:
        return False
    if criteria.resource_type and resource.type != criteria.resource_type:
        return False
    if criteria.course and resource.course != criteria.course:
        return False
    return True


def filter_resources(resources: Sequence[Resource], criteria: FilterCriteria | None = None) -> FilterResult:
    """Visible subset in input order, plus facets taken from the whole collection.

    Facets ignore the criteria so choosing one filter never hides the options
    of the others.
    """
    criteria = criteria or FilterCriteria()
    visible = [r for r in resources if matches_criteria(r, criteria)]
    return FilterResult(
        visible=visible,
        available_years=available_years(resources),
        available_types=available_types(resources),
        available_courses=available_courses(resources),
    )


def reset_criteria() -> FilterCriteria:
    return FilterCriteria()
