from __future__ import annotations

from lurm.core.resource_filters import filter_resources
from lurm.domain.models.filtering import FilterCriteria, FilterResult
from lurm.infrastructure.db.repos.resource_repo import ResourceRepo


class CatalogService:
    def __init__(self, resource_repo: ResourceRepo) -> None:
        self.resource_repo = resource_repo

    def browse(self, criteria: FilterCriteria | None = None) -> FilterResult:
        return filter_resources(self.resource_repo.list(), criteria)
