"""
Theme Repository
================

Version: 0.1.0
"""

from pymongo import ASCENDING

from services.assurance.models.theme import Theme
from services.assurance.repositories.base import SoftDeleteRepository


class ThemeRepository(SoftDeleteRepository[Theme]):
    collection_name = "themes"
    model = Theme
    default_sort = [("name", ASCENDING)]

    async def list_by_project(self, project_id: str) -> list[Theme]:
        """Active themes that include the project."""
        return await self.list_all({"project_ids": project_id, "is_active": True})
