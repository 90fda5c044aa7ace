"""
Project Repository
==================

Version: 0.1.0
"""

from collections.abc import Sequence
from datetime import datetime
from typing import Any

from pymongo import ASCENDING
from pymongo.errors import PyMongoError

from shared.logging import get_logger
from services.assurance.models.project import Project, StandardSummary
from services.assurance.repositories.base import MongoRepository


logger = get_logger(__name__)


class ProjectRepository(MongoRepository[Project]):
    """Persistence for projects."""

    collection_name = "projects"
    model = Project
    default_sort = [("name", ASCENDING)]

    async def search(
        self,
        tag: str | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        delivery_group_id: str | None = None,
    ) -> list[Project]:
        """
        List projects matching every given filter, ordered by name.

        Args:
            tag: Project must carry this exact tag
            start_date: Lower bound (inclusive) on last_updated
            end_date: Upper bound (inclusive) on last_updated
            delivery_group_id: Owning delivery group
        """
        query: dict[str, Any] = {}
        if tag:
            query["tags"] = tag
        if delivery_group_id:
            query["delivery_group_id"] = delivery_group_id
        if start_date or end_date:
            bounds: dict[str, datetime] = {}
            if start_date:
                bounds["$gte"] = start_date
            if end_date:
                bounds["$lte"] = end_date
            query["last_updated"] = bounds
        return await self.list_all(query)

    async def set_standards_summary(self, project_id: str, summary: Sequence[StandardSummary]) -> bool:
        """Overwrite the cached standards summary only."""
        try:
            result = await self.collection.update_one(
                {"_id": project_id},
                {"$set": {"standards_summary": [s.model_dump() for s in summary]}},
            )
        except PyMongoError as e:
            logger.error("standards_summary_write_failed", project_id=project_id, error=str(e))
            return False
        return result.matched_count > 0
