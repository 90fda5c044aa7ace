"""
Assessment Repository
=====================

Current profession assessments, unique per
(project_id, standard_id, profession_id).

Version: 0.1.0
"""

from pymongo import ASCENDING
from pymongo.errors import PyMongoError

from shared.logging import get_logger
from services.assurance.models.assessment import Assessment
from services.assurance.repositories.base import MongoRepository


logger = get_logger(__name__)


def assessment_key(project_id: str, standard_id: str, profession_id: str) -> dict[str, str]:
    return {
        "project_id": project_id,
        "standard_id": standard_id,
        "profession_id": profession_id,
    }


class AssessmentRepository(MongoRepository[Assessment]):
    """Persistence for current assessments."""

    collection_name = "assessments"
    model = Assessment
    default_sort = [("standard_id", ASCENDING), ("profession_id", ASCENDING)]

    async def get_by_key(self, project_id: str, standard_id: str, profession_id: str) -> Assessment | None:
        return await self.find_one(assessment_key(project_id, standard_id, profession_id))

    async def list_by_project(self, project_id: str) -> list[Assessment]:
        return await self.list_all({"project_id": project_id})

    async def upsert(self, assessment: Assessment) -> bool:
        """Insert or overwrite the assessment for its key triple."""
        try:
            await self.collection.replace_one(
                assessment.key,
                self.to_document(assessment),
                upsert=True,
            )
        except PyMongoError as e:
            logger.error("assessment_upsert_failed", error=str(e), **assessment.key)
            return False
        return True

    async def delete_by_key(self, project_id: str, standard_id: str, profession_id: str) -> bool:
        try:
            result = await self.collection.delete_one(assessment_key(project_id, standard_id, profession_id))
        except PyMongoError as e:
            logger.error(
                "assessment_delete_failed",
                project_id=project_id,
                standard_id=standard_id,
                profession_id=profession_id,
                error=str(e),
            )
            return False
        return result.deleted_count > 0
