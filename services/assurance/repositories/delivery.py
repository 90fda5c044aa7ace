"""
Delivery Repositories
=====================

Version: 0.1.0
"""

from pymongo import ASCENDING
from pymongo.errors import PyMongoError

from shared.logging import get_logger
from services.assurance.models.delivery import DeliveryGroup, DeliveryPartner, ProjectDeliveryPartner
from services.assurance.repositories.base import MongoRepository


logger = get_logger(__name__)


class DeliveryGroupRepository(MongoRepository[DeliveryGroup]):
    collection_name = "delivery_groups"
    model = DeliveryGroup
    default_sort = [("name", ASCENDING)]


class DeliveryPartnerRepository(MongoRepository[DeliveryPartner]):
    collection_name = "delivery_partners"
    model = DeliveryPartner
    default_sort = [("name", ASCENDING)]


class ProjectDeliveryPartnerRepository(MongoRepository[ProjectDeliveryPartner]):
    """Delivery partner engagements, unique per (project_id, delivery_partner_id)."""

    collection_name = "project_delivery_partners"
    model = ProjectDeliveryPartner
    default_sort = [("engagement_started", ASCENDING)]

    async def get_link(self, project_id: str, partner_id: str) -> ProjectDeliveryPartner | None:
        return await self.find_one({"project_id": project_id, "delivery_partner_id": partner_id})

    async def list_by_project(self, project_id: str) -> list[ProjectDeliveryPartner]:
        return await self.list_all({"project_id": project_id})

    async def upsert(self, link: ProjectDeliveryPartner) -> bool:
        try:
            await self.collection.replace_one(link.key, self.to_document(link), upsert=True)
        except PyMongoError as e:
            logger.error("project_delivery_partner_upsert_failed", error=str(e), **link.key)
            return False
        return True

    async def delete_link(self, project_id: str, partner_id: str) -> bool:
        try:
            result = await self.collection.delete_one({"project_id": project_id, "delivery_partner_id": partner_id})
        except PyMongoError as e:
            logger.error(
                "project_delivery_partner_delete_failed",
                project_id=project_id,
                delivery_partner_id=partner_id,
                error=str(e),
            )
            return False
        return result.deleted_count > 0
