"""
Delivery Services
=================

Delivery groups (history tracked), delivery partners and their
engagements on projects.

Version: 0.1.0
"""

from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

from shared.logging import get_logger
from services.assurance.errors import (
    InternalError,
    NotFoundError,
    ValidationError,
    operation_boundary,
)
from services.assurance.models.delivery import (
    DeliveryGroup,
    DeliveryGroupPayload,
    DeliveryPartner,
    DeliveryPartnerPayload,
    ProjectDeliveryPartner,
    ProjectDeliveryPartnerPayload,
)
from services.assurance.models.history import DeliveryGroupHistory
from services.assurance.models.project import Project
from services.assurance.repositories.base import new_id
from services.assurance.repositories.delivery import (
    DeliveryGroupRepository,
    DeliveryPartnerRepository,
    ProjectDeliveryPartnerRepository,
)
from services.assurance.repositories.history import DeliveryGroupHistoryLedger
from services.assurance.repositories.projects import ProjectRepository
from services.assurance.services.backdating import utc_now
from services.assurance.services.changes import DELIVERY_GROUP_FIELDS, detect_changes
from services.assurance.validators import (
    DeliveryGroupValidator,
    DeliveryPartnerValidator,
    ProjectDeliveryPartnerValidator,
    Validator,
)


if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger


class DeliveryGroupService:
    """Delivery group CRUD with change history."""

    def __init__(
        self,
        groups: DeliveryGroupRepository,
        history: DeliveryGroupHistoryLedger,
        projects: ProjectRepository,
        validator: Validator | None = None,
        logger: "BoundLogger | None" = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.groups = groups
        self.ledger = history
        self.projects = projects
        self.validator = validator or DeliveryGroupValidator()
        self.logger = logger or get_logger(__name__)
        self.clock = clock

    def _validate(self, payload: DeliveryGroupPayload, action: str) -> None:
        errors = self.validator.validate(payload)
        if errors:
            raise ValidationError(f"Validation errors occurred whilst {action} the delivery group", errors)

    async def _require(self, group_id: str) -> DeliveryGroup:
        group = await self.groups.get_by_id(group_id)
        if group is None:
            raise NotFoundError(f"Delivery group not found: {group_id}")
        return group

    async def _record(self, group_id: str, changes: dict, changed_by: str, timestamp: datetime) -> None:
        entry = DeliveryGroupHistory(
            id=new_id(),
            delivery_group_id=group_id,
            timestamp=timestamp,
            changed_by=changed_by,
            changes=changes,
        )
        if not await self.ledger.append(entry):
            raise InternalError("Failed to record the delivery group history")

    @operation_boundary("get_delivery_group")
    async def get(self, group_id: str) -> DeliveryGroup:
        return await self._require(group_id)

    @operation_boundary("list_delivery_groups")
    async def list_groups(self) -> list[DeliveryGroup]:
        return await self.groups.list_all()

    @operation_boundary("list_delivery_group_projects")
    async def projects_for(self, group_id: str) -> list[Project]:
        await self._require(group_id)
        return await self.projects.search(delivery_group_id=group_id)

    @operation_boundary("get_delivery_group_history")
    async def history(self, group_id: str, include_archived: bool = False) -> list[DeliveryGroupHistory]:
        return await self.ledger.list_for({"delivery_group_id": group_id}, include_archived=include_archived)

    @operation_boundary("create_delivery_group")
    async def create(self, payload: DeliveryGroupPayload, changed_by: str) -> DeliveryGroup:
        self._validate(payload, "creating")
        now = self.clock()
        group = DeliveryGroup(id=new_id(), **payload.model_dump(), created_at=now, updated_at=now)
        if not await self.groups.create(group):
            raise InternalError("Failed to create the delivery group")

        await self._record(
            group.id,
            detect_changes(None, group, ("name", "status")),
            changed_by,
            now,
        )
        self.logger.info("delivery_group_created", delivery_group_id=group.id, changed_by=changed_by)
        return group

    @operation_boundary("update_delivery_group")
    async def update(self, group_id: str, payload: DeliveryGroupPayload, changed_by: str) -> DeliveryGroup:
        self._validate(payload, "updating")
        existing = await self._require(group_id)

        candidate = existing.model_copy(update=payload.model_dump())
        changes = detect_changes(existing, candidate, DELIVERY_GROUP_FIELDS)
        if not changes:
            return existing

        now = self.clock()
        await self._record(group_id, changes, changed_by, now)

        candidate = candidate.model_copy(update={"updated_at": now})
        if not await self.groups.replace(group_id, candidate):
            raise NotFoundError(f"Delivery group not found: {group_id}")

        self.logger.info(
            "delivery_group_updated",
            delivery_group_id=group_id,
            changes=sorted(changes),
            changed_by=changed_by,
        )
        return candidate

    @operation_boundary("delete_delivery_group")
    async def delete(self, group_id: str) -> None:
        if not await self.groups.delete(group_id):
            raise NotFoundError(f"Delivery group not found: {group_id}")
        self.logger.info("delivery_group_deleted", delivery_group_id=group_id)

    @operation_boundary("archive_delivery_group_history")
    async def archive_history(self, group_id: str, history_id: str, archived_by: str) -> None:
        if not await self.ledger.archive({"delivery_group_id": group_id}, history_id):
            raise NotFoundError(f"History entry not found: {history_id}")
        self.logger.info(
            "history_entry_archived",
            delivery_group_id=group_id,
            history_id=history_id,
            archived_by=archived_by,
        )


class DeliveryPartnerService:
    """Plain delivery partner CRUD."""

    def __init__(
        self,
        partners: DeliveryPartnerRepository,
        validator: Validator | None = None,
        logger: "BoundLogger | None" = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.partners = partners
        self.validator = validator or DeliveryPartnerValidator()
        self.logger = logger or get_logger(__name__)
        self.clock = clock

    def _validate(self, payload: DeliveryPartnerPayload, action: str) -> None:
        errors = self.validator.validate(payload)
        if errors:
            raise ValidationError(f"Validation errors occurred whilst {action} the delivery partner", errors)

    @operation_boundary("get_delivery_partner")
    async def get(self, partner_id: str) -> DeliveryPartner:
        partner = await self.partners.get_by_id(partner_id)
        if partner is None:
            raise NotFoundError(f"Delivery partner not found: {partner_id}")
        return partner

    @operation_boundary("list_delivery_partners")
    async def list_partners(self) -> list[DeliveryPartner]:
        return await self.partners.list_all()

    @operation_boundary("create_delivery_partner")
    async def create(self, payload: DeliveryPartnerPayload) -> DeliveryPartner:
        self._validate(payload, "creating")
        now = self.clock()
        partner = DeliveryPartner(id=new_id(), **payload.model_dump(), created_at=now, updated_at=now)
        if not await self.partners.create(partner):
            raise InternalError("Failed to create the delivery partner")
        self.logger.info("delivery_partner_created", delivery_partner_id=partner.id)
        return partner

    @operation_boundary("update_delivery_partner")
    async def update(self, partner_id: str, payload: DeliveryPartnerPayload) -> DeliveryPartner:
        self._validate(payload, "updating")
        existing = await self.get(partner_id)
        updated = existing.model_copy(update={**payload.model_dump(), "updated_at": self.clock()})
        if not await self.partners.replace(partner_id, updated):
            raise NotFoundError(f"Delivery partner not found: {partner_id}")
        self.logger.info("delivery_partner_updated", delivery_partner_id=partner_id)
        return updated

    @operation_boundary("delete_delivery_partner")
    async def delete(self, partner_id: str) -> None:
        if not await self.partners.delete(partner_id):
            raise NotFoundError(f"Delivery partner not found: {partner_id}")
        self.logger.info("delivery_partner_deleted", delivery_partner_id=partner_id)


class ProjectDeliveryPartnerService:
    """
    Engagements of delivery partners on projects.

    A project has at most one engagement per delivery partner; creating
    or updating an existing pair overwrites it in place.
    """

    def __init__(
        self,
        links: ProjectDeliveryPartnerRepository,
        projects: ProjectRepository,
        partners: DeliveryPartnerRepository,
        validator: Validator | None = None,
        logger: "BoundLogger | None" = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.links = links
        self.projects = projects
        self.partners = partners
        self.validator = validator or ProjectDeliveryPartnerValidator()
        self.logger = logger or get_logger(__name__)
        self.clock = clock

    async def _check(self, project_id: str, payload: ProjectDeliveryPartnerPayload) -> None:
        errors = self.validator.validate(payload)
        if not errors and payload.project_id != project_id:
            errors.append("Project IDs must match")
        if errors:
            self.logger.warning("project_delivery_partner_validation_failed", project_id=project_id, errors=errors)
            raise ValidationError("Validation errors occurred whilst saving the project delivery partner", errors)

        if (
            await self.projects.get_by_id(project_id) is None
            or await self.partners.get_by_id(payload.delivery_partner_id) is None
        ):
            raise NotFoundError(
                f"Project and/or delivery partner not found for project ID '{project_id}' "
                f"and delivery partner ID '{payload.delivery_partner_id}'"
            )

    async def _save(self, payload: ProjectDeliveryPartnerPayload) -> tuple[ProjectDeliveryPartner, bool]:
        existing = await self.links.get_link(payload.project_id, payload.delivery_partner_id)
        link = ProjectDeliveryPartner(
            **payload.model_dump(exclude={"engagement_started"}),
            id=existing.id if existing else new_id(),
            engagement_started=payload.engagement_started or self.clock(),
        )
        if not await self.links.upsert(link):
            raise InternalError("Failed to save the project delivery partner")
        return link, existing is None

    @operation_boundary("list_project_delivery_partners")
    async def list_for_project(self, project_id: str) -> list[ProjectDeliveryPartner]:
        return await self.links.list_by_project(project_id)

    @operation_boundary("get_project_delivery_partner")
    async def get(self, project_id: str, partner_id: str) -> ProjectDeliveryPartner:
        link = await self.links.get_link(project_id, partner_id)
        if link is None:
            raise NotFoundError(f"Delivery partner {partner_id} is not engaged on project {project_id}")
        return link

    @operation_boundary("create_project_delivery_partner")
    async def create(self, project_id: str, payload: ProjectDeliveryPartnerPayload) -> ProjectDeliveryPartner:
        await self._check(project_id, payload)
        link, created = await self._save(payload)
        self.logger.info("project_delivery_partner_created", created=created, **link.key)
        return link

    @operation_boundary("update_project_delivery_partner")
    async def update(
        self,
        project_id: str,
        partner_id: str,
        payload: ProjectDeliveryPartnerPayload,
    ) -> ProjectDeliveryPartner:
        await self._check(project_id, payload)
        if payload.delivery_partner_id != partner_id:
            raise ValidationError(
                "Validation errors occurred whilst saving the project delivery partner",
                ["Delivery partner IDs must match"],
            )
        link, _ = await self._save(payload)
        self.logger.info("project_delivery_partner_updated", **link.key)
        return link

    @operation_boundary("delete_project_delivery_partner")
    async def delete(self, project_id: str, partner_id: str) -> None:
        if not await self.links.delete_link(project_id, partner_id):
            raise NotFoundError(f"Delivery partner {partner_id} is not engaged on project {project_id}")
        self.logger.info("project_delivery_partner_deleted", project_id=project_id, delivery_partner_id=partner_id)
