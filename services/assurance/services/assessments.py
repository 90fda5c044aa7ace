"""
Assessment Service
==================

Upsert, delete and archive workflows for profession assessments.

An assessment is keyed by (project, standard, profession). Every write
that changes its status or commentary appends to the assessment
history, and every write, delete or archive re-runs the aggregator for
the owning project.

Version: 0.1.0
"""

from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

from shared.logging import get_logger
from services.assurance.errors import (
    InternalError,
    NotFoundError,
    ReferentialIntegrityError,
    ValidationError,
    operation_boundary,
)
from services.assurance.models.assessment import Assessment, AssessmentPayload
from services.assurance.models.history import AssessmentHistory, latest_value
from services.assurance.repositories.assessments import AssessmentRepository, assessment_key
from services.assurance.repositories.base import new_id
from services.assurance.repositories.history import AssessmentHistoryLedger
from services.assurance.repositories.projects import ProjectRepository
from services.assurance.repositories.reference import ProfessionRepository, ServiceStandardRepository
from services.assurance.services.backdating import resolve_history_timestamp, utc_now
from services.assurance.services.changes import ASSESSMENT_FIELDS, detect_changes
from services.assurance.services.summary import StandardsSummaryAggregator
from services.assurance.validators import AssessmentValidator, Validator


if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger


class AssessmentService:
    """Profession assessment workflows."""

    def __init__(
        self,
        assessments: AssessmentRepository,
        history: AssessmentHistoryLedger,
        projects: ProjectRepository,
        standards: ServiceStandardRepository,
        professions: ProfessionRepository,
        aggregator: StandardsSummaryAggregator,
        validator: Validator | None = None,
        logger: "BoundLogger | None" = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.assessments = assessments
        self.ledger = history
        self.projects = projects
        self.standards = standards
        self.professions = professions
        self.aggregator = aggregator
        self.validator = validator or AssessmentValidator()
        self.logger = logger or get_logger(__name__)
        self.clock = clock

    async def _check_references(self, project_id: str, standard_id: str, profession_id: str) -> None:
        if await self.projects.get_by_id(project_id) is None:
            raise ReferentialIntegrityError("Referenced project does not exist")
        if await self.standards.get_active(standard_id) is None:
            raise ReferentialIntegrityError("Referenced service standard does not exist or is inactive")
        if await self.professions.get_active(profession_id) is None:
            raise ReferentialIntegrityError("Referenced profession does not exist or is inactive")

    @operation_boundary("get_assessment")
    async def get(self, project_id: str, standard_id: str, profession_id: str) -> Assessment:
        assessment = await self.assessments.get_by_key(project_id, standard_id, profession_id)
        if assessment is None:
            raise NotFoundError("Assessment not found")
        return assessment

    @operation_boundary("list_project_assessments")
    async def list_for_project(self, project_id: str) -> list[Assessment]:
        return await self.assessments.list_by_project(project_id)

    @operation_boundary("get_assessment_history")
    async def history(
        self,
        project_id: str,
        standard_id: str,
        profession_id: str,
        include_archived: bool = False,
    ) -> list[AssessmentHistory]:
        return await self.ledger.list_for(
            assessment_key(project_id, standard_id, profession_id),
            include_archived=include_archived,
        )

    @operation_boundary("save_assessment")
    async def upsert(
        self,
        project_id: str,
        standard_id: str,
        profession_id: str,
        payload: AssessmentPayload,
        changed_by: str,
    ) -> tuple[Assessment, bool]:
        """
        Create or overwrite the assessment for a key triple.

        Validation and reference checks run before any write. A payload
        equal to the stored assessment writes nothing.

        Returns:
            (assessment, created) where created is True for a new assessment

        Raises:
            ValidationError: Invalid status
            ReferentialIntegrityError: Project, standard or profession missing or inactive
            InternalError: History or assessment could not be written
        """
        errors = self.validator.validate(payload)
        if errors:
            self.logger.warning(
                "assessment_validation_failed",
                project_id=project_id,
                standard_id=standard_id,
                profession_id=profession_id,
                errors=errors,
            )
            raise ValidationError("Validation errors occurred whilst saving the assessment", errors)

        await self._check_references(project_id, standard_id, profession_id)

        key = assessment_key(project_id, standard_id, profession_id)
        existing = await self.assessments.get_by_key(project_id, standard_id, profession_id)
        now = self.clock()
        actor = payload.changed_by or changed_by

        incoming = Assessment(
            id=existing.id if existing else new_id(),
            **key,
            status=payload.status,
            commentary=payload.commentary,
            last_updated=now,
            changed_by=actor,
        )

        changes = detect_changes(existing, incoming, ASSESSMENT_FIELDS)
        if existing is not None and not changes:
            self.logger.info("assessment_unchanged", **key)
            return existing, False

        entry = AssessmentHistory(
            id=new_id(),
            **key,
            timestamp=resolve_history_timestamp(payload.update_date, now),
            changed_by=actor,
            changes=changes,
        )
        if not await self.ledger.append(entry):
            raise InternalError("Failed to record the assessment history")

        # A backdated entry does not displace a newer one
        current = incoming
        newest = await self.ledger.latest_active(key)
        if newest is not None:
            current = incoming.model_copy(
                update={
                    "status": newest.to_value("status", incoming.status),
                    "commentary": newest.to_value("commentary", incoming.commentary),
                }
            )

        if not await self.assessments.upsert(current):
            raise InternalError("Failed to save the assessment")

        await self.aggregator.refresh(project_id)

        self.logger.info(
            "assessment_saved",
            **key,
            created=existing is None,
            changes=sorted(changes),
            changed_by=actor,
        )
        return current, existing is None

    @operation_boundary("delete_assessment")
    async def delete(self, project_id: str, standard_id: str, profession_id: str) -> None:
        if await self.assessments.get_by_key(project_id, standard_id, profession_id) is None:
            raise NotFoundError("Assessment not found")
        if not await self.assessments.delete_by_key(project_id, standard_id, profession_id):
            raise InternalError("Failed to delete the assessment")

        await self.aggregator.refresh(project_id)
        self.logger.info(
            "assessment_deleted",
            project_id=project_id,
            standard_id=standard_id,
            profession_id=profession_id,
        )

    @operation_boundary("archive_assessment_history")
    async def archive_history(
        self,
        project_id: str,
        standard_id: str,
        profession_id: str,
        history_id: str,
        archived_by: str,
    ) -> Assessment | None:
        """
        Archive one history entry and recompute the current assessment.

        The current assessment takes its status, commentary, timestamp and
        actor from the newest remaining entry. When no entry remains the
        current assessment is deleted. The project summary is refreshed
        either way.

        Returns:
            The recomputed assessment, or None when it was removed

        Raises:
            NotFoundError: No active entry with this id for the key
        """
        key = assessment_key(project_id, standard_id, profession_id)
        if not await self.ledger.archive(key, history_id):
            raise NotFoundError(f"History entry not found: {history_id}")

        self.logger.info("history_entry_archived", **key, history_id=history_id, archived_by=archived_by)

        existing = await self.assessments.get_by_key(project_id, standard_id, profession_id)
        active = await self.ledger.list_active(key)
        current: Assessment | None = None

        if active and existing is not None:
            latest = active[0]
            current = existing.model_copy(
                update={
                    "status": latest_value(active, "status", existing.status),
                    "commentary": latest_value(active, "commentary", existing.commentary),
                    "last_updated": latest.timestamp,
                    "changed_by": latest.changed_by,
                }
            )
            if not await self.assessments.upsert(current):
                raise InternalError("Failed to restore the assessment")
            self.logger.info("assessment_restored_from_history", **key, status=current.status)
        elif not active and existing is not None:
            if not await self.assessments.delete_by_key(project_id, standard_id, profession_id):
                raise InternalError("Failed to remove the assessment")
            self.logger.info("assessment_removed_with_history", **key)

        await self.aggregator.refresh(project_id)
        return current
