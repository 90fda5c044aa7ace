"""
Project Service
===============

Create, update and archive workflows for projects.

Every update is diffed against the stored project and the differences
are written to the project history before the project itself is
replaced. The cached standards summary is owned by the aggregator and
is carried over unchanged by these workflows.

Version: 0.1.0
"""

from collections import Counter, defaultdict
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
from services.assurance.models.history import ProjectHistory, latest_value
from services.assurance.models.project import (
    Project,
    ProjectPayload,
    TagCategorySummary,
    TagValueCount,
)
from services.assurance.repositories.base import new_id
from services.assurance.repositories.history import ProjectHistoryLedger
from services.assurance.repositories.projects import ProjectRepository
from services.assurance.services.backdating import (
    guard_update_date,
    parse_effective_date,
    parse_range_end,
    resolve_history_timestamp,
    utc_now,
)
from services.assurance.services.changes import PROJECT_FIELDS, detect_changes
from services.assurance.validators import ProjectValidator, Validator


if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger


NO_TAG_VALUE = "No Value"


class ProjectService:
    """
    Project workflows.

    Collaborators are injected so each workflow can run against any
    storage and validator.
    """

    def __init__(
        self,
        projects: ProjectRepository,
        history: ProjectHistoryLedger,
        validator: Validator | None = None,
        logger: "BoundLogger | None" = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.projects = projects
        self.ledger = history
        self.validator = validator or ProjectValidator()
        self.logger = logger or get_logger(__name__)
        self.clock = clock

    def _validate(self, payload: ProjectPayload, action: str) -> None:
        errors = self.validator.validate(payload)
        if errors:
            self.logger.warning("project_validation_failed", action=action, errors=errors)
            raise ValidationError(f"Validation errors occurred whilst {action} the project", errors)

    # =========================================================================
    # Queries
    # =========================================================================

    @operation_boundary("get_project")
    async def get(self, project_id: str) -> Project:
        project = await self.projects.get_by_id(project_id)
        if project is None:
            raise NotFoundError(f"Project not found: {project_id}")
        return project

    @operation_boundary("list_projects")
    async def search(
        self,
        tag: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
        delivery_group_id: str | None = None,
    ) -> list[Project]:
        """List projects, filtered by tag, last-updated window and delivery group."""
        errors: list[str] = []
        start = parse_effective_date(start_date)
        end = parse_range_end(end_date)
        if start_date and start is None:
            errors.append(f"start_date '{start_date}' is not a valid date")
        if end_date and end is None:
            errors.append(f"end_date '{end_date}' is not a valid date")
        if errors:
            raise ValidationError("Invalid project filters", errors)

        return await self.projects.search(
            tag=tag,
            start_date=start,
            end_date=end,
            delivery_group_id=delivery_group_id,
        )

    @operation_boundary("get_project_history")
    async def history(self, project_id: str, include_archived: bool = False) -> list[ProjectHistory]:
        return await self.ledger.list_for({"project_id": project_id}, include_archived=include_archived)

    @operation_boundary("summarise_project_tags")
    async def tags_summary(self) -> list[TagCategorySummary]:
        """
        Count projects per tag category and value.

        Tags take the form "Category: Value"; a tag without a value is
        counted under "No Value".
        """
        counts: dict[str, Counter[str]] = defaultdict(Counter)
        for project in await self.projects.list_all():
            for tag in set(project.tags):
                category, _, value = tag.partition(": ")
                counts[category.strip()][value.strip() or NO_TAG_VALUE] += 1

        return [
            TagCategorySummary(
                category=category,
                total=sum(values.values()),
                values=[TagValueCount(value=v, count=values[v]) for v in sorted(values)],
            )
            for category, values in sorted(counts.items())
        ]

    # =========================================================================
    # Mutations
    # =========================================================================

    @operation_boundary("create_project")
    async def create(self, payload: ProjectPayload, changed_by: str) -> Project:
        """
        Create a project and seed its history with the initial status and commentary.

        Raises:
            ValidationError: Invalid payload or id already in use
            InternalError: Project or its first history entry could not be written
        """
        self._validate(payload, "creating")

        project_id = payload.id or new_id()
        if await self.projects.get_by_id(project_id) is not None:
            raise ValidationError(
                "Validation errors occurred whilst creating the project",
                [f"A project with id '{project_id}' already exists"],
            )

        now = self.clock()
        project = Project(
            **payload.model_dump(exclude={"id", "update_date"}),
            id=project_id,
            update_date=guard_update_date(payload.update_date, None, None, now),
            last_updated=now,
        )

        if not await self.projects.create(project):
            raise InternalError("Failed to create the project")

        entry = ProjectHistory(
            id=new_id(),
            project_id=project_id,
            timestamp=resolve_history_timestamp(payload.update_date, now),
            changed_by=changed_by,
            changes=detect_changes(None, project, ("status", "commentary")),
        )
        if not await self.ledger.append(entry):
            raise InternalError("Failed to record the project history")

        self.logger.info("project_created", project_id=project_id, changed_by=changed_by)
        return project

    @operation_boundary("update_project")
    async def update(
        self,
        project_id: str,
        payload: ProjectPayload,
        changed_by: str,
        suppress_history: bool = False,
    ) -> Project:
        """
        Apply a full-replacement update.

        Steps: validate, load, diff, record history (unless suppressed),
        carry over the standards summary, settle the display dates,
        mirror status/commentary from the newest history and persist.

        Returns:
            The persisted project; the stored one untouched when nothing changed

        Raises:
            ValidationError: Invalid payload
            NotFoundError: No project with this id
            InternalError: History could not be written
        """
        self._validate(payload, "updating")

        existing = await self.projects.get_by_id(project_id)
        if existing is None:
            raise NotFoundError(f"Project not found: {project_id}")

        now = self.clock()
        key = {"project_id": project_id}
        latest = await self.ledger.latest_active(key)

        candidate = existing.model_copy(
            update={
                **payload.model_dump(exclude={"id", "update_date"}),
                "update_date": guard_update_date(
                    payload.update_date,
                    existing.update_date,
                    latest.timestamp if latest else None,
                    now,
                ),
            }
        )

        changes = detect_changes(existing, candidate, PROJECT_FIELDS)
        if not changes and candidate.update_date == existing.update_date:
            self.logger.info("project_unchanged", project_id=project_id)
            return existing

        if changes and not suppress_history:
            entry = ProjectHistory(
                id=new_id(),
                project_id=project_id,
                timestamp=resolve_history_timestamp(payload.update_date, now),
                changed_by=changed_by,
                changes=changes,
            )
            if not await self.ledger.append(entry):
                raise InternalError("Failed to record the project history")

            # Fields the newest entry did not touch keep the payload's value
            newest = await self.ledger.latest_active(key)
            if newest is not None:
                candidate = candidate.model_copy(
                    update={
                        "status": newest.to_value("status", candidate.status),
                        "commentary": newest.to_value("commentary", candidate.commentary),
                    }
                )

        candidate = candidate.model_copy(update={"last_updated": now})
        if not await self.projects.replace(project_id, candidate):
            raise NotFoundError(f"Project not found: {project_id}")

        self.logger.info(
            "project_updated",
            project_id=project_id,
            changed_by=changed_by,
            changes=sorted(changes),
            history_suppressed=suppress_history,
        )
        return candidate

    @operation_boundary("delete_project")
    async def delete(self, project_id: str) -> None:
        if not await self.projects.delete(project_id):
            raise NotFoundError(f"Project not found: {project_id}")
        self.logger.info("project_deleted", project_id=project_id)

    @operation_boundary("archive_project_history")
    async def archive_history(self, project_id: str, history_id: str, archived_by: str) -> Project | None:
        """
        Archive one history entry and re-derive status/commentary from what remains.

        `last_updated` follows the timestamp of the newest remaining entry.
        A project whose history is archived away keeps its current fields.

        Raises:
            NotFoundError: No active entry with this id for the project
        """
        key = {"project_id": project_id}
        if not await self.ledger.archive(key, history_id):
            raise NotFoundError(f"History entry not found: {history_id}")

        self.logger.info(
            "history_entry_archived",
            project_id=project_id,
            history_id=history_id,
            archived_by=archived_by,
        )

        project = await self.projects.get_by_id(project_id)
        if project is None:
            return None

        active = await self.ledger.list_active(key)
        if not active:
            self.logger.info("project_history_exhausted", project_id=project_id)
            return project

        restored = project.model_copy(
            update={
                "status": latest_value(active, "status", project.status),
                "commentary": latest_value(active, "commentary", project.commentary),
                "last_updated": active[0].timestamp,
            }
        )
        if restored != project:
            if not await self.projects.replace(project_id, restored):
                raise NotFoundError(f"Project not found: {project_id}")
            self.logger.info(
                "project_restored_from_history",
                project_id=project_id,
                status=restored.status,
            )
        return restored
