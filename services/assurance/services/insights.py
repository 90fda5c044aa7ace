"""
Prioritisation Insights
=======================

Read-only views over projects and their assessment history, used to
decide which deliveries need attention:

- Stale deliveries: no active assessment change within a threshold.
- Worsening deliveries: a standard whose newest assessed status is worse
  than the one before it (or whose first ever status was RED/AMBER),
  changed within a look-back window.

Only assessment history entries that set a status take part in the
status trajectory of a standard.

Version: 0.1.0
"""

from collections import defaultdict
from collections.abc import Callable, Sequence
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from shared.logging import get_logger
from services.assurance.errors import operation_boundary
from services.assurance.models.history import AssessmentHistory
from services.assurance.models.insights import (
    DeliveryNeedingUpdate,
    PrioritisationResponse,
    StandardChange,
    WorseningStandardsDelivery,
)
from services.assurance.models.project import Project
from services.assurance.repositories.history import AssessmentHistoryLedger
from services.assurance.repositories.projects import ProjectRepository
from services.assurance.repositories.reference import ServiceStandardRepository
from services.assurance.services.backdating import utc_now


if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger


DEFAULT_STALE_DAYS = 14
DEFAULT_WORSENING_DAYS = 14
STATUS_HISTORY_DEPTH = 5

# Higher is better
STATUS_RANK = {"GREEN": 3, "AMBER": 2, "RED": 1}


def is_worsening(statuses: Sequence[str]) -> bool:
    """
    Whether the newest status is a deterioration.

    Args:
        statuses: Assessed statuses, newest first

    Returns:
        True when the newest status ranks below the previous one, or when
        it is the only status and is not GREEN. Unranked statuses (TBC)
        never count as worsening.
    """
    if not statuses:
        return False
    current = STATUS_RANK.get(str(statuses[0]).upper())
    if current is None:
        return False
    if len(statuses) == 1:
        return current < STATUS_RANK["GREEN"]
    previous = STATUS_RANK.get(str(statuses[1]).upper())
    if previous is None:
        return False
    return current < previous


class InsightsService:
    """Prioritisation data for the weekly assurance review."""

    def __init__(
        self,
        projects: ProjectRepository,
        history: AssessmentHistoryLedger,
        standards: ServiceStandardRepository,
        logger: "BoundLogger | None" = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.projects = projects
        self.ledger = history
        self.standards = standards
        self.logger = logger or get_logger(__name__)
        self.clock = clock

    async def _history_by_project(self) -> dict[str, list[AssessmentHistory]]:
        grouped: dict[str, list[AssessmentHistory]] = defaultdict(list)
        for entry in await self.ledger.list_all_active():
            grouped[entry.project_id].append(entry)
        return grouped

    def _needing_updates(
        self,
        projects: Sequence[Project],
        history: dict[str, list[AssessmentHistory]],
        now: datetime,
        stale_days: int,
    ) -> list[DeliveryNeedingUpdate]:
        cutoff = now - timedelta(days=stale_days)
        stale: list[DeliveryNeedingUpdate] = []
        for project in projects:
            entries = history.get(project.id, [])
            last = entries[0].timestamp if entries else None
            if last is not None and last >= cutoff:
                continue
            stale.append(
                DeliveryNeedingUpdate(
                    id=project.id,
                    name=project.name,
                    status=project.status,
                    last_service_standard_update=last,
                    days_since_standard_update=(now - last).days if last is not None else None,
                )
            )

        # Never assessed first, then the longest without an update
        stale.sort(
            key=lambda d: (d.days_since_standard_update is not None, -(d.days_since_standard_update or 0))
        )
        return stale

    async def _worsening(
        self,
        projects: Sequence[Project],
        history: dict[str, list[AssessmentHistory]],
        now: datetime,
        worsening_days: int,
    ) -> list[WorseningStandardsDelivery]:
        cutoff = now - timedelta(days=worsening_days)
        standards = {s.id: s for s in await self.standards.list_active()}
        worsening: list[WorseningStandardsDelivery] = []

        for project in projects:
            by_standard: dict[str, list[AssessmentHistory]] = defaultdict(list)
            for entry in history.get(project.id, []):
                if "status" in entry.changes:
                    by_standard[entry.standard_id].append(entry)

            changes: list[StandardChange] = []
            for standard_id, entries in by_standard.items():
                standard = standards.get(standard_id)
                if standard is None or entries[0].timestamp < cutoff:
                    continue
                statuses = [str(entry.to_value("status")) for entry in entries]
                if not is_worsening(statuses):
                    continue
                changes.append(
                    StandardChange(
                        standard_number=standard.number,
                        standard_name=standard.name,
                        status_history=statuses[:STATUS_HISTORY_DEPTH][::-1],
                    )
                )

            if changes:
                worsening.append(
                    WorseningStandardsDelivery(
                        id=project.id,
                        name=project.name,
                        status=project.status,
                        standard_changes=sorted(changes, key=lambda c: c.standard_number),
                    )
                )
        return worsening

    @operation_boundary("get_prioritisation")
    async def prioritisation(
        self,
        stale_days: int = DEFAULT_STALE_DAYS,
        worsening_days: int = DEFAULT_WORSENING_DAYS,
    ) -> PrioritisationResponse:
        """
        Deliveries needing attention.

        Args:
            stale_days: A delivery with no assessment change for longer than this is stale
            worsening_days: Look-back window for worsening standards

        Returns:
            Stale deliveries (never assessed first, then oldest first) and
            deliveries with worsening standards (ordered by project name)
        """
        now = self.clock()
        projects = await self.projects.list_all()
        history = await self._history_by_project()

        response = PrioritisationResponse(
            deliveries_needing_standard_updates=self._needing_updates(projects, history, now, stale_days),
            deliveries_with_worsening_standards=await self._worsening(projects, history, now, worsening_days),
        )
        self.logger.info(
            "prioritisation_computed",
            stale_days=stale_days,
            worsening_days=worsening_days,
            needing_updates=len(response.deliveries_needing_standard_updates),
            worsening=len(response.deliveries_with_worsening_standards),
        )
        return response
