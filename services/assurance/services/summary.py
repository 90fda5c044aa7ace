"""
Assessment Aggregator
=====================

Recomputes a project's cached standards summary from its live
assessments. Always a full recompute: assessments are grouped by
standard, each group's status reduced with the Status Reducer and its
non-blank commentary joined with "; ".

Version: 0.1.0
"""

from collections import defaultdict
from collections.abc import Iterable
from typing import TYPE_CHECKING

from shared.logging import get_logger
from services.assurance.errors import InternalError
from services.assurance.models.assessment import Assessment
from services.assurance.models.project import ProfessionAssessmentSummary, StandardSummary
from services.assurance.repositories.assessments import AssessmentRepository
from services.assurance.repositories.projects import ProjectRepository
from services.assurance.services.status import aggregate_status


if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger


COMMENTARY_SEPARATOR = "; "


def build_standards_summary(assessments: Iterable[Assessment]) -> list[StandardSummary]:
    """
    Roll profession assessments up to one summary per standard.

    Standards are ordered by id and professions within a standard by id,
    so the same assessment set always yields the same summary.
    """
    groups: dict[str, list[Assessment]] = defaultdict(list)
    for assessment in assessments:
        groups[assessment.standard_id].append(assessment)

    summaries: list[StandardSummary] = []
    for standard_id in sorted(groups):
        group = sorted(groups[standard_id], key=lambda a: a.profession_id)
        timestamps = [a.last_updated for a in group if a.last_updated is not None]
        summaries.append(
            StandardSummary(
                standard_id=standard_id,
                aggregated_status=aggregate_status(a.status for a in group),
                aggregated_commentary=COMMENTARY_SEPARATOR.join(
                    a.commentary for a in group if a.commentary and a.commentary.strip()
                ),
                last_updated=max(timestamps, default=None),
                professions=[
                    ProfessionAssessmentSummary(
                        profession_id=a.profession_id,
                        status=a.status,
                        commentary=a.commentary,
                        last_updated=a.last_updated,
                    )
                    for a in group
                ],
            )
        )
    return summaries


class StandardsSummaryAggregator:
    """Keeps `Project.standards_summary` in line with the live assessments."""

    def __init__(
        self,
        projects: ProjectRepository,
        assessments: AssessmentRepository,
        logger: "BoundLogger | None" = None,
    ) -> None:
        self.projects = projects
        self.assessments = assessments
        self.logger = logger or get_logger(__name__)

    async def refresh(self, project_id: str) -> list[StandardSummary] | None:
        """
        Recompute and persist the summary for one project.

        Returns:
            The new summary, or None when the project no longer exists

        Raises:
            InternalError: If the summary could not be written
        """
        if await self.projects.get_by_id(project_id) is None:
            self.logger.warning("standards_summary_project_missing", project_id=project_id)
            return None

        live = await self.assessments.list_by_project(project_id)
        summary = build_standards_summary(live)

        if not await self.projects.set_standards_summary(project_id, summary):
            raise InternalError("Failed to update the standards summary")

        self.logger.info(
            "standards_summary_refreshed",
            project_id=project_id,
            standards=len(summary),
            assessments=len(live),
        )
        return summary
