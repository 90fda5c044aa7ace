"""
Assessment Service Tests
========================

Tests for assessment upsert, delete and archive-and-recompute, and the
standards summary they keep up to date.

Version: 0.1.0
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from services.assurance.errors import (
    InternalError,
    NotFoundError,
    ReferentialIntegrityError,
    ValidationError,
)
from services.assurance.models.assessment import AssessmentPayload
from services.assurance.models.project import Project
from services.assurance.repositories import ProfessionRepository, ServiceStandardRepository
from services.assurance.services import AssessmentService, StandardsSummaryAggregator


ACTOR = "assessor@assurance.test"
KEY = ("p1", "std-1", "delivery-management")


@pytest_asyncio.fixture
async def project(reference_data, project_repository) -> Project:
    project = Project(id="p1", name="Project", status="GREEN")
    await project_repository.create(project)
    return project


async def save(service: AssessmentService, status: str, commentary: str = "", **extra: str | None):
    payload = AssessmentPayload(status=status, commentary=commentary, **extra)
    return await service.upsert(*KEY, payload, ACTOR)


# =============================================================================
# Upsert
# =============================================================================


class TestUpsertAssessment:
    """Tests for creating and overwriting assessments."""

    @pytest.mark.asyncio
    async def test_create(self, assessment_service: AssessmentService, project, project_repository, clock) -> None:
        assessment, created = await save(assessment_service, "GREEN", "fine")

        assert created is True
        assert assessment.status == "GREEN"
        assert assessment.changed_by == ACTOR
        assert assessment.last_updated == clock.now

        history = await assessment_service.history(*KEY)
        assert len(history) == 1
        assert history[0].changes["status"].from_ == ""
        assert history[0].changes["status"].to == "GREEN"

        stored = await project_repository.get_by_id("p1")
        assert [(s.standard_id, s.aggregated_status) for s in stored.standards_summary] == [("std-1", "GREEN")]

    @pytest.mark.asyncio
    async def test_update(self, assessment_service: AssessmentService, project, clock) -> None:
        await save(assessment_service, "GREEN", "fine")
        clock.advance(hours=1)

        assessment, created = await save(assessment_service, "RED", "fine")

        assert created is False
        assert assessment.status == "RED"
        history = await assessment_service.history(*KEY)
        assert len(history) == 2
        assert set(history[0].changes) == {"status"}

    @pytest.mark.asyncio
    async def test_identical_upsert_writes_nothing(
        self,
        assessment_service: AssessmentService,
        project,
        clock,
    ) -> None:
        first, _ = await save(assessment_service, "GREEN", "fine")
        clock.advance(hours=1)

        second, created = await save(assessment_service, "GREEN", "fine")

        assert created is False
        assert second == first
        assert len(await assessment_service.history(*KEY)) == 1

    @pytest.mark.asyncio
    async def test_payload_actor_overrides_caller(self, assessment_service: AssessmentService, project) -> None:
        assessment, _ = await save(assessment_service, "GREEN", changed_by="Jane Doe")

        assert assessment.changed_by == "Jane Doe"
        assert (await assessment_service.history(*KEY))[0].changed_by == "Jane Doe"

    @pytest.mark.asyncio
    async def test_backdated_entry(self, assessment_service: AssessmentService, project) -> None:
        await save(assessment_service, "AMBER", update_date="2025-02-01")

        history = await assessment_service.history(*KEY)
        assert history[0].timestamp == datetime(2025, 2, 1, tzinfo=UTC)

    @pytest.mark.asyncio
    async def test_future_entry_recorded_now(self, assessment_service: AssessmentService, project, clock) -> None:
        await save(assessment_service, "AMBER", update_date="2099-01-01")

        assert (await assessment_service.history(*KEY))[0].timestamp == clock.now

    @pytest.mark.asyncio
    async def test_invalid_status(self, assessment_service: AssessmentService, project) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await assessment_service.upsert(*KEY, AssessmentPayload.model_construct(status="AMBER_RED"), ACTOR)
        assert len(exc_info.value.errors) == 1
        assert exc_info.value.errors[0].startswith("status: ")

    @pytest.mark.asyncio
    async def test_summary_rolls_up_every_profession(
        self,
        assessment_service: AssessmentService,
        project,
        project_repository,
    ) -> None:
        await assessment_service.upsert("p1", "std-1", "delivery-management", AssessmentPayload(status="GREEN"), ACTOR)
        await assessment_service.upsert("p1", "std-1", "user-research", AssessmentPayload(status="RED"), ACTOR)
        await assessment_service.upsert("p1", "std-2", "delivery-management", AssessmentPayload(status="AMBER"), ACTOR)

        stored = await project_repository.get_by_id("p1")
        summary = {s.standard_id: s.aggregated_status for s in stored.standards_summary}
        assert summary == {"std-1": "RED", "std-2": "AMBER"}

    @pytest.mark.asyncio
    async def test_storage_failure(self, assessment_service: AssessmentService, project, fake_db) -> None:
        fake_db.assessments.fail_on.add("replace_one")

        with pytest.raises(InternalError):
            await save(assessment_service, "GREEN")


# =============================================================================
# Referential integrity
# =============================================================================


class TestReferentialIntegrity:
    """Upserts that reference missing or inactive entities."""

    @pytest.fixture
    def isolated_service(
        self,
        fake_db,
        project_repository,
        assessment_repository,
        assessment_ledger,
        clock,
    ) -> AssessmentService:
        return AssessmentService(
            assessments=assessment_repository,
            history=assessment_ledger,
            projects=project_repository,
            standards=ServiceStandardRepository(fake_db),
            professions=ProfessionRepository(fake_db),
            aggregator=AsyncMock(spec=StandardsSummaryAggregator),
            clock=clock,
        )

    @pytest.mark.asyncio
    async def test_missing_standard(self, isolated_service: AssessmentService, project, fake_db) -> None:
        with pytest.raises(ReferentialIntegrityError) as exc_info:
            await isolated_service.upsert(
                "p1", "std-404", "delivery-management", AssessmentPayload(status="GREEN"), ACTOR
            )

        assert exc_info.value.message == "Referenced service standard does not exist or is inactive"
        assert exc_info.value.status_code == 400
        assert fake_db.assessment_history.docs == {}
        assert fake_db.assessments.docs == {}
        isolated_service.aggregator.refresh.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_inactive_profession(self, isolated_service: AssessmentService, project) -> None:
        with pytest.raises(ReferentialIntegrityError) as exc_info:
            await isolated_service.upsert("p1", "std-1", "retired-profession", AssessmentPayload(status="GREEN"), ACTOR)

        assert exc_info.value.message == "Referenced profession does not exist or is inactive"
        isolated_service.aggregator.refresh.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_project(self, isolated_service: AssessmentService, reference_data) -> None:
        with pytest.raises(ReferentialIntegrityError) as exc_info:
            await isolated_service.upsert("nope", "std-1", "delivery-management", AssessmentPayload(status="GREEN"), ACTOR)

        assert exc_info.value.message == "Referenced project does not exist"

    @pytest.mark.asyncio
    async def test_successful_upsert_refreshes_summary(self, isolated_service: AssessmentService, project) -> None:
        await isolated_service.upsert("p1", "std-1", "delivery-management", AssessmentPayload(status="GREEN"), ACTOR)

        isolated_service.aggregator.refresh.assert_awaited_once_with("p1")


# =============================================================================
# Archive and recompute
# =============================================================================


class TestArchiveAssessmentHistory:
    """Tests for archiving assessment history entries."""

    @pytest.mark.asyncio
    async def test_archive_restores_previous_entry(
        self,
        assessment_service: AssessmentService,
        project,
        project_repository,
        clock,
    ) -> None:
        await save(assessment_service, "GREEN", "first")
        clock.advance(hours=1)
        await save(assessment_service, "AMBER", "second")
        clock.advance(hours=1)
        await save(assessment_service, "RED", "third")

        history = await assessment_service.history(*KEY)
        newest, previous = history[0], history[1]

        restored = await assessment_service.archive_history(*KEY, newest.id, ACTOR)

        assert restored is not None
        assert restored.status == previous.to_value("status") == "AMBER"
        assert restored.commentary == previous.to_value("commentary") == "second"
        assert restored.last_updated == previous.timestamp
        assert restored.changed_by == previous.changed_by
        assert (await assessment_service.get(*KEY)) == restored

        stored = await project_repository.get_by_id("p1")
        assert stored.standards_summary[0].aggregated_status == "AMBER"

    @pytest.mark.asyncio
    async def test_archiving_only_entry_deletes_assessment(
        self,
        assessment_service: AssessmentService,
        project,
        project_repository,
    ) -> None:
        await save(assessment_service, "GREEN")
        only = (await assessment_service.history(*KEY))[0]

        result = await assessment_service.archive_history(*KEY, only.id, ACTOR)

        assert result is None
        with pytest.raises(NotFoundError):
            await assessment_service.get(*KEY)
        stored = await project_repository.get_by_id("p1")
        assert stored.standards_summary == []
        assert len(await assessment_service.history(*KEY, include_archived=True)) == 1

    @pytest.mark.asyncio
    async def test_unknown_entry(self, assessment_service: AssessmentService, project) -> None:
        await save(assessment_service, "GREEN")

        with pytest.raises(NotFoundError):
            await assessment_service.archive_history(*KEY, "does-not-exist", ACTOR)

    @pytest.mark.asyncio
    async def test_second_archive_is_not_found(self, assessment_service: AssessmentService, project) -> None:
        await save(assessment_service, "GREEN")
        only = (await assessment_service.history(*KEY))[0]
        await assessment_service.archive_history(*KEY, only.id, ACTOR)

        with pytest.raises(NotFoundError):
            await assessment_service.archive_history(*KEY, only.id, ACTOR)


# =============================================================================
# Delete and queries
# =============================================================================


class TestDeleteAssessment:
    @pytest.mark.asyncio
    async def test_delete_recomputes_summary(
        self,
        assessment_service: AssessmentService,
        project,
        project_repository,
    ) -> None:
        await save(assessment_service, "GREEN")

        await assessment_service.delete(*KEY)

        assert await assessment_service.list_for_project("p1") == []
        stored = await project_repository.get_by_id("p1")
        assert stored.standards_summary == []

    @pytest.mark.asyncio
    async def test_delete_missing(self, assessment_service: AssessmentService, project) -> None:
        with pytest.raises(NotFoundError):
            await assessment_service.delete(*KEY)

    @pytest.mark.asyncio
    async def test_list_for_project(self, assessment_service: AssessmentService, project) -> None:
        await assessment_service.upsert("p1", "std-2", "user-research", AssessmentPayload(status="TBC"), ACTOR)
        await assessment_service.upsert("p1", "std-1", "user-research", AssessmentPayload(status="RED"), ACTOR)

        listed = await assessment_service.list_for_project("p1")
        assert [(a.standard_id, a.profession_id) for a in listed] == [
            ("std-1", "user-research"),
            ("std-2", "user-research"),
        ]
