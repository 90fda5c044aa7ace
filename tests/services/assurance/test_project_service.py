"""
Project Service Tests
=====================

Tests for project create/update/archive workflows and their history.

Version: 0.1.0
"""

from datetime import UTC, datetime
from typing import Any

import pytest

from services.assurance.errors import InternalError, NotFoundError, ValidationError
from services.assurance.models.project import ProjectPayload
from services.assurance.services.projects import ProjectService


ACTOR = "admin@assurance.test"


@pytest.fixture
def payload(sample_project_data: dict[str, Any]) -> ProjectPayload:
    return ProjectPayload(**sample_project_data)


def changed(payload: ProjectPayload, **fields: Any) -> ProjectPayload:
    return payload.model_copy(update=fields)


# =============================================================================
# Create
# =============================================================================


class TestCreateProject:
    """Tests for project creation."""

    @pytest.mark.asyncio
    async def test_create_seeds_history(self, project_service: ProjectService, payload: ProjectPayload, clock) -> None:
        project = await project_service.create(payload, ACTOR)

        assert project.id == "p1"
        assert project.update_date == "2025-03-10"
        assert project.last_updated == clock.now

        history = await project_service.history("p1")
        assert len(history) == 1
        assert history[0].changed_by == ACTOR
        assert history[0].changes["status"].from_ == ""
        assert history[0].changes["status"].to == "GREEN"
        assert history[0].changes["commentary"].to == "ok"

    @pytest.mark.asyncio
    async def test_create_generates_id(self, project_service: ProjectService, payload: ProjectPayload) -> None:
        project = await project_service.create(changed(payload, id=None), ACTOR)
        assert len(project.id) == 24

    @pytest.mark.asyncio
    async def test_duplicate_id_rejected(self, project_service: ProjectService, payload: ProjectPayload) -> None:
        await project_service.create(payload, ACTOR)

        with pytest.raises(ValidationError) as exc_info:
            await project_service.create(payload, ACTOR)
        assert exc_info.value.errors == ["A project with id 'p1' already exists"]

    @pytest.mark.asyncio
    async def test_invalid_payload_writes_nothing(
        self,
        project_service: ProjectService,
        payload: ProjectPayload,
        fake_db,
    ) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await project_service.create(changed(payload, name="", status="PURPLE"), ACTOR)

        assert len(exc_info.value.errors) == 2
        assert fake_db.projects.docs == {}
        assert fake_db.project_history.docs == {}

    @pytest.mark.asyncio
    async def test_backdated_create(self, project_service: ProjectService, payload: ProjectPayload) -> None:
        project = await project_service.create(changed(payload, update_date="2025-01-15"), ACTOR)
        history = await project_service.history("p1")

        assert project.update_date == "2025-01-15"
        assert history[0].timestamp == datetime(2025, 1, 15, tzinfo=UTC)


# =============================================================================
# Update
# =============================================================================


class TestUpdateProject:
    """Tests for the update orchestrator."""

    @pytest.mark.asyncio
    async def test_identical_update_is_a_no_op(
        self,
        project_service: ProjectService,
        payload: ProjectPayload,
        clock,
    ) -> None:
        created = await project_service.create(payload, ACTOR)
        clock.advance(hours=1)

        updated = await project_service.update("p1", payload, ACTOR)

        assert updated == created
        assert len(await project_service.history("p1")) == 1

    @pytest.mark.asyncio
    async def test_repeated_update_is_idempotent(
        self,
        project_service: ProjectService,
        payload: ProjectPayload,
        clock,
    ) -> None:
        await project_service.create(payload, ACTOR)
        clock.advance(hours=1)
        change = changed(payload, status="RED")

        first = await project_service.update("p1", change, ACTOR)
        clock.advance(hours=1)
        second = await project_service.update("p1", change, ACTOR)

        assert second == first
        assert len(await project_service.history("p1")) == 2

    @pytest.mark.asyncio
    async def test_status_change_is_recorded(
        self,
        project_service: ProjectService,
        payload: ProjectPayload,
        clock,
    ) -> None:
        await project_service.create(payload, ACTOR)
        clock.advance(hours=1)

        updated = await project_service.update("p1", changed(payload, status="RED"), "someone@else.test")

        assert updated.status == "RED"
        assert updated.last_updated == clock.now
        history = await project_service.history("p1")
        assert len(history) == 2
        assert set(history[0].changes) == {"status"}
        assert history[0].changes["status"].from_ == "GREEN"
        assert history[0].changes["status"].to == "RED"
        assert history[0].changed_by == "someone@else.test"

    @pytest.mark.asyncio
    async def test_non_status_change_carries_status(
        self,
        project_service: ProjectService,
        payload: ProjectPayload,
        clock,
    ) -> None:
        await project_service.create(payload, ACTOR)
        clock.advance(hours=1)

        await project_service.update("p1", changed(payload, name="Renamed", tags=["Priority"]), ACTOR)

        latest = (await project_service.history("p1"))[0]
        assert set(latest.changes) == {"name", "tags", "status"}
        assert latest.changes["status"].from_ == latest.changes["status"].to == "GREEN"

    @pytest.mark.asyncio
    async def test_standards_summary_is_carried_over(
        self,
        project_service: ProjectService,
        project_repository,
        payload: ProjectPayload,
    ) -> None:
        from services.assurance.models.project import StandardSummary

        await project_service.create(payload, ACTOR)
        summary = [StandardSummary(standard_id="std-1", aggregated_status="RED")]
        await project_repository.set_standards_summary("p1", summary)

        updated = await project_service.update("p1", changed(payload, commentary="changed"), ACTOR)

        assert updated.standards_summary == summary

    @pytest.mark.asyncio
    async def test_suppressed_history(self, project_service: ProjectService, payload: ProjectPayload) -> None:
        await project_service.create(payload, ACTOR)

        updated = await project_service.update("p1", changed(payload, status="AMBER"), ACTOR, suppress_history=True)

        assert updated.status == "AMBER"
        assert len(await project_service.history("p1")) == 1

    @pytest.mark.asyncio
    async def test_suppressed_correction_survives_later_update(
        self,
        project_service: ProjectService,
        payload: ProjectPayload,
    ) -> None:
        await project_service.create(payload, ACTOR)
        fixed = changed(payload, commentary="fixed typo")
        await project_service.update("p1", fixed, ACTOR, suppress_history=True)

        updated = await project_service.update("p1", changed(fixed, name="Renamed"), ACTOR)

        assert updated.commentary == "fixed typo"
        assert updated.name == "Renamed"
        stored = await project_service.get("p1")
        assert (stored.name, stored.commentary) == ("Renamed", "fixed typo")
        assert set((await project_service.history("p1"))[0].changes) == {"name"}

    @pytest.mark.asyncio
    async def test_missing_project(self, project_service: ProjectService, payload: ProjectPayload) -> None:
        with pytest.raises(NotFoundError):
            await project_service.update("missing", payload, ACTOR)

    @pytest.mark.asyncio
    async def test_invalid_payload(self, project_service: ProjectService, payload: ProjectPayload) -> None:
        await project_service.create(payload, ACTOR)

        with pytest.raises(ValidationError):
            await project_service.update("p1", changed(payload, phase="Gamma"), ACTOR)
        assert len(await project_service.history("p1")) == 1

    @pytest.mark.asyncio
    async def test_history_write_failure_aborts_update(
        self,
        project_service: ProjectService,
        payload: ProjectPayload,
        fake_db,
    ) -> None:
        await project_service.create(payload, ACTOR)
        fake_db.project_history.fail_on.add("insert_one")

        with pytest.raises(InternalError):
            await project_service.update("p1", changed(payload, status="RED"), ACTOR)

        stored = await project_service.get("p1")
        assert stored.status == "GREEN"

    @pytest.mark.asyncio
    async def test_storage_read_failure_becomes_internal_error(
        self,
        project_service: ProjectService,
        fake_db,
    ) -> None:
        fake_db.projects.fail_on.add("find_one")

        with pytest.raises(InternalError) as exc_info:
            await project_service.get("p1")
        assert exc_info.value.message == "Failed to get project"


# =============================================================================
# Backdating
# =============================================================================


class TestBackdatedUpdates:
    """Tests for effective-dated updates."""

    @pytest.mark.asyncio
    async def test_display_date_never_moves_behind_history(
        self,
        project_service: ProjectService,
        payload: ProjectPayload,
        clock,
    ) -> None:
        await project_service.create(payload, ACTOR)
        clock.advance(days=1)

        updated = await project_service.update(
            "p1",
            changed(payload, commentary="late news", update_date="2025-01-01"),
            ACTOR,
        )

        assert updated.update_date == "2025-03-10"
        history = await project_service.history("p1")
        assert history[-1].timestamp == datetime(2025, 1, 1, tzinfo=UTC)

    @pytest.mark.asyncio
    async def test_backdated_change_does_not_displace_newer_status(
        self,
        project_service: ProjectService,
        payload: ProjectPayload,
        clock,
    ) -> None:
        await project_service.create(payload, ACTOR)
        clock.advance(days=1)

        updated = await project_service.update(
            "p1",
            changed(payload, status="RED", update_date="2025-01-01"),
            ACTOR,
        )

        assert updated.status == "GREEN"

    @pytest.mark.asyncio
    async def test_future_date_is_recorded_now(
        self,
        project_service: ProjectService,
        payload: ProjectPayload,
        clock,
    ) -> None:
        await project_service.create(payload, ACTOR)
        clock.advance(days=1)

        updated = await project_service.update(
            "p1",
            changed(payload, status="RED", update_date="2030-01-01"),
            ACTOR,
        )

        assert updated.status == "RED"
        assert updated.update_date == "2030-01-01"
        assert (await project_service.history("p1"))[0].timestamp == clock.now

    @pytest.mark.asyncio
    async def test_forward_display_date_is_accepted(
        self,
        project_service: ProjectService,
        payload: ProjectPayload,
        clock,
    ) -> None:
        await project_service.create(payload, ACTOR)
        clock.advance(days=2)

        updated = await project_service.update("p1", changed(payload, update_date="2025-03-12"), ACTOR)

        assert updated.update_date == "2025-03-12"
        assert len(await project_service.history("p1")) == 1


# =============================================================================
# Archive
# =============================================================================


class TestArchiveProjectHistory:
    """Tests for archiving project history entries."""

    @pytest.mark.asyncio
    async def test_archive_restores_previous_status(
        self,
        project_service: ProjectService,
        payload: ProjectPayload,
        clock,
    ) -> None:
        await project_service.create(payload, ACTOR)
        clock.advance(hours=1)
        await project_service.update("p1", changed(payload, status="RED", commentary="blocked"), ACTOR)
        newest = (await project_service.history("p1"))[0]

        restored = await project_service.archive_history("p1", newest.id, ACTOR)

        assert restored is not None
        assert restored.status == "GREEN"
        assert restored.commentary == "ok"
        assert (await project_service.get("p1")).status == "GREEN"
        assert len(await project_service.history("p1")) == 1
        assert len(await project_service.history("p1", include_archived=True)) == 2

    @pytest.mark.asyncio
    async def test_archive_restores_last_updated(
        self,
        project_service: ProjectService,
        payload: ProjectPayload,
        clock,
    ) -> None:
        await project_service.create(payload, ACTOR)
        clock.advance(hours=1)
        updated = await project_service.update("p1", changed(payload, status="RED"), ACTOR)
        assert updated.last_updated == datetime(2025, 3, 10, 13, 0, tzinfo=UTC)
        newest = (await project_service.history("p1"))[0]

        restored = await project_service.archive_history("p1", newest.id, ACTOR)

        assert restored is not None
        assert restored.last_updated == datetime(2025, 3, 10, 12, 0, tzinfo=UTC)
        assert (await project_service.get("p1")).last_updated == datetime(2025, 3, 10, 12, 0, tzinfo=UTC)

    @pytest.mark.asyncio
    async def test_archiving_last_entry_keeps_project(
        self,
        project_service: ProjectService,
        payload: ProjectPayload,
    ) -> None:
        created = await project_service.create(payload, ACTOR)
        only = (await project_service.history("p1"))[0]

        result = await project_service.archive_history("p1", only.id, ACTOR)

        assert result == created
        assert await project_service.get("p1") == created

    @pytest.mark.asyncio
    async def test_unknown_entry(self, project_service: ProjectService, payload: ProjectPayload) -> None:
        await project_service.create(payload, ACTOR)

        with pytest.raises(NotFoundError):
            await project_service.archive_history("p1", "does-not-exist", ACTOR)

    @pytest.mark.asyncio
    async def test_entry_cannot_be_archived_twice(
        self,
        project_service: ProjectService,
        payload: ProjectPayload,
    ) -> None:
        await project_service.create(payload, ACTOR)
        entry = (await project_service.history("p1"))[0]
        await project_service.archive_history("p1", entry.id, ACTOR)

        with pytest.raises(NotFoundError):
            await project_service.archive_history("p1", entry.id, ACTOR)

    @pytest.mark.asyncio
    async def test_entry_of_another_project(
        self,
        project_service: ProjectService,
        payload: ProjectPayload,
    ) -> None:
        await project_service.create(payload, ACTOR)
        await project_service.create(changed(payload, id="p2"), ACTOR)
        other = (await project_service.history("p2"))[0]

        with pytest.raises(NotFoundError):
            await project_service.archive_history("p1", other.id, ACTOR)


# =============================================================================
# Queries
# =============================================================================


class TestProjectQueries:
    """Tests for listing, filtering and tag summaries."""

    @pytest.mark.asyncio
    async def test_search_filters(self, project_service: ProjectService, payload: ProjectPayload, clock) -> None:
        await project_service.create(changed(payload, id="p1", name="Bravo", delivery_group_id="dg-1"), ACTOR)
        clock.advance(days=5)
        await project_service.create(changed(payload, id="p2", name="Alpha", tags=["Portfolio: Urban"]), ACTOR)

        assert [p.id for p in await project_service.search()] == ["p2", "p1"]
        assert [p.id for p in await project_service.search(tag="Priority")] == ["p1"]
        assert [p.id for p in await project_service.search(delivery_group_id="dg-1")] == ["p1"]
        assert [p.id for p in await project_service.search(start_date="2025-03-12")] == ["p2"]
        assert [p.id for p in await project_service.search(end_date="2025-03-12")] == ["p1"]
        # A bare end date covers the whole day
        assert [p.id for p in await project_service.search(end_date="2025-03-10")] == ["p1"]
        assert [p.id for p in await project_service.search(end_date="2025-03-10T11:00:00Z")] == []

    @pytest.mark.asyncio
    async def test_search_rejects_bad_dates(self, project_service: ProjectService) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await project_service.search(start_date="soon", end_date="later")
        assert len(exc_info.value.errors) == 2

    @pytest.mark.asyncio
    async def test_tags_summary(self, project_service: ProjectService, payload: ProjectPayload) -> None:
        await project_service.create(changed(payload, id="p1", tags=["Portfolio: Rural", "Priority"]), ACTOR)
        await project_service.create(changed(payload, id="p2", tags=["Portfolio: Rural"]), ACTOR)
        await project_service.create(changed(payload, id="p3", tags=["Portfolio: Urban"]), ACTOR)

        summary = {s.category: s for s in await project_service.tags_summary()}

        assert summary["Portfolio"].total == 3
        assert [(v.value, v.count) for v in summary["Portfolio"].values] == [("Rural", 2), ("Urban", 1)]
        assert [(v.value, v.count) for v in summary["Priority"].values] == [("No Value", 1)]

    @pytest.mark.asyncio
    async def test_delete(self, project_service: ProjectService, payload: ProjectPayload) -> None:
        await project_service.create(payload, ACTOR)
        await project_service.delete("p1")

        with pytest.raises(NotFoundError):
            await project_service.get("p1")
        with pytest.raises(NotFoundError):
            await project_service.delete("p1")
