"""
Reference Data Services
=======================

Professions and service standards. Both are soft-deleted, history
tracked on update, and can be bulk seeded by administrators.

Version: 0.1.0
"""

from collections.abc import Callable, Sequence
from datetime import datetime
from typing import TYPE_CHECKING, Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel

from shared.logging import get_logger
from services.assurance.errors import (
    InternalError,
    NotFoundError,
    ValidationError,
    operation_boundary,
)
from services.assurance.models.history import HistoryEntry, ProfessionHistory, ServiceStandardHistory
from services.assurance.models.reference import (
    Profession,
    ProfessionPayload,
    ServiceStandard,
    ServiceStandardPayload,
)
from services.assurance.repositories.base import SoftDeleteRepository, new_id
from services.assurance.repositories.history import (
    HistoryLedger,
    ProfessionHistoryLedger,
    ServiceStandardHistoryLedger,
)
from services.assurance.repositories.reference import ProfessionRepository, ServiceStandardRepository
from services.assurance.services.backdating import utc_now
from services.assurance.services.changes import (
    PROFESSION_FIELDS,
    SERVICE_STANDARD_FIELDS,
    detect_changes,
)
from services.assurance.validators import (
    ProfessionValidator,
    ServiceStandardValidator,
    Validator,
)


if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger


ItemT = TypeVar("ItemT", bound=BaseModel)
PayloadT = TypeVar("PayloadT", bound=BaseModel)
EntryT = TypeVar("EntryT", bound=HistoryEntry)


class ReferenceDataService(Generic[ItemT, PayloadT, EntryT]):
    """Shared workflows for soft-deletable, history-tracked reference data."""

    label: ClassVar[str]
    noun: ClassVar[str]
    history_key: ClassVar[str]
    tracked_fields: ClassVar[tuple[str, ...]]
    item_model: type[ItemT]
    entry_model: type[EntryT]

    def __init__(
        self,
        items: SoftDeleteRepository[ItemT],
        history: HistoryLedger[EntryT],
        validator: Validator,
        logger: "BoundLogger | None" = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.items = items
        self.ledger = history
        self.validator = validator
        self.logger = logger or get_logger(__name__)
        self.clock = clock

    def _validate(self, payload: PayloadT, action: str) -> None:
        errors = self.validator.validate(payload)
        if errors:
            self.logger.warning(f"{self.label}_validation_failed", action=action, errors=errors)
            raise ValidationError(f"Validation errors occurred whilst {action} the {self.noun}", errors)

    def _build(self, payload: PayloadT, now: datetime, **extra: Any) -> ItemT:
        return self.item_model(**payload.model_dump(), created_at=now, updated_at=now, **extra)

    async def _require(self, item_id: str) -> ItemT:
        item = await self.items.get_by_id(item_id)
        if item is None:
            raise NotFoundError(f"{self.noun.capitalize()} not found: {item_id}")
        return item

    async def get(self, item_id: str) -> ItemT:
        """Fetch by id, including inactive records."""
        return await self._require(item_id)

    async def list_items(self, include_inactive: bool = False) -> list[ItemT]:
        return await self.items.list_active(include_inactive=include_inactive)

    async def history(self, item_id: str, include_archived: bool = False) -> list[EntryT]:
        return await self.ledger.list_for({self.history_key: item_id}, include_archived=include_archived)

    async def create(self, payload: PayloadT, changed_by: str) -> ItemT:
        self._validate(payload, "creating")
        item_id = payload.id  # type: ignore[attr-defined]
        if await self.items.get_by_id(item_id) is not None:
            raise ValidationError(
                f"Validation errors occurred whilst creating the {self.noun}",
                [f"Id '{item_id}' is already in use"],
            )

        now = self.clock()
        item = self._build(payload, now)
        if not await self.items.create(item):
            raise InternalError(f"Failed to persist the {self.noun}")

        entry = self.entry_model(
            id=new_id(),
            timestamp=now,
            changed_by=changed_by,
            changes=detect_changes(None, item, self.tracked_fields, status_field=None),
            **{self.history_key: item_id},
        )
        if not await self.ledger.append(entry):
            raise InternalError(f"Failed to record the {self.noun} history")

        self.logger.info(f"{self.label}_created", id=item_id, changed_by=changed_by)
        return item

    async def update(self, item_id: str, payload: PayloadT, changed_by: str) -> ItemT:
        payload = payload.model_copy(update={"id": item_id})
        self._validate(payload, "updating")
        existing = await self._require(item_id)

        candidate = existing.model_copy(update=payload.model_dump())
        changes = detect_changes(existing, candidate, self.tracked_fields, status_field=None)
        if candidate == existing:
            return existing

        now = self.clock()
        if changes:
            entry = self.entry_model(
                id=new_id(),
                timestamp=now,
                changed_by=changed_by,
                changes=changes,
                **{self.history_key: item_id},
            )
            if not await self.ledger.append(entry):
                raise InternalError(f"Failed to record the {self.noun} history")

        candidate = candidate.model_copy(update={"updated_at": now})
        if not await self.items.replace(item_id, candidate):
            raise NotFoundError(f"{self.noun.capitalize()} not found: {item_id}")

        self.logger.info(f"{self.label}_updated", id=item_id, changes=sorted(changes), changed_by=changed_by)
        return candidate

    async def soft_delete(self, item_id: str, deleted_by: str) -> None:
        """Deactivate; the record and its history stay addressable by id."""
        now = self.clock()
        fields = {"is_active": False, "deleted_at": now, "deleted_by": deleted_by, "updated_at": now}
        if not await self.items.update_fields(item_id, fields):
            raise NotFoundError(f"{self.noun.capitalize()} not found: {item_id}")
        self.logger.info(f"{self.label}_deactivated", id=item_id, deleted_by=deleted_by)

    async def restore(self, item_id: str) -> ItemT:
        fields = {"is_active": True, "deleted_at": None, "deleted_by": None, "updated_at": self.clock()}
        if not await self.items.update_fields(item_id, fields):
            raise NotFoundError(f"{self.noun.capitalize()} not found: {item_id}")
        self.logger.info(f"{self.label}_restored", id=item_id)
        return await self._require(item_id)

    async def seed(self, payloads: Sequence[PayloadT]) -> int:
        """Replace every record with the given set. An empty set clears them all."""
        errors: list[str] = []
        for index, payload in enumerate(payloads):
            errors.extend(f"[{index}] {error}" for error in self.validator.validate(payload))
        ids = [p.id for p in payloads]  # type: ignore[attr-defined]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        errors.extend(f"Duplicate id '{i}'" for i in duplicates)
        if errors:
            raise ValidationError(f"Validation errors occurred whilst seeding the {self.noun}s", errors)

        now = self.clock()
        await self.items.delete_all()
        count = await self.items.insert_many([self._build(p, now) for p in payloads])
        self.logger.info(f"{self.label}s_seeded", count=count)
        return count

    async def delete_all(self) -> int:
        count = await self.items.delete_all()
        self.logger.info(f"{self.label}s_deleted", count=count)
        return count


class ProfessionService(ReferenceDataService[Profession, ProfessionPayload, ProfessionHistory]):
    label = "profession"
    noun = "profession"
    history_key = "profession_id"
    tracked_fields = PROFESSION_FIELDS
    item_model = Profession
    entry_model = ProfessionHistory

    def __init__(
        self,
        items: ProfessionRepository,
        history: ProfessionHistoryLedger,
        validator: Validator | None = None,
        logger: "BoundLogger | None" = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        super().__init__(items, history, validator or ProfessionValidator(), logger, clock)

    get = operation_boundary("get_profession")(ReferenceDataService.get)
    list_items = operation_boundary("list_professions")(ReferenceDataService.list_items)
    history = operation_boundary("get_profession_history")(ReferenceDataService.history)
    create = operation_boundary("create_profession")(ReferenceDataService.create)
    update = operation_boundary("update_profession")(ReferenceDataService.update)
    soft_delete = operation_boundary("delete_profession")(ReferenceDataService.soft_delete)
    restore = operation_boundary("restore_profession")(ReferenceDataService.restore)
    seed = operation_boundary("seed_professions")(ReferenceDataService.seed)
    delete_all = operation_boundary("delete_all_professions")(ReferenceDataService.delete_all)


class ServiceStandardService(
    ReferenceDataService[ServiceStandard, ServiceStandardPayload, ServiceStandardHistory]
):
    label = "service_standard"
    noun = "service standard"
    history_key = "standard_id"
    tracked_fields = SERVICE_STANDARD_FIELDS
    item_model = ServiceStandard
    entry_model = ServiceStandardHistory

    def __init__(
        self,
        items: ServiceStandardRepository,
        history: ServiceStandardHistoryLedger,
        validator: Validator | None = None,
        logger: "BoundLogger | None" = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        super().__init__(items, history, validator or ServiceStandardValidator(), logger, clock)

    get = operation_boundary("get_service_standard")(ReferenceDataService.get)
    list_items = operation_boundary("list_service_standards")(ReferenceDataService.list_items)
    history = operation_boundary("get_service_standard_history")(ReferenceDataService.history)
    create = operation_boundary("create_service_standard")(ReferenceDataService.create)
    update = operation_boundary("update_service_standard")(ReferenceDataService.update)
    soft_delete = operation_boundary("delete_service_standard")(ReferenceDataService.soft_delete)
    restore = operation_boundary("restore_service_standard")(ReferenceDataService.restore)
    seed = operation_boundary("seed_service_standards")(ReferenceDataService.seed)
    delete_all = operation_boundary("delete_all_service_standards")(ReferenceDataService.delete_all)
