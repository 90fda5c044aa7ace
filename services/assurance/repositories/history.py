"""
History Ledger
==============

Append-only store of change records for one kind of entity.

Entries are keyed by one or more key fields (a project id, or the
project/standard/profession triple of an assessment). Entries are only
ever archived, never deleted or edited. "Latest" means the newest
timestamp among entries that are not archived; ties fall back to
insertion order of the generated ids.

Version: 0.1.0
"""

from collections.abc import Mapping
from typing import Any, ClassVar, Generic, TypeVar

from pymongo import DESCENDING
from pymongo.errors import PyMongoError

from shared.logging import get_logger
from services.assurance.models.history import (
    AssessmentHistory,
    DeliveryGroupHistory,
    HistoryEntry,
    ProfessionHistory,
    ProjectHistory,
    ServiceStandardHistory,
)
from services.assurance.repositories.base import MongoRepository


logger = get_logger(__name__)

EntryT = TypeVar("EntryT", bound=HistoryEntry)

NEWEST_FIRST = [("timestamp", DESCENDING), ("_id", DESCENDING)]


class HistoryLedger(MongoRepository[EntryT], Generic[EntryT]):
    """History collaborator: append, list active, latest active, archive."""

    key_fields: ClassVar[tuple[str, ...]]
    default_sort = NEWEST_FIRST

    def _key_query(self, key: Mapping[str, str]) -> dict[str, Any]:
        missing = [field for field in self.key_fields if field not in key]
        if missing:
            raise KeyError(f"History key is missing {', '.join(missing)}")
        return {field: key[field] for field in self.key_fields}

    async def append(self, entry: EntryT) -> bool:
        """Write a new entry; False when the write failed."""
        try:
            await self.collection.insert_one(self.to_document(entry))
        except PyMongoError as e:
            logger.error(
                "history_append_failed",
                collection=self.collection_name,
                entry_id=entry.id,
                error=str(e),
            )
            return False
        logger.debug(
            "history_appended",
            collection=self.collection_name,
            entry_id=entry.id,
            fields=sorted(entry.changes),
        )
        return True

    async def list_active(self, key: Mapping[str, str]) -> list[EntryT]:
        """Non-archived entries for `key`, newest first."""
        return await self.list_all({**self._key_query(key), "archived": False})

    async def list_all_active(self) -> list[EntryT]:
        """Every non-archived entry in the collection, newest first."""
        return await self.list_all({"archived": False})

    async def list_for(self, key: Mapping[str, str], include_archived: bool = False) -> list[EntryT]:
        if not include_archived:
            return await self.list_active(key)
        return await self.list_all(self._key_query(key))

    async def latest_active(self, key: Mapping[str, str]) -> EntryT | None:
        docs = (
            await self.collection.find({**self._key_query(key), "archived": False})
            .sort(NEWEST_FIRST)
            .to_list(length=1)
        )
        return self.from_document(docs[0]) if docs else None

    async def archive(self, key: Mapping[str, str], entry_id: str) -> bool:
        """
        Flip `archived` on one active entry.

        Returns:
            True iff a matching, not yet archived entry existed
        """
        try:
            result = await self.collection.update_one(
                {"_id": entry_id, **self._key_query(key), "archived": False},
                {"$set": {"archived": True}},
            )
        except PyMongoError as e:
            logger.error(
                "history_archive_failed",
                collection=self.collection_name,
                entry_id=entry_id,
                error=str(e),
            )
            return False
        return result.modified_count > 0


class ProjectHistoryLedger(HistoryLedger[ProjectHistory]):
    collection_name = "project_history"
    model = ProjectHistory
    key_fields = ("project_id",)


class AssessmentHistoryLedger(HistoryLedger[AssessmentHistory]):
    collection_name = "assessment_history"
    model = AssessmentHistory
    key_fields = ("project_id", "standard_id", "profession_id")


class ProfessionHistoryLedger(HistoryLedger[ProfessionHistory]):
    collection_name = "profession_history"
    model = ProfessionHistory
    key_fields = ("profession_id",)


class ServiceStandardHistoryLedger(HistoryLedger[ServiceStandardHistory]):
    collection_name = "service_standard_history"
    model = ServiceStandardHistory
    key_fields = ("standard_id",)


class DeliveryGroupHistoryLedger(HistoryLedger[DeliveryGroupHistory]):
    collection_name = "delivery_group_history"
    model = DeliveryGroupHistory
    key_fields = ("delivery_group_id",)
