"""
Mongo Repository
================

Generic persistence over one Motor collection. Documents keep the model
id in `_id`.

Reads raise on storage failure. Writes report their outcome as a bool
and log the failure, leaving callers to decide whether the write was
required.

Version: 0.1.0
"""

from collections.abc import Mapping, Sequence
from typing import Any, ClassVar, Generic, TypeVar

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pydantic import BaseModel
from pymongo.errors import DuplicateKeyError, PyMongoError

from shared.logging import get_logger


logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

SortSpec = Sequence[tuple[str, int]]


def new_id() -> str:
    """Generate a document id."""
    return str(ObjectId())


class MongoRepository(Generic[ModelT]):
    """Get/create/replace/delete/list over a single collection."""

    collection_name: ClassVar[str]
    model: type[ModelT]
    default_sort: ClassVar[SortSpec | None] = None

    def __init__(self, db: AsyncIOMotorDatabase) -> None:  # type: ignore[type-arg]
        self.collection: AsyncIOMotorCollection = db[self.collection_name]  # type: ignore[type-arg]

    def to_document(self, item: ModelT) -> dict[str, Any]:
        doc = item.model_dump(by_alias=True)
        doc["_id"] = doc.pop("id")
        return doc

    def from_document(self, doc: Mapping[str, Any]) -> ModelT:
        data = dict(doc)
        data["id"] = str(data.pop("_id"))
        return self.model.model_validate(data)

    async def get_by_id(self, item_id: str) -> ModelT | None:
        doc = await self.collection.find_one({"_id": item_id})
        return self.from_document(doc) if doc else None

    async def find_one(self, query: Mapping[str, Any]) -> ModelT | None:
        doc = await self.collection.find_one(dict(query))
        return self.from_document(doc) if doc else None

    async def list_all(
        self,
        query: Mapping[str, Any] | None = None,
        sort: SortSpec | None = None,
    ) -> list[ModelT]:
        cursor = self.collection.find(dict(query or {}))
        order = sort or self.default_sort
        if order:
            cursor = cursor.sort(list(order))
        docs = await cursor.to_list(length=None)
        return [self.from_document(doc) for doc in docs]

    async def create(self, item: ModelT) -> bool:
        """Insert a new document; False if the id is taken or the write failed."""
        try:
            await self.collection.insert_one(self.to_document(item))
        except DuplicateKeyError:
            logger.warning("document_already_exists", collection=self.collection_name, id=item.id)  # type: ignore[attr-defined]
            return False
        except PyMongoError as e:
            logger.error("document_create_failed", collection=self.collection_name, error=str(e))
            return False
        return True

    async def replace(self, item_id: str, item: ModelT) -> bool:
        """Replace the stored document; True iff one matched."""
        try:
            result = await self.collection.replace_one({"_id": item_id}, self.to_document(item))
        except PyMongoError as e:
            logger.error("document_replace_failed", collection=self.collection_name, id=item_id, error=str(e))
            return False
        return result.matched_count > 0

    async def update_fields(self, item_id: str, fields: Mapping[str, Any]) -> bool:
        """Set individual fields on the stored document; True iff one matched."""
        try:
            result = await self.collection.update_one({"_id": item_id}, {"$set": dict(fields)})
        except PyMongoError as e:
            logger.error("document_update_failed", collection=self.collection_name, id=item_id, error=str(e))
            return False
        return result.matched_count > 0

    async def delete(self, item_id: str) -> bool:
        try:
            result = await self.collection.delete_one({"_id": item_id})
        except PyMongoError as e:
            logger.error("document_delete_failed", collection=self.collection_name, id=item_id, error=str(e))
            return False
        return result.deleted_count > 0

    async def delete_all(self) -> int:
        result = await self.collection.delete_many({})
        return result.deleted_count

    async def insert_many(self, items: Sequence[ModelT]) -> int:
        if not items:
            return 0
        result = await self.collection.insert_many([self.to_document(item) for item in items])
        return len(result.inserted_ids)


class SoftDeleteRepository(MongoRepository[ModelT]):
    """Repository for records that are deactivated rather than removed."""

    async def list_active(self, include_inactive: bool = False) -> list[ModelT]:
        query: dict[str, Any] = {} if include_inactive else {"is_active": True}
        return await self.list_all(query)

    async def get_active(self, item_id: str) -> ModelT | None:
        return await self.find_one({"_id": item_id, "is_active": True})
