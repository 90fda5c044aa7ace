"""
MongoDB Client
==============

Async MongoDB client using Motor for projects, assessments and their history.

Version: 0.1.0
"""

import time
from typing import Any

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError

from shared.config import settings
from shared.logging import get_logger

logger = get_logger(__name__)


class MongoDBClient:
    """
    Async MongoDB client wrapper.

    Manages client lifecycle and provides database access.
    """

    _client: AsyncIOMotorClient | None = None  # type: ignore[type-arg]

    @classmethod
    def get_client(cls) -> AsyncIOMotorClient:  # type: ignore[type-arg]
        """Get or create the async client."""
        if cls._client is None:
            cls._client = AsyncIOMotorClient(
                settings.mongodb.uri,
                tz_aware=True,
                maxPoolSize=50,
                serverSelectionTimeoutMS=5000,
                connectTimeoutMS=5000,
            )
            logger.info(
                "mongodb_client_created",
                host=settings.mongodb.host,
                database=settings.mongodb.db,
            )
        return cls._client

    @classmethod
    def get_database(cls, name: str | None = None) -> AsyncIOMotorDatabase:  # type: ignore[type-arg]
        """
        Get a database instance.

        Args:
            name: Database name (default from settings)

        Returns:
            AsyncIOMotorDatabase instance
        """
        client = cls.get_client()
        db_name = name or settings.mongodb.db
        return client[db_name]

    @classmethod
    async def close(cls) -> None:
        """Close the client and release all connections."""
        if cls._client is not None:
            cls._client.close()
            cls._client = None
            logger.info("mongodb_client_closed")

    @classmethod
    async def health_check(cls) -> dict[str, Any]:
        """
        Check database health.

        Returns:
            dict with status and latency
        """
        try:
            start = time.perf_counter()
            result = await cls.get_client().admin.command("ping")
            latency_ms = (time.perf_counter() - start) * 1000

            return {
                "status": "healthy" if result.get("ok") == 1 else "unhealthy",
                "latency_ms": round(latency_ms, 2),
            }
        except PyMongoError as e:
            logger.error("mongodb_health_check_failed", error=str(e))
            return {
                "status": "unhealthy",
                "error": str(e),
            }

    @classmethod
    async def create_indexes(cls) -> None:
        """Create indexes for all collections."""
        db = cls.get_database()

        # Projects
        await db.projects.create_index("name")
        await db.projects.create_index("tags")
        await db.projects.create_index("delivery_group_id")

        # Assessments are unique per (project, standard, profession)
        await db.assessments.create_index(
            [("project_id", ASCENDING), ("standard_id", ASCENDING), ("profession_id", ASCENDING)],
            unique=True,
        )

        # History ledgers
        await db.project_history.create_index(
            [("project_id", ASCENDING), ("archived", ASCENDING), ("timestamp", DESCENDING)]
        )
        await db.assessment_history.create_index(
            [
                ("project_id", ASCENDING),
                ("standard_id", ASCENDING),
                ("profession_id", ASCENDING),
                ("archived", ASCENDING),
                ("timestamp", DESCENDING),
            ]
        )
        await db.profession_history.create_index([("profession_id", ASCENDING), ("timestamp", DESCENDING)])
        await db.service_standard_history.create_index([("standard_id", ASCENDING), ("timestamp", DESCENDING)])
        await db.delivery_group_history.create_index(
            [("delivery_group_id", ASCENDING), ("timestamp", DESCENDING)]
        )

        # Reference data
        await db.themes.create_index("project_ids")
        await db.project_delivery_partners.create_index(
            [("project_id", ASCENDING), ("delivery_partner_id", ASCENDING)],
            unique=True,
        )

        logger.info("mongodb_indexes_created")


async def get_mongodb() -> AsyncIOMotorDatabase:  # type: ignore[type-arg]
    """
    Dependency that provides the MongoDB database.

    Usage:
        @router.get("/projects")
        async def projects(db: AsyncIOMotorDatabase = Depends(get_mongodb)):
            return await db.projects.find({}).to_list(None)
    """
    return MongoDBClient.get_database()
