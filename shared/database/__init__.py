"""
Database Module
===============

Async MongoDB client (motor) for the assurance data store.

Usage:
    from shared.database import get_mongodb

    # In FastAPI
    @router.get("/example")
    async def example(db: AsyncIOMotorDatabase = Depends(get_mongodb)):
        return await db.projects.find_one({"_id": "p1"})
"""

from shared.database.mongodb import (
    MongoDBClient,
    get_mongodb,
)


__all__ = [
    "get_mongodb",
    "MongoDBClient",
]
