"""MongoDB connection handle."""

import logging
from typing import Optional

from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from app.models import INDEXES

logger = logging.getLogger(__name__)


class MongoDB:
    """
    Process-wide MongoDB handle.

    Constructed once by the application factory, connected in the lifespan
    startup and closed on shutdown. Request handlers reach it through
    ``app.state.mongo`` (see ``app.core.deps.get_db``).
    """

    def __init__(
        self,
        uri: Optional[str],
        database_name: str,
        max_pool_size: int = 10,
        server_selection_timeout_ms: int = 5000,
    ):
        self.uri = uri
        self.database_name = database_name
        self.max_pool_size = max_pool_size
        self.server_selection_timeout_ms = server_selection_timeout_ms
        self.client: Optional[AsyncIOMotorClient] = None
        self._db: Optional[AsyncIOMotorDatabase] = None

    @classmethod
    def from_database(cls, database) -> "MongoDB":
        """Wrap an already-open database (scripts and tests)."""
        handle = cls(uri=None, database_name=database.name)
        handle._db = database
        return handle

    @property
    def db(self) -> AsyncIOMotorDatabase:
        if self._db is None:
            raise RuntimeError("MongoDB not initialized. Call connect() first.")
        return self._db

    async def connect(self) -> AsyncIOMotorDatabase:
        """Connect, verify with a ping and make sure indexes exist."""
        if self._db is not None:
            return self._db

        if not self.uri:
            raise RuntimeError("MONGODB_URI is not configured")

        self.client = AsyncIOMotorClient(
            self.uri,
            maxPoolSize=self.max_pool_size,
            serverSelectionTimeoutMS=self.server_selection_timeout_ms,
            retryWrites=True,
        )
        # Database name comes from the URI path when present
        self._db = self.client.get_default_database(default=self.database_name)

        await self._db.command("ping")
        await ensure_indexes(self._db)

        logger.info("Connected to MongoDB database %s (pool: %s)", self._db.name, self.max_pool_size)
        return self._db

    async def close(self) -> None:
        if self.client is not None:
            self.client.close()
            logger.info("MongoDB connection closed")
        self.client = None
        self._db = None


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    """Create the indexes declared by the document models."""
    for collection_name, indexes in INDEXES.items():
        if not indexes:
            continue
        await db[collection_name].create_indexes(indexes)
        logger.info("Ensured %d indexes on %s", len(indexes), collection_name)


def get_db(request: Request) -> AsyncIOMotorDatabase:
    """Dependency returning the database attached to the running app."""
    return request.app.state.mongo.db
