"""
LifeStream Backend: Document Store Client
===========================================

What:  Process-scoped MongoDB client, collection accessors and the FastAPI
       dependency that hands them to route handlers.
How:   `create_database()` builds one AsyncMongoClient during application
       startup; the lifespan handler stores it on `app.state.database` and
       closes it on shutdown. Handlers receive it through `get_database`.

Collections (database `LifeStreamDB` by default):
    users             User records keyed by unique email
    donationRequests  Blood donation requests
    blogs             Blog posts

Connection pooling is left to the driver's internal pool.
"""

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from fastapi import Request
from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError
from pymongo.server_api import ServerApi

from lifestream.config import Settings, settings
from lifestream.exceptions import DatabaseError

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"
BLOGS_COLLECTION = "blogs"
DONATION_REQUESTS_COLLECTION = "donationRequests"


class Database:
    """
    Thin holder for the client and the three collections the API touches.

    Services only use the collection surface (insert_one, find, find_one,
    update_one, delete_one), which lets tests swap in an in-memory fake.
    """

    def __init__(self, client: AsyncMongoClient, database_name: str):
        self.client = client
        self._db = client[database_name]

    @property
    def users(self):
        return self._db[USERS_COLLECTION]

    @property
    def blogs(self):
        return self._db[BLOGS_COLLECTION]

    @property
    def donation_requests(self):
        return self._db[DONATION_REQUESTS_COLLECTION]

    async def ping(self) -> None:
        """Round-trip to the server; raises the driver error if unreachable."""
        await self.client.admin.command("ping")

    async def close(self) -> None:
        await self.client.close()


def create_database(config: Optional[Settings] = None) -> Database:
    """
    Build the process-wide Database.

    The driver connects lazily, so this does no I/O; the first operation
    (or the startup ping) opens the pool.
    """
    config = config or settings
    client = AsyncMongoClient(
        config.mongodb_uri,
        server_api=ServerApi("1", strict=True, deprecation_errors=True),
    )
    logger.info("Mongo client created for database '%s'", config.database_name)
    return Database(client, config.database_name)


@contextmanager
def store_errors(operation: str, **context: Any) -> Iterator[None]:
    """
    Translate driver failures inside the block into DatabaseError.

    Usage:
        with store_errors("find users", status=status):
            return await db.users.find(query).to_list()
    """
    try:
        yield
    except PyMongoError as e:
        logger.error("Store error during %s: %s", operation, str(e), exc_info=True)
        raise DatabaseError(
            context={"operation": operation, "error_type": type(e).__name__, **context},
        ) from e


def get_database(request: Request) -> Database:
    """
    FastAPI dependency returning the Database created at startup.

    Example usage in a route:
        @router.get("/blogs")
        async def list_blogs(db: Database = Depends(get_database)):
            ...
    """
    return request.app.state.database
