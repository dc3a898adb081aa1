import logging
from contextlib import contextmanager
from typing import Iterator

import certifi
from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from sitepunch.core.config import settings
from sitepunch.core.errors import StoreUnavailable


logger = logging.getLogger(__name__)


def create_mongo_client(uri: str | None = None) -> AsyncIOMotorClient:
    uri = uri or settings.MONGODB_URI
    client_kwargs = {"serverSelectionTimeoutMS": settings.MONGODB_TIMEOUT_MS}
    if uri.startswith("mongodb+srv://") or "tls=true" in uri.lower():
        # certifi CA bundle avoids SSL verify errors with Atlas
        client_kwargs["tlsCAFile"] = certifi.where()
    return AsyncIOMotorClient(uri, **client_kwargs)


def get_mongo_db(request: Request) -> AsyncIOMotorDatabase:
    """Database handle opened by the application lifespan."""
    return request.app.state.mongo_db


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """Report driver failures as StoreUnavailable. Nothing is retried."""
    try:
        yield
    except PyMongoError as exc:
        logger.warning("Mongo %s failed: %s", operation, exc)
        raise StoreUnavailable() from exc
