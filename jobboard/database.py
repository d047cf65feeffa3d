from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any

from bson import ObjectId
from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient

from .config import Settings

logger = logging.getLogger(__name__)


class _ServerTimestamp:
    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"

    # a single instance; identity checks must survive copies of the payload
    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


# Field value resolved by the store to its own current time
SERVER_TIMESTAMP = _ServerTimestamp()


class ArrayUnion:
    """Field value: add each of ``values`` to an array unless already present."""

    def __init__(self, *values: Any):
        self.values = values

    def __repr__(self) -> str:
        return f"ArrayUnion{self.values!r}"


class ArrayRemove:
    """Field value: remove every occurrence of each of ``values`` from an array."""

    def __init__(self, *values: Any):
        self.values = values

    def __repr__(self) -> str:
        return f"ArrayRemove{self.values!r}"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DocumentStore(ABC):
    """
    Minimal document store used by the managers.

    Documents are plain dicts addressed by collection name and an opaque
    string id. Returned documents always carry that id under ``"id"``.
    ``add`` and ``update`` understand the SERVER_TIMESTAMP, ArrayUnion and
    ArrayRemove field values.
    """

    @abstractmethod
    async def get(self, collection: str, doc_id: str) -> dict | None:
        """Return the document or None. Malformed ids are simply not found."""

    @abstractmethod
    async def find(self, collection: str, field: str, value: Any) -> list[dict]:
        """Equality query on a single field."""

    @abstractmethod
    async def all(self, collection: str) -> list[dict]:
        ...

    @abstractmethod
    async def add(self, collection: str, data: dict) -> str:
        """Insert a document and return its store-assigned id."""

    @abstractmethod
    async def update(self, collection: str, doc_id: str, data: dict) -> bool:
        """Merge ``data`` into the document. False when it does not exist."""

    @abstractmethod
    async def delete(self, collection: str, doc_id: str) -> bool:
        ...

    async def ping(self) -> None:
        return None

    async def close(self) -> None:
        return None


def build_update(data: dict) -> dict:
    """Translate a field mapping (with sentinels) into a MongoDB update document."""
    update: dict[str, dict] = {}
    for field, value in data.items():
        if value is SERVER_TIMESTAMP:
            update.setdefault("$currentDate", {})[field] = True
        elif isinstance(value, ArrayUnion):
            update.setdefault("$addToSet", {})[field] = {"$each": list(value.values)}
        elif isinstance(value, ArrayRemove):
            update.setdefault("$pull", {})[field] = {"$in": list(value.values)}
        else:
            update.setdefault("$set", {})[field] = value
    return update


def resolve_for_insert(data: dict, now: datetime) -> dict:
    """Replace sentinels in a brand new document with concrete values."""
    doc = {}
    for field, value in data.items():
        if value is SERVER_TIMESTAMP:
            doc[field] = now
        elif isinstance(value, ArrayUnion):
            doc[field] = list(dict.fromkeys(value.values))
        elif isinstance(value, ArrayRemove):
            doc[field] = []
        else:
            doc[field] = value
    return doc


def _object_id(doc_id: str) -> ObjectId | None:
    if not ObjectId.is_valid(doc_id):
        return None
    return ObjectId(doc_id)


def _from_mongo(doc: dict) -> dict:
    doc = dict(doc)
    doc["id"] = str(doc.pop("_id"))
    return doc


class MongoStore(DocumentStore):
    """DocumentStore backed by MongoDB through motor."""

    def __init__(self, url: str, database: str):
        self.client = AsyncIOMotorClient(
            url,
            tz_aware=True,
            serverSelectionTimeoutMS=5000,
            connectTimeoutMS=10000,
        )
        self.db = self.client[database]

    async def get(self, collection, doc_id):
        oid = _object_id(doc_id)
        if oid is None:
            return None
        doc = await self.db[collection].find_one({"_id": oid})
        return _from_mongo(doc) if doc else None

    async def find(self, collection, field, value):
        cursor = self.db[collection].find({field: value})
        return [_from_mongo(doc) async for doc in cursor]

    async def all(self, collection):
        return [_from_mongo(doc) async for doc in self.db[collection].find({})]

    async def add(self, collection, data):
        doc = resolve_for_insert(data, utcnow())
        result = await self.db[collection].insert_one(doc)
        return str(result.inserted_id)

    async def update(self, collection, doc_id, data):
        oid = _object_id(doc_id)
        if oid is None:
            return False
        result = await self.db[collection].update_one({"_id": oid}, build_update(data))
        return result.matched_count > 0

    async def delete(self, collection, doc_id):
        oid = _object_id(doc_id)
        if oid is None:
            return False
        result = await self.db[collection].delete_one({"_id": oid})
        return result.deleted_count > 0

    async def ping(self):
        await self.client.admin.command("ping")

    async def close(self):
        self.client.close()


def create_store(settings: Settings) -> DocumentStore:
    if settings.STORE_BACKEND == "mongo":
        logger.info("Using MongoDB store (%s)", settings.MONGODB_DATABASE)
        return MongoStore(settings.MONGODB_URL, settings.MONGODB_DATABASE)

    from .memory import InMemoryStore
    logger.warning("Using in-memory store; data is lost when the process exits")
    return InMemoryStore()


def get_store(request: Request) -> DocumentStore:
    return request.app.state.store
