"""
In-process DocumentStore.

Used by the test suite and for local runs without MongoDB. Every call hands
control back to the event loop once, so concurrent fetches interleave the way
they would against a real store.
"""
from __future__ import annotations
import asyncio
import copy
import uuid

from .database import (
    SERVER_TIMESTAMP,
    ArrayRemove,
    ArrayUnion,
    DocumentStore,
    resolve_for_insert,
    utcnow,
)


class InMemoryStore(DocumentStore):
    def __init__(self):
        self.collections: dict[str, dict[str, dict]] = {}

    def _collection(self, name: str) -> dict[str, dict]:
        return self.collections.setdefault(name, {})

    @staticmethod
    def _out(doc_id: str, doc: dict) -> dict:
        out = copy.deepcopy(doc)
        out["id"] = doc_id
        return out

    async def get(self, collection, doc_id):
        await asyncio.sleep(0)
        doc = self._collection(collection).get(doc_id)
        return self._out(doc_id, doc) if doc is not None else None

    async def find(self, collection, field, value):
        await asyncio.sleep(0)
        return [
            self._out(doc_id, doc)
            for doc_id, doc in self._collection(collection).items()
            if field in doc and doc[field] == value
        ]

    async def all(self, collection):
        await asyncio.sleep(0)
        return [self._out(doc_id, doc) for doc_id, doc in self._collection(collection).items()]

    async def add(self, collection, data):
        await asyncio.sleep(0)
        doc_id = uuid.uuid4().hex
        doc = copy.deepcopy(resolve_for_insert(data, utcnow()))
        doc.pop("id", None)
        self._collection(collection)[doc_id] = doc
        return doc_id

    async def update(self, collection, doc_id, data):
        await asyncio.sleep(0)
        doc = self._collection(collection).get(doc_id)
        if doc is None:
            return False
        now = utcnow()
        for field, value in data.items():
            if value is SERVER_TIMESTAMP:
                doc[field] = now
            elif isinstance(value, ArrayUnion):
                current = list(doc.get(field) or [])
                current.extend(v for v in value.values if v not in current)
                doc[field] = current
            elif isinstance(value, ArrayRemove):
                doc[field] = [v for v in doc.get(field) or [] if v not in value.values]
            else:
                doc[field] = copy.deepcopy(value)
        return True

    async def delete(self, collection, doc_id):
        await asyncio.sleep(0)
        return self._collection(collection).pop(doc_id, None) is not None
