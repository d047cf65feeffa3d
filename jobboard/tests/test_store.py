import asyncio
import copy
from datetime import datetime

from jobboard.database import SERVER_TIMESTAMP, ArrayRemove, ArrayUnion, build_update, resolve_for_insert
from jobboard.memory import InMemoryStore


def test_build_update_translates_sentinels():
    update = build_update({
        "name": "Ana",
        "updatedAt": SERVER_TIMESTAMP,
        "saved": ArrayUnion("v1"),
    })
    assert update == {
        "$set": {"name": "Ana"},
        "$currentDate": {"updatedAt": True},
        "$addToSet": {"saved": {"$each": ["v1"]}},
    }
    assert build_update({"saved": ArrayRemove("v1", "v2")}) == {"$pull": {"saved": {"$in": ["v1", "v2"]}}}


def test_resolve_for_insert():
    now = datetime(2024, 1, 1)
    doc = resolve_for_insert({"createdAt": SERVER_TIMESTAMP, "saved": ArrayUnion("a", "a", "b")}, now)
    assert doc == {"createdAt": now, "saved": ["a", "b"]}


def test_memory_store_crud_and_array_ops():
    async def run():
        store = InMemoryStore()
        doc_id = await store.add("users", {"email": "a@x.com", "saved": [], "createdAt": SERVER_TIMESTAMP})
        doc = await store.get("users", doc_id)
        assert doc["id"] == doc_id
        assert isinstance(doc["createdAt"], datetime)

        assert await store.update("users", doc_id, {"saved": ArrayUnion("v1")})
        assert await store.update("users", doc_id, {"saved": ArrayUnion("v1", "v2")})
        assert (await store.get("users", doc_id))["saved"] == ["v1", "v2"]

        assert await store.update("users", doc_id, {"saved": ArrayRemove("v1")})
        assert (await store.get("users", doc_id))["saved"] == ["v2"]

        assert [d["id"] for d in await store.find("users", "email", "a@x.com")] == [doc_id]
        assert await store.find("users", "email", "b@x.com") == []
        assert len(await store.all("users")) == 1

        assert await store.update("users", "missing", {"email": "x"}) is False
        assert await store.delete("users", doc_id) is True
        assert await store.delete("users", doc_id) is False
        assert await store.get("users", doc_id) is None

    asyncio.run(run())


def test_memory_store_returns_copies():
    async def run():
        store = InMemoryStore()
        doc_id = await store.add("users", {"saved": []})
        doc = await store.get("users", doc_id)
        doc["saved"].append("tampered")
        assert (await store.get("users", doc_id))["saved"] == []

    asyncio.run(run())


def test_server_timestamp_survives_copies():
    assert copy.copy(SERVER_TIMESTAMP) is SERVER_TIMESTAMP
    assert copy.deepcopy({"at": SERVER_TIMESTAMP})["at"] is SERVER_TIMESTAMP


def test_memory_store_add_resolves_timestamps():
    async def run():
        store = InMemoryStore()
        payload = {"createdAt": SERVER_TIMESTAMP, "updatedAt": SERVER_TIMESTAMP}
        doc_id = await store.add("vagas", payload)
        stored = store.collections["vagas"][doc_id]
        assert isinstance(stored["createdAt"], datetime)
        assert stored["createdAt"] == stored["updatedAt"]
        # the caller's payload is left untouched
        assert payload["createdAt"] is SERVER_TIMESTAMP

    asyncio.run(run())
