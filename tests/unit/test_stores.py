import pytest

from policystore.config import PolicyStoreConfig
from policystore.stores import InMemoryDocumentStore, get_store


async def _collect(store, selector):
    return [doc async for doc in store.find(selector)]


@pytest.mark.asyncio
async def test_inmemory_store_find_and_delete():
    store = InMemoryDocumentStore()
    await store.insert_one({"ptype": "p", "v0": "alice"})
    await store.insert_many([{"ptype": "p", "v0": "bob"}, {"ptype": "g", "v0": "alice"}])

    assert len(await _collect(store, {})) == 3
    assert await _collect(store, {"v0": "alice", "ptype": "g"}) == [{"ptype": "g", "v0": "alice"}]
    # missing keys never equal an empty string
    assert await _collect(store, {"v1": ""}) == []

    assert await store.delete_one({"ptype": "p"}) == 1
    assert await store.delete_many({"ptype": "p"}) == 1
    assert await store.delete_many({"ptype": "p"}) == 0
    assert store.documents == [{"ptype": "g", "v0": "alice"}]

    await store.drop()
    assert store.documents == []


@pytest.mark.asyncio
async def test_inmemory_store_returns_copies():
    store = InMemoryDocumentStore([{"ptype": "p", "v0": "alice"}])
    found = await _collect(store, {})
    found[0]["v0"] = "mallory"
    assert store.documents[0]["v0"] == "alice"


@pytest.mark.asyncio
async def test_get_store_uses_config(monkeypatch):
    monkeypatch.delenv("POLICYSTORE_BACKEND", raising=False)
    config = PolicyStoreConfig(**{"store": {"backend": "mongo", "mongo": {"database": "rules"}}})

    store = get_store(config=config)

    from policystore.stores.mongo import MongoDocumentStore

    assert isinstance(store, MongoDocumentStore)
    assert store.database == "rules"
    assert store.collection == "casbin_rule"
    assert store.owns_client
    await store.disconnect()


def test_get_store_env_override(monkeypatch):
    monkeypatch.setenv("POLICYSTORE_BACKEND", "inmemory")
    config = PolicyStoreConfig(**{"store": {"backend": "mongo"}})
    assert isinstance(get_store(config=config), InMemoryDocumentStore)


def test_get_store_rejects_unknown_backend():
    with pytest.raises(ValueError, match="Unsupported store backend"):
        get_store("cassandra", config=PolicyStoreConfig())


@pytest.mark.asyncio
async def test_borrowed_mongo_client_is_not_closed():
    from unittest.mock import AsyncMock, MagicMock

    from policystore import PolicyAdapter

    client = MagicMock()
    client.close = AsyncMock()

    adapter = PolicyAdapter.from_client(client, database="rules")
    await adapter.store.disconnect()

    assert adapter.store.owns_client is False
    assert adapter.store.database == "rules"
    client.close.assert_not_awaited()
