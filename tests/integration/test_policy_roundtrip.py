"""End-to-end save and reload through the adapter."""

import pytest

from policystore import ManagedPolicyAdapter, PolicyModel
from policystore.stores import InMemoryDocumentStore


@pytest.mark.asyncio
async def test_save_then_reload_policy():
    store = InMemoryDocumentStore([{"ptype": "p", "v0": "stale", "v1": "rule"}])

    async with ManagedPolicyAdapter(store) as adapter:
        model = PolicyModel()
        model.add_policy("p", "p", ["alice", "data1", "read"])
        model.add_policy("g", "g", ["alice", "admin"])
        await adapter.save_policy(model)

        reloaded = PolicyModel()
        await adapter.load_policy(reloaded)

    assert reloaded.get_policy("p", "p") == [["alice", "data1", "read"]]
    assert reloaded.get_policy("g", "g") == [["alice", "admin"]]
    assert sorted(reloaded.model) == ["g", "p"]
    assert len(store.documents) == 2


@pytest.mark.asyncio
async def test_filtered_view_cannot_overwrite_full_policy():
    store = InMemoryDocumentStore()

    async with ManagedPolicyAdapter(store) as adapter:
        await adapter.add_policy("p", "p", ["alice", "data1", "read"])
        await adapter.add_policy("p", "p", ["bob", "data2", "write"])

        partial = PolicyModel()
        await adapter.load_filtered_policy(partial, {"v0": "alice"})
        partial.add_policy("p", "p", ["carol", "data3", "read"])

        with pytest.raises(RuntimeError):
            await adapter.save_policy(partial)

        full = PolicyModel()
        await adapter.load_policy(full)
        full.add_policy("p", "p", ["carol", "data3", "read"])
        await adapter.save_policy(full)

    assert len(store.documents) == 3
