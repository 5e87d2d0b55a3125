"""Simple example showing policy storage in MongoDB."""

import asyncio

from policystore import FieldFilter, ManagedPolicyAdapter, PolicyModel


async def main():
    """Save a policy, reload part of it, then edit single rules."""
    async with ManagedPolicyAdapter.from_url("mongodb://localhost:27017") as adapter:
        # Replace the stored policy
        model = PolicyModel()
        model.add_policy("p", "p", ["alice", "data1", "read"])
        model.add_policy("p", "p", ["bob", "data2", "write"])
        model.add_policy("g", "g", ["alice", "admin"])
        await adapter.save_policy(model)

        # Load only alice's permissions
        partial = PolicyModel()
        await adapter.load_filtered_policy(partial, FieldFilter(ptype="p", field_values=["alice"]))
        print(f"Filtered load: {partial.get_policy('p')} (filtered={adapter.is_filtered()})")

        # Incremental edits
        await adapter.add_policy("p", "p", ["carol", "data3", "read"])
        await adapter.remove_filtered_policy("p", "p", 1, "data2")

        full = PolicyModel()
        await adapter.load_policy(full)
        print(f"Stored rules: {full.get_policy('p') + full.get_policy('g')}")


if __name__ == "__main__":
    asyncio.run(main())
