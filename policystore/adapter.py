"""Casbin-style policy adapter backed by a document store."""

from __future__ import annotations

import logging
from contextlib import aclosing
from typing import Any, Mapping, Optional, Sequence, Union

from pydantic import ValidationError

from .codec import encode_rule, iter_model_rules, load_policy_line, rule_selector
from .config import DEFAULT_COLLECTION, DEFAULT_DATABASE, PolicyStoreConfig, load_config
from .models import RuleRecord
from .selector import FieldFilter, build_filter_selector
from .stores import DocumentStore, get_store

logger = logging.getLogger(__name__)

PolicyFilter = Union[None, Mapping[str, Any], FieldFilter]


class FilteredPolicyError(RuntimeError):
    """Raised when saving a model that was loaded through a filter."""


def _as_selector(policy_filter: PolicyFilter) -> dict:
    if policy_filter is None:
        return {}
    if isinstance(policy_filter, FieldFilter):
        return policy_filter.to_selector()
    return dict(policy_filter)


class PolicyAdapter:
    """Load and persist policy rules for an enforcement engine.

    The adapter borrows its store: whoever built the store connects it before
    use and disconnects it afterwards. Use :class:`ManagedPolicyAdapter` when
    the adapter should own the connection.

    Concurrent load and save calls are not serialized here.
    """

    def __init__(self, store: DocumentStore, *, filtered: bool = False) -> None:
        self._store = store
        self._filtered = filtered

    @classmethod
    def from_client(
        cls,
        client: Any,
        database: str = DEFAULT_DATABASE,
        collection: str = DEFAULT_COLLECTION,
        *,
        filtered: bool = False,
    ) -> "PolicyAdapter":
        """Wrap an already connected ``AsyncMongoClient``.

        The client stays open after the adapter is done with it.
        """
        from .stores.mongo import MongoDocumentStore

        store = MongoDocumentStore(client, database, collection, owns_client=False)
        return cls(store, filtered=filtered)

    @property
    def store(self) -> DocumentStore:
        return self._store

    # ------------------------------------------------------------------
    # Loading
    async def load_policy(self, model: Any) -> None:
        """Load every stored rule into ``model``."""
        await self.load_filtered_policy(model, None)

    async def load_filtered_policy(self, model: Any, policy_filter: PolicyFilter = None) -> None:
        """Load the rules matching ``policy_filter`` into ``model``.

        ``policy_filter`` is either a :class:`FieldFilter` or a MongoDB
        selector passed through unchanged. An empty filter loads everything
        and clears the filtered state; anything else marks the adapter as
        filtered so the partial model cannot be saved over the full policy.

        Documents that fail validation are skipped. Store errors propagate,
        and rules appended before the error stay in ``model``.
        """

        selector = _as_selector(policy_filter)
        self._filtered = bool(selector)

        loaded = 0
        async with aclosing(self._store.find(selector)) as documents:
            async for document in documents:
                try:
                    record = RuleRecord.from_document(document)
                except ValidationError as exc:
                    logger.warning(
                        "Skipping malformed policy document %s: %s", document.get("_id"), exc
                    )
                    continue
                load_policy_line(record, model)
                loaded += 1
        logger.debug("Loaded %d policy rules (filtered=%s)", loaded, self._filtered)

    def is_filtered(self) -> bool:
        """Return True if the last load used a non-empty filter."""
        return self._filtered

    # ------------------------------------------------------------------
    # Saving
    async def save_policy(self, model: Any) -> None:
        """Replace the stored policy with the ``p`` and ``g`` rules of ``model``.

        The collection is dropped before the new rules are inserted. The two
        steps are not atomic: if the insert fails the store is left empty.
        """

        if self._filtered:
            raise FilteredPolicyError("cannot save a filtered policy")

        documents = [
            encode_rule(ptype, rule).to_document()
            for ptype, rule in iter_model_rules(model)
        ]
        await self._store.drop()
        if documents:
            await self._store.insert_many(documents)
        logger.debug("Saved %d policy rules", len(documents))

    async def add_policy(self, section: str, ptype: str, rule: Sequence[str]) -> None:
        """Store one rule. Duplicates are not checked."""
        await self._store.insert_one(encode_rule(ptype, rule).to_document())

    async def remove_policy(self, section: str, ptype: str, rule: Sequence[str]) -> None:
        """Remove at most one stored copy of ``rule``."""
        selector = rule_selector(encode_rule(ptype, rule))
        removed = await self._store.delete_one(selector)
        logger.debug("Removed %d rule(s) matching %s", removed, selector)

    async def remove_filtered_policy(
        self, section: str, ptype: str, field_index: int, *field_values: str
    ) -> None:
        """Remove every rule whose values match ``field_values`` from ``field_index`` on."""
        selector = build_filter_selector(ptype, field_index, field_values)
        removed = await self._store.delete_many(selector)
        logger.debug("Removed %d rule(s) matching %s", removed, selector)


class ManagedPolicyAdapter(PolicyAdapter):
    """Policy adapter that owns its store connection.

    ``open`` connects and ``close`` disconnects. Prefer ``async with`` so the
    store is disconnected on every exit path::

        async with ManagedPolicyAdapter.from_url("mongodb://localhost") as adapter:
            await adapter.load_policy(model)
    """

    def __init__(self, store: DocumentStore, *, filtered: bool = False) -> None:
        super().__init__(store, filtered=filtered)
        self._opened = False

    @classmethod
    def from_url(
        cls,
        url: str,
        database: str = DEFAULT_DATABASE,
        collection: str = DEFAULT_COLLECTION,
        *,
        filtered: bool = False,
    ) -> "ManagedPolicyAdapter":
        from .stores.mongo import MongoDocumentStore

        return cls(MongoDocumentStore.from_url(url, database, collection), filtered=filtered)

    @classmethod
    def from_config(cls, config: Optional[PolicyStoreConfig] = None) -> "ManagedPolicyAdapter":
        config = config or load_config()
        return cls(get_store(config=config), filtered=config.filtered)

    async def open(self) -> "ManagedPolicyAdapter":
        try:
            await self._store.connect()
        except Exception:
            await self._store.disconnect()
            raise
        self._opened = True
        return self

    async def close(self) -> None:
        """Disconnect the store. Calling it again is a no-op."""
        if not self._opened:
            return
        self._opened = False
        await self._store.disconnect()

    async def __aenter__(self) -> "ManagedPolicyAdapter":
        return await self.open()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
