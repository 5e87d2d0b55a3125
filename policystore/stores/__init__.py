"""Document store factory and initialization."""

from __future__ import annotations

import os
from typing import Optional

from ..config import PolicyStoreConfig, load_config
from .base import DocumentStore
from .inmemory import InMemoryDocumentStore


def get_store(
    backend: Optional[str] = None, config: Optional[PolicyStoreConfig] = None
) -> DocumentStore:
    """Factory function to get the configured document store."""

    config = config or load_config()
    backend = (
        backend
        or os.getenv("POLICYSTORE_BACKEND")
        or config.store.backend
    ).lower()

    if backend == "inmemory":
        return InMemoryDocumentStore()
    elif backend == "mongo":
        from .mongo import MongoDocumentStore

        mongo_conf = config.store.mongo
        return MongoDocumentStore.from_url(
            mongo_conf.url,
            database=mongo_conf.database,
            collection=mongo_conf.collection,
        )
    else:
        raise ValueError(f"Unsupported store backend: {backend}")


__all__ = ["DocumentStore", "InMemoryDocumentStore", "get_store"]
