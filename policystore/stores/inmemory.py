"""In-memory document store for testing."""

from __future__ import annotations

import asyncio
from typing import Any, AsyncIterator, Iterable, List, Mapping, Optional

from .base import Document, DocumentStore


class InMemoryDocumentStore(DocumentStore):
    """Keep rule documents in a local list.

    Useful for tests or when no database is configured. Selectors match by
    plain equality on every key, like a MongoDB filter without operators.
    """

    def __init__(self, documents: Optional[Iterable[Mapping[str, Any]]] = None) -> None:
        self._documents: List[Document] = [dict(doc) for doc in documents or []]
        self._lock = asyncio.Lock()
        self.connected = False

    @property
    def documents(self) -> List[Document]:
        return [dict(doc) for doc in self._documents]

    @staticmethod
    def _matches(document: Mapping[str, Any], selector: Mapping[str, Any]) -> bool:
        return all(document.get(key) == value for key, value in selector.items())

    async def connect(self) -> None:
        self.connected = True

    async def disconnect(self) -> None:
        self.connected = False

    async def find(self, selector: Mapping[str, Any]) -> AsyncIterator[Document]:
        async with self._lock:
            matched = [dict(doc) for doc in self._documents if self._matches(doc, selector)]
        for document in matched:
            yield document

    async def insert_one(self, document: Mapping[str, Any]) -> None:
        async with self._lock:
            self._documents.append(dict(document))

    async def insert_many(self, documents: Iterable[Mapping[str, Any]]) -> None:
        async with self._lock:
            self._documents.extend(dict(doc) for doc in documents)

    async def delete_one(self, selector: Mapping[str, Any]) -> int:
        async with self._lock:
            for index, document in enumerate(self._documents):
                if self._matches(document, selector):
                    del self._documents[index]
                    return 1
        return 0

    async def delete_many(self, selector: Mapping[str, Any]) -> int:
        async with self._lock:
            kept = [doc for doc in self._documents if not self._matches(doc, selector)]
            removed = len(self._documents) - len(kept)
            self._documents = kept
        return removed

    async def drop(self) -> None:
        async with self._lock:
            self._documents.clear()
