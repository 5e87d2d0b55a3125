"""MongoDB document store."""

from __future__ import annotations

from typing import Any, AsyncIterator, Iterable, Mapping

from pymongo import AsyncMongoClient

from ..config import DEFAULT_COLLECTION, DEFAULT_DATABASE
from .base import Document, DocumentStore


class MongoDocumentStore(DocumentStore):
    """Rule documents kept in one MongoDB collection.

    When ``owns_client`` is false the client was handed in already connected
    and ``disconnect`` leaves it open for its owner to close.
    """

    def __init__(
        self,
        client: AsyncMongoClient,
        database: str = DEFAULT_DATABASE,
        collection: str = DEFAULT_COLLECTION,
        owns_client: bool = True,
    ) -> None:
        self._client = client
        self._collection = client[database][collection]
        self.database = database
        self.collection = collection
        self.owns_client = owns_client

    @classmethod
    def from_url(
        cls,
        url: str,
        database: str = DEFAULT_DATABASE,
        collection: str = DEFAULT_COLLECTION,
    ) -> "MongoDocumentStore":
        return cls(AsyncMongoClient(url), database, collection, owns_client=True)

    async def connect(self) -> None:
        """Check the server is reachable."""
        await self._client.admin.command("ping")

    async def disconnect(self) -> None:
        if self.owns_client:
            await self._client.close()

    async def find(self, selector: Mapping[str, Any]) -> AsyncIterator[Document]:
        cursor = self._collection.find(dict(selector))
        try:
            async for document in cursor:
                yield document
        finally:
            await cursor.close()

    async def insert_one(self, document: Mapping[str, Any]) -> None:
        # copy: pymongo writes the generated _id into the dict it is given
        await self._collection.insert_one(dict(document))

    async def insert_many(self, documents: Iterable[Mapping[str, Any]]) -> None:
        await self._collection.insert_many([dict(doc) for doc in documents])

    async def delete_one(self, selector: Mapping[str, Any]) -> int:
        result = await self._collection.delete_one(dict(selector))
        return result.deleted_count

    async def delete_many(self, selector: Mapping[str, Any]) -> int:
        result = await self._collection.delete_many(dict(selector))
        return result.deleted_count

    async def drop(self) -> None:
        await self._collection.drop()
