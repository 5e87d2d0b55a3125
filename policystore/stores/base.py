"""Base document store interface used by the policy adapter."""

from __future__ import annotations

import abc
from typing import Any, AsyncIterator, Dict, Iterable, Mapping

Document = Dict[str, Any]


class DocumentStore(metaclass=abc.ABCMeta):
    """Abstract collection of rule documents."""

    async def connect(self) -> None:
        """Open connection to the database (no-op by default)."""
        pass

    async def disconnect(self) -> None:
        """Close connection to the database (no-op by default)."""
        pass

    @abc.abstractmethod
    def find(self, selector: Mapping[str, Any]) -> AsyncIterator[Document]:
        """Yield documents matching ``selector``.

        The underlying cursor is closed once iteration finishes or fails.
        """
        raise NotImplementedError

    @abc.abstractmethod
    async def insert_one(self, document: Mapping[str, Any]) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def insert_many(self, documents: Iterable[Mapping[str, Any]]) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def delete_one(self, selector: Mapping[str, Any]) -> int:
        """Delete the first matching document and return the number removed."""
        raise NotImplementedError

    @abc.abstractmethod
    async def delete_many(self, selector: Mapping[str, Any]) -> int:
        """Delete every matching document and return the number removed."""
        raise NotImplementedError

    @abc.abstractmethod
    async def drop(self) -> None:
        """Remove the whole collection."""
        raise NotImplementedError
