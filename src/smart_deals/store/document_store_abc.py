"""Abstract base class for the document store behind the API."""
from abc import ABC, abstractmethod
from typing import Any

from smart_deals.schemas import DeleteResult, InsertResult, UpdateResult
from smart_deals.store.queries import Selection

USERS = "users"
PRODUCTS = "products"
BIDS = "bids"


class DocumentStoreABC(ABC):
    """Async interface over a schema-less document database.

    Documents are plain dicts. Returned documents keep the store's native
    value types (e.g. ObjectId); callers convert them with to_jsonable.
    """

    @abstractmethod
    async def find(self, collection: str, selection: Selection) -> list[dict[str, Any]]:
        """Return every document matching the selection, sorted and limited.

        Args:
            collection: Collection name (users, products, bids).
            selection: Criteria, sort keys and optional limit.
        """

    @abstractmethod
    async def find_one(
        self, collection: str, criteria: dict[str, Any]
    ) -> dict[str, Any] | None:
        """Return the first document matching criteria, or None."""

    @abstractmethod
    async def insert_one(self, collection: str, document: dict[str, Any]) -> InsertResult:
        """Insert a document; an _id is assigned when missing."""

    @abstractmethod
    async def update_one(
        self, collection: str, criteria: dict[str, Any], fields: dict[str, Any]
    ) -> UpdateResult:
        """Set the given fields on the first matching document."""

    @abstractmethod
    async def delete_one(self, collection: str, criteria: dict[str, Any]) -> DeleteResult:
        """Delete the first matching document."""

    @abstractmethod
    async def distinct(self, collection: str, field_name: str) -> list[Any]:
        """Return the distinct values of a field across the collection."""

    async def ping(self) -> None:
        """Check connectivity. Override in stores that have a server."""

    async def close(self) -> None:
        """Release connections. Override in subclasses if cleanup is needed."""

    async def __aenter__(self) -> "DocumentStoreABC":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        """Async context manager exit - calls close()."""
        await self.close()
