"""MongoDB document store (pymongo async client)."""
import logging
from typing import Any

from pymongo import AsyncMongoClient
from pymongo.server_api import ServerApi

from smart_deals.schemas import DeleteResult, InsertResult, UpdateResult
from smart_deals.store.document_store_abc import DocumentStoreABC
from smart_deals.store.ids import to_jsonable
from smart_deals.store.queries import Selection

logger = logging.getLogger(__name__)


class MongoDocumentStore(DocumentStoreABC):
    """Document store backed by a MongoDB deployment.

    One client is shared by every request; the driver owns pooling and
    server selection. Create it once at startup and close it on shutdown.
    """

    def __init__(self, uri: str, db_name: str) -> None:
        """Initialize the client with the Stable API v1.

        Args:
            uri: MongoDB connection string (mongodb:// or mongodb+srv://).
            db_name: Database holding the users, products and bids collections.
        """
        self._client: AsyncMongoClient = AsyncMongoClient(
            uri,
            server_api=ServerApi("1", strict=False, deprecation_errors=True),
        )
        self._db = self._client[db_name]

    async def find(self, collection: str, selection: Selection) -> list[dict[str, Any]]:
        cursor = self._db[collection].find(selection.criteria)
        if selection.sort:
            cursor = cursor.sort(list(selection.sort))
        if selection.limit is not None:
            cursor = cursor.limit(selection.limit)
        return await cursor.to_list()

    async def find_one(
        self, collection: str, criteria: dict[str, Any]
    ) -> dict[str, Any] | None:
        return await self._db[collection].find_one(criteria)

    async def insert_one(self, collection: str, document: dict[str, Any]) -> InsertResult:
        result = await self._db[collection].insert_one(document)
        return InsertResult(
            acknowledged=result.acknowledged,
            inserted_id=to_jsonable(result.inserted_id),
        )

    async def update_one(
        self, collection: str, criteria: dict[str, Any], fields: dict[str, Any]
    ) -> UpdateResult:
        result = await self._db[collection].update_one(criteria, {"$set": fields})
        return UpdateResult(
            acknowledged=result.acknowledged,
            matched_count=result.matched_count,
            modified_count=result.modified_count,
            upserted_count=0 if result.upserted_id is None else 1,
            upserted_id=to_jsonable(result.upserted_id),
        )

    async def delete_one(self, collection: str, criteria: dict[str, Any]) -> DeleteResult:
        result = await self._db[collection].delete_one(criteria)
        return DeleteResult(
            acknowledged=result.acknowledged,
            deleted_count=result.deleted_count,
        )

    async def distinct(self, collection: str, field_name: str) -> list[Any]:
        return await self._db[collection].distinct(field_name)

    async def ping(self) -> None:
        await self._client.admin.command("ping")
        logger.info("Pinged MongoDB deployment; connection is healthy")

    async def close(self) -> None:
        await self._client.close()
