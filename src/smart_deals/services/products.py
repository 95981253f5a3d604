"""Product listing, lookup and mutation."""
import logging
from typing import Any

from smart_deals.schemas import DeleteResult, InsertResult, UpdateResult
from smart_deals.services.error_mapper import STORE_EXCEPTIONS, StoreErrorMapper
from smart_deals.store import PRODUCTS, DocumentStoreABC, to_jsonable
from smart_deals.store import queries

logger = logging.getLogger(__name__)


class ProductsService:
    """Runs product selections against the store; maps store errors to HTTP."""

    def __init__(self, store: DocumentStoreABC) -> None:
        self._store = store
        self._error_mapper = StoreErrorMapper(resource_name="Product")

    async def list_products(self, email: str | None = None) -> list[dict[str, Any]]:
        """All products (or one owner's), newest first."""
        try:
            docs = await self._store.find(PRODUCTS, queries.products(email))
        except STORE_EXCEPTIONS as e:
            self._error_mapper.raise_http(e, "list products")
        return to_jsonable(docs)

    async def latest(self) -> list[dict[str, Any]]:
        """The six most recently created products."""
        try:
            docs = await self._store.find(PRODUCTS, queries.latest_products())
        except STORE_EXCEPTIONS as e:
            self._error_mapper.raise_http(e, "list latest products")
        return to_jsonable(docs)

    async def get(self, product_id: str) -> dict[str, Any] | None:
        """One product by native or legacy string id; None when absent."""
        try:
            doc = await self._store.find_one(PRODUCTS, queries.by_id(product_id))
        except STORE_EXCEPTIONS as e:
            self._error_mapper.raise_http(e, "get product")
        return to_jsonable(doc)

    async def categories(self) -> list[str]:
        """Distinct, cleaned and sorted category names."""
        try:
            values = await self._store.distinct(PRODUCTS, "category")
        except STORE_EXCEPTIONS as e:
            self._error_mapper.raise_http(e, "list categories")
        return queries.clean_categories(values)

    async def create(self, document: dict[str, Any]) -> InsertResult:
        try:
            result = await self._store.insert_one(PRODUCTS, document)
        except STORE_EXCEPTIONS as e:
            self._error_mapper.raise_http(e, "create product")
        logger.info("Created product %s", result.inserted_id)
        return result

    async def update(self, product_id: str, fields: dict[str, Any]) -> UpdateResult:
        """Set the supplied fields on a product; _id is immutable and ignored."""
        fields = {k: v for k, v in fields.items() if k != "_id"}
        try:
            return await self._store.update_one(PRODUCTS, queries.by_id(product_id), fields)
        except STORE_EXCEPTIONS as e:
            self._error_mapper.raise_http(e, "update product")

    async def delete(self, product_id: str) -> DeleteResult:
        try:
            result = await self._store.delete_one(PRODUCTS, queries.by_id(product_id))
        except STORE_EXCEPTIONS as e:
            self._error_mapper.raise_http(e, "delete product")
        if result.deleted_count:
            logger.info("Deleted product %s", product_id)
        return result
