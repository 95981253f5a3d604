"""Bid listing, enrichment and mutation."""
import logging
from typing import Any

from smart_deals.auth import ensure_owner
from smart_deals.schemas import DeleteResult, Identity, InsertResult
from smart_deals.services.enrichment import enrich_many
from smart_deals.services.error_mapper import STORE_EXCEPTIONS, StoreErrorMapper
from smart_deals.store import BIDS, DocumentStoreABC, to_jsonable
from smart_deals.store import queries

logger = logging.getLogger(__name__)


class BidsService:
    """Runs bid selections against the store; maps store errors to HTTP."""

    def __init__(self, store: DocumentStoreABC) -> None:
        self._store = store
        self._error_mapper = StoreErrorMapper(resource_name="Bid")

    async def list_bids(self, buyer_email: str | None = None) -> list[dict[str, Any]]:
        """All bids, or one buyer's bids."""
        try:
            docs = await self._store.find(BIDS, queries.bids(buyer_email))
        except STORE_EXCEPTIONS as e:
            self._error_mapper.raise_http(e, "list bids")
        return to_jsonable(docs)

    async def get(self, bid_id: str) -> dict[str, Any] | None:
        try:
            doc = await self._store.find_one(BIDS, queries.by_id(bid_id))
        except STORE_EXCEPTIONS as e:
            self._error_mapper.raise_http(e, "get bid")
        return to_jsonable(doc)

    async def my_bids(
        self, identity: Identity, buyer_email: str | None = None
    ) -> list[dict[str, Any]]:
        """The caller's bids (or all bids when unfiltered), enriched with product fields.

        Raises:
            Forbidden: buyer_email names someone other than the caller.
        """
        ensure_owner(buyer_email, identity)
        try:
            docs = await self._store.find(BIDS, queries.bids(buyer_email))
            enriched = await enrich_many(self._store, docs)
        except STORE_EXCEPTIONS as e:
            self._error_mapper.raise_http(e, "list my bids")
        return to_jsonable(enriched)

    async def for_product(self, product_id: str) -> list[dict[str, Any]]:
        """Bids on a product, highest first, enriched with that product's fields."""
        try:
            docs = await self._store.find(BIDS, queries.bids_for_product(product_id))
            enriched = await enrich_many(self._store, docs)
        except STORE_EXCEPTIONS as e:
            self._error_mapper.raise_http(e, "list bids for product")
        return to_jsonable(enriched)

    async def create(self, document: dict[str, Any]) -> InsertResult:
        try:
            result = await self._store.insert_one(BIDS, document)
        except STORE_EXCEPTIONS as e:
            self._error_mapper.raise_http(e, "create bid")
        logger.info("Created bid %s", result.inserted_id)
        return result

    async def delete(self, bid_id: str) -> DeleteResult:
        try:
            return await self._store.delete_one(BIDS, queries.by_id(bid_id))
        except STORE_EXCEPTIONS as e:
            self._error_mapper.raise_http(e, "delete bid")
