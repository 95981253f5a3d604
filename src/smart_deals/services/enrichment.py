"""Join bids with the display fields of the products they reference."""
import asyncio
from typing import Any

from smart_deals.store import PRODUCTS, DocumentStoreABC
from smart_deals.store.queries import by_id

# Enriched field -> product field.
PRODUCT_FIELDS: dict[str, str] = {
    "product_image": "image",
    "product_title": "title",
    "product_price_min": "price_min",
    "product_price_max": "price_max",
}


def enrich(bid: dict[str, Any], product: dict[str, Any] | None) -> dict[str, Any]:
    """Return a copy of bid with product_image/title/price_min/price_max added.

    A missing product (dangling reference) yields the four fields as None.
    """
    enriched = dict(bid)
    for target, source in PRODUCT_FIELDS.items():
        enriched[target] = product.get(source) if product else None
    return enriched


def _ref_key(ref: Any) -> str | None:
    return None if ref is None else str(ref)


async def enrich_many(
    store: DocumentStoreABC, bids: list[dict[str, Any]]
) -> list[dict[str, Any]]:
    """Enrich bids, looking each distinct product reference up once, concurrently."""
    refs: dict[str, Any] = {}
    for bid in bids:
        key = _ref_key(bid.get("product"))
        if key is not None:
            refs.setdefault(key, bid["product"])
    keys = list(refs)
    found = await asyncio.gather(
        *(store.find_one(PRODUCTS, by_id(refs[key])) for key in keys)
    )
    products = dict(zip(keys, found))
    return [enrich(bid, products.get(_ref_key(bid.get("product")))) for bid in bids]
