"""Selection criteria for products, bids and users.

Builds what the store should match, how to order it and how many to return.
"""
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from smart_deals.store.ids import parse_record_id

ASCENDING = 1
DESCENDING = -1

LATEST_PRODUCTS_LIMIT = 6


@dataclass(frozen=True)
class Selection:
    """Filter, sort and limit for a store query."""

    criteria: dict[str, Any] = field(default_factory=dict)
    sort: tuple[tuple[str, int], ...] = ()
    limit: int | None = None


def by_id(raw_id: Any) -> dict[str, Any]:
    """Exact match on _id, native ObjectId when the value parses as one."""
    return {"_id": parse_record_id(raw_id).as_key()}


def by_filter(field_name: str, value: Any | None) -> dict[str, Any]:
    """Equality on field_name when value is given, otherwise match everything."""
    if value:
        return {field_name: value}
    return {}


def user_by_email(email: str) -> dict[str, Any]:
    return {"email": email}


def products(email: str | None = None) -> Selection:
    """All products (optionally one owner's), newest first."""
    return Selection(
        criteria=by_filter("email", email),
        sort=(("created_at", DESCENDING),),
    )


def latest_products() -> Selection:
    return Selection(
        sort=(("created_at", DESCENDING),),
        limit=LATEST_PRODUCTS_LIMIT,
    )


def bids(buyer_email: str | None = None) -> Selection:
    """All bids, or one buyer's bids, in natural order."""
    return Selection(criteria=by_filter("buyer_email", buyer_email))


def bids_for_product(product_id: str) -> Selection:
    """Bids referencing a product, highest bid first."""
    return Selection(
        criteria={"product": product_id},
        sort=(("bid_price", DESCENDING),),
    )


def clean_categories(values: Iterable[Any]) -> list[str]:
    """Normalize raw distinct category values for display.

    Drops falsy and non-string values, trims whitespace, removes duplicates
    (first occurrence wins) and sorts case-sensitively. Whitespace-only values
    are dropped as well rather than kept as "", so cleaning an already cleaned
    list returns it unchanged.
    """
    seen: dict[str, None] = {}
    for value in values:
        if not value or not isinstance(value, str):
            continue
        trimmed = value.strip()
        if trimmed:
            seen.setdefault(trimmed, None)
    return sorted(seen)
