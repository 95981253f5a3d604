"""Pydantic schemas for API payloads and responses.

Records are open: known fields are declared, anything else a client sends is
kept as an extra field and stored verbatim.
"""
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class OpenRecord(BaseModel):
    """Base for schema-less documents (known fields plus arbitrary extras).

    Known fields are typed Any so stored values (numbers, strings, lists, ...)
    pass through unchanged; only keys the routes depend on are narrowed.
    """

    model_config = ConfigDict(extra="allow")

    id: Any = Field(default=None, alias="_id")

    def to_document(self) -> dict[str, Any]:
        """Return the document to store, without unset fields and a null _id."""
        doc = self.model_dump(by_alias=True, exclude_unset=True)
        if doc.get("_id") is None:
            doc.pop("_id", None)
        return doc


class UserIn(OpenRecord):
    """Registration payload; email is the unique key."""

    email: str
    name: Any = None
    image: Any = None


class Product(OpenRecord):
    """Listed product."""

    email: Any = None
    title: Any = None
    image: Any = None
    price_min: Any = None
    price_max: Any = None
    category: Any = None
    created_at: Any = None


class Bid(OpenRecord):
    """Bid placed by a buyer on a product."""

    buyer_email: Any = None
    product: Any = None
    bid_price: Any = None


class EnrichedBid(Bid):
    """Bid with the referenced product's display fields merged in."""

    product_image: Any = None
    product_title: Any = None
    product_price_min: Any = None
    product_price_max: Any = None


class Identity(BaseModel):
    """Verified caller identity extracted from a bearer credential."""

    email: str
    claims: dict[str, Any] = Field(default_factory=dict)


class TokenRequest(BaseModel):
    """Claims to embed in a self-issued token (at minimum the email)."""

    model_config = ConfigDict(extra="allow")

    email: str


class TokenResponse(BaseModel):
    token: str


class MessageResponse(BaseModel):
    message: str


class InsertResult(BaseModel):
    """Summary of an insert, shaped like the MongoDB driver's InsertOneResult."""

    model_config = ConfigDict(populate_by_name=True)

    acknowledged: bool = True
    inserted_id: Any = Field(alias="insertedId")


class UpdateResult(BaseModel):
    """Summary of an update, shaped like the MongoDB driver's UpdateResult."""

    model_config = ConfigDict(populate_by_name=True)

    acknowledged: bool = True
    matched_count: int = Field(alias="matchedCount")
    modified_count: int = Field(alias="modifiedCount")
    upserted_count: int = Field(default=0, alias="upsertedCount")
    upserted_id: Any = Field(default=None, alias="upsertedId")


class DeleteResult(BaseModel):
    """Summary of a delete, shaped like the MongoDB driver's DeleteResult."""

    model_config = ConfigDict(populate_by_name=True)

    acknowledged: bool = True
    deleted_count: int = Field(alias="deletedCount")


__all__ = [
    "Bid",
    "DeleteResult",
    "EnrichedBid",
    "Identity",
    "InsertResult",
    "MessageResponse",
    "OpenRecord",
    "Product",
    "TokenRequest",
    "TokenResponse",
    "UpdateResult",
    "UserIn",
]
