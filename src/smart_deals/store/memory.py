"""In-memory document store for development and tests."""
import copy
from datetime import datetime
from typing import Any

from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from smart_deals.schemas import DeleteResult, InsertResult, UpdateResult
from smart_deals.store.document_store_abc import DocumentStoreABC
from smart_deals.store.ids import to_jsonable
from smart_deals.store.queries import Selection

_MISSING = object()


def _sort_key(value: Any) -> tuple[int, Any]:
    """Order mixed values the way MongoDB does: null, numbers, strings, ids, bools, dates."""
    if value is None or value is _MISSING:
        return (0, 0)
    if isinstance(value, bool):
        return (4, value)
    if isinstance(value, (int, float)):
        return (1, value)
    if isinstance(value, str):
        return (2, value)
    if isinstance(value, ObjectId):
        return (3, value)
    if isinstance(value, datetime):
        return (5, value.timestamp())
    return (6, repr(value))


def _matches(document: dict[str, Any], criteria: dict[str, Any]) -> bool:
    """Equality match; a null criterion also matches a missing field."""
    for key, expected in criteria.items():
        actual = document.get(key, _MISSING)
        if expected is None and actual is _MISSING:
            continue
        if actual is _MISSING or actual != expected:
            return False
    return True


class InMemoryDocumentStore(DocumentStoreABC):
    """Dict-backed store with the subset of MongoDB semantics the API uses.

    Collections are insertion-ordered lists of documents; returned documents
    are copies so callers cannot mutate stored state.
    """

    def __init__(self) -> None:
        self.collections: dict[str, list[dict[str, Any]]] = {}

    def reset(self) -> None:
        """Drop every collection."""
        self.collections.clear()

    def _collection(self, name: str) -> list[dict[str, Any]]:
        return self.collections.setdefault(name, [])

    def _first(self, collection: str, criteria: dict[str, Any]) -> dict[str, Any] | None:
        for document in self._collection(collection):
            if _matches(document, criteria):
                return document
        return None

    async def find(self, collection: str, selection: Selection) -> list[dict[str, Any]]:
        docs = [d for d in self._collection(collection) if _matches(d, selection.criteria)]
        # Stable sorts applied last key first give a multi-key ordering.
        for field_name, direction in reversed(selection.sort):
            docs.sort(
                key=lambda d, f=field_name: _sort_key(d.get(f, _MISSING)),
                reverse=direction < 0,
            )
        if selection.limit is not None:
            docs = docs[: selection.limit]
        return copy.deepcopy(docs)

    async def find_one(
        self, collection: str, criteria: dict[str, Any]
    ) -> dict[str, Any] | None:
        return copy.deepcopy(self._first(collection, criteria))

    async def insert_one(self, collection: str, document: dict[str, Any]) -> InsertResult:
        stored = copy.deepcopy(document)
        stored.setdefault("_id", ObjectId())
        if self._first(collection, {"_id": stored["_id"]}) is not None:
            raise DuplicateKeyError(
                f"E11000 duplicate key error collection: {collection} "
                f"dup key: {{ _id: {stored['_id']!r} }}"
            )
        self._collection(collection).append(stored)
        return InsertResult(inserted_id=to_jsonable(stored["_id"]))

    async def update_one(
        self, collection: str, criteria: dict[str, Any], fields: dict[str, Any]
    ) -> UpdateResult:
        document = self._first(collection, criteria)
        if document is None:
            return UpdateResult(matched_count=0, modified_count=0)
        changed = any(document.get(k, _MISSING) != v for k, v in fields.items())
        document.update(copy.deepcopy(fields))
        return UpdateResult(matched_count=1, modified_count=1 if changed else 0)

    async def delete_one(self, collection: str, criteria: dict[str, Any]) -> DeleteResult:
        docs = self._collection(collection)
        for index, document in enumerate(docs):
            if _matches(document, criteria):
                del docs[index]
                return DeleteResult(deleted_count=1)
        return DeleteResult(deleted_count=0)

    async def distinct(self, collection: str, field_name: str) -> list[Any]:
        values: list[Any] = []
        for document in self._collection(collection):
            value = document.get(field_name, _MISSING)
            if value is not _MISSING and value not in values:
                values.append(value)
        return values
