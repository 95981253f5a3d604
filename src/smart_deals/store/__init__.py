"""Document store: abstraction, MongoDB and in-memory implementations, queries."""
from smart_deals.store.document_store_abc import (BIDS, PRODUCTS, USERS,
                                                  DocumentStoreABC)
from smart_deals.store.ids import (NativeId, OpaqueId, RecordId,
                                   parse_record_id, to_jsonable)
from smart_deals.store.memory import InMemoryDocumentStore
from smart_deals.store.mongo import MongoDocumentStore
from smart_deals.store.queries import Selection

__all__ = [
    "BIDS",
    "PRODUCTS",
    "USERS",
    "DocumentStoreABC",
    "InMemoryDocumentStore",
    "MongoDocumentStore",
    "NativeId",
    "OpaqueId",
    "RecordId",
    "Selection",
    "parse_record_id",
    "to_jsonable",
]
