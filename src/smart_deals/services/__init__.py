"""Service layer: store orchestration and exception-to-HTTP mapping."""
from smart_deals.services.bids import BidsService
from smart_deals.services.error_mapper import StoreErrorMapper
from smart_deals.services.products import ProductsService
from smart_deals.services.users import UsersService

__all__ = [
    "BidsService",
    "ProductsService",
    "StoreErrorMapper",
    "UsersService",
]
