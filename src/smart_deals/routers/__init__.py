"""API routers for the Smart Deals endpoints.

Includes routes for:
- /get-token - Self-issued session tokens
- /users - Registration
- /products, /latest-products, /categories - Product listings and mutation
- /bids, /my-bids, /products/bids/{product_id} - Bids, enriched with product details
"""
from smart_deals.routers.bids import router as bids_router
from smart_deals.routers.products import router as products_router
from smart_deals.routers.tokens import router as tokens_router
from smart_deals.routers.users import router as users_router

__all__ = [
    "bids_router",
    "products_router",
    "tokens_router",
    "users_router",
]
