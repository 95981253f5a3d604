"""Product routes: listings, categories, lookup and mutation.

Reads are public. Creating a product requires a verified identity; updates
and deletes are open (see DESIGN.md, open questions).
"""
import logging

from fastapi import APIRouter, Query

from smart_deals.deps import CreateProductIdentity, ProductsServiceDep
from smart_deals.schemas import DeleteResult, InsertResult, Product, UpdateResult

logger = logging.getLogger(__name__)
router = APIRouter(tags=["products"])


@router.get("/products", response_model=list[Product], response_model_exclude_unset=True)
async def list_products(
    service: ProductsServiceDep,
    email: str | None = Query(default=None, description="Only products listed by this owner"),
) -> list[dict]:
    """List products, newest first."""
    return await service.list_products(email)


@router.get("/latest-products", response_model=list[Product], response_model_exclude_unset=True)
async def latest_products(service: ProductsServiceDep) -> list[dict]:
    """The six most recently created products (home page)."""
    return await service.latest()


@router.get("/categories", response_model=list[str])
async def list_categories(service: ProductsServiceDep) -> list[str]:
    """Distinct category names, trimmed, de-duplicated and sorted."""
    return await service.categories()


@router.get("/products/{product_id}", response_model=Product | None, response_model_exclude_unset=True)
async def get_product(product_id: str, service: ProductsServiceDep) -> dict | None:
    """Get one product by id.

    Args:
        product_id: 24-hex ObjectId, or the plain string id of a legacy record.

    Returns:
        The product, or null when nothing matches.
    """
    return await service.get(product_id)


@router.post("/products", response_model=InsertResult)
async def create_product(
    product: Product, identity: CreateProductIdentity, service: ProductsServiceDep
) -> InsertResult:
    """Create a product listing. Requires a bearer token."""
    logger.debug("Product listing submitted by %s", identity.email)
    return await service.create(product.to_document())


@router.patch("/products/{product_id}", response_model=UpdateResult)
async def update_product(
    product_id: str, changes: Product, service: ProductsServiceDep
) -> UpdateResult:
    """Set the supplied fields on a product; fields not sent are left as they are."""
    return await service.update(product_id, changes.to_document())


@router.delete("/products/{product_id}", response_model=DeleteResult)
async def delete_product(product_id: str, service: ProductsServiceDep) -> DeleteResult:
    """Delete a product by id."""
    return await service.delete(product_id)
