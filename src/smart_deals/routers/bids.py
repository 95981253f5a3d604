"""Bid routes.

/my-bids and /products/bids/{product_id} need a verified identity and return
bids enriched with the referenced product's image, title and price range.
"""
from fastapi import APIRouter, Query

from smart_deals.deps import BidsServiceDep, MyBidsIdentity, ProductBidsIdentity
from smart_deals.schemas import Bid, DeleteResult, EnrichedBid, InsertResult

router = APIRouter(tags=["bids"])

# Route order: /my-bids and /products/bids/... are distinct from /bids/{bid_id}.


@router.get("/bids", response_model=list[Bid], response_model_exclude_unset=True)
async def list_bids(
    service: BidsServiceDep,
    email: str | None = Query(default=None, description="Only bids placed by this buyer"),
) -> list[dict]:
    """List bids, optionally for one buyer."""
    return await service.list_bids(email)


@router.get("/bids/{bid_id}", response_model=Bid | None, response_model_exclude_unset=True)
async def get_bid(bid_id: str, service: BidsServiceDep) -> dict | None:
    """Get one bid by id, or null."""
    return await service.get(bid_id)


@router.get("/my-bids", response_model=list[EnrichedBid], response_model_exclude_unset=True)
async def my_bids(
    identity: MyBidsIdentity,
    service: BidsServiceDep,
    email: str | None = Query(default=None, description="Buyer email; must be the caller's"),
) -> list[dict]:
    """List the caller's bids with product details.

    Responds 403 when email names anyone but the token's owner.
    """
    return await service.my_bids(identity, email)


@router.get(
    "/products/bids/{product_id}",
    response_model=list[EnrichedBid],
    response_model_exclude_unset=True,
)
async def product_bids(
    product_id: str, _: ProductBidsIdentity, service: BidsServiceDep
) -> list[dict]:
    """List bids on a product, highest bid first, with product details."""
    return await service.for_product(product_id)


@router.post("/bids", response_model=InsertResult)
async def create_bid(bid: Bid, service: BidsServiceDep) -> InsertResult:
    """Place a bid."""
    return await service.create(bid.to_document())


@router.delete("/bids/{bid_id}", response_model=DeleteResult)
async def delete_bid(bid_id: str, service: BidsServiceDep) -> DeleteResult:
    """Withdraw a bid by id."""
    return await service.delete(bid_id)
