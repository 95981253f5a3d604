"""FastAPI dependency injection: app.state holds singletons; Depends() resolves them.

No external DI container. The lifespan (main.py) creates the store, verifiers,
token issuer and services once and attaches them to app.state; these getters
are used by Depends().
"""
from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request

from smart_deals.auth import CredentialVerifierABC, JwtTokenIssuer
from smart_deals.schemas import Identity
from smart_deals.services import BidsService, ProductsService, UsersService


def get_users_service(request: Request) -> UsersService:
    """Resolve UsersService from app.state (created at startup)."""
    return request.app.state.users_service


def get_products_service(request: Request) -> ProductsService:
    """Resolve ProductsService from app.state."""
    return request.app.state.products_service


def get_bids_service(request: Request) -> BidsService:
    """Resolve BidsService from app.state."""
    return request.app.state.bids_service


def get_token_issuer(request: Request) -> JwtTokenIssuer:
    """Resolve the self-issued token signer; 503 when JWT_SECRET is unset."""
    issuer = request.app.state.token_issuer
    if issuer is None:
        raise HTTPException(503, detail="Token signing is not configured")
    return issuer


def require_identity(route: str) -> Callable[..., Awaitable[Identity]]:
    """Build a dependency that authenticates the caller for a protected route.

    The verifier (federated or self-issued) for each route is fixed at startup
    from ROUTE_VERIFIERS.
    """

    async def _authenticate(
        request: Request,
        authorization: Annotated[str | None, Header()] = None,
    ) -> Identity:
        verifier: CredentialVerifierABC = request.app.state.route_verifiers[route]
        return await verifier.authenticate(authorization)

    return _authenticate


# Type aliases for route injection
UsersServiceDep = Annotated[UsersService, Depends(get_users_service)]
ProductsServiceDep = Annotated[ProductsService, Depends(get_products_service)]
BidsServiceDep = Annotated[BidsService, Depends(get_bids_service)]
TokenIssuerDep = Annotated[JwtTokenIssuer, Depends(get_token_issuer)]
CreateProductIdentity = Annotated[Identity, Depends(require_identity("create_product"))]
MyBidsIdentity = Annotated[Identity, Depends(require_identity("my_bids"))]
ProductBidsIdentity = Annotated[Identity, Depends(require_identity("product_bids"))]
