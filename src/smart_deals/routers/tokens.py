"""Self-issued session token route."""
from fastapi import APIRouter

from smart_deals.deps import TokenIssuerDep
from smart_deals.schemas import TokenRequest, TokenResponse

router = APIRouter(tags=["auth"])


@router.post("/get-token", response_model=TokenResponse)
async def get_token(claims: TokenRequest, issuer: TokenIssuerDep) -> TokenResponse:
    """Issue a one-hour session token embedding the posted identity claims."""
    return TokenResponse(token=issuer.issue(claims.model_dump()))
