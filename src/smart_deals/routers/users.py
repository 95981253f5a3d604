"""User registration routes."""
from fastapi import APIRouter

from smart_deals.deps import UsersServiceDep
from smart_deals.schemas import InsertResult, MessageResponse, UserIn

router = APIRouter(tags=["users"])


@router.post("/users", response_model=InsertResult | MessageResponse)
async def register_user(
    user: UserIn, service: UsersServiceDep
) -> InsertResult | MessageResponse:
    """Register a user on first sign-in.

    Returns the insert summary, or {"message": "User already exists."} when the
    email is already registered.
    """
    return await service.register(user)
