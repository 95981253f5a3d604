"""User registration."""
import logging

from smart_deals.schemas import InsertResult, MessageResponse, UserIn
from smart_deals.services.error_mapper import STORE_EXCEPTIONS, StoreErrorMapper
from smart_deals.store import USERS, DocumentStoreABC
from smart_deals.store.queries import user_by_email

logger = logging.getLogger(__name__)

USER_EXISTS_MESSAGE = "User already exists."


class UsersService:
    """Registers users keyed by email.

    The existence check and the insert are separate operations, so two
    concurrent registrations of the same email can both succeed.
    """

    def __init__(self, store: DocumentStoreABC) -> None:
        self._store = store
        self._error_mapper = StoreErrorMapper(resource_name="User")

    async def register(self, user: UserIn) -> InsertResult | MessageResponse:
        """Insert the user unless one with the same email already exists."""
        try:
            existing = await self._store.find_one(USERS, user_by_email(user.email))
            if existing:
                return MessageResponse(message=USER_EXISTS_MESSAGE)
            result = await self._store.insert_one(USERS, user.to_document())
        except STORE_EXCEPTIONS as e:
            self._error_mapper.raise_http(e, "register user")
        logger.info("Registered user %s", user.email)
        return result
