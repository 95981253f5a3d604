"""Abstract base class for bearer credential verifiers."""
import logging
from abc import ABC, abstractmethod

from smart_deals.auth.exceptions import Unauthorized
from smart_deals.schemas import Identity

logger = logging.getLogger(__name__)


def extract_bearer_token(authorization: str | None) -> str:
    """Return the token from an "Authorization: Bearer <token>" header value.

    Raises:
        Unauthorized: Header missing, not a Bearer credential, or no token segment.
    """
    if not authorization:
        raise Unauthorized("missing Authorization header")
    parts = authorization.split()
    if len(parts) < 2 or parts[0].lower() != "bearer":
        raise Unauthorized("Authorization header is not a Bearer credential")
    return parts[1]


class CredentialVerifierABC(ABC):
    """Verifies a bearer token and yields the caller's identity.

    Implementations differ only in who issued the token (an external identity
    provider or this service); every failure surfaces as Unauthorized.
    """

    name: str = "verifier"

    @abstractmethod
    async def verify(self, token: str) -> Identity:
        """Verify a raw token.

        Args:
            token: The credential without the "Bearer " prefix.

        Returns:
            The verified identity (email plus the decoded claims).

        Raises:
            Unauthorized: The token is invalid, expired, or carries no email.
        """

    async def authenticate(self, authorization: str | None) -> Identity:
        """Extract the bearer token from a header value and verify it."""
        try:
            token = extract_bearer_token(authorization)
            return await self.verify(token)
        except Unauthorized as exc:
            logger.debug("%s rejected request: %s", self.name, exc.reason)
            raise
