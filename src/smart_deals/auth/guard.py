"""Ownership guard for user-scoped queries."""
from enum import Enum

from smart_deals.auth.exceptions import Forbidden
from smart_deals.schemas import Identity


class AccessDecision(str, Enum):
    ALLOW = "allow"
    DENY = "deny"


def authorize(requested_owner_email: str | None, identity: Identity) -> AccessDecision:
    """Decide whether the caller may read data scoped to requested_owner_email.

    No owner filter means a collection-wide view and is always allowed;
    otherwise the filter must name the caller.
    """
    if not requested_owner_email:
        return AccessDecision.ALLOW
    if requested_owner_email == identity.email:
        return AccessDecision.ALLOW
    return AccessDecision.DENY


def ensure_owner(requested_owner_email: str | None, identity: Identity) -> None:
    """Raise Forbidden unless authorize() allows the request."""
    if authorize(requested_owner_email, identity) is AccessDecision.DENY:
        raise Forbidden(
            f"{identity.email} may not read data owned by {requested_owner_email}"
        )
