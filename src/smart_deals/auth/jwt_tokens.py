"""Self-issued session tokens (HS256 JWTs signed with a shared secret)."""
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from smart_deals.auth.exceptions import Unauthorized
from smart_deals.auth.verifier_abc import CredentialVerifierABC
from smart_deals.schemas import Identity

ALGORITHM = "HS256"
TOKEN_TTL = timedelta(hours=1)


class JwtTokenIssuer:
    """Signs identity claims into a token that expires one hour after issuance.

    There is no revocation; expiry is the only way a token stops working.
    """

    def __init__(self, secret: str) -> None:
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self._secret = secret

    def issue(self, claims: dict[str, Any], *, issued_at: datetime | None = None) -> str:
        """Return a signed token embedding claims plus iat and exp.

        Args:
            claims: Identity claims; at minimum the caller's email.
            issued_at: Issuance time (defaults to now, UTC).
        """
        now = issued_at or datetime.now(timezone.utc)
        payload = {
            **claims,
            "iat": int(now.timestamp()),
            "exp": int((now + TOKEN_TTL).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)


class JwtTokenVerifier(CredentialVerifierABC):
    """Verifies tokens minted by JwtTokenIssuer (signature and expiry)."""

    name = "jwt"

    def __init__(self, secret: str | None) -> None:
        self._secret = secret

    async def verify(self, token: str) -> Identity:
        if not self._secret:
            raise Unauthorized("JWT secret is not configured")
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"require": ["exp"]},
            )
        except jwt.PyJWTError as exc:
            raise Unauthorized(f"invalid session token: {exc}") from exc
        email = claims.get("email")
        if not email or not isinstance(email, str):
            raise Unauthorized("session token has no email claim")
        return Identity(email=email, claims=claims)
