"""Request authentication and authorization.

- CredentialVerifierABC: bearer-token verification interface
- FirebaseTokenVerifier: federated ID tokens (Firebase Admin SDK)
- JwtTokenVerifier / JwtTokenIssuer: self-issued HS256 session tokens
- authorize / ensure_owner: ownership guard for user-scoped data
"""
from smart_deals.auth.exceptions import (AuthError, Forbidden, Unauthorized,
                                         auth_error_handler)
from smart_deals.auth.firebase import FirebaseTokenVerifier, init_firebase_app
from smart_deals.auth.guard import AccessDecision, authorize, ensure_owner
from smart_deals.auth.jwt_tokens import JwtTokenIssuer, JwtTokenVerifier
from smart_deals.auth.verifier_abc import (CredentialVerifierABC,
                                           extract_bearer_token)

__all__ = [
    "AccessDecision",
    "AuthError",
    "CredentialVerifierABC",
    "FirebaseTokenVerifier",
    "Forbidden",
    "JwtTokenIssuer",
    "JwtTokenVerifier",
    "Unauthorized",
    "auth_error_handler",
    "authorize",
    "ensure_owner",
    "extract_bearer_token",
    "init_firebase_app",
]
