"""Federated identity tokens issued by Firebase Authentication."""
import asyncio
import base64
import json
import logging

import firebase_admin
from firebase_admin import auth, credentials
from firebase_admin.exceptions import FirebaseError

from smart_deals.auth.exceptions import Unauthorized
from smart_deals.auth.verifier_abc import CredentialVerifierABC
from smart_deals.config import Settings
from smart_deals.schemas import Identity

logger = logging.getLogger(__name__)

FIREBASE_APP_NAME = "smart-deals"


def init_firebase_app(settings: Settings) -> firebase_admin.App | None:
    """Initialize the Firebase Admin app from the configured service account.

    FIREBASE_SERVICE_KEY (base64-encoded JSON) wins over
    FIREBASE_SERVICE_KEY_PATH. Returns None when neither is set.
    """
    service_key = (
        settings.firebase_service_key.get_secret_value()
        if settings.firebase_service_key
        else ""
    )
    if service_key:
        decoded = base64.b64decode(service_key)
        cred = credentials.Certificate(json.loads(decoded.decode("utf-8")))
    elif settings.firebase_service_key_path:
        cred = credentials.Certificate(settings.firebase_service_key_path)
    else:
        logger.warning("No Firebase service account configured; federated tokens will be rejected")
        return None
    return firebase_admin.initialize_app(cred, name=FIREBASE_APP_NAME)


class FirebaseTokenVerifier(CredentialVerifierABC):
    """Verifies Firebase ID tokens with the Admin SDK.

    verify_id_token checks signature, audience and expiry against Google's
    public certificates; it blocks on the certificate fetch, so it runs in a
    worker thread.
    """

    name = "firebase"

    def __init__(self, app: firebase_admin.App | None) -> None:
        self._app = app

    async def verify(self, token: str) -> Identity:
        if self._app is None:
            raise Unauthorized("Firebase is not configured")
        try:
            claims = await asyncio.to_thread(auth.verify_id_token, token, app=self._app)
        except (ValueError, FirebaseError) as exc:
            raise Unauthorized(f"invalid Firebase ID token: {exc}") from exc
        email = claims.get("email")
        if not email:
            raise Unauthorized("Firebase ID token has no email claim")
        return Identity(email=email, claims=claims)

    def close(self) -> None:
        """Delete the Firebase app so a later startup can initialize it again."""
        if self._app is not None:
            firebase_admin.delete_app(self._app)
            self._app = None
