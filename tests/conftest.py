"""Shared pytest fixtures for smart_deals tests."""
from collections.abc import Iterator
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from bson import ObjectId
from fastapi import FastAPI
from fastapi.testclient import TestClient
from firebase_admin import auth as firebase_auth

from smart_deals.auth import FirebaseTokenVerifier, JwtTokenIssuer, JwtTokenVerifier
from smart_deals.config import Settings
from smart_deals.main import create_app
from smart_deals.store import InMemoryDocumentStore

JWT_SECRET = "test-secret-with-at-least-32-bytes!!"

# Firebase ID token -> email, as the Admin SDK would decode them.
FIREBASE_TOKENS = {
    "firebase-token-a": "a@x.com",
    "firebase-token-b": "b@x.com",
}


def fake_verify_id_token(token: str, app: Any = None) -> dict[str, Any]:
    """Stand-in for firebase_admin.auth.verify_id_token."""
    if token not in FIREBASE_TOKENS:
        raise firebase_auth.InvalidIdTokenError("Could not verify token signature.")
    email = FIREBASE_TOKENS[token]
    return {"email": email, "uid": email.split("@")[0]}


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def seed(store: InMemoryDocumentStore, collection: str, *docs: dict[str, Any]) -> list[Any]:
    """Insert documents directly into the in-memory store; return their _ids."""
    ids = []
    for doc in docs:
        stored = dict(doc)
        stored.setdefault("_id", ObjectId())
        store.collections.setdefault(collection, []).append(stored)
        ids.append(stored["_id"])
    return ids


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        use_in_memory_store=True,
        jwt_secret=JWT_SECRET,
    )


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def firebase_verifier() -> Iterator[FirebaseTokenVerifier]:
    """Firebase verifier whose SDK call is patched with fake_verify_id_token."""
    with patch("firebase_admin.auth.verify_id_token", side_effect=fake_verify_id_token):
        yield FirebaseTokenVerifier(MagicMock(name="firebase_app"))


@pytest.fixture
def issuer() -> JwtTokenIssuer:
    return JwtTokenIssuer(JWT_SECRET)


@pytest.fixture
def app(settings: Settings, store: InMemoryDocumentStore, firebase_verifier) -> FastAPI:
    return create_app(
        settings,
        store=store,
        verifiers={"firebase": firebase_verifier, "jwt": JwtTokenVerifier(JWT_SECRET)},
    )


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client
