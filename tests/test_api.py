"""HTTP surface, end to end over the in-memory store."""
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest
from bson import Decimal128, ObjectId
from fastapi.testclient import TestClient

from smart_deals.auth import JwtTokenIssuer, JwtTokenVerifier
from smart_deals.config import Settings
from smart_deals.main import LIVENESS_TEXT, create_app
from smart_deals.store import InMemoryDocumentStore

from .conftest import JWT_SECRET, bearer, seed

UNAUTHORIZED = {"message": "Unauthorized Access"}
FORBIDDEN = {"message": "Forbidden Access"}


def test_liveness(client: TestClient) -> None:
    response = client.get("/")

    assert response.status_code == 200
    assert response.text == LIVENESS_TEXT


class TestUsers:
    def test_register_twice_stores_one_user(
        self, client: TestClient, store: InMemoryDocumentStore
    ) -> None:
        first = client.post("/users", json={"email": "u@x.com", "name": "U"})
        second = client.post("/users", json={"email": "u@x.com", "name": "Someone else"})

        assert first.status_code == 200
        assert first.json()["acknowledged"] is True
        assert ObjectId.is_valid(first.json()["insertedId"])
        assert second.json() == {"message": "User already exists."}
        assert len(store.collections["users"]) == 1
        assert store.collections["users"][0]["name"] == "U"

    def test_extra_fields_are_stored(self, client: TestClient, store: InMemoryDocumentStore) -> None:
        client.post("/users", json={"email": "u@x.com", "photoURL": "https://p/u.png"})

        assert store.collections["users"][0]["photoURL"] == "https://p/u.png"

    def test_email_is_required(self, client: TestClient) -> None:
        assert client.post("/users", json={"name": "anon"}).status_code == 422


class TestProducts:
    def test_list_newest_first_with_owner_filter(
        self, client: TestClient, store: InMemoryDocumentStore
    ) -> None:
        seed(
            store,
            "products",
            {"title": "old", "email": "a@x.com", "created_at": "2026-01-01T00:00:00Z"},
            {"title": "new", "email": "a@x.com", "created_at": "2026-03-01T00:00:00Z"},
            {"title": "other", "email": "b@x.com", "created_at": "2026-02-01T00:00:00Z"},
        )

        everything = client.get("/products").json()
        mine = client.get("/products", params={"email": "a@x.com"}).json()

        assert [p["title"] for p in everything] == ["new", "other", "old"]
        assert [p["title"] for p in mine] == ["new", "old"]

    def test_list_preserves_stored_fields_verbatim(
        self, client: TestClient, store: InMemoryDocumentStore
    ) -> None:
        (product_id,) = seed(store, "products", {"title": "Lamp", "price_min": "12", "location": "Dhaka"})

        (product,) = client.get("/products").json()

        assert product == {"_id": str(product_id), "title": "Lamp", "price_min": "12", "location": "Dhaka"}

    def test_non_string_display_fields_are_returned_as_stored(
        self, client: TestClient, store: InMemoryDocumentStore
    ) -> None:
        stored = {"title": 2024, "image": ["a.png", "b.png"], "price_min": Decimal128("9.50")}
        (product_id,) = seed(store, "products", stored)
        seed(store, "bids", {"buyer_email": "a@x.com", "product": str(product_id), "bid_price": 12})
        expected = {"_id": str(product_id), "title": 2024, "image": ["a.png", "b.png"], "price_min": "9.50"}

        (listed,) = client.get("/products").json()
        fetched = client.get(f"/products/{product_id}")
        (bid,) = client.get("/my-bids", headers=bearer("firebase-token-a")).json()

        assert listed == expected
        assert fetched.status_code == 200
        assert fetched.json() == expected
        assert bid["product_title"] == 2024
        assert bid["product_image"] == ["a.png", "b.png"]
        assert bid["product_price_min"] == "9.50"

    def test_non_string_fields_accepted_on_create_and_update(self, client: TestClient) -> None:
        created = client.post(
            "/products", json={"title": 2024, "image": ["a.png"]}, headers=bearer("firebase-token-a")
        )
        product_id = created.json()["insertedId"]
        updated = client.patch(f"/products/{product_id}", json={"image": ["a.png", "b.png"], "price_max": 30})

        assert created.status_code == 200
        assert updated.status_code == 200
        product = client.get(f"/products/{product_id}").json()
        assert product["title"] == 2024
        assert product["image"] == ["a.png", "b.png"]
        assert product["price_max"] == 30

    def test_latest_products_returns_six_newest(
        self, client: TestClient, store: InMemoryDocumentStore
    ) -> None:
        seed(store, "products", *({"title": f"p{i}", "created_at": f"2026-01-{i + 1:02d}"} for i in range(8)))

        latest = client.get("/latest-products").json()

        assert [p["title"] for p in latest] == ["p7", "p6", "p5", "p4", "p3", "p2"]

    def test_get_by_native_and_legacy_id(
        self, client: TestClient, store: InMemoryDocumentStore
    ) -> None:
        (native_id,) = seed(store, "products", {"title": "native"})
        seed(store, "products", {"_id": "legacy-1", "title": "legacy"})

        assert client.get(f"/products/{native_id}").json()["title"] == "native"
        assert client.get("/products/legacy-1").json()["title"] == "legacy"
        missing = client.get(f"/products/{ObjectId()}")
        assert missing.status_code == 200
        assert missing.json() is None

    def test_categories(self, client: TestClient, store: InMemoryDocumentStore) -> None:
        seed(
            store,
            "products",
            {"category": "Electronics"},
            {"category": "electronics "},
            {"category": ""},
            {"category": "Books"},
            {"title": "uncategorized"},
        )

        assert client.get("/categories").json() == ["Books", "Electronics", "electronics"]

    def test_create_requires_bearer_token(self, client: TestClient) -> None:
        missing = client.post("/products", json={"title": "Lamp"})
        forged = client.post("/products", json={"title": "Lamp"}, headers=bearer("forged"))
        no_token = client.post("/products", json={"title": "Lamp"}, headers={"Authorization": "Bearer"})

        for response in (missing, forged, no_token):
            assert response.status_code == 401
            assert response.json() == UNAUTHORIZED

    def test_create_with_firebase_token(
        self, client: TestClient, store: InMemoryDocumentStore
    ) -> None:
        response = client.post(
            "/products",
            json={"title": "Lamp", "email": "a@x.com", "price_min": 10, "condition": "used"},
            headers=bearer("firebase-token-a"),
        )

        assert response.status_code == 200
        inserted_id = response.json()["insertedId"]
        stored = client.get(f"/products/{inserted_id}").json()
        assert stored["title"] == "Lamp"
        assert stored["condition"] == "used"

    def test_patch_sets_only_supplied_fields(
        self, client: TestClient, store: InMemoryDocumentStore
    ) -> None:
        (product_id,) = seed(store, "products", {"title": "Lamp", "price_min": 10, "color": "red"})

        response = client.patch(f"/products/{product_id}", json={"price_min": 15, "_id": "hijack"})

        assert response.json() == {
            "acknowledged": True,
            "matchedCount": 1,
            "modifiedCount": 1,
            "upsertedCount": 0,
            "upsertedId": None,
        }
        stored = client.get(f"/products/{product_id}").json()
        assert stored == {"_id": str(product_id), "title": "Lamp", "price_min": 15, "color": "red"}

    def test_delete(self, client: TestClient, store: InMemoryDocumentStore) -> None:
        seed(store, "products", {"_id": "legacy-1"})

        first = client.delete("/products/legacy-1")
        second = client.delete("/products/legacy-1")

        assert first.json() == {"acknowledged": True, "deletedCount": 1}
        assert second.json() == {"acknowledged": True, "deletedCount": 0}


class TestBids:
    @pytest.fixture
    def product_id(self, store: InMemoryDocumentStore) -> str:
        (product_id,) = seed(
            store,
            "products",
            {"title": "Camera", "image": "cam.png", "price_min": 100, "price_max": 300},
        )
        return str(product_id)

    def test_list_with_email_filter(self, client: TestClient, store: InMemoryDocumentStore) -> None:
        seed(store, "bids", {"buyer_email": "a@x.com"}, {"buyer_email": "b@x.com"})

        assert len(client.get("/bids").json()) == 2
        (only,) = client.get("/bids", params={"email": "b@x.com"}).json()
        assert only["buyer_email"] == "b@x.com"

    def test_create_get_delete(self, client: TestClient, product_id: str) -> None:
        created = client.post(
            "/bids", json={"buyer_email": "a@x.com", "product": product_id, "bid_price": 150}
        ).json()
        bid_id = created["insertedId"]

        fetched = client.get(f"/bids/{bid_id}").json()
        deleted = client.delete(f"/bids/{bid_id}").json()

        assert fetched["bid_price"] == 150
        assert fetched["product"] == product_id
        assert deleted["deletedCount"] == 1
        assert client.get(f"/bids/{bid_id}").json() is None

    def test_my_bids_enriched_for_owner(
        self, client: TestClient, store: InMemoryDocumentStore, product_id: str
    ) -> None:
        seed(
            store,
            "bids",
            {"buyer_email": "a@x.com", "product": product_id, "bid_price": 120},
            {"buyer_email": "a@x.com", "product": str(ObjectId()), "bid_price": 90},
            {"buyer_email": "b@x.com", "product": product_id, "bid_price": 130},
        )

        response = client.get("/my-bids", params={"email": "a@x.com"}, headers=bearer("firebase-token-a"))

        assert response.status_code == 200
        enriched, dangling = response.json()
        assert enriched["product_title"] == "Camera"
        assert enriched["product_image"] == "cam.png"
        assert (enriched["product_price_min"], enriched["product_price_max"]) == (100, 300)
        assert dangling["bid_price"] == 90
        assert dangling["product_title"] is None
        assert "product_image" in dangling

    def test_my_bids_for_someone_else_is_forbidden(
        self, client: TestClient, store: InMemoryDocumentStore
    ) -> None:
        seed(store, "bids", {"buyer_email": "a@x.com"})

        response = client.get("/my-bids", params={"email": "a@x.com"}, headers=bearer("firebase-token-b"))

        assert response.status_code == 403
        assert response.json() == FORBIDDEN

    def test_my_bids_without_filter_lists_all(
        self, client: TestClient, store: InMemoryDocumentStore
    ) -> None:
        seed(store, "bids", {"buyer_email": "a@x.com"}, {"buyer_email": "b@x.com"})

        response = client.get("/my-bids", headers=bearer("firebase-token-b"))

        assert len(response.json()) == 2

    def test_my_bids_requires_token(self, client: TestClient) -> None:
        response = client.get("/my-bids", params={"email": "a@x.com"})

        assert response.status_code == 401
        assert response.json() == UNAUTHORIZED

    def test_product_bids_sorted_highest_first(
        self, client: TestClient, store: InMemoryDocumentStore, product_id: str
    ) -> None:
        seed(
            store,
            "bids",
            {"buyer_email": "a@x.com", "product": product_id, "bid_price": 120},
            {"buyer_email": "b@x.com", "product": product_id, "bid_price": 250},
            {"buyer_email": "c@x.com", "product": "elsewhere", "bid_price": 999},
        )

        response = client.get(f"/products/bids/{product_id}", headers=bearer("firebase-token-a"))

        bids = response.json()
        assert [b["bid_price"] for b in bids] == [250, 120]
        assert {b["product_title"] for b in bids} == {"Camera"}

    def test_product_bids_requires_token(self, client: TestClient, product_id: str) -> None:
        assert client.get(f"/products/bids/{product_id}").status_code == 401


class TestSelfIssuedTokens:
    @pytest.fixture
    def jwt_client(self, store: InMemoryDocumentStore, firebase_verifier):
        settings = Settings(
            _env_file=None,
            use_in_memory_store=True,
            jwt_secret=JWT_SECRET,
            route_verifiers={"create_product": "firebase", "my_bids": "jwt", "product_bids": "jwt"},
        )
        app = create_app(
            settings,
            store=store,
            verifiers={"firebase": firebase_verifier, "jwt": JwtTokenVerifier(JWT_SECRET)},
        )
        with TestClient(app) as test_client:
            yield test_client

    def test_get_token_then_read_my_bids(
        self, jwt_client: TestClient, store: InMemoryDocumentStore
    ) -> None:
        seed(store, "bids", {"buyer_email": "a@x.com", "bid_price": 10})

        token = jwt_client.post("/get-token", json={"email": "a@x.com"}).json()["token"]
        mine = jwt_client.get("/my-bids", params={"email": "a@x.com"}, headers=bearer(token))
        theirs = jwt_client.get("/my-bids", params={"email": "b@x.com"}, headers=bearer(token))

        assert mine.status_code == 200
        assert mine.json()[0]["bid_price"] == 10
        assert theirs.status_code == 403

    def test_expired_session_token_is_unauthorized(self, jwt_client: TestClient) -> None:
        issued_at = datetime.now(timezone.utc) - timedelta(hours=2)
        token = JwtTokenIssuer(JWT_SECRET).issue({"email": "a@x.com"}, issued_at=issued_at)

        response = jwt_client.get("/my-bids", headers=bearer(token))

        assert response.status_code == 401
        assert response.json() == UNAUTHORIZED

    def test_firebase_token_not_accepted_on_jwt_route(self, jwt_client: TestClient) -> None:
        response = jwt_client.get("/my-bids", headers=bearer("firebase-token-a"))

        assert response.status_code == 401

    def test_get_token_disabled_without_secret(self, store: InMemoryDocumentStore, firebase_verifier) -> None:
        app = create_app(
            Settings(_env_file=None, use_in_memory_store=True),
            store=store,
            verifiers={"firebase": firebase_verifier, "jwt": JwtTokenVerifier(None)},
        )
        with TestClient(app) as test_client:
            response = test_client.post("/get-token", json={"email": "a@x.com"})

        assert response.status_code == 503


class ClosableStore(InMemoryDocumentStore):
    def __init__(self) -> None:
        super().__init__()
        self.closed = False

    async def close(self) -> None:
        self.closed = True


class TestRouteVerifierConfig:
    def _app(self, store, firebase_verifier, route_verifiers: dict[str, str]):
        settings = Settings(
            _env_file=None, use_in_memory_store=True, jwt_secret=JWT_SECRET, route_verifiers=route_verifiers
        )
        return create_app(
            settings,
            store=store,
            verifiers={"firebase": firebase_verifier, "jwt": JwtTokenVerifier(JWT_SECRET)},
        )

    def test_unknown_strategy_fails_startup(self, store: InMemoryDocumentStore, firebase_verifier) -> None:
        app = self._app(store, firebase_verifier, {"my_bids": "oauth"})

        with pytest.raises(ValueError, match="oauth"):
            with TestClient(app):
                pass

    def test_unknown_route_name_fails_startup(self, store: InMemoryDocumentStore, firebase_verifier) -> None:
        app = self._app(store, firebase_verifier, {"my-bids": "jwt"})

        with pytest.raises(ValueError, match="my-bids"):
            with TestClient(app):
                pass

    def test_partial_map_keeps_defaults_for_other_routes(
        self, store: InMemoryDocumentStore, firebase_verifier
    ) -> None:
        (product_id,) = seed(store, "products", {"title": "Lamp"})
        app = self._app(store, firebase_verifier, {"my_bids": "jwt"})

        with TestClient(app) as test_client:
            created = test_client.post("/products", json={"title": "Desk"}, headers=bearer("firebase-token-a"))
            product_bids = test_client.get(f"/products/bids/{product_id}", headers=bearer("firebase-token-a"))
            my_bids_firebase = test_client.get("/my-bids", headers=bearer("firebase-token-a"))

        assert created.status_code == 200
        assert product_bids.status_code == 200
        assert my_bids_firebase.status_code == 401

    def test_failed_startup_releases_created_resources(self, firebase_verifier) -> None:
        created_store = ClosableStore()
        settings = Settings(_env_file=None, use_in_memory_store=True, route_verifiers={"my_bids": "oauth"})
        app = create_app(settings)

        with (
            patch("smart_deals.main.create_store", return_value=created_store),
            patch("smart_deals.main.create_verifiers", return_value={"firebase": firebase_verifier}),
            patch("firebase_admin.delete_app") as delete_app,
        ):
            with pytest.raises(ValueError):
                with TestClient(app):
                    pass

        assert created_store.closed
        delete_app.assert_called_once()
