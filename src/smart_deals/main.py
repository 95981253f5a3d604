"""Main module for the Smart Deals bidding marketplace service."""
import logging
from collections.abc import Mapping
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from smart_deals.auth import (AuthError, CredentialVerifierABC,
                              FirebaseTokenVerifier, JwtTokenIssuer,
                              JwtTokenVerifier, auth_error_handler,
                              init_firebase_app)
from smart_deals.config import DEFAULT_ROUTE_VERIFIERS, Settings, get_settings
from smart_deals.routers import (bids_router, products_router, tokens_router,
                                 users_router)
from smart_deals.services import BidsService, ProductsService, UsersService
from smart_deals.store import (DocumentStoreABC, InMemoryDocumentStore,
                               MongoDocumentStore)

logger = logging.getLogger(__name__)

LIVENESS_TEXT = "Smart Deals Server is running."


def create_store(settings: Settings) -> DocumentStoreABC:
    """Return the configured document store (MongoDB unless in-memory is requested)."""
    if settings.use_in_memory_store:
        logger.warning("Using the in-memory document store; data is lost on restart")
        return InMemoryDocumentStore()
    return MongoDocumentStore(settings.mongo_uri(), settings.db_name)


def create_verifiers(settings: Settings) -> dict[str, CredentialVerifierABC]:
    """Build one verifier per strategy name."""
    secret = settings.jwt_secret.get_secret_value() if settings.jwt_secret else None
    return {
        "firebase": FirebaseTokenVerifier(init_firebase_app(settings)),
        "jwt": JwtTokenVerifier(secret),
    }


def resolve_route_verifiers(
    route_verifiers: Mapping[str, str],
    verifiers: Mapping[str, CredentialVerifierABC],
) -> dict[str, CredentialVerifierABC]:
    """Map each protected route to its verifier instance.

    Configured entries override DEFAULT_ROUTE_VERIFIERS; routes left out keep
    their default strategy.

    Raises:
        ValueError: A key is not a protected route, or names a strategy that
            does not exist.
    """
    unknown_routes = sorted(set(route_verifiers) - set(DEFAULT_ROUTE_VERIFIERS))
    if unknown_routes:
        raise ValueError(
            f"Unknown protected route(s) {', '.join(map(repr, unknown_routes))}. "
            f"Available: {', '.join(DEFAULT_ROUTE_VERIFIERS)}"
        )
    resolved: dict[str, CredentialVerifierABC] = {}
    for route, strategy in {**DEFAULT_ROUTE_VERIFIERS, **route_verifiers}.items():
        if strategy not in verifiers:
            raise ValueError(
                f"Unknown verifier {strategy!r} for route {route!r}. "
                f"Available: {', '.join(verifiers)}"
            )
        resolved[route] = verifiers[strategy]
    return resolved


def create_app(
    settings: Settings | None = None,
    *,
    store: DocumentStoreABC | None = None,
    verifiers: Mapping[str, CredentialVerifierABC] | None = None,
) -> FastAPI:
    """Create the FastAPI app.

    Args:
        settings: Settings to use; defaults to the cached environment settings.
        store: Pre-built document store (tests); created from settings otherwise.
        verifiers: Pre-built verifiers by strategy name (tests); created from settings otherwise.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(fastapi_app: FastAPI):
        """Create the store, verifiers and services at startup; close them on shutdown."""
        app_store = store or create_store(settings)
        app_verifiers = dict(verifiers) if verifiers is not None else create_verifiers(settings)
        secret = settings.jwt_secret.get_secret_value() if settings.jwt_secret else None

        async def close_created() -> None:
            # Injected store/verifiers belong to the caller
            if store is None:
                try:
                    await app_store.close()
                except Exception as exc:  # pylint: disable=broad-except
                    logger.warning("Error closing store %s: %s", type(app_store).__name__, exc)
            if verifiers is None:
                for verifier in app_verifiers.values():
                    if isinstance(verifier, FirebaseTokenVerifier):
                        verifier.close()

        try:
            if settings.ping_on_startup:
                await app_store.ping()
            route_verifiers = resolve_route_verifiers(settings.route_verifiers, app_verifiers)
        except Exception:
            logger.error("Startup failed; releasing store and verifiers")
            await close_created()
            raise

        fastapi_app.state.store = app_store
        fastapi_app.state.route_verifiers = route_verifiers
        fastapi_app.state.token_issuer = JwtTokenIssuer(secret) if secret else None
        if fastapi_app.state.token_issuer is None:
            logger.warning("JWT_SECRET is not set; /get-token is disabled")

        # Per-domain services
        fastapi_app.state.users_service = UsersService(app_store)
        fastapi_app.state.products_service = ProductsService(app_store)
        fastapi_app.state.bids_service = BidsService(app_store)

        yield

        await close_created()

    app = FastAPI(
        title="Smart Deals",
        description="Bidding marketplace API: products, bids and user registration",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(AuthError, auth_error_handler)

    # Include routers
    app.include_router(tokens_router)
    app.include_router(users_router)
    app.include_router(products_router)
    app.include_router(bids_router)

    @app.get("/", response_class=PlainTextResponse)
    def health() -> str:
        """Liveness check."""
        return LIVENESS_TEXT

    return app


app = create_app()


def run() -> None:
    """Run the server (uvicorn). Use for `poetry run start`."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Smart Deals Server listening on: %s", settings.public_url)
    uvicorn.run("smart_deals.main:app", host=settings.bind_host, port=settings.port)
