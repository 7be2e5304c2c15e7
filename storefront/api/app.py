"""
FastAPI application for the storefront.

create_app() builds every collaborator from explicit settings and hangs
them on app.state, so tests can build an app with their own secret and
storage.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.api.categories import router as category_router
from storefront.api.products import router as product_router
from storefront.auth import (
    AuthRejected,
    PasswordHasher,
    TokenIssuer,
    TokenVerifier,
    auth_rejected_handler,
    auth_router,
)
from storefront.config import Settings, get_settings
from storefront.integrations.sentry import init_sentry
from storefront.services import CategoryStore, CredentialStore, OrderStore, ProductStore
from storefront.storage import MetadataStorage, create_local_storage

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Process-level setup: logging and error tracking."""
    settings: Settings = app.state.settings

    configure_logging(settings)
    if init_sentry(settings):
        logger.info("Sentry error tracking enabled")

    logger.info(f"Storefront API starting in {settings.environment} mode")

    yield

    logger.info("Storefront API shutting down")


# =============================================================================
# App Factory
# =============================================================================


def create_app(
    settings: Settings | None = None,
    storage: MetadataStorage | None = None,
) -> FastAPI:
    """
    Build the API.

    Args:
        settings: Configuration (defaults to environment settings)
        storage: Document store (defaults to the in-memory store)
    """
    settings = settings or get_settings()
    storage = storage or create_local_storage()

    app = FastAPI(
        title="Storefront API",
        description="Accounts, orders and catalog administration for the storefront",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.storage = storage
    app.state.password_hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    app.state.token_issuer = TokenIssuer(
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        expires_in=timedelta(days=settings.jwt_expire_days),
    )
    app.state.token_verifier = TokenVerifier(
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )
    app.state.users = CredentialStore(storage)
    app.state.orders = OrderStore(storage)
    app.state.categories = CategoryStore(storage)
    app.state.products = ProductStore(storage)

    app.add_exception_handler(AuthRejected, auth_rejected_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth_router, prefix=settings.api_prefix)
    app.include_router(category_router, prefix=settings.api_prefix)
    app.include_router(product_router, prefix=settings.api_prefix)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "storefront-api"}

    return app
