from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from .config import Settings
from .container import ApplicationContainer
from .logging import configure_logging
from ..application.services.account_service import AccountService
from ..application.services.auth_guard import AuthGuard
from ..application.services.password_hasher import PasswordHasher
from ..application.services.subscription_service import SubscriptionService
from ..application.services.token_service import TokenService
from ..infrastructure.persistence.sqlite import SQLitePersistence
from ..presentation.api.errors import register_exception_handlers
from ..presentation.api.routers import auth as auth_router
from ..presentation.api.routers import subscriptions as subscriptions_router
from ..presentation.api.routers import users as users_router

logger = logging.getLogger(__name__)


def create_application(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()

    app = FastAPI(title="Subscription Tracker", lifespan=_create_lifespan(settings))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(auth_router.router)
    app.include_router(users_router.router)
    app.include_router(subscriptions_router.router)

    @app.get("/", response_class=PlainTextResponse)
    async def root() -> str:
        return "Welcome to subscription tracker"

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        return {"ok": True}

    return app


def build_container(settings: Settings) -> ApplicationContainer:
    persistence = SQLitePersistence(settings.database_path)
    password_hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    token_service = TokenService(
        secret_key=settings.jwt_secret,
        expires_minutes=settings.jwt_expires_minutes,
        algorithm=settings.jwt_algorithm,
    )
    return ApplicationContainer(
        persistence=persistence,
        account_service=AccountService(persistence, password_hasher, token_service),
        auth_guard=AuthGuard(token_service, persistence),
        subscription_service=SubscriptionService(persistence),
    )


def _create_lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging(settings.log_level)
        container = build_container(settings)
        app.state.container = container  # type: ignore[attr-defined]
        logger.info(
            "Subscription tracker started in %s mode (database %s)",
            settings.environment,
            settings.database_path,
        )
        try:
            yield
        finally:
            container.persistence.close()

    return lifespan
