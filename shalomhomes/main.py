import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.sessions import SessionMiddleware

from .api import activities, apartments, auth, properties, tasks, transactions, users
from .auth.google import GoogleOAuthClient
from .config import Settings, StorageBackend, get_settings
from .core.errors import register_exception_handlers
from .core.logging import configure_logging
from .core.security import SecurityHeadersMiddleware, log_security_warnings
from .schemas.schemas import HealthStatus
from .services.auth import AuthService
from .services.seed import seed_sample_data
from .storage import DbStorage, MemStorage, Storage, StorageProxy

logger = logging.getLogger(__name__)


def build_storage(settings: Settings) -> Storage:
    """Pick the backend named by STORAGE_BACKEND, keeping memory when the database is unusable."""
    storage: Storage
    if settings.storage_backend == StorageBackend.MEMORY:
        storage = MemStorage()
    elif not settings.sqlalchemy_database_url:
        logger.warning("DATABASE_URL is not set; using in-memory storage.")
        storage = MemStorage()
    else:
        try:
            db_storage = DbStorage.from_url(settings.sqlalchemy_database_url)
            db_storage.init()
            storage = db_storage
        except SQLAlchemyError:
            logger.exception("Database storage unavailable; falling back to in-memory storage.")
            storage = MemStorage()

    if settings.seed_sample_data:
        seed_sample_data(storage)
    logger.info("Using %s storage.", storage.name)
    return storage


def create_app(settings: Optional[Settings] = None, storage: Optional[Storage] = None) -> FastAPI:
    settings = settings or get_settings()

    proxy = StorageProxy(storage or MemStorage())

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        # An injected storage is used as-is; otherwise pick the backend at startup.
        if storage is None:
            proxy.use(build_storage(settings))
        yield
        if isinstance(proxy.implementation, DbStorage):
            proxy.implementation.dispose()

    app = FastAPI(title="ShalomHomes API", lifespan=lifespan)
    app.state.settings = settings
    app.state.storage = proxy
    app.state.auth_service = AuthService(proxy, settings.session_max_age_seconds)
    app.state.google_oauth = GoogleOAuthClient.from_settings(settings)

    app.add_middleware(SecurityHeadersMiddleware, settings=settings)
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        session_cookie=settings.session_cookie_name,
        max_age=settings.session_max_age_seconds,
        same_site="lax",
        https_only=settings.session_https_only,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
    app.include_router(users.router, prefix="/api/users", tags=["users"])
    app.include_router(properties.router, prefix="/api/properties", tags=["properties"])
    app.include_router(apartments.router, prefix="/api/apartments", tags=["apartments"])
    app.include_router(tasks.router, prefix="/api/tasks", tags=["tasks"])
    app.include_router(transactions.router, prefix="/api/transactions", tags=["transactions"])
    app.include_router(activities.router, prefix="/api/activities", tags=["activities"])

    @app.get("/api/health", response_model=HealthStatus, tags=["meta"])
    def health(request: Request) -> HealthStatus:
        return HealthStatus(status="ok", storage=request.app.state.storage.name)

    return app


def run() -> None:
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)
    if not settings.database_url:
        logger.error("DATABASE_URL is required.")
        sys.exit(1)
    log_security_warnings(settings)
    uvicorn.run(
        "shalomhomes.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    run()
