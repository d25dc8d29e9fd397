from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from aquacrm.app import App
from aquacrm.config import Config
from aquacrm.errors import StoreUnavailableError, UserError
from aquacrm.web.error_handlers import general_exception_handler, store_unavailable_handler, user_error_handler
from aquacrm.web.openapi import set_custom_openapi
from aquacrm.web.routers import (
    amcs_router,
    clients_router,
    dashboard_router,
    invoices_router,
    metadata_router,
    products_router,
    quotations_router,
)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(UserError, user_error_handler)
    app.add_exception_handler(StoreUnavailableError, store_unavailable_handler)
    app.add_exception_handler(Exception, general_exception_handler)


def create_fastapi_app(app_instance: App, config: Config) -> FastAPI:
    """Create and configure FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        """FastAPI application lifespan management."""
        app.state.app = app_instance
        app.state.config = config
        async with app_instance.lifespan():
            yield

    app = FastAPI(title="AquaCRM API", lifespan=lifespan)

    if config.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Health check endpoint (at root level, not versioned)
    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    app.include_router(clients_router, prefix="/api/v1")
    app.include_router(products_router, prefix="/api/v1")
    app.include_router(quotations_router, prefix="/api/v1")
    app.include_router(invoices_router, prefix="/api/v1")
    app.include_router(amcs_router, prefix="/api/v1")
    app.include_router(dashboard_router, prefix="/api/v1")
    app.include_router(metadata_router, prefix="/api/v1")

    register_error_handlers(app)
    set_custom_openapi(app)

    return app
