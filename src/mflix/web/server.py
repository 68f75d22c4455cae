from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from mflix.app import App
from mflix.config import Config
from mflix.errors import UserError
from mflix.web.error_handlers import (
    general_exception_handler,
    http_exception_handler,
    request_validation_error_handler,
    store_error_handler,
    user_error_handler,
)
from mflix.web.middleware import TokenGateMiddleware
from mflix.web.openapi import set_custom_openapi
from mflix.web.routers import auth_router, comments_router, movies_router, theaters_router


def create_fastapi_app(app_instance: App, config: Config) -> FastAPI:
    """Create and configure FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        """FastAPI application lifespan management."""
        async with app_instance.lifespan():
            yield

    app = FastAPI(
        title="Mflix API",
        lifespan=lifespan,
        docs_url="/api-doc",
        openapi_url="/api-doc/openapi.json",
        redoc_url=None,
    )
    # Available before lifespan runs so requests never see a missing facade
    app.state.app = app_instance

    app.add_middleware(TokenGateMiddleware, verify_token=app_instance.verify_token)

    if config.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    app.include_router(auth_router, prefix="/api")
    app.include_router(comments_router, prefix="/api")
    app.include_router(theaters_router, prefix="/api")
    app.include_router(movies_router, prefix="/api")

    app.add_exception_handler(UserError, user_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(PyMongoError, store_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    set_custom_openapi(app)

    return app
