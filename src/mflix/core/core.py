from __future__ import annotations

import importlib
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any, cast

from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from mflix.config import Config


class Service:
    """Base class for services with direct database access."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self.database = database
        self._core: Core | None = None

    async def on_start(self) -> None:
        """Initialize service on application startup."""

    async def on_stop(self) -> None:
        """Cleanup service on application shutdown."""

    @property
    def core(self) -> Core:
        """Get the core application context."""
        if self._core is None:
            raise RuntimeError("Core not set for service")
        return self._core

    def set_core(self, core: Core) -> None:
        """Set the core application context."""
        self._core = core


class Services:
    """Service registry that automatically discovers and initializes services."""

    from mflix.core.modules.catalog.comment import CommentService  # noqa: PLC0415
    from mflix.core.modules.catalog.movie import MovieService  # noqa: PLC0415
    from mflix.core.modules.catalog.theater import TheaterService  # noqa: PLC0415
    from mflix.core.modules.session.service import SessionService  # noqa: PLC0415
    from mflix.core.modules.user.service import UserService  # noqa: PLC0415

    user: UserService
    session: SessionService
    movie: MovieService
    comment: CommentService
    theater: TheaterService

    def __init__(self, databases: dict[str, AsyncDatabase[dict[str, Any]]]) -> None:
        """Initialize all services, each bound to the database that owns its collections."""
        self._services: list[Service] = []

        # Service configuration: (attribute_name, module_path, class_name, database_key)
        service_configs = [
            ("user", "mflix.core.modules.user.service", "UserService", "auth"),
            ("session", "mflix.core.modules.session.service", "SessionService", "auth"),
            ("movie", "mflix.core.modules.catalog.movie", "MovieService", "content"),
            ("comment", "mflix.core.modules.catalog.comment", "CommentService", "content"),
            ("theater", "mflix.core.modules.catalog.theater", "TheaterService", "content"),
        ]

        for attr_name, module_path, class_name, database_key in service_configs:
            module = importlib.import_module(module_path)
            service_class = cast(type[Service], getattr(module, class_name))
            service_instance = service_class(databases[database_key])
            setattr(self, attr_name, service_instance)
            self._services.append(service_instance)

    def set_core(self, core: Core) -> None:
        """Set core reference for all services."""
        for service in self._services:
            service.set_core(core)

    async def start_all(self) -> None:
        for service in self._services:
            await service.on_start()

    async def stop_all(self) -> None:
        for service in self._services:
            await service.on_stop()


class Core:
    """Container providing config, database handles, and all service instances."""

    config: Config
    mongo_client: AsyncMongoClient[dict[str, Any]]
    auth_database: AsyncDatabase[dict[str, Any]]
    content_database: AsyncDatabase[dict[str, Any]]
    services: Services

    def __init__(self, config: Config, mongo_client: AsyncMongoClient[dict[str, Any]] | None = None) -> None:
        """Initialize core with config and MongoDB, then register services.

        The client connects lazily on first use and is shared by all requests.
        """
        self.config = config
        self.mongo_client = mongo_client or AsyncMongoClient(config.database_url, tz_aware=True)
        self.auth_database = self.mongo_client.get_database(config.auth_database)
        self.content_database = self.mongo_client.get_database(config.content_database)
        self.services = Services({"auth": self.auth_database, "content": self.content_database})
        self.services.set_core(self)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Manage application lifecycle - startup and shutdown."""
        await self.on_start()
        try:
            yield
        finally:
            await self.on_stop()

    async def on_start(self) -> None:
        await self.services.start_all()

    async def on_stop(self) -> None:
        """Stop services and close MongoDB connection on shutdown."""
        await self.services.stop_all()
        await self.mongo_client.aclose()
