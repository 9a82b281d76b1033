from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator
import logging

from litestar import Litestar, Request, Response
from litestar.di import Provide
from litestar.logging import LoggingConfig

from core.config import AppConfig
from core.db import init_pool, close_pool, provide_connection
from core.errors import DataAccessError
from core.schema import provide_introspector
from api.admin import AdminController
from api.health import HealthController, PingController
from api.recipes import (
    CalculateController,
    CategoriesController,
    RecipesController,
    ResourcesController,
)


logger = logging.getLogger(__name__)

config = AppConfig.load()


@asynccontextmanager
async def lifespan(app: Litestar) -> AsyncGenerator[None, None]:
    app.state.config = config
    app.state.db_schema = config.database.schema
    logger.info("Config loaded: database=%s", config.database.host)

    if config.database.host:
        app.state.pool = await init_pool(
            config.database.conninfo,
            min_size=config.database.min_pool_size,
            max_size=config.database.max_pool_size,
        )
        logger.info("Database pool initialized")

    yield

    await close_pool(app.state.get("pool"))
    app.state.pool = None
    logger.info("Database pool closed")


def data_access_error_handler(request: Request, exc: DataAccessError) -> Response:
    """Report data-access failures with the database's own message."""
    if exc.status_code >= 500:
        request.logger.error("Unhandled data access failure: %s", exc.detail)
    return Response(
        content={"status_code": exc.status_code, "detail": exc.detail},
        status_code=exc.status_code,
    )


route_handlers = [
    HealthController,
    PingController,
    RecipesController,
    CategoriesController,
    ResourcesController,
    CalculateController,
    AdminController,
]

dependencies = {
    "conn": Provide(provide_connection),
    "introspector": Provide(provide_introspector),
}

exception_handlers = {DataAccessError: data_access_error_handler}


app = Litestar(
    route_handlers=route_handlers,
    dependencies=dependencies,
    exception_handlers=exception_handlers,
    logging_config=LoggingConfig(
        root={"level": config.log_level, "handlers": ["queue_listener"]},
        log_exceptions="always",
    ),
    lifespan=[lifespan],
)
