from dataclasses import dataclass
import logging

from litestar import Controller, get
from litestar.datastructures import State


logger = logging.getLogger(__name__)


@dataclass
class HealthResponse:
    status: str
    config_loaded: bool
    database_host: str | None = None
    database_connected: bool = False


class HealthController(Controller):
    path = "/api/health"
    tags = ["health"]

    @get()
    async def health_check(self, state: State) -> HealthResponse:
        config = state.get("config")
        pool = state.get("pool")

        db_connected = False
        if pool:
            try:
                async with pool.connection() as conn:
                    async with conn.cursor() as cur:
                        await cur.execute("SELECT 1")
                        db_connected = True
            except Exception as e:
                logger.warning("Health check could not reach the database: %s", e)

        return HealthResponse(
            status="ok",
            config_loaded=config is not None,
            database_host=config.database.host if config else None,
            database_connected=db_connected,
        )


class PingController(Controller):
    path = "/api/ping"
    tags = ["health"]

    @get()
    async def ping(self) -> dict:
        return {"message": "pong"}
