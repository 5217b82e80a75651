from contextlib import asynccontextmanager
from typing import Optional

from starlette.applications import Starlette
from starlette.routing import Mount

from monday_items.platform.logging_config import setup_logging
from monday_items.services.monday.api import (
    MondayClient,
    MondayClientConfig,
    load_config,
    routes as monday_routes,
)

setup_logging()


def create_app(
    config: Optional[MondayClientConfig] = None,
    client: Optional[MondayClient] = None,
) -> Starlette:
    if client is None:
        client = MondayClient(config or load_config())

    @asynccontextmanager
    async def lifespan(app: Starlette):
        yield
        # Close the shared HTTP client on shutdown
        await app.state.monday_client.aclose()

    app = Starlette(
        routes=[Mount("/api/services/monday", routes=monday_routes)],
        lifespan=lifespan,
    )
    app.state.monday_client = client
    return app
