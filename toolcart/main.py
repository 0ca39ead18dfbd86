"""ToolCart API main application module.

Builds the FastAPI application around one shop session and configures
middleware, routers and logging.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from toolcart.api.health import router as health_router
from toolcart.api.middleware import setup_middleware
from toolcart.api.shop import router as shop_router
from toolcart.api.tools import router as tools_router
from toolcart.infrastructure.activity import ActivityLog
from toolcart.infrastructure.config import Settings, settings
from toolcart.infrastructure.logging import configure_logging
from toolcart.shop import Shop

logger = structlog.get_logger()


def build_shop(config: Settings) -> Shop:
    """Create the shop session described by the settings."""
    return Shop(
        currency=config.currency,
        protocol=config.default_protocol,
        activity=ActivityLog(max_entries=config.activity_log_size),
    )


def create_app(shop: Shop | None = None, config: Settings = settings) -> FastAPI:
    """Create the FastAPI application.

    Args:
        shop: Shop session to serve; built from settings when omitted.
        config: Application settings.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info(
            "Starting ToolCart API",
            version=config.api_version,
            protocol=app.state.shop.protocol.value,
            tools=[tool.name for tool in app.state.shop.tools.list_tools()],
        )
        yield
        logger.info("Shutting down ToolCart API")

    app = FastAPI(
        title=config.api_title,
        description="Commerce operations shared by people and agents",
        version=config.api_version,
        debug=config.debug,
        lifespan=lifespan,
    )
    app.state.shop = shop or build_shop(config)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    setup_middleware(app)

    app.include_router(health_router, tags=["Health"])
    app.include_router(shop_router)
    app.include_router(tools_router)
    return app


def run() -> None:
    """Serve the API with uvicorn."""
    configure_logging(settings.log_level, settings.log_json)
    uvicorn.run(create_app(), host="0.0.0.0", port=8000)


if __name__ == "__main__":
    run()
