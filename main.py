#!/usr/bin/env python3
"""
Chat Relay
Forwards browser chat completion requests to OpenRouter with a server-held API key.
"""

from contextlib import asynccontextmanager
from typing import Optional

import httpx
import uvicorn

from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException

from relay.shared.config import config, logger
from relay.shared.middleware import RequestIDMiddleware, log_request_timing
from relay.dependencies import build_http_client
from relay.features.chat_relay.endpoints import router as chat_relay_router, method_not_allowed_handler
from relay.features.metrics.endpoints import router as metrics_router


def create_app(http_client: Optional[httpx.AsyncClient] = None) -> FastAPI:
    """Builds the relay application; an injected client is left open on shutdown."""

    @asynccontextmanager
    async def lifespan(app_: FastAPI):
        owned_client = None
        if getattr(app_.state, "http_client", None) is None:
            owned_client = app_.state.http_client = build_http_client()
        logger.info("Application startup complete")
        yield
        if owned_client is not None:
            await owned_client.aclose()
        logger.info("Application shutdown complete")

    app_ = FastAPI(
        title="Chat Relay",
        description="Relays chat completions to OpenRouter without exposing the API key",
        version="1.0.0",
        lifespan=lifespan,
    )
    if http_client is not None:
        app_.state.http_client = http_client

    app_.include_router(chat_relay_router, prefix="/api", tags=["Relay"])
    app_.include_router(metrics_router)
    app_.add_exception_handler(StarletteHTTPException, method_not_allowed_handler)

    app_.add_middleware(RequestIDMiddleware)
    app_.middleware("http")(log_request_timing)
    return app_


app = create_app()

if __name__ == "__main__":
    host = config["server"]["host"]
    port = config["server"]["port"]
    logger.warning("Starting Chat Relay on %s:%s", host, port)
    logger.warning("Relay URL: http://%s:%s/api/chat", host, port)

    log_config = uvicorn.config.LOGGING_CONFIG
    http_log_level = config["server"].get("http_log_level", "INFO").upper()
    log_config["loggers"]["uvicorn.access"]["level"] = http_log_level

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_config=log_config,
        timeout_graceful_shutdown=30,
        server_header=False
    )
