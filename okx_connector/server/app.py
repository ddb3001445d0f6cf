"""
Web server.

Minimal FastAPI app that owns the OkxClient for the process lifetime and
fires the configured startup fetch once the server is accepting requests.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from okx_connector.core.config import Config
from okx_connector.transport.client import OkxClient
from okx_connector.transport.responses import ExchangeResponse

logger = logging.getLogger(__name__)


def _log_startup_fetch(task: "asyncio.Task[ExchangeResponse]") -> None:
    if task.cancelled():
        logger.warning("[Server] Startup fetch cancelled")
        return
    exc = task.exception()
    if exc is not None:
        logger.error(f"[Server] Startup fetch failed: {exc!r}")
        return
    resp = task.result()
    if resp.outcome == "network_error":
        logger.error(f"[Server] Startup fetch {resp.path}: {resp.error}")
    elif resp.outcome == "parse_error":
        logger.error(f"[Server] Startup fetch {resp.path}: unparseable body ({resp.error})")
    elif resp.api_error:
        logger.warning(f"[Server] Startup fetch {resp.path}: OKX code {resp.api_code}: {resp.data.get('msg')}")
    else:
        logger.info(f"[Server] Startup fetch {resp.path} complete (HTTP {resp.status_code})")


def create_app(config: Config, client: Optional[OkxClient] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Connector configuration
        client: Pre-built OkxClient (default: one built from config, closed on shutdown)
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        okx = client or OkxClient(config.credentials, config.api)
        app.state.okx = okx
        app.state.startup_fetch = None

        fetch = config.startup_fetch
        if fetch.enabled:
            logger.info(f"[Server] Initiating GET request to {fetch.path}")
            task = okx.submit_get(fetch.path, fetch.params)
            task.add_done_callback(_log_startup_fetch)
            app.state.startup_fetch = task

        try:
            yield
        finally:
            task = app.state.startup_fetch
            if task is not None and not task.done():
                task.cancel()
                await asyncio.gather(task, return_exceptions=True)
            if client is None:
                await okx.close()

    app = FastAPI(title="OKX Connector", lifespan=lifespan)

    @app.get("/", response_class=PlainTextResponse)
    async def root() -> str:
        return "Hello World from the OKX connector!"

    @app.get("/health")
    async def health() -> dict:
        return {"ok": True}

    # Last-resort handler: log and answer 500, keep the process alive
    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"[Server] Unhandled error on {request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})

    return app
