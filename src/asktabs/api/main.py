"""FastAPI application factory and entry point."""

import argparse
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from asktabs import __version__
from asktabs.api.routes import ask, navigate, tabs
from asktabs.api.schemas import HealthResponse
from asktabs.app_utils.logging_config import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    from asktabs.api.deps import (
        clear_caches,
        get_answer_synthesizer,
        get_gateway,
        get_refresh_scheduler,
    )

    logger.info("Initializing AskTabs API...")

    scheduler = get_refresh_scheduler()
    await scheduler.start()
    scheduler.request_refresh(reason="startup")

    logger.info("✓ AskTabs API startup complete")

    yield

    logger.info("Shutting down AskTabs API...")

    await scheduler.stop()
    await get_gateway().close()
    client = get_answer_synthesizer().client
    if client is not None:
        await client.close()
    summarizer = scheduler.aggregator.resolver.summarizer
    if summarizer is not None:
        await summarizer.close()

    clear_caches()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    configure_logging()

    app = FastAPI(
        title="AskTabs API",
        description="Ask questions about your open browser tabs",
        version=__version__,
        lifespan=lifespan,
    )

    # CORS middleware - the side panel runs on an extension origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(tabs.router, prefix="/api/tabs", tags=["tabs"])
    app.include_router(ask.router, prefix="/api", tags=["ask"])
    app.include_router(navigate.router, prefix="/api", tags=["navigate"])

    # WebSocket router at /ws (not under /api)
    app.include_router(tabs.ws_router, tags=["websocket"])

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="ok", version=__version__)

    return app


# Create default app instance
app = create_app()


def run() -> None:
    """Run the API server (CLI entry point)."""
    parser = argparse.ArgumentParser(description="AskTabs API Server")
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8765,
        help="Port to bind to (default: 8765)",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )
    args = parser.parse_args()
    serve(args.host, args.port, args.reload)


def serve(host: str, port: int, reload: bool = False) -> None:
    print(f"\n  AskTabs v{__version__}")
    print(f"  API listening on: http://{host}:{port}\n")

    uvicorn.run(
        "asktabs.api.main:app",
        host=host,
        port=port,
        reload=reload,
    )


if __name__ == "__main__":
    run()
