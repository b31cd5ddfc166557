"""FastAPI application entry point.

This module initialises the FastAPI app, configures logging and
registers API routes.  The `uvicorn` ASGI server can point to
``src.main:app`` to serve the application.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config.app_config import AppConfig, get_app_config
from .config.llm_config import LlmConfig, get_llm_config
from .controllers.chat_controller import router as chat_router
from .models.chat_response import HealthResponse
from .utils.error_handler import (
    ChatError,
    chat_exception_handler,
    http_exception_handler,
    unhandled_exception_handler,
)
from .utils.logger import setup_logging


def _report_upstream_config(llm_config: LlmConfig) -> None:
    if llm_config.is_configured:
        logger.info("Upstream API key configured - AI responses enabled")
    else:
        logger.warning(
            "Upstream API key not configured (GROQ_API_KEY); every chat will use fallback responses"
        )


def create_app(
    app_config: AppConfig | None = None,
    llm_config: LlmConfig | None = None,
) -> FastAPI:
    """Create and configure a FastAPI application."""
    app_config = app_config or get_app_config()
    llm_config = llm_config or get_llm_config()
    setup_logging(app_config)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        logger.info("Chat proxy starting (env={})", app_config.app_env)
        _report_upstream_config(llm_config)
        yield

    app = FastAPI(title="AI Chatbot Proxy", version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ChatError, chat_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(chat_router)

    @app.get("/api/health", tags=["Health"], response_model=HealthResponse)
    async def health() -> HealthResponse:
        """Simple health check endpoint."""
        logger.debug("Health check invoked")
        return HealthResponse()

    return app


# Create an application instance for ASGI servers
app = create_app()


if __name__ == "__main__":
    import uvicorn

    config = get_app_config()
    uvicorn.run(app, host=config.app_host, port=config.app_port)
