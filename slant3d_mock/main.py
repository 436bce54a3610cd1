# slant3d_mock/main.py
import logging
import time
from contextlib import AsyncExitStack, asynccontextmanager
from typing import Optional

import yaml
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from slant3d_mock.core.config import Settings, settings as default_settings
from slant3d_mock.core.errors import register_error_handlers
from slant3d_mock.core.http import lifespan_http_client
from slant3d_mock.core.logging import configure_logging
from slant3d_mock.core.observability import RequestIDMiddleware
from slant3d_mock.api.routers import include_routers
from slant3d_mock.domain.store import EntityStore

logger = logging.getLogger("slant3d.main")


def create_app(settings: Optional[Settings] = None, store: Optional[EntityStore] = None) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        async with AsyncExitStack() as stack:
            app.state.http_client = await stack.enter_async_context(
                lifespan_http_client(settings.WEBHOOK_TEST_TIMEOUT)
            )
            logger.info(f"[CONFIG] {settings.APP_NAME} ready (order ids: {settings.ORDER_ID_STRATEGY})")
            yield
        app.state.http_client = None

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.VERSION,
        openapi_url=settings.OPENAPI_URL,
        docs_url=settings.DOCS_URL,
        lifespan=lifespan,
    )

    # one store per process, shared by every route through get_store
    app.state.settings = settings
    app.state.store = store or EntityStore()
    app.state.started_at = time.monotonic()
    app.state.http_client = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins(),
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "api-key", "Authorization", "Accept", "Origin", "X-Requested-With"],
    )
    app.add_middleware(RequestIDMiddleware)

    register_error_handlers(app)
    include_routers(app)

    @app.get("/openapi.yaml", include_in_schema=False)
    def get_openapi_yaml():
        """Serve the OpenAPI document as YAML"""
        return Response(
            content=yaml.safe_dump(app.openapi(), sort_keys=False),
            media_type="application/x-yaml",
        )

    return app


def build_default_app() -> FastAPI:
    """uvicorn factory: configures logging from settings, then builds the app."""
    configure_logging(level=default_settings.LOG_LEVEL, json_mode=(default_settings.LOG_FORMAT == "json"))
    return create_app()
