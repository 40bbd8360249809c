from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.router import router
from src.config import Settings, settings
from src.core.exceptions import register_exception_handlers
from src.core.logging import setup_logging
from src.services.image_edit import ClientConfig, ImageEditClient

logger = structlog.get_logger()


def create_app(app_settings: Settings = settings, edit_client: ImageEditClient | None = None) -> FastAPI:
    setup_logging(app_settings.log_level, app_settings.debug)

    # Missing credentials must stop the process here, before any request is served.
    client = edit_client or ImageEditClient(ClientConfig.from_settings(app_settings))

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("app_started", app_name=app_settings.app_name, model=client.config.model)
        yield
        await client.aclose()
        logger.info("app_stopped", app_name=app_settings.app_name)

    app = FastAPI(title=app_settings.app_name, debug=app_settings.debug, lifespan=lifespan)
    app.state.edit_client = client
    app.state.settings = app_settings
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("src.main:app", host=settings.host, port=settings.port, log_level=settings.log_level)
