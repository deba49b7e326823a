import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.infrastructure.database import engine, initialize_database
from app.infrastructure.realtime import RealtimeHub
from app.interfaces.api.routes import register_routes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and start the realtime hub, then tear both down on shutdown."""

    settings = get_settings()
    initialize_database()

    hub = RealtimeHub(ping_interval=settings.realtime_ping_interval_seconds)
    app.state.realtime = hub
    await hub.start()
    try:
        yield
    finally:
        await hub.stop()
        app.state.realtime = None
        engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="DevQuery API", lifespan=lifespan)

    # The Vite dev server and the deployed web client call the API from the browser.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    logger.debug("Application created with %d routes", len(app.routes))
    return app


app = create_app()
