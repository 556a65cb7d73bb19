from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fellowship.config import get_settings
from fellowship.infrastructure.database import engine, initialize_database
from fellowship.infrastructure.push import close_push_dispatcher
from fellowship.interfaces.api.routes import register_routes
from fellowship.logging_config import configure_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the tables on startup and release shared clients on shutdown."""

    configure_logging()
    initialize_database()
    yield
    close_push_dispatcher()
    engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = get_settings()
    app = FastAPI(title="Fellowship API", lifespan=lifespan)

    if settings.allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.allowed_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_routes(app)
    return app


app = create_app()
