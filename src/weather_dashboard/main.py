"""FastAPI applications for the weather dashboard and its weather backend."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import traceback
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from weather_dashboard.api.backend import router as backend_router
from weather_dashboard.api.endpoints import router as dashboard_router
from weather_dashboard.config import (
    HOST, PORT, BACKEND_HOST, BACKEND_PORT, DEBUG,
    OPENWEATHER_API_KEY, WEATHER_BACKEND_URL
)
from weather_dashboard.logging_config import configure_logging

# Configure logging
configure_logging()
logger = logging.getLogger(__name__)


def _lifespan(service_name: str):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan manager."""
        try:
            if not app.state.api_key:
                logger.warning("OPENWEATHER_API_KEY is not set; upstream lookups will fail")
            logger.info(f"Starting {service_name}")
            yield
        except Exception as e:
            logger.error(f"Startup error: {e}")
            logger.error(traceback.format_exc())
            raise
        finally:
            logger.info(f"Shutting down {service_name}")

    return lifespan


def _add_cors(app: FastAPI) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def create_app(
    api_key: Optional[str] = OPENWEATHER_API_KEY,
    backend_url: str = WEATHER_BACKEND_URL
) -> FastAPI:
    """Create the dashboard application.

    Args:
        api_key: OpenWeather API key used for geocoding
        backend_url: Weather backend the /weather proxy forwards to

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title="Weather Dashboard",
        description="Weather passthrough and geocoding for the weather dashboard",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=_lifespan("Weather Dashboard")
    )
    app.state.api_key = api_key
    app.state.backend_url = backend_url

    _add_cors(app)
    app.include_router(dashboard_router)

    @app.get("/api", tags=["root"])
    async def api_info() -> dict:
        """API information endpoint.

        Returns:
            Basic service information
        """
        return {
            "message": "Weather Dashboard",
            "docs": "/docs",
            "weather": "/weather",
            "geocode": "/geocode",
            "reverse_geocode": "/geocode/reverse",
            "health": "/health"
        }

    return app


def create_backend_app(api_key: Optional[str] = OPENWEATHER_API_KEY) -> FastAPI:
    """Create the weather backend application.

    Args:
        api_key: OpenWeather API key used for current conditions

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title="Weather Backend",
        description="Current conditions from OpenWeather as flat weather snapshots",
        version="0.1.0",
        lifespan=_lifespan("Weather Backend")
    )
    app.state.api_key = api_key

    _add_cors(app)
    app.include_router(backend_router)

    return app


# Create app instances for uvicorn
app = create_app()
backend_app = create_backend_app()


def main() -> None:
    """Entry point for the dashboard service."""
    logger.info(f"Starting dashboard server on {HOST}:{PORT}")
    uvicorn.run(
        app,
        host=HOST,
        port=PORT,
        log_level="info" if not DEBUG else "debug"
    )


def backend_main() -> None:
    """Entry point for the weather backend service."""
    logger.info(f"Starting weather backend on {BACKEND_HOST}:{BACKEND_PORT}")
    uvicorn.run(
        backend_app,
        host=BACKEND_HOST,
        port=BACKEND_PORT,
        log_level="info" if not DEBUG else "debug"
    )


if __name__ == "__main__":
    main()
