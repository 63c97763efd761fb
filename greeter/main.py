"""FastAPI application entry point for Greeter."""

import logging
from contextlib import asynccontextmanager
from typing import Callable
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from greeter.config import get_settings
from greeter.services.controller import AppController, build_controller
from greeter.routers import (
    auth_router,
    greeting_router,
    state_router,
)

# Configure logging
logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(controller_factory: Callable[[], AppController] = build_controller) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager.

        Owns the controller, and with it the session subscription.
        """
        # Startup
        logger.info(f"Starting {settings.app_name} API...")
        async with controller_factory() as controller:
            app.state.controller = controller
            logger.info(f"{settings.app_name} API started successfully")

            yield

            # Shutdown
            logger.info(f"Shutting down {settings.app_name} API...")
            app.state.controller = None
        logger.info(f"{settings.app_name} API shutdown complete")

    app = FastAPI(
        title=f"{settings.app_name} API",
        description="Anonymous sign-in and a greeting fetched from a remote server",
        version="1.0.0",
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.controller = None

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(auth_router, prefix="/api")
    app.include_router(greeting_router, prefix="/api")
    app.include_router(state_router, prefix="/api")

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        controller = app.state.controller
        if controller is None or not controller.is_running:
            return {
                "status": "unhealthy",
                "controller": "stopped",
            }
        return {
            "status": "healthy",
            "controller": "running",
            "auth": controller.state.auth.status.value,
        }

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "greeter.main:app",
        host="0.0.0.0",
        port=8000,
        reload=get_settings().debug,
    )
