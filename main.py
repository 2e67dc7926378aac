"""
Mesh Warp Flow - Main FastAPI Application
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.exceptions import register_exception_handlers
from api.routers import mesh, system, warp
from config import get_settings
from core.constants import SystemConstants
from services.warp_service import WarpService
from warp.mesh_warp import WarpParams

# Get configuration
settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.system.log_level),
    format=SystemConstants.LOG_FORMAT,
)
logger = logging.getLogger(__name__)

# Suppress watchfiles debug messages
logging.getLogger("watchfiles").setLevel(logging.WARNING)


def build_warp_service() -> WarpService:
    """Default service built from the warp settings section"""
    params = WarpParams(
        degenerate_policy=settings.warp.degenerate_policy,
        interpolation=settings.warp.interpolation,
        workers=settings.warp.workers,
        determinant_epsilon=settings.warp.determinant_epsilon,
    )
    return WarpService(params=params, background=settings.warp.background)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle"""
    # Startup
    logger.info("Starting Mesh Warp Flow server...")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Debug mode: {settings.system.debug}")

    # Store service and config in app state for access by routers
    app.state.warp_service = build_warp_service()
    app.state.config = settings.to_dict()
    app.state.debug = settings.system.debug

    logger.info(
        f"Warp defaults: policy={settings.warp.degenerate_policy.value}, "
        f"interpolation={settings.warp.interpolation.value}, workers={settings.warp.workers}"
    )

    yield

    # Shutdown
    logger.info("Server shutdown complete")


# Create FastAPI app
app = FastAPI(
    title="Mesh Warp Flow",
    description="Piecewise-affine image warping driven by triangle meshes",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS
if settings.api.cors_enabled:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Register exception handlers
register_exception_handlers(app)

# Include routers
app.include_router(warp.router, prefix="/api/warp", tags=["Warp"])
app.include_router(mesh.router, prefix="/api/mesh", tags=["Mesh"])
app.include_router(system.router, prefix="/api/system", tags=["System"])


# Root endpoint
@app.get("/")
async def root():
    return {
        "name": "Mesh Warp Flow",
        "status": "running",
        "version": "1.0.0",
        "endpoints": {
            "warp": "/api/warp",
            "mesh": "/api/mesh",
            "system": "/api/system",
            "docs": "/docs",
        },
    }


# Health check endpoint
@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "services": {
            "warp_service": getattr(app.state, "warp_service", None) is not None,
        },
    }


def run() -> None:
    """Run the API server with uvicorn"""
    uvicorn.run(
        "main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.system.debug,
        log_level=settings.system.log_level.lower(),
    )


if __name__ == "__main__":
    run()
