"""
FastAPI application entry point.
Main application setup and configuration.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager
from pathlib import Path
import logging

from realty.config import settings
from realty.database import create_tables, test_database_connection, close_db_connection
from realty.routers import (
    auth_router,
    properties_router,
    sellers_router,
    admin_router,
    blogs_router,
    enquiries_router,
    locations_router,
)
from realty.services.error_handler import register_exception_handlers
from realty.middleware import RequestContextMiddleware

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Creates missing tables on startup and disposes the engine on shutdown.
    """
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")

    if await test_database_connection():
        await create_tables()
    else:
        logger.error("Failed to connect to database on startup")

    yield

    logger.info("Shutting down application")
    await close_db_connection()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Real-estate marketplace backend.

    ## Roles

    * **Public**: browse published listings, blog posts and submit enquiries
    * **Sellers**: register, wait for activation, submit listings for review
    * **Admins**: moderate listings, manage sellers, blogs and enquiries

    ## Authentication

    Log in through `/api/sellers/login` or `/api/admin/login` and send the
    access token as `Authorization: Bearer <token>`.
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {"name": "Authentication", "description": "Token identity and refresh"},
        {"name": "Properties", "description": "Listing browsing and management"},
        {"name": "Sellers", "description": "Seller registration, login and profile"},
        {"name": "Admin", "description": "Moderation and seller management"},
        {"name": "Blogs", "description": "Blog posts"},
        {"name": "Enquiries", "description": "Contact and property enquiries"},
        {"name": "Locations", "description": "Location autocomplete"},
        {"name": "Health", "description": "Service health"},
    ],
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Processing-Time"],
)

# Bodies may carry up to max_images_per_property uploads
app.add_middleware(
    RequestContextMiddleware,
    max_request_size=settings.max_file_size * settings.max_images_per_property + 1024 * 1024,
)

register_exception_handlers(app)

for router in (
    auth_router,
    properties_router,
    sellers_router,
    admin_router,
    blogs_router,
    enquiries_router,
    locations_router,
):
    app.include_router(router, prefix=settings.api_prefix)

Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
app.mount(settings.upload_url_prefix, StaticFiles(directory=settings.upload_dir), name="uploads")


@app.get("/", tags=["Health"])
async def root():
    """Basic API information."""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.environment,
        "documentation": {
            "swagger_ui": "/docs",
            "redoc": "/redoc",
            "openapi_json": "/openapi.json"
        },
        "api_prefix": settings.api_prefix
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check with database connectivity test.
    Used by Docker health checks and load balancers.
    """
    db_healthy = await test_database_connection()
    body = {
        "status": "healthy" if db_healthy else "unhealthy",
        "service": settings.app_name,
        "version": settings.app_version,
        "database": "connected" if db_healthy else "unavailable",
    }
    return JSONResponse(status_code=200 if db_healthy else 503, content=body)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "realty.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
