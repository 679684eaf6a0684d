"""
FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.middleware.sessions import SessionMiddleware

from forest_console.config import settings
from forest_console.api.dependencies import LoginRequired
from forest_console.api.limiter import limiter
from forest_console.api.routers import auth, dashboard, entities
from forest_console.domain.registry import all_schemas
from forest_console.middleware.error_handler import ErrorHandlerMiddleware
from forest_console.web.templating import STATIC_DIR

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events using the modern FastAPI pattern.
    """
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Log level: {settings.log_level}")
    logger.info(f"Backend API: {settings.api_base_url} (timeout {settings.request_timeout}s)")
    logger.info(f"Sections: {', '.join(schema.key for schema in all_schemas())}")

    yield

    # Shutdown
    from forest_console.infrastructure.api_client import get_api_client
    logger.info("Shutting down application...")
    client = get_api_client()
    await client.close()
    logger.info("Shutdown complete")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Administrative console for the forest management system.

    Management screens for animals, trees, plants, forest officers, visitors
    and resources, backed by the forest management REST API.

    ## Features

    - **List & filter**: server-side filters by zone, status, type or date range
    - **Create, edit, quick update, delete**: one generic screen per entity
    - **Statistics**: totals and distinct counts over the displayed list
    """,
    debug=settings.debug,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Add rate limiter to app state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


async def _redirect_to_login(request: Request, exc: LoginRequired):
    return RedirectResponse(url="/auth", status_code=303)

app.add_exception_handler(LoginRequired, _redirect_to_login)

# Add global error handling middleware
app.add_middleware(ErrorHandlerMiddleware)

# Signed cookie session holding the signed-in user
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.session_secret_key,
    same_site="lax",
)

# Add CORS middleware with configurable origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", tags=["health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        Health status
    """
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
    }


app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

# Include routers; the generic entity routes go last so fixed paths win
app.include_router(dashboard.router)
app.include_router(auth.router)
app.include_router(entities.router)
