"""FastAPI main application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from catalog_admin.core.config import settings
from catalog_admin.core.middleware import setup_middleware
from catalog_admin.core.rate_limiter import limiter
from catalog_admin.core.exceptions import CatalogAdminError

from catalog_admin.api.auth import router as auth_router
from catalog_admin.api.users import router as users_router
from catalog_admin.api.roles import router as roles_router
from catalog_admin.api.products import router as products_router
from catalog_admin.api.admin import router as admin_router

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("catalog_admin")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("🚀 Starting Catalog Admin API")
    from catalog_admin.services.cache_service import cache_service
    if not settings.CACHE_ENABLED:
        logger.info("Role cache disabled")
    elif cache_service.health_check():
        logger.info("✅ Redis connected, role cache enabled")
    else:
        logger.warning("⚠️  Redis not available, roles will be read from the database")

    yield

    logger.info("🔻 Shutting down Catalog Admin API")


app = FastAPI(
    title="Catalog Admin API",
    description="Product catalog administration with role-based access control",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Middleware
setup_middleware(app)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(CatalogAdminError)
async def catalog_admin_exception_handler(request: Request, exc: CatalogAdminError):
    if exc.status_code >= 403:
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message},
    )

# Register routers
app.include_router(auth_router, prefix="/api")
app.include_router(users_router, prefix="/api")
app.include_router(roles_router, prefix="/api")
app.include_router(products_router, prefix="/api")
app.include_router(admin_router, prefix="/api")


@app.get("/")
async def root():
    return {
        "name": settings.APP_NAME,
        "version": "0.1.0",
        "docs": "/docs",
    }


@app.get("/api/health")
async def health():
    """Quick health check endpoint."""
    return {"status": "ok"}
