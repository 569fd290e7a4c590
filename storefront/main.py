import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront.config import settings, setup_logging
from storefront.database import create_db_and_tables
from storefront.errors import (
    ExpiredError,
    InvalidStateError,
    LimitExceededError,
    NotFoundError,
    StorefrontError,
)
from storefront.routes import (
    admin_analytics,
    auth,
    blog,
    cart,
    categories,
    contact,
    coupons,
    downloads,
    health,
    orders,
    products,
    reviews,
    users,
)
from storefront.routes import settings as site_settings

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Run DB creation ONLY in local; other environments go through alembic
    if settings.env == "local":
        create_db_and_tables()
    logger.info(f"Storefront API started (env={settings.env})")
    yield


app = FastAPI(title="Storefront API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Global Exception Handlers ---


# Map error kinds to HTTP status codes
ERROR_STATUS_CODES = {
    NotFoundError: 404,
    InvalidStateError: 400,
    LimitExceededError: 409,
    ExpiredError: 410,
}


def status_code_for(exc: StorefrontError) -> int:
    for kind in type(exc).__mro__:
        if kind in ERROR_STATUS_CODES:
            return ERROR_STATUS_CODES[kind]
    return 500


@app.exception_handler(StorefrontError)
async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    status_code = status_code_for(exc)
    if status_code == 500:
        logger.error(f"Unmapped domain error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "error_type": type(exc).__name__},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "error_type": "InternalError"},
    )


app.include_router(health.router, tags=["Health"])
app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(users.router, prefix="/users", tags=["Users"])
app.include_router(categories.router, prefix="/categories", tags=["Categories"])
app.include_router(products.router, prefix="/products", tags=["Products"])
app.include_router(coupons.router, prefix="/coupons", tags=["Coupons"])
app.include_router(orders.router, prefix="/orders", tags=["Orders"])
app.include_router(cart.router, prefix="/cart", tags=["Cart"])
app.include_router(reviews.router, prefix="/reviews", tags=["Reviews"])
app.include_router(downloads.router, prefix="/downloads", tags=["Downloads"])
app.include_router(blog.router, prefix="/blog", tags=["Blog"])
app.include_router(contact.router, prefix="/contact", tags=["Contact"])
app.include_router(site_settings.router, prefix="/settings", tags=["Settings"])
app.include_router(admin_analytics.router, prefix="/admin/analytics", tags=["Admin Analytics"])


@app.get("/")
def root():
    return {
        "name": "Storefront API",
        "docs": "/docs",
        "health": "/healthcheck",
    }
