# storefront/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

import storefront.core.logging_config  # noqa: F401  configures logging on import
from storefront.core.config import get_settings
from storefront.routes import checkout, health, shipping

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logger.info(f"Starting storefront service ({settings.ENVIRONMENT})")
    if not settings.SHIPENGINE_API_KEY:
        logger.warning("SHIPENGINE_API_KEY is not set; shipping quotes will fail")
    if not settings.STRIPE_SECRET_KEY:
        logger.warning("STRIPE_SECRET_KEY is not set; checkout sessions will fail")
    if not settings.SANITY_PROJECT_ID:
        logger.warning("SANITY_PROJECT_ID is not set; every parcel will use the default box")
    yield
    logger.info("Storefront service stopped")


app = FastAPI(
    title="Storefront Commerce",
    lifespan=lifespan,
)


def add_cors(app: FastAPI, settings) -> None:
    """Only origins listed in CORS_ALLOW get CORS headers; `*` opens every origin"""
    origins = settings.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=bool(origins) and "*" not in origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )


add_cors(app, get_settings())


# Add middleware to handle HTTPS behind proxy
@app.middleware("http")
async def proxy_headers_middleware(request: Request, call_next):
    if request.headers.get("x-forwarded-proto") == "https":
        request.scope["scheme"] = "https"
    return await call_next(request)


app.include_router(shipping.router)
app.include_router(checkout.router)
app.include_router(health.router)
