"""FastAPI application."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .config import settings
from .database import init_db
from .routers import gateway

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Production safety checks (fail closed on insecure config).
if settings.ENV.lower() == "production" and settings.DEBUG:
    raise RuntimeError("DEBUG must be false in production (error messages would leak internals).")
if settings.ENV.lower() == "production" and not settings.cors_origins:
    raise RuntimeError("ALLOWED_ORIGINS must be set in production (explicit frontend origin required).")
if settings.ENV.lower() == "production" and any(origin == "*" for origin in settings.cors_origins):
    raise RuntimeError("ALLOWED_ORIGINS must be explicit in production (no wildcard).")
if settings.ENV.lower() == "production" and settings.ADMIN_TOKEN_KEY and len(settings.ADMIN_TOKEN_KEY) < 32:
    raise RuntimeError("ADMIN_TOKEN_KEY must be at least 32 characters in production.")


@asynccontextmanager
async def lifespan(_: FastAPI):
    init_db()
    logger.info("%s started (env=%s)", settings.APP_NAME, settings.ENV)
    yield


# Create app
app = FastAPI(
    title="Damon Service Panel",
    version="1.0.0",
    description="Project tracking and equipment pricing backend",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)

app.include_router(gateway.router)


@app.get("/")
def root():
    """Root endpoint."""
    return {
        "message": "Damon Service Panel API",
        "version": "1.0.0",
        "gateway": "/exec?path=/health",
    }
