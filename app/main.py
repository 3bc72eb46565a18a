# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Chants API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import (
    ChantsException,
    chants_exception_handler,
    validation_exception_handler,
)
from app.routers import health, prompter, songs, transfer
from app.auth import routes as auth_routes

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Logs the effective configuration on startup and shutdown.
    """
    logger.info(f"Starting Chants API in {settings.ENVIRONMENT} mode")
    logger.info(f"Storage backend: {settings.STORAGE_BACKEND}")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    yield

    logger.info("Shutting down Chants API")


# Create FastAPI application
app = FastAPI(
    title="Chants API",
    description="""
## Capoeira song repertoire API

Manage your capoeira songs, grouped into three categories
(**angola**, **saoBentoPequeno**, **saoBentoGrande**), configure the
prompter, and move songs in and out with CSV files.

### CSV format

```
title,category,mnemonic,lyrics,mediaLink
"Paranauê","angola","Para-na-uê","Paranauê, paranauê paraná
Paranauê, paranauê paraná",""
```

Fields with commas, quotes or line breaks are quoted; quotes inside a
field are doubled. On import, `title` and `category` columns are required
and each row needs a title or a mnemonic.
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Auth",
            "description": "Token verification and account deletion",
        },
        {
            "name": "Songs",
            "description": "Create, edit and delete songs",
        },
        {
            "name": "Import/Export",
            "description": "Bulk CSV import and export",
        },
        {
            "name": "Prompter",
            "description": "Prompter display settings",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(ChantsException)
async def handle_chants_exception(request: Request, exc: ChantsException):
    """Handle custom exceptions."""
    return await chants_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_exception(request: Request, exc: RequestValidationError):
    """Handle request body/query validation errors."""
    return await validation_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

app.include_router(
    auth_routes.router,
    prefix="/api/v1/auth",
    tags=["Auth"]
)

app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

# Registered before songs so /songs/import and /songs/export aren't read as song IDs
app.include_router(
    transfer.router,
    prefix="/api/v1/songs",
    tags=["Import/Export"]
)

app.include_router(
    songs.router,
    prefix="/api/v1/songs",
    tags=["Songs"]
)

app.include_router(
    prompter.router,
    prefix="/api/v1/prompter-settings",
    tags=["Prompter"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Chants API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
    }
