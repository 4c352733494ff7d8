"""Main FastAPI application module.

This module initializes the FastAPI application and registers all route handlers.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.logging_config import setup_logging
from config import (
    CORS_ALLOWED_ORIGINS,
    API_HOST,
    API_PORT,
    JWT_SECRET_KEY,
)
from core.database import close_db, get_db, init_db
from api.routes import auth, news, user

# Setup logging
setup_logging()

logger = logging.getLogger(__name__)

# Initialize FastAPI application
app = FastAPI(
    title="News API",
    description="User accounts, token authentication and news articles.",
    version="1.0.0",
)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register route handlers
app.include_router(auth.router)
app.include_router(user.router)
app.include_router(news.router)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report request validation failures as 400 with field-level detail."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected failures and hide their details from the caller."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


@app.on_event("startup")
def startup_tasks() -> None:
    """Ensure collection indexes exist."""
    if not JWT_SECRET_KEY:
        logger.warning("JWT_SECRET_KEY is not set: tokens can be neither issued nor validated")
    init_db(get_db())


@app.on_event("shutdown")
def shutdown_tasks() -> None:
    close_db()


@app.get("/", summary="API root", tags=["Info"])
def root() -> dict:
    """API root, returns API information and documentation links.

    Returns:
        Dictionary with API information and documentation links.
    """
    return {
        "name": "News API",
        "version": "1.0.0",
        "description": "User accounts, token authentication and news articles.",
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc",
        },
        "health": "/api/health",
    }


@app.get("/api/health", summary="Health check", tags=["Health"])
def health() -> dict:
    """Health check endpoint.

    Returns:
        Dictionary with status "ok".
    """
    return {"status": "ok"}


# --- Startup code for direct execution ---
if __name__ == "__main__":
    import uvicorn

    server_url = f"http://{API_HOST}:{API_PORT}"
    logger.info("Starting News API at %s (docs: %s/docs)", server_url, server_url)
    uvicorn.run("app:app", host=API_HOST, port=API_PORT, reload=True)
