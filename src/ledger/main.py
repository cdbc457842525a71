"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ledger.config.settings import get_settings
from ledger.config.logging_config import setup_logging
from ledger.repositories.sqlalchemy.database import init_db
from ledger.api.routers import transactions_router, numerals_router, cashback_router
from ledger.core.exceptions import AppError, NotFoundError


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    setup_logging()
    init_db()
    yield
    # Shutdown (nothing to clean up)


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Personal money ledger with cashback tracking",
    version=settings.app_version,
    lifespan=lifespan,
)

# Include routers
app.include_router(transactions_router)
app.include_router(numerals_router)
app.include_router(cashback_router)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Global handler for application errors."""
    return JSONResponse(
        status_code=404 if isinstance(exc, NotFoundError) else 400,
        content={"error": exc.code, "message": exc.message},
    )


@app.get("/health")
def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/")
def root() -> dict[str, str]:
    """Root endpoint with API info."""
    return {
        "app": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }
