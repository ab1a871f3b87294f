"""
Kivu Event - FastAPI Backend
Main application entry point
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from app.core.config import settings
from app.core.db import Database
from app.core.exceptions import KivuEventError, StorageError
from app.api import routes_events, routes_participants, routes_public, routes_users
from app.utils.responses import error_response

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

def register_exception_handlers(app: FastAPI) -> None:
    """Turn every failure into the {success: false, error} envelope"""

    @app.exception_handler(KivuEventError)
    async def handle_domain_error(request: Request, exc: KivuEventError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return error_response(
            error=exc.message,
            error_code=exc.error_code,
            details=exc.details,
            status_code=exc.status_code
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        fields = sorted({
            str(err["loc"][-1]) for err in exc.errors()
            if err.get("loc") and err["loc"][0] != "header"
        })
        message = f"Invalid fields: {', '.join(fields)}" if fields else "Invalid request"
        return error_response(
            error=message,
            error_code="validation_error",
            details=fields,
            status_code=400
        )

    @app.exception_handler(SQLAlchemyError)
    async def handle_storage_error(request: Request, exc: SQLAlchemyError):
        logger.error(f"Storage failure on {request.method} {request.url.path}", exc_info=exc)
        storage_error = StorageError()
        return error_response(
            error=storage_error.message,
            error_code=storage_error.error_code,
            status_code=storage_error.status_code
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        return error_response(error=str(exc.detail), status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
        return error_response(
            error=StorageError().message,
            error_code="internal_error",
            status_code=500
        )

def create_app(database: Optional[Database] = None) -> FastAPI:
    """Build the application around an owned (or injected) database handle"""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan management"""
        db = database or Database(settings.DATABASE_URL)
        app.state.database = db
        db.create_all()
        logger.info("Database tables created")
        yield
        if database is None:
            db.dispose()
        logger.info("Application shutdown")

    app = FastAPI(
        title="Kivu Event",
        description="Event management backend: events, venues, registrations and QR check-in",
        version="1.0.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(routes_public.router, tags=["public"])
    app.include_router(routes_events.router, prefix="/api", tags=["events"])
    app.include_router(routes_participants.router, prefix="/api", tags=["participants"])
    app.include_router(routes_users.router, prefix="/api", tags=["users"])

    return app

app = create_app()

# Note: Run this ASGI app directly with Uvicorn or Hypercorn. For Gunicorn,
# use `uvicorn.workers.UvicornWorker` instead of wrapping the app.

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="127.0.0.1",
        port=8000,
        reload=True
    )
