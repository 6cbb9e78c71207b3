from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import SQLModel
from .error import ClientError, ServerError
from src.domain.errors import PersistenceError
import logging

logger = logging.getLogger(__name__)


def error_envelope(message: str, code: Optional[str] = None) -> dict:
    body = {"success": False, "error": message}
    if code:
        body["code"] = code
    return body


async def handle_client_error(request: Request, exc: ClientError):
    code = exc.base_error.code if exc.expose_code else None
    logger.warning(f"Client error: {exc.base_error.code} {exc.base_error.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_envelope(exc.base_error.message, code),
    )


async def handle_server_error(request: Request, exc: ServerError):
    logger.error(f"Server error: {exc.base_error.code} {exc.base_error.message}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_envelope(exc.public_message),
    )


async def handle_persistence_error(request: Request, exc: PersistenceError):
    logger.error(f"Persistence error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_envelope("Internal server error"),
    )


async def handle_validation_error(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    if field:
        message = f"{field}: {message}"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_envelope(message, "VALIDATION_ERROR"),
    )


def create_app(ApplicationConfig) -> FastAPI:
    from src.depends import engine

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if ApplicationConfig.DB_AUTO_CREATE:
            async with engine.begin() as conn:
                await conn.run_sync(SQLModel.metadata.create_all)
        yield

    app = FastAPI(title="Exam Prep Auth API", version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from src.api.routes import admin, auth, health_check, sessions

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(auth.router, tags=["Authentication"])
    app.include_router(sessions.router, tags=["Sessions"])
    app.include_router(admin.router, tags=["Admin"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)
    app.add_exception_handler(PersistenceError, handle_persistence_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)

    return app
