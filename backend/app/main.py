"""
FastAPI entrypoint for the Blacksheep back-office application.
"""
import logging
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.core.config import settings
from app.core.container import Container, build_container
from app.core.errors import AppError, ErrorCode, STATUS_CODES, USER_MESSAGES
from app.core.utils import format_error
from app.api.router import api_router

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path}: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content=format_error(exc.public_message, exc.code.value),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = USER_MESSAGES[ErrorCode.INVALID_INPUT]
        if errors:
            first = errors[0]
            location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
            message = f"{location}: {first.get('msg')}" if location else first.get("msg", message)
        return JSONResponse(
            status_code=STATUS_CODES[ErrorCode.INVALID_INPUT],
            content=format_error(message, ErrorCode.INVALID_INPUT.value),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=STATUS_CODES[ErrorCode.INTERNAL_ERROR],
            content=format_error(
                USER_MESSAGES[ErrorCode.INTERNAL_ERROR], ErrorCode.INTERNAL_ERROR.value
            ),
        )


def create_app(container: Optional[Container] = None) -> FastAPI:
    """Build the application around an existing container or a fresh one."""
    container = container or build_container(settings)
    app_settings = container.settings
    logging.basicConfig(
        level=app_settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("app").setLevel(app_settings.LOG_LEVEL)

    app = FastAPI(
        title=f"{app_settings.APP_NAME} API",
        description="Back-office API for trips, services and finances",
        version="1.0.0",
        debug=app_settings.DEBUG,
    )
    app.state.container = container

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include API routes
    app.include_router(api_router, prefix="/api")

    @app.get("/")
    async def root():
        return {"message": f"{app_settings.APP_NAME} API is running"}

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()
