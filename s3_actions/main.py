"""
FastAPI application entry point.

This module creates and configures the FastAPI application.
Using an application factory pattern (create_app function) because:
- Easier to test with different configurations
- Explicit about initialization order

For local development:
    uvicorn s3_actions.main:app --reload

For production:
    gunicorn s3_actions.main:app -w 4 -k uvicorn.workers.UvicornWorker
"""

import logging
from contextlib import asynccontextmanager

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.routes import actions, health
from .config.settings import get_settings
from .core.storage.errors import FileAccessError, UnknownActionError, ValidationError

# Configure logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Nothing is pooled, so startup only applies the log level and reports
    configuration problems.
    """
    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level.upper())

    logger.info("S3 Actions API starting", extra={"version": settings.api_version})

    missing_fields = settings.validate_required_fields()
    if missing_fields:
        logger.error(
            "Missing required configuration",
            extra={"missing_fields": missing_fields}
        )

    yield

    logger.info("S3 Actions API shutting down")


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map action errors to HTTP responses.

    The actions themselves never translate errors; this is the only
    place that does.
    """

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        logger.info(
            "Action validation failed",
            extra={"path": request.url.path, "field": exc.field, "error": exc.message},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": exc.message, "field": exc.field},
        )

    @app.exception_handler(UnknownActionError)
    async def unknown_action_handler(request: Request, exc: UnknownActionError):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": str(exc)},
        )

    @app.exception_handler(FileAccessError)
    async def file_access_handler(request: Request, exc: FileAccessError):
        logger.warning(
            "File lookup failed",
            extra={"path": request.url.path, "identifier": exc.identifier},
        )
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": exc.message},
        )

    @app.exception_handler(ClientError)
    async def backend_error_handler(request: Request, exc: ClientError):
        error = exc.response.get("Error", {})
        logger.error(
            "Storage backend rejected request",
            extra={
                "path": request.url.path,
                "error_code": error.get("Code"),
                "operation": exc.operation_name,
            },
        )
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={
                "detail": error.get("Message") or str(exc),
                "code": error.get("Code"),
                "operation": exc.operation_name,
            },
        )

    @app.exception_handler(BotoCoreError)
    async def transport_error_handler(request: Request, exc: BotoCoreError):
        logger.error(
            "Storage backend unreachable",
            extra={"path": request.url.path, "error": str(exc)},
        )
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"detail": str(exc)},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Catch-all exception handler.

        Log the full error server-side but return a generic message.
        """
        logger.error(
            "Unhandled exception",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error": str(exc),
            },
            exc_info=exc,
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error."}
        )


def create_app() -> FastAPI:
    """
    Application factory.

    Called once at startup, or per test with different settings.
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description="""
        Object storage actions against S3-compatible backends.

        ## Actions

        - `signed_upload`, `signed_download`: presigned PUT / GET URLs
        - `put_object`: store a file (multipart via `/put_object/upload`)
        - `list_files`: list a bucket or prefix with public URLs
        - `copy_object`, `delete_file`

        Each call carries its own storage credentials (`accessKeyId`,
        `secretAccessKey`) and optionally `region`, `provider`,
        `endpoint` and `forcePathStyle`.

        ## Authentication

        All action endpoints require an API key in the `X-API-Key` header.
        """,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(
        health.router,
        prefix="/health",
        tags=["Health"],
    )

    app.include_router(
        actions.router,
        prefix="/api/v1/actions",
        tags=["Actions"],
    )

    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "message": "S3 Actions API",
            "version": settings.api_version,
            "docs": "/docs",
            "health": "/health",
        }

    register_exception_handlers(app)

    logger.info(
        "FastAPI application created",
        extra={
            "title": settings.api_title,
            "version": settings.api_version,
        }
    )

    return app


# Create the application instance
# This is what uvicorn/gunicorn will import
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "s3_actions.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=settings.log_level.lower(),
    )
