"""Entry point for the gateway service."""

import time
from typing import Optional, Tuple

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse

from common.constants import AUTH_REALM
from common.formatting import format_file_size
from common.logging_config import setup_logging
from gateway import config
from gateway.auth import BasicAuthenticator
from gateway.backends import StorageBackend, create_backend
from gateway.catalog import Catalog
from gateway.coordinator import ObjectCoordinator
from gateway.exceptions import (
    GatewayException,
    ObjectConflictError,
    ObjectNotFoundError,
    StorageBackendError,
)
from gateway.lock_registry import LockRegistry
from gateway.routes.object_routes import router as object_router
from gateway.utils import generate_request_id

logger = setup_logging('gateway')


def create_app(
    backend: Optional[StorageBackend] = None,
    credentials: Optional[Tuple[str, str]] = None,
    cdn_enabled: Optional[bool] = None,
) -> FastAPI:
    """
    Build an isolated gateway application.

    Every call gets its own catalog, lock registry and coordinator. Arguments
    left as None fall back to the environment configuration.

    Args:
        backend: Storage backend to use (defaults to STORAGE_BACKEND)
        credentials: (username, password) enabling Basic Auth (defaults to AUTH)
        cdn_enabled: Whether /cdn/ dumps the catalog (defaults to CDN)

    Returns:
        FastAPI application
    """
    if backend is None:
        backend = create_backend(
            config.STORAGE_BACKEND,
            config.CHUNK_STORAGE_PATH,
            config.GATEWAY_CHUNK_SIZE_BYTES,
        )
    if credentials is None:
        credentials = config.parse_auth(config.AUTH)
    if cdn_enabled is None:
        cdn_enabled = config.CDN_ENABLED

    app = FastAPI(
        title="ChunkDrive Gateway",
        description="Named object storage on top of a chunk-transport channel",
        version="1.0.0",
    )

    app.state.coordinator = ObjectCoordinator(Catalog(), LockRegistry(), backend)
    app.state.cdn_enabled = cdn_enabled
    app.state.authenticator = BasicAuthenticator(*credentials) if credentials else None

    @app.middleware("http")
    async def basic_auth(request: Request, call_next):
        """
        Reject requests without valid operator credentials when auth is enabled.
        """
        authenticator = request.app.state.authenticator
        if authenticator is not None and not authenticator.verify(request.headers.get("authorization")):
            logger.warning(f"Unauthorized request: {request.method} {request.url.path}")
            return PlainTextResponse(
                "Unauthorized access",
                status_code=status.HTTP_401_UNAUTHORIZED,
                headers={"WWW-Authenticate": AUTH_REALM},
            )
        return await call_next(request)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """
        Middleware to log all HTTP requests and responses.
        """
        request_id = generate_request_id()
        request.state.request_id = request_id

        start_time = time.time()

        logger.info(f"Request started: {request.method} {request.url.path} [request_id={request_id}]")

        response = await call_next(request)

        duration = time.time() - start_time

        logger.info(
            f"Request completed: {request.method} {request.url.path} "
            f"status={response.status_code} duration={duration:.3f}s [request_id={request_id}]"
        )

        response.headers["X-Request-ID"] = request_id

        return response

    @app.on_event("startup")
    async def startup_event():
        """
        Open the storage channel and report the catalog totals.
        """
        coordinator = app.state.coordinator
        logger.info(f"Gateway starting up with {backend.name} backend...")

        coordinator.channel = await backend.open_channel()

        meta = coordinator.catalog.meta
        logger.info(f"==== Size => {format_file_size(meta.total_size)}")
        logger.info(f"==== Chunks => {meta.total_chunks}")
        if app.state.authenticator is not None:
            logger.info("Credentials required for every request (HTTP Basic)")
        if app.state.cdn_enabled:
            logger.info("CDN catalog dump enabled")

    @app.on_event("shutdown")
    async def shutdown_event():
        """
        Release the storage channel.
        """
        logger.info("Gateway shutting down...")
        coordinator = app.state.coordinator
        if coordinator.channel is not None:
            await backend.close_channel(coordinator.channel)
            coordinator.channel = None
        logger.info("Storage channel closed")

    @app.exception_handler(ObjectConflictError)
    async def object_conflict_handler(request: Request, exc: ObjectConflictError):
        request_id = getattr(request.state, 'request_id', 'unknown')
        logger.warning(
            f"Object conflict: {exc} [request_id={request_id}] path={request.url.path}"
        )
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"detail": str(exc), "code": "OBJECT_CONFLICT"}
        )

    @app.exception_handler(ObjectNotFoundError)
    async def object_not_found_handler(request: Request, exc: ObjectNotFoundError):
        request_id = getattr(request.state, 'request_id', 'unknown')
        logger.warning(
            f"Object not found: {exc} [request_id={request_id}] path={request.url.path}"
        )
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": str(exc), "code": "OBJECT_NOT_FOUND"}
        )

    @app.exception_handler(StorageBackendError)
    async def storage_backend_handler(request: Request, exc: StorageBackendError):
        request_id = getattr(request.state, 'request_id', 'unknown')
        logger.error(
            f"Storage backend error: {exc} [request_id={request_id}] path={request.url.path}",
            exc_info=True
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error", "code": "STORAGE_BACKEND_ERROR"}
        )

    @app.exception_handler(GatewayException)
    async def gateway_exception_handler(request: Request, exc: GatewayException):
        request_id = getattr(request.state, 'request_id', 'unknown')
        logger.error(
            f"Gateway exception: {exc} [request_id={request_id}] path={request.url.path}",
            exc_info=True
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error", "code": "INTERNAL_ERROR"}
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        request_id = getattr(request.state, 'request_id', 'unknown')
        logger.error(
            f"Unhandled exception: {exc} [request_id={request_id}] path={request.url.path}",
            exc_info=True
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "internal server error", "code": "INTERNAL_ERROR"}
        )

    app.include_router(object_router)

    return app


def main() -> None:
    """
    Start the gateway with uvicorn.
    """
    uvicorn.run(
        "gateway.main:create_app",
        factory=True,
        host=config.GATEWAY_HOST,
        port=config.GATEWAY_PORT,
    )


if __name__ == "__main__":
    main()
