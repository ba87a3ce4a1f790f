"""
Error taxonomy for the InventiSync API.

Every failure a route can report is a ServiceError carrying an HTTP-equivalent
status. The handlers registered here turn them into `{"message": ...}` bodies.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "unauthorized access"


class Forbidden(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "forbidden access"


class QuotaExceeded(Forbidden):
    default_message = "product limit reached"


class NotFound(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "not found"


class ShopNotFound(NotFound):
    default_message = "shop not found"


class Conflict(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "already exists"


class BadRequest(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "bad request"


class InvalidIdentifier(BadRequest):
    default_message = "invalid id"


class UpstreamFailure(ServiceError):
    default_message = "upstream service failure"


def register_error_handlers(app: FastAPI) -> None:
    """Register the global exception handlers on the app."""

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        if exc.status_code >= 500:
            logger.error(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(PyMongoError)
    async def store_error_handler(request: Request, exc: PyMongoError):
        logger.error(f"Document store error on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=UpstreamFailure.status_code,
            content={"message": UpstreamFailure.default_message},
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Internal server error"},
        )
