from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from loguru import logger


class DataStoreError(Exception):
    """Base class for data store failures"""

    def __init__(self, message: str, orig: Optional[BaseException] = None):
        super().__init__(message)
        self.orig = orig


class ConfigurationError(DataStoreError):
    """Required configuration is missing"""


class ConstraintViolation(DataStoreError):
    """Storage rejected a write because of a uniqueness or referential constraint"""


class TransportError(DataStoreError):
    """Connection or network failure reported by the database driver"""


_STATUS_CODES = {
    DataStoreError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ConstraintViolation: status.HTTP_409_CONFLICT,
    TransportError: status.HTTP_503_SERVICE_UNAVAILABLE,
}

_ERROR_MESSAGES = {
    DataStoreError: "Data store error",
    ConfigurationError: "Service is not configured",
    ConstraintViolation: "Record conflicts with existing data",
    TransportError: "Database is unavailable",
}


async def data_store_error_handler(request: Request, exc: DataStoreError) -> JSONResponse:
    error_type = type(exc)
    logger.warning(f"{error_type.__name__} on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=_STATUS_CODES.get(error_type, status.HTTP_500_INTERNAL_SERVER_ERROR),
        content={"detail": _ERROR_MESSAGES.get(error_type, "Data store error")},
    )


def register_exception_handlers(app: FastAPI) -> None:
    for error_type in _STATUS_CODES:
        app.add_exception_handler(error_type, data_store_error_handler)
