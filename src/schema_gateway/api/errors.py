"""Gateway error taxonomy and the handlers that render it as JSON."""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """Base error carrying the HTTP status and the ``error`` category string."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        """Initialize with the optional driver-reported detail."""
        super().__init__(message or self.error)
        self.message = message

    def to_dict(self) -> dict:
        payload = {"error": self.error}
        if self.message is not None:
            payload["message"] = self.message
        return payload


class TableNameRequired(GatewayError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Table name is required"


class QueryRequired(GatewayError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Query is required"


class InvalidRequestBody(GatewayError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Invalid request body"


class QueryNotAllowed(GatewayError):
    """The statement failed the SELECT-prefix gate and was never executed."""

    status_code = status.HTTP_403_FORBIDDEN
    error = "Only SELECT queries are allowed"


class MetadataQueryFailed(GatewayError):
    """A catalog lookup failed; attributed to the server or database."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "Internal server error"


class QueryExecutionFailed(GatewayError):
    """A client-supplied statement was rejected by the database."""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "Query execution failed"


def describe_exception(exc: BaseException) -> str:
    """Return the driver's message, or the exception type when it has none."""
    return str(exc) or type(exc).__name__


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()))
        parts.append(f"{location}: {err.get('msg', 'invalid value')}")
    return "; ".join(parts) or "Malformed request body"


async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    """Render a GatewayError with its own status code."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Answer malformed bodies with 400 instead of FastAPI's default 422."""
    error = InvalidRequestBody(_format_validation_errors(exc))
    logger.warning("Rejected request to %s: %s", request.url.path, error.message)
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(GatewayError, gateway_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
