from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
import logging

logger = logging.getLogger(__name__)


class BikeHubError(Exception):
    status_code = 500

    def __init__(self, message: str, **context):
        super().__init__(message)
        self.message = message
        self.context = context


class ValidationError(BikeHubError):
    status_code = 400


class NotFoundError(BikeHubError):
    status_code = 404


class PaymentError(BikeHubError):
    """Raised for any failure talking to the payment gateway."""
    status_code = 500


class StorageError(BikeHubError):
    status_code = 500


def error_response(status_code: int, message: str, **context) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **context})


async def bikehub_error_handler(request: Request, exc: BikeHubError):
    return error_response(exc.status_code, exc.message, **exc.context)


async def http_error_handler(request: Request, exc: HTTPException):
    return error_response(exc.status_code, str(exc.detail))


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
        message = f"{field}: {first.get('msg')}" if field else first.get("msg")
    else:
        message = "Invalid request"
    return error_response(400, message)


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return error_response(500, "Internal server error")


def register_error_handlers(app: FastAPI):
    app.add_exception_handler(BikeHubError, bikehub_error_handler)
    app.add_exception_handler(HTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
