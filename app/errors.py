"""Domain errors and their HTTP rendering"""

from typing import Any, List, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import structlog

logger = structlog.get_logger()


class OrderDeskError(Exception):
    """Base class for errors raised by the service layer"""
    status_code = 500
    default_message = "Internal error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(OrderDeskError):
    """Malformed or missing input"""
    status_code = 400
    default_message = "Validation failed"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[Any]] = None):
        super().__init__(message)
        self.errors = errors or []


class NotFoundError(OrderDeskError):
    status_code = 404
    default_message = "Not found"


class VerificationError(OrderDeskError):
    """Customer identity check failed"""
    status_code = 403
    default_message = "Verification failed"


class InvalidStateError(OrderDeskError):
    """Requested transition is not allowed from the current status"""
    status_code = 400
    default_message = "Invalid state"


class AuthError(OrderDeskError):
    status_code = 401
    default_message = "Could not validate credentials"


class StoreError(OrderDeskError):
    """Underlying transaction or storage failure"""
    status_code = 500
    default_message = "Storage failure"


async def order_desk_error_handler(request: Request, exc: OrderDeskError) -> JSONResponse:
    body = {"detail": exc.message}
    if isinstance(exc, ValidationError) and exc.errors:
        body["errors"] = jsonable_encoder(exc.errors)
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
    if exc.status_code >= 500:
        logger.error("Request failed", path=request.url.path, error=exc.message)
    return JSONResponse(status_code=exc.status_code, content=body, headers=headers)


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render body/query validation failures as 400 with itemised fields"""
    return JSONResponse(
        status_code=400,
        content={"detail": "Validation failed", "errors": jsonable_encoder(exc.errors())},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(OrderDeskError, order_desk_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
