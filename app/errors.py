"""
Domain errors raised by the booking core.

Each one is an HTTPException with a fixed status code, so raising it from a
router, a CRUD method or a helper produces the right response directly.
"""

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger


class BookingError(HTTPException):
    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str) -> None:
        super().__init__(status_code=self.status_code, detail=detail)


class ValidationError(BookingError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(BookingError):
    status_code = status.HTTP_404_NOT_FOUND


class UnauthorizedError(BookingError):
    status_code = status.HTTP_401_UNAUTHORIZED


class InvalidStateError(BookingError):
    status_code = status.HTTP_400_BAD_REQUEST


class AlreadyCancelledError(InvalidStateError):
    pass


class ConflictError(BookingError):
    status_code = status.HTTP_409_CONFLICT


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = jsonable_encoder(exc.errors())
    logger.debug("Validation error at {}: {}", request.url.path, errors)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request", "errors": errors},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Answer malformed request bodies and params with 400 instead of 422."""
    app.add_exception_handler(RequestValidationError, request_validation_handler)  # type: ignore[arg-type]
