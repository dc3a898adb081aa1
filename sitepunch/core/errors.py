"""
Error taxonomy and the single translation point into HTTP responses.

Services raise these; ``register_error_handlers`` makes FastAPI render them
in the ``{"success": false, "error": ..., "code": ...}`` envelope the mobile
client reads.
"""
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class SitePunchError(Exception):
    code = "Error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Server error"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class Unauthorized(SitePunchError):
    code = "Unauthorized"
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Please sign in again"


class Forbidden(SitePunchError):
    code = "Forbidden"
    status_code = status.HTTP_403_FORBIDDEN
    message = "Forbidden"


class NotFound(SitePunchError):
    code = "NotFound"
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class AlreadyClockedIn(SitePunchError):
    code = "AlreadyClockedIn"
    status_code = status.HTTP_409_CONFLICT
    message = "Already clocked in"


class NotClockedIn(SitePunchError):
    code = "NotClockedIn"
    status_code = status.HTTP_409_CONFLICT
    message = "Not clocked in"


class ValidationError(SitePunchError):
    code = "ValidationError"
    status_code = 422
    message = "Invalid request"


class StoreUnavailable(SitePunchError):
    code = "StoreUnavailable"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    message = "Service temporarily unavailable, please try again"


def error_body(code: str, message: str) -> dict:
    return {"success": False, "error": message, "code": code}


async def sitepunch_error_handler(request: Request, exc: SitePunchError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.code, exc.message))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Report the first offending field only; the client shows one line
    errors = exc.errors()
    message = ValidationError.message
    if errors:
        first = errors[0]
        where = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"{where}: {first.get('msg', 'invalid value')}" if where else str(first.get("msg", message))
    return JSONResponse(
        status_code=ValidationError.status_code,
        content=error_body(ValidationError.code, message),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SitePunchError, sitepunch_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
