"""Exception handlers: every failure leaves as {"success": false, "message": ...}"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from wagate.core.exceptions import AppException
from wagate.core.logging import log


async def app_exception_handler(request: Request, exc: AppException):
    """Handle application exceptions."""
    if exc.status_code >= 500:
        log.error(f"{request.method} {request.url.path} failed: {exc.message} {exc.details or ''}".rstrip())
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.message},
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed JSON or wrong field types are plain 400s."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"Invalid request: {field} {first.get('msg', '')}".strip() if field else "Invalid request body"
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": message},
    )


async def generic_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    log.exception("Unhandled exception")
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
