"""
Exception handlers registered on the application.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from event_booking.core.logging import get_logger

logger = get_logger(__name__)


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """A constraint the services did not pre-check was violated by a concurrent write."""
    message = str(exc.orig) if exc.orig is not None else str(exc)
    logger.warning("integrity_error", path=request.url.path, error=message)

    detail = "Resource conflicts with existing data"
    if "unique" in message.lower():
        detail = "Resource already exists"
    elif "foreign key" in message.lower():
        detail = "Referenced resource does not exist"

    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": detail})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(IntegrityError, integrity_error_handler)
