"""Mapping of note domain errors to HTTP responses."""

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from ..core.errors import NoteError, is_client_error
from ..core.schemas.common import ErrorResponse

logger = logging.getLogger("threadnote.api.errors")


def error_response(exc: NoteError) -> JSONResponse:
    body = ErrorResponse(error=exc.code, message=exc.message, details=exc.details() or None)
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(body))


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register the NoteError handler on the application.

    Client errors are logged at WARNING, storage errors at ERROR with the
    wrapped driver exception.
    """

    @app.exception_handler(NoteError)
    async def note_error_handler(request: Request, exc: NoteError) -> JSONResponse:
        if is_client_error(exc):
            logger.warning(
                f"{request.method} {request.url.path} rejected: [{exc.code}] {exc.message}",
                extra={"details": exc.details()},
            )
        else:
            logger.error(
                f"{request.method} {request.url.path} failed: [{exc.code}] {exc.message}",
                exc_info=exc.__cause__,
            )
        return error_response(exc)
