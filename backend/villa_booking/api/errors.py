"""Translate typed booking errors into HTTP responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from villa_booking.domain.errors import BlobFailure, BookingError, StorageFailure

logger = logging.getLogger(__name__)


async def booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
    if isinstance(exc, (StorageFailure, BlobFailure)):
        logger.warning("%s on %s %s", exc.code, request.method, request.url.path)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def setup_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BookingError, booking_error_handler)  # type: ignore[arg-type]
