"""
app/api/error_handlers.py

Maps ingestion exceptions to structured ``{error, details}`` responses.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from app.errors import ConfigurationError, IngestionError, ParseError, PersistenceError

logger = logging.getLogger(__name__)


def _error_response(status_code: int, error: str, details: object) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, "details": details})


async def _configuration_error_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
    return _error_response(status.HTTP_400_BAD_REQUEST, exc.message, exc.to_dict())


async def _parse_error_handler(request: Request, exc: ParseError) -> JSONResponse:
    logger.warning("Parse failure path=%s: %s", request.url.path, exc.message)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to process file", exc.message)


async def _persistence_error_handler(request: Request, exc: PersistenceError) -> JSONResponse:
    logger.error(
        "Persistence failure path=%s batches_committed=%d records_committed=%d: %s",
        request.url.path,
        exc.batches_committed,
        exc.records_committed,
        exc.message,
    )
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to persist data", exc.to_dict())


async def _ingestion_error_handler(request: Request, exc: IngestionError) -> JSONResponse:
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Ingestion failed", exc.message)


async def _unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error path=%s", request.url.path)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", str(exc))


def install_error_handlers(application: FastAPI) -> None:
    application.add_exception_handler(ConfigurationError, _configuration_error_handler)
    application.add_exception_handler(ParseError, _parse_error_handler)
    application.add_exception_handler(PersistenceError, _persistence_error_handler)
    application.add_exception_handler(IngestionError, _ingestion_error_handler)
    application.add_exception_handler(Exception, _unexpected_error_handler)
