"""HTTP mapping for failures shared by every Stockroom router.

Protean's FastAPI integration turns ValidationError (and subclasses such as
InvalidStockOperation or DuplicateProduct) into 400 responses with an
{"error": ...} body. The handlers here add the remaining cases in the same
body shape.
"""

from contextlib import contextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError
from protean.integrations.fastapi import register_exception_handlers
from sqlalchemy.exc import OperationalError

logger = structlog.get_logger(__name__)


class StorageUnavailable(Exception):
    """The underlying store could not be reached."""


@contextmanager
def storage_guard():
    """Translate driver-level connectivity errors into StorageUnavailable."""
    try:
        yield
    except OperationalError as exc:
        raise StorageUnavailable(str(exc)) from exc


async def _not_found(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": str(exc)})


async def _version_conflict(request: Request, exc: ExpectedVersionError) -> JSONResponse:
    logger.warning("Version conflict surfaced to client", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=409, content={"error": "Resource was modified concurrently, retry the request"})


async def _storage_unavailable(request: Request, exc: StorageUnavailable) -> JSONResponse:
    logger.error("Storage unavailable", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=503, content={"error": "Storage unavailable"})


def register_error_handlers(app: FastAPI) -> None:
    register_exception_handlers(app)
    app.add_exception_handler(ObjectNotFoundError, _not_found)
    app.add_exception_handler(ExpectedVersionError, _version_conflict)
    app.add_exception_handler(StorageUnavailable, _storage_unavailable)
