"""FastAPI application factory.

``create_app`` wires a ``Workspace`` for the configured repository into the
routes and maps the panel's exception types to HTTP statuses:

- ``CommandRejected`` and request validation errors -> 400
- ``CommandForbidden`` -> 403
- ``WorkspaceBusy`` -> 409
- ``CommandFailed`` -> 500 with the captured command output
- ``CommandTimedOut`` -> 504
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse

from .. import __version__
from ..config import Config
from ..errors import CommandFailed, CommandForbidden, CommandRejected, CommandTimedOut, WorkspaceBusy
from ..workspace import CommandRunner, Workspace
from .routes import router

logger = logging.getLogger(__name__)

ERROR_STATUS: dict[type[Exception], int] = {
    CommandRejected: 400,
    CommandForbidden: 403,
    WorkspaceBusy: 409,
    CommandFailed: 500,
    CommandTimedOut: 504,
}


def _error_handler(status_code: int):
    async def handler(request: Request, exc: Exception) -> PlainTextResponse:
        if status_code >= 500:
            logger.error("%s %s -> %d: %s", request.method, request.url.path, status_code, exc)
        else:
            logger.info("%s %s -> %d: %s", request.method, request.url.path, status_code, exc)
        return PlainTextResponse(str(exc), status_code=status_code)

    return handler


async def _validation_error(request: Request, exc: RequestValidationError) -> PlainTextResponse:
    logger.info("%s %s -> 400: %s", request.method, request.url.path, exc.errors())
    return PlainTextResponse("Invalid request", status_code=400)


def create_app(config: Config, runner: CommandRunner | None = None) -> FastAPI:
    """Build the panel application for ``config``.

    ``runner`` replaces the subprocess runner, which tests use to script
    git and gh responses.
    """
    app = FastAPI(title="Ledger Panel", version=__version__, docs_url=None, redoc_url=None)
    app.state.workspace = Workspace(config, runner=runner)

    for exc_class, status_code in ERROR_STATUS.items():
        app.add_exception_handler(exc_class, _error_handler(status_code))
    app.add_exception_handler(RequestValidationError, _validation_error)

    app.include_router(router)
    return app
