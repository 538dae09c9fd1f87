"""HTTP server exposing count, append and prune over the guest log."""

from __future__ import annotations

import logging
import sys

import uvicorn
from pydantic import ValidationError
from starlette.applications import Starlette
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response
from starlette.routing import Route

from guestlog.auth import verify_auth
from guestlog.config import Settings
from guestlog.store.errors import InvalidJsonError
from guestlog.store.guest_log import GuestLog
from guestlog.store.working_file import WorkingFile

logger = logging.getLogger(__name__)


def configure_logging(config: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def create_app(
    config: Settings,
    guest_log: GuestLog | None = None,
) -> Starlette:
    """Create a Starlette app serving the guest log operations."""
    app_log = guest_log or GuestLog(
        WorkingFile(config.dest_file),
        atomic_append=config.atomic_append,
    )

    def forbidden() -> PlainTextResponse:
        return PlainTextResponse("forbidden", status_code=403)

    def invalid_json() -> PlainTextResponse:
        return PlainTextResponse("invalid json", status_code=400)

    def internal_error(operation: str) -> PlainTextResponse:
        logger.exception("internal error during %s", operation)
        return PlainTextResponse("internal server error", status_code=500)

    def require_auth(request: Request) -> PlainTextResponse | None:
        if verify_auth(config.auth, request.headers):
            return None
        logger.warning("Rejected %s %s: bad or missing x-auth", request.method, request.url.path)
        return forbidden()

    async def count(request: Request) -> Response:
        auth = require_auth(request)
        if auth:
            return auth
        try:
            total = await run_in_threadpool(app_log.count)
        except Exception:
            return internal_error("count")
        return PlainTextResponse(str(total))

    async def append(request: Request) -> Response:
        auth = require_auth(request)
        if auth:
            return auth
        try:
            payload = (await request.body()).decode("utf-8")
        except UnicodeDecodeError:
            return invalid_json()
        try:
            await run_in_threadpool(app_log.append, payload)
        except InvalidJsonError:
            return invalid_json()
        except Exception:
            return internal_error("append")
        return Response(status_code=200)

    async def prune(request: Request) -> Response:
        auth = require_auth(request)
        if auth:
            return auth
        try:
            await run_in_threadpool(app_log.prune)
        except Exception:
            return internal_error("prune")
        return Response(status_code=200)

    routes = [
        Route("/count", count, methods=["GET"]),
        Route("/append", append, methods=["POST"]),
        Route("/prune", prune, methods=["POST"]),
    ]

    return Starlette(debug=False, routes=routes)


def main() -> None:
    """Run the guest log server."""
    try:
        config = Settings()
    except ValidationError as e:
        logging.basicConfig(format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        logger.error("Invalid configuration:\n%s", e)
        sys.exit(1)

    configure_logging(config)
    logger.info(
        "Starting guest log server on %s:%s (file=%s)",
        config.host,
        config.port,
        config.dest_file,
    )
    app = create_app(config)
    uvicorn.run(app, host=config.host, port=config.port)


if __name__ == "__main__":
    main()
