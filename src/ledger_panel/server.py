"""HTTP server entrypoint for Ledger Panel.

The server binds to localhost only: the panel runs git and gh with the
invoking user's credentials and is meant to be reached through a local
browser or an authenticating proxy that sets
``Cf-Access-Authenticated-User-Email``.
"""

from __future__ import annotations

import argparse
import logging
import sys

import uvicorn

from .config import Config
from .web import create_app

_UVICORN_LEVELS = {"critical", "error", "warning", "info", "debug", "trace"}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="ledger-panel",
        description="Local web panel for a plain-text accounting git repository",
    )
    parser.add_argument("--host", default=None, help="bind host (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=None, help="port to run the server on (default: 7001)")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Entrypoint for the Ledger Panel server.

    Configuration problems, such as a missing repository directory, stop
    the process before the server starts listening.
    """
    args = parse_args(argv)

    try:
        config = Config.load_from_env()
    except RuntimeError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        sys.exit(1)

    if args.host is not None:
        config.host = args.host
    if args.port is not None:
        config.port = args.port

    # Configure logging to stderr
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
    logger = logging.getLogger(__name__)
    logger.info(
        "Ledger panel running on %s:%d in directory: %s",
        config.host,
        config.port,
        config.repo_path,
    )

    uvicorn_level = config.log_level.lower()
    if uvicorn_level not in _UVICORN_LEVELS:
        uvicorn_level = "info"

    app = create_app(config)
    uvicorn.run(app, host=config.host, port=config.port, log_level=uvicorn_level)


if __name__ == "__main__":
    main()
