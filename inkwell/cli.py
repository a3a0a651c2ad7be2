from __future__ import annotations

import argparse

import uvicorn

from .config import load_settings
from .db import connect, init_db
from .lifecycle import purge_expired
from .logging import get_logger, setup_logging

logger = get_logger("cli")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="inkwell", description="Inkwell - personal notes with a recoverable trash.")
    sub = parser.add_subparsers(dest="cmd", required=True)

    run = sub.add_parser("run", help="Run the web server")
    run.add_argument("--host", default=None, help="Bind host (override INKWELL_HOST)")
    run.add_argument("--port", type=int, default=None, help="Bind port (override INKWELL_PORT)")

    sub.add_parser("purge-expired", help="Remove deleted notes past their 30-day retention")

    args = parser.parse_args(argv)
    settings = load_settings()
    setup_logging(settings.log_level)

    if args.cmd == "purge-expired":
        with connect(settings.db_path) as conn:
            init_db(conn)
            removed = purge_expired(conn)
        print(f"Purged {removed} expired note(s) from {settings.db_path}")
        return

    host = args.host or settings.host
    port = args.port or settings.port

    logger.info("Serving %s on %s:%s", settings.db_path, host, port)
    uvicorn.run(
        "inkwell.web:create_app",
        factory=True,
        host=host,
        port=port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
