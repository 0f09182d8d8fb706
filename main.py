#!/usr/bin/env python3
"""
Stockroom -- multi-tenant item inventory API.

Usage:
  python main.py serve                     # listen on $HOST:$PORT (default 0.0.0.0:8080)
  python main.py serve --port 9000
  python main.py serve --reload
  python main.py init-db                   # create tables in $DATABASE_URL and exit

Environment variables:
  DATABASE_URL  SQLAlchemy URL of the backing store (postgres:// is accepted).
  SECRET_KEY    JWT signing key, at least 32 characters. Without it a public
                development placeholder is used -- never do that in production.
  PORT          Listening port for `serve`.
"""

import argparse
import logging
import sys

from core.config import get_settings


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "asgi:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=args.reload or settings.debug,
        log_level=settings.log_level.lower(),
    )
    return 0


def _init_db(args: argparse.Namespace) -> int:
    from auth.store import UserStore
    from items.store import ItemStore

    settings = get_settings()
    user_store = UserStore(settings.database_url)
    item_store = ItemStore(settings.database_url)
    ok = user_store.ping()
    item_store.close()
    user_store.close()
    if not ok:
        print("  [!] Database did not answer SELECT 1.")
        return 1
    print("  Tables ready.")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Stockroom -- multi-tenant item inventory API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API with uvicorn")
    serve.add_argument("--host", default=None, help="Bind address (default: $HOST or 0.0.0.0)")
    serve.add_argument("--port", type=int, default=None, help="Port (default: $PORT or 8080)")
    serve.add_argument("--reload", action="store_true", help="Auto-reload on code changes (dev only)")
    serve.set_defaults(func=_serve)

    init_db = sub.add_parser("init-db", help="Create database tables and exit")
    init_db.set_defaults(func=_init_db)

    return parser


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)-5s %(name)s %(message)s")
    args = _build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
