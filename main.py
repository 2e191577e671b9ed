#!/usr/bin/env python3
"""
Account service command line.

Usage:
  python main.py serve
  python main.py serve --host 0.0.0.0 --port 8080
  python main.py serve --reload
  python main.py create-admin
  python main.py create-admin --email root@example.com

Environment variables (see core/config.py for the full list):
  JWT_ACCESS_SECRET  Token signing key, at least 32 characters. Required
                     unless DEBUG=true.
  DATABASE_URL       SQLAlchemy URL. Defaults to a SQLite file under auth/.
  CREATE_ADMIN       When true, `serve` seeds a default admin on startup.
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
        reload=args.reload,
    )
    return 0


def _create_admin(args: argparse.Namespace) -> int:
    from auth.accounts import seed_admin
    from auth.store import UserStore
    from core.errors import Conflict

    settings = get_settings()
    email = args.email or settings.admin_email
    store = UserStore(settings.database_url)
    try:
        password = seed_admin(store, email)
    except Conflict:
        print(f"  {email} is already registered to a non-admin account. Pass --email to pick another.")
        return 1
    finally:
        store.close()

    if password is None:
        print("  An admin user already exists. Nothing to do.")
        return 1
    print(f"  Email:    {email}")
    print(f"  Password: {password}")
    print("  Change these credentials as soon as possible.")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Account service: register, authenticate, list, fetch and block users.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API with uvicorn")
    serve.add_argument("--host", help="Bind address (default: HOST setting)")
    serve.add_argument("--port", type=int, help="Bind port (default: PORT setting)")
    serve.add_argument("--reload", action="store_true", help="Reload on code changes (development)")
    serve.set_defaults(func=_serve)

    admin = sub.add_parser("create-admin", help="Create the default admin account if none exists")
    admin.add_argument("--email", help="Admin email (default: ADMIN_EMAIL setting)")
    admin.set_defaults(func=_create_admin)

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)-5s %(name)s %(message)s")
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
