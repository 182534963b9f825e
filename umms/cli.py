# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Operator commands: password hashing, admin bootstrap and a dev server."""

from __future__ import annotations

import argparse
import getpass
import sys
from collections.abc import Sequence

from umms.application.services.password_hashing import BcryptPasswordHasher
from umms.infrastructure.admin_setup import create_admin
from umms.infrastructure.db import Database
from umms.infrastructure.repositories.sqlalchemy_user_repository import \
    SqlAlchemyUserRepository
from umms.shared.config import DatabaseConfig
from umms.shared.errors import AppError
from umms.shared.logging import setup_logging


def _hash_password(args: argparse.Namespace) -> int:
    password = args.password or getpass.getpass("Password: ")
    if not password:
        print("Password must not be empty", file=sys.stderr)
        return 1
    print(BcryptPasswordHasher().hash(password))
    return 0


def _create_admin(args: argparse.Namespace) -> int:
    setup_logging(log_file=args.log_file)
    password = args.password or getpass.getpass("Admin password: ")

    database = Database(DatabaseConfig(url=args.database_url) if args.database_url else DatabaseConfig())
    try:
        database.create_all()
        user = create_admin(
            SqlAlchemyUserRepository(database),
            BcryptPasswordHasher(),
            email=args.email,
            password=password,
            first_name=args.first_name,
            last_name=args.last_name,
        )
    except AppError as exc:
        print(f"Error: {exc.error or exc.code}", file=sys.stderr)
        return 1
    finally:
        database.dispose()

    print(f"Admin user ready: {user.email} (id={user.id})")
    return 0


def _serve(args: argparse.Namespace) -> int:
    from umms.app import create_app

    create_app().run(host=args.host, port=args.port, debug=args.debug)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="umms", description="UMMS backend operator tools")
    sub = parser.add_subparsers(dest="command", required=True)

    hash_cmd = sub.add_parser("hash-password", help="Print a bcrypt hash for a password")
    hash_cmd.add_argument("password", nargs="?", help="Password to hash (prompted when omitted)")
    hash_cmd.set_defaults(handler=_hash_password)

    admin_cmd = sub.add_parser("create-admin", help="Create or promote an Admin account")
    admin_cmd.add_argument("--email", required=True)
    admin_cmd.add_argument("--password", help="Prompted when omitted")
    admin_cmd.add_argument("--first-name", default="Admin")
    admin_cmd.add_argument("--last-name", default="User")
    admin_cmd.add_argument("--database-url", help="Overrides DATABASE_URL")
    admin_cmd.add_argument("--log-file", help="Overrides LOG_FILE")
    admin_cmd.set_defaults(handler=_create_admin)

    serve_cmd = sub.add_parser("serve", help="Run the development server")
    serve_cmd.add_argument("--host", default="0.0.0.0")
    serve_cmd.add_argument("--port", type=int, default=5000)
    serve_cmd.add_argument("--debug", action="store_true")
    serve_cmd.set_defaults(handler=_serve)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
