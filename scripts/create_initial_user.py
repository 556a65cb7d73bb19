"""Utility script to create the first administrator of the directory."""

from __future__ import annotations

import argparse
from getpass import getpass

from sqlalchemy.exc import SQLAlchemyError

from fellowship.application.use_cases.users import create_user
from fellowship.domain.entities import ROLE_ADMIN, ROLE_USER
from fellowship.infrastructure.database import SessionLocal, initialize_database


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Create an initial user for the Fellowship API.",
    )
    parser.add_argument("--name", default="Administrator", help="Full name (default: Administrator)")
    parser.add_argument(
        "--email",
        default="admin@example.com",
        help="Email address used to sign in (default: admin@example.com)",
    )
    parser.add_argument(
        "--password",
        default=None,
        help="Password for the account. Prompted for when omitted.",
    )
    parser.add_argument(
        "--role",
        choices=(ROLE_ADMIN, ROLE_USER),
        default=ROLE_ADMIN,
        help="Role assigned to the user (default: admin)",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Create a user using the provided command line arguments."""

    args = parse_args(argv)

    password = args.password or getpass("Password for the new user: ")
    if not password:
        raise SystemExit("A password is required.")

    initialize_database()

    session = SessionLocal()
    try:
        user = create_user(
            session,
            name=args.name,
            email=args.email,
            password=password,
            role=args.role,
        )
    except ValueError as exc:
        session.rollback()
        raise SystemExit(f"Could not create the user: {exc}") from exc
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Could not save the user to the database: {exc}") from exc
    else:
        print(
            "User created:\n"
            f"  ID: {user.id}\n"
            f"  Name: {user.name}\n"
            f"  Email: {user.email}\n"
            f"  Role: {user.role}"
        )
    finally:
        session.close()


if __name__ == "__main__":
    main()
