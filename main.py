#!/usr/bin/env python3
"""
forum-auth -- Register and check user credentials from the command line.

Usage:
  python main.py register alice
  python main.py login alice
  echo "s3cret" | python main.py register alice --password-stdin
  python main.py login alice --db-url sqlite:///./other.db

Environment variables:
  DATABASE_URL   SQLAlchemy URL of the user database (default: ./forumauth.db)
  ARGON2_*       Hashing cost parameters, see core/config.py

Exit status:
  0  success (user record printed as JSON)
  1  field errors (one "field: message" line each)
  2  system error (database unavailable, etc.)
"""

import argparse
import getpass
import json
import logging
import sys

from auth.exceptions import StorageError
from auth.hashing import CredentialHasher
from auth.models import AuthResult
from auth.service import AuthService
from auth.store import UserStore
from core.config import get_settings

logger = logging.getLogger("forumauth.cli")


def _read_password(from_stdin: bool, confirm: bool) -> str:
    """Read a password without echoing it.

    --password-stdin reads one line for scripted use. Interactive registration
    asks twice so a typo does not become the stored credential.
    """
    if from_stdin:
        return sys.stdin.readline().rstrip("\n")
    password = getpass.getpass("Password: ")
    if confirm and getpass.getpass("Confirm password: ") != password:
        print("  [!] Passwords do not match.", file=sys.stderr)
        sys.exit(1)
    return password


def _print_result(result: AuthResult) -> int:
    if result.ok:
        print(json.dumps(result.user.to_public_dict(), indent=2))
        return 0
    for error in result.errors:
        print(f"  {error.field}: {error.message}", file=sys.stderr)
    return 1


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="forum-auth",
        description="Register users and check passwords against the forum-auth user store.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py register alice
  python main.py login alice
  echo "s3cret" | python main.py login alice --password-stdin
        """,
    )
    parser.add_argument(
        "command",
        choices=["register", "login"],
        help="register creates a user; login checks a password",
    )
    parser.add_argument("username", help="Account username")
    parser.add_argument(
        "--password-stdin",
        action="store_true",
        help="Read the password from the first line of stdin instead of prompting",
    )
    parser.add_argument(
        "--db-url",
        metavar="URL",
        default=None,
        help="SQLAlchemy database URL (overrides DATABASE_URL)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log store and service activity to stderr",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    settings = get_settings()
    password = _read_password(args.password_stdin, confirm=args.command == "register")

    try:
        store = UserStore(args.db_url or settings.database_url)
    except StorageError as exc:
        logger.error("Could not open user store: %s", exc)
        print("  [!] The user database is unavailable.", file=sys.stderr)
        sys.exit(2)

    service = AuthService(store, CredentialHasher.from_settings(settings))
    try:
        if args.command == "register":
            result = service.register(args.username, password)
        else:
            result = service.login(args.username, password)
    except StorageError as exc:
        logger.error("Storage failure during %s: %s", args.command, exc)
        print("  [!] The user database is unavailable.", file=sys.stderr)
        sys.exit(2)
    finally:
        store.close()

    sys.exit(_print_result(result))


if __name__ == "__main__":
    main()
