"""Create a user account directly in the database.

Run: `shalomhomes-create-user --username admin --email admin@example.com --password changeme --role owner`
"""

import argparse
import sys

from .config import get_settings
from .constants import USER_ROLES
from .storage import DbStorage, DuplicateUserError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Create a ShalomHomes user account")
    parser.add_argument("--username", required=True)
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", required=True)
    parser.add_argument("--name", default="Administrator")
    parser.add_argument("--role", choices=USER_ROLES, default="owner")
    parser.add_argument("--database-url", help="Defaults to DATABASE_URL from the environment")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    if args.database_url:
        settings = settings.model_copy(update={"database_url": args.database_url})
    if not settings.sqlalchemy_database_url:
        print("DATABASE_URL is required.", file=sys.stderr)
        return 1

    storage = DbStorage.from_url(settings.sqlalchemy_database_url)
    try:
        storage.init()
        user = storage.create_user(
            {
                "username": args.username,
                "email": args.email,
                "password": args.password,
                "name": args.name,
                "role": args.role,
            }
        )
    except DuplicateUserError as exc:
        print(f"Could not create user: {exc}.", file=sys.stderr)
        return 1
    finally:
        storage.dispose()

    print(f"Created {user.role} user {user.username!r} with id {user.id}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
