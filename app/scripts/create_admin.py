"""
Create the first admin from the command line (same rules as POST /admin/setup). Run from project root:
  python -m app.scripts.create_admin USERNAME PASSWORD EMAIL [--name NAME]
Example:
  python -m app.scripts.create_admin admin your-secure-password admin@example.com --name "Ops"
"""
import argparse
import sys

from app.core.database import SessionLocal
from app.core.errors import ApiError
from app.core.security import TOKEN_USAGE
from app.services.bootstrap import create_first_admin


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create the first MB Bank API admin.")
    parser.add_argument("username", help="Username (1-50 chars)")
    parser.add_argument("password", help="Password")
    parser.add_argument("email", help="Email address")
    parser.add_argument("--name", default=None, help="Display name")
    args = parser.parse_args(argv)

    db = SessionLocal()
    try:
        user, token = create_first_admin(
            db,
            username=args.username.strip(),
            password=args.password,
            email=args.email.strip(),
            name=args.name,
        )
    except ApiError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()

    print(f"Created admin '{user.username}' (id {user.id}).")
    print(f"Token: {token}")
    print(f"Use with: {TOKEN_USAGE}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
