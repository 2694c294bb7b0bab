"""
Create an account (e.g. the first administrator). Run from project root:
  python -m botanical.scripts.create_user PHONE PASSWORD [--username NAME] [--admin]
Example:
  python -m botanical.scripts.create_user 13800000000 admin123 --username admin --admin
"""
import argparse
import logging
import sys

from botanical.core.config import get_settings
from botanical.core.database import SessionLocal
from botanical.core.security import PasswordPolicyError
from botanical.core.tokens import TokenIssuer
from botanical.models.user import ADMIN_ROLE, DEFAULT_ROLE
from botanical.repositories.user_repository import UserRepository
from botanical.services.accounts import AccountExistsError, AccountService

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Botanical API account.")
    parser.add_argument("phone", help="Phone number used as the login key")
    parser.add_argument("password", help="Password (6-20 chars, letters and digits)")
    parser.add_argument("--username", default="user", help="Display name")
    parser.add_argument("--admin", action="store_true", help="Grant the administrator role")
    args = parser.parse_args(argv)

    phone = args.phone.strip()
    if not phone or len(phone) > 20:
        print("Invalid phone length.", file=sys.stderr)
        return 1

    settings = get_settings()
    issuer = TokenIssuer(
        settings.JWT_SECRET.get_secret_value(),
        ttl_hours=settings.JWT_EXPIRE_HOURS,
        issuer=settings.JWT_ISSUER,
    )
    role = ADMIN_ROLE if args.admin else DEFAULT_ROLE
    db = SessionLocal()
    try:
        accounts = AccountService(UserRepository(db), issuer)
        try:
            user = accounts.register(args.username, phone, args.password, role=role)
        except (AccountExistsError, PasswordPolicyError) as e:
            print(e.message, file=sys.stderr)
            return 1
        print(f"Created account {user.id} ({phone}) with role {role}.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
