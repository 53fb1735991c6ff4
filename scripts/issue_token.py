#!/usr/bin/env python3
"""
Print a signed access token for an existing user, for local API testing.

Usage:
  python scripts/issue_token.py student@example.com
  curl --cookie "auth-token=<token>" http://localhost:8000/api/v1/auth/me

Sign-in happens outside this service; this only mints the cookie value.
"""
import asyncio
import os
import sys

from dotenv import load_dotenv

_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
load_dotenv(os.path.join(_root, ".env"))

# Add project root to path
sys.path.insert(0, _root)

from study_portal.config import settings  # noqa: E402
from study_portal.core.security import create_access_token  # noqa: E402
from study_portal.database import AsyncSessionLocal, close_db  # noqa: E402
from study_portal.services.user_service import UserService  # noqa: E402


async def issue(email: str) -> int:
    async with AsyncSessionLocal() as db:
        user = await UserService.get_user_by_email(db, email)
    await close_db()
    if user is None:
        print(f"ERROR: no user with email {email}")
        return 1
    if not user.is_active:
        print(f"ERROR: user {email} is inactive")
        return 1

    token = create_access_token({"sub": str(user.id), "email": user.email, "role": user.role.value})
    print(f"{settings.AUTH_COOKIE_NAME}={token}")
    return 0


def main():
    if len(sys.argv) != 2:
        print("Usage: python scripts/issue_token.py <email>")
        sys.exit(2)
    sys.exit(asyncio.run(issue(sys.argv[1])))


if __name__ == "__main__":
    main()
