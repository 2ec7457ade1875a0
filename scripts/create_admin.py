#!/usr/bin/env python3
"""Create (or promote) a user and print a bearer token for local testing.

Usage:
    python scripts/create_admin.py --email admin@camp.local --username admin
    python scripts/create_admin.py --email guest@camp.local --username guest --role USER
"""

import argparse
import asyncio
from datetime import timedelta

from sqlalchemy import select

from app.core.security import create_access_token
from app.database import get_db_context
from app.models.user import User


async def create_user(email: str, username: str, role: str, token_hours: int) -> None:
    """Create the user if it doesn't exist, otherwise update its role."""
    async with get_db_context() as session:
        result = await session.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()

        if user:
            user.role = role
            user.is_active = True
            print(f"Updated existing user: {email}")
        else:
            user = User(email=email, username=username, role=role, is_active=True)
            session.add(user)
            await session.flush()
            print(f"Created user: {email}")

        token = create_access_token(
            {"sub": str(user.public_id), "role": role},
            expires_delta=timedelta(hours=token_hours),
        )
        print(f"User ID: {user.public_id}")
        print(f"Role: {role}")
        print(f"Token: {token}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create a user and issue a bearer token")
    parser.add_argument("--email", default="admin@camp.local", help="User email")
    parser.add_argument("--username", default="admin", help="Username")
    parser.add_argument("--role", default="ADMIN", choices=["USER", "ADMIN"], help="Role")
    parser.add_argument("--token-hours", type=int, default=12, help="Token lifetime in hours")

    args = parser.parse_args()

    asyncio.run(create_user(args.email, args.username, args.role, args.token_hours))
