"""
Seed Bootstrap Admin

Creates the first activated admin with the ``admin`` role so that further
admins can be created through the API. Run once after migrating.

Usage:
    SEED_ADMIN_EMAIL=ops@example.org SEED_ADMIN_PASSWORD=... \
        python scripts/seed_admin.py --first-name Ops --last-name Team
"""

import argparse
import asyncio
import os
import sys

from bursary.core.database import async_session_maker, close_db, transaction
from bursary.core.security import hash_password
from bursary.modules.admins.models import Admin
from bursary.modules.admins.repository import AdminRepository
from bursary.modules.roles.repository import RoleRepository

BOOTSTRAP_ROLE = "admin"


async def seed_admin(email: str, password: str, first_name: str, last_name: str) -> None:
    """Create the bootstrap admin if no admin with that email exists."""
    async with async_session_maker() as db:
        existing = await AdminRepository.get_by_email(db, email)
        if existing:
            print(f"Admin already exists: {existing.email}")
            print(f"  ID: {existing.id}")
            print(f"  Role: {existing.role.name}")
            return

        role = await RoleRepository.get_by_name(db, BOOTSTRAP_ROLE)
        async with transaction(db, "seed_admin"):
            admin = Admin(
                email=email.lower(),
                password_hash=hash_password(password),
                first_name=first_name,
                last_name=last_name,
                role_id=role.id,
                role=role,
                blocked=False,
                activated=True,  # No invitation for the bootstrap account
                first_time_login=False,
            )
            db.add(admin)

        print("Admin created successfully!")
        print(f"  Email: {admin.email}")
        print(f"  Name: {admin.full_name}")
        print(f"  ID: {admin.id}")
        print(f"  Role: {role.name}")

    await close_db()


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--email", default=os.environ.get("SEED_ADMIN_EMAIL"))
    parser.add_argument("--first-name", default=os.environ.get("SEED_ADMIN_FIRST_NAME", "System"))
    parser.add_argument("--last-name", default=os.environ.get("SEED_ADMIN_LAST_NAME", "Admin"))
    args = parser.parse_args()

    # Password only from the environment so it never lands in shell history
    password = os.environ.get("SEED_ADMIN_PASSWORD")
    if not args.email or not password:
        print("SEED_ADMIN_EMAIL (or --email) and SEED_ADMIN_PASSWORD are required")
        return 1
    if len(password) < 8:
        print("SEED_ADMIN_PASSWORD must be at least 8 characters")
        return 1

    asyncio.run(seed_admin(args.email, password, args.first_name, args.last_name))
    return 0


if __name__ == "__main__":
    sys.exit(main())
