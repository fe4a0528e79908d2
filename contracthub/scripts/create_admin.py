"""
One-time bootstrap script: creates the tables and the first admin user.

Usage:
    python -m contracthub.scripts.create_admin

You only need this ONCE.  After the first admin exists, staff users are
created from the admin API and customer logins through customer access.
"""

import asyncio
import getpass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from contracthub.core.config import settings
from contracthub.core.security import hash_password, validate_password_strength
from contracthub.models import Base, User
from contracthub.rbac.permissions import Role


async def create_admin() -> None:
    engine = create_async_engine(settings.DATABASE_URL, echo=False)
    session_factory = async_sessionmaker(engine, expire_on_commit=False)

    # ── Schema ───────────────────────────────────────────────────────
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with session_factory() as session:
        # ── Collect input ────────────────────────────────────────────
        print(f"\n{settings.APP_NAME}: first admin setup\n")
        email = input("  Admin email: ").strip().lower()
        name = input("  Full name:   ").strip()
        password = getpass.getpass("  Password:    ")
        confirm = getpass.getpass("  Confirm:     ")

        if not email or not name or not password:
            print("\nAll fields are required.")
            await engine.dispose()
            return

        if password != confirm:
            print("\nPasswords do not match.")
            await engine.dispose()
            return

        problems = validate_password_strength(password)
        if problems:
            print("\nPassword rejected:")
            for problem in problems:
                print(f"  - {problem}")
            await engine.dispose()
            return

        # ── Check for existing user ──────────────────────────────────
        existing = (
            await session.execute(select(User).where(User.email == email))
        ).scalar_one_or_none()

        if existing:
            print(f"\nUser with email '{email}' already exists.")
            await engine.dispose()
            return

        # ── Create the admin user ────────────────────────────────────
        admin_user = User(
            email=email,
            name=name,
            password_hash=hash_password(password),
            role=Role.ADMIN,
            is_active=True,
        )
        session.add(admin_user)
        await session.commit()

        print("\nAdmin user created.")
        print(f"    ID:    {admin_user.id}")
        print(f"    Email: {admin_user.email}")
        print(f"    Role:  {admin_user.role.value}")
        print("\n   You can now log in via POST /api/auth/login\n")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(create_admin())
