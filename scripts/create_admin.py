"""Provision an admin account.

Admins are never signed up through the API; run this once per admin.

Usage:
    python -m scripts.create_admin --email admin@example.com --password SecurePassword123!

    # Or with environment variables:
    ADMIN_EMAIL=admin@example.com ADMIN_PASSWORD=SecurePassword123! python -m scripts.create_admin

    # Change the password of an existing admin:
    python -m scripts.create_admin --email admin@example.com --password NewPassword123! --reset-password
"""

import argparse
import asyncio
import logging
import os
import sys

from sqlmodel import SQLModel

from config import ApplicationConfig
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import AsyncSessionLocal, engine, get_password_hasher
from src.domain.base import normalize_email
from src.domain.entities import Admin

logger = logging.getLogger(__name__)


async def create_admin(email: str, password: str, name: str, reset_password: bool) -> dict:
    if ApplicationConfig.DB_AUTO_CREATE:
        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    email = normalize_email(email)
    password_hash = get_password_hasher().hash(password)

    async with AsyncSessionLocal() as session:
        uow = SqlAlchemyUnitOfWork(session)
        async with uow:
            existing = await uow.admins.get_by_email(email)

            if existing is not None:
                if not reset_password:
                    return {"admin_id": str(existing.id), "email": email, "status": "exists"}
                existing.password_hash = password_hash
                await uow.admins.update(existing)
                await uow.commit()
                return {"admin_id": str(existing.id), "email": email, "status": "updated"}

            admin = await uow.admins.create(
                Admin(email=email, name=name, password_hash=password_hash)
            )
            await uow.commit()

    logger.info(f"Admin account created: {email}")
    return {"admin_id": str(admin.id), "email": email, "status": "created"}


def main():
    parser = argparse.ArgumentParser(
        description="Provision an admin account",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--email",
        default=os.environ.get("ADMIN_EMAIL"),
        help="Admin email (or set ADMIN_EMAIL env var)",
    )
    parser.add_argument(
        "--password",
        default=os.environ.get("ADMIN_PASSWORD"),
        help="Admin password, 8 to 72 bytes (or set ADMIN_PASSWORD env var)",
    )
    parser.add_argument("--name", default="Administrator", help="Display name")
    parser.add_argument(
        "--reset-password",
        action="store_true",
        help="Overwrite the password if the admin already exists",
    )

    args = parser.parse_args()

    if not args.email:
        print("Error: --email or ADMIN_EMAIL environment variable required")
        sys.exit(1)

    if not args.password or len(args.password) < 8:
        print("Error: --password or ADMIN_PASSWORD required (at least 8 characters)")
        sys.exit(1)

    logging.basicConfig(level=ApplicationConfig.LOG_LEVEL.upper())

    try:
        result = asyncio.run(
            create_admin(args.email, args.password, args.name, args.reset_password)
        )
    except ValueError as exc:
        print(f"Error: {exc}")
        sys.exit(1)

    if result["status"] == "created":
        print(f"Created admin: {result['email']} (id: {result['admin_id']})")
    elif result["status"] == "updated":
        print(f"Password updated for admin: {result['email']}")
    else:
        print(f"Admin {result['email']} already exists; pass --reset-password to change it")


if __name__ == "__main__":
    main()
