from typing import Optional

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.email_verification_code_repository import (
    IEmailVerificationCodeRepository,
)
from src.domain.base import normalize_email
from src.domain.entities import EmailVerificationCode
from src.domain.errors import PersistenceError


class EmailVerificationCodeRepository(IEmailVerificationCodeRepository):
    """EmailVerificationCode repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, code: EmailVerificationCode) -> EmailVerificationCode:
        """Create a new verification code"""
        code.email = normalize_email(code.email)
        return await self._save(code, "Failed to insert verification code")

    async def get_latest_active_by_email(self, email: str) -> Optional[EmailVerificationCode]:
        """Get the newest unused verification code of an email"""
        stmt = (
            select(EmailVerificationCode)
            .where(
                EmailVerificationCode.email == normalize_email(email),
                EmailVerificationCode.used == False,  # noqa: E712
            )
            .order_by(EmailVerificationCode.created_at.desc())
        )
        try:
            result = await self.session.exec(stmt)
            return result.first()
        except SQLAlchemyError as exc:
            raise PersistenceError("Failed to load verification code") from exc

    async def invalidate_all_by_email(self, email: str) -> int:
        """Mark every unused code of an email as used"""
        stmt = (
            update(EmailVerificationCode)
            .where(
                EmailVerificationCode.email == normalize_email(email),
                EmailVerificationCode.used == False,  # noqa: E712
            )
            .values(used=True)
        )
        try:
            result = await self.session.execute(stmt)
            await self.session.flush()
        except SQLAlchemyError as exc:
            raise PersistenceError("Failed to invalidate verification codes") from exc
        return result.rowcount

    async def update(self, code: EmailVerificationCode) -> EmailVerificationCode:
        """Update existing verification code"""
        return await self._save(code, "Failed to update verification code")

    async def _save(self, code: EmailVerificationCode, message: str) -> EmailVerificationCode:
        try:
            self.session.add(code)
            await self.session.flush()
            await self.session.refresh(code)
        except SQLAlchemyError as exc:
            raise PersistenceError(message) from exc
        return code
