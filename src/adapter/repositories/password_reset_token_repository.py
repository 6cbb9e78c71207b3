from typing import Optional
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.password_reset_token_repository import IPasswordResetTokenRepository
from src.domain.entities import PasswordResetToken
from src.domain.errors import PersistenceError


class PasswordResetTokenRepository(IPasswordResetTokenRepository):
    """PasswordResetToken repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, token: PasswordResetToken) -> PasswordResetToken:
        """Create a new password reset token"""
        try:
            self.session.add(token)
            await self.session.flush()
            await self.session.refresh(token)
        except SQLAlchemyError as exc:
            raise PersistenceError("Failed to insert reset code") from exc
        return token

    async def get_active_by_user_and_hash(
        self, user_id: UUID, token_hash: str
    ) -> Optional[PasswordResetToken]:
        """Get the unused reset token of a student matching the hash"""
        stmt = select(PasswordResetToken).where(
            PasswordResetToken.user_id == user_id,
            PasswordResetToken.token_hash == token_hash,
            PasswordResetToken.used == False,  # noqa: E712
        )
        try:
            result = await self.session.exec(stmt)
            return result.first()
        except SQLAlchemyError as exc:
            raise PersistenceError("Failed to load reset code") from exc

    async def get_latest_active_by_user_id(self, user_id: UUID) -> Optional[PasswordResetToken]:
        """Get the newest unused reset token of a student"""
        stmt = (
            select(PasswordResetToken)
            .where(
                PasswordResetToken.user_id == user_id,
                PasswordResetToken.used == False,  # noqa: E712
            )
            .order_by(PasswordResetToken.created_at.desc())
        )
        try:
            result = await self.session.exec(stmt)
            return result.first()
        except SQLAlchemyError as exc:
            raise PersistenceError("Failed to load reset code") from exc

    async def invalidate_all_by_user_id(self, user_id: UUID) -> int:
        """Mark every unused token of a student as used"""
        stmt = (
            update(PasswordResetToken)
            .where(
                PasswordResetToken.user_id == user_id,
                PasswordResetToken.used == False,  # noqa: E712
            )
            .values(used=True)
        )
        try:
            result = await self.session.execute(stmt)
            await self.session.flush()
        except SQLAlchemyError as exc:
            raise PersistenceError("Failed to invalidate reset codes") from exc
        return result.rowcount

    async def update(self, token: PasswordResetToken) -> PasswordResetToken:
        """Update existing password reset token"""
        try:
            self.session.add(token)
            await self.session.flush()
            await self.session.refresh(token)
        except SQLAlchemyError as exc:
            raise PersistenceError("Failed to update reset code") from exc
        return token
