from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import PasswordResetToken


class IPasswordResetTokenRepository(ABC):
    """PasswordResetToken repository interface - application layer"""

    @abstractmethod
    async def create(self, token: PasswordResetToken) -> PasswordResetToken:
        """Create a new password reset token"""
        pass

    @abstractmethod
    async def get_active_by_user_and_hash(
        self, user_id: UUID, token_hash: str
    ) -> Optional[PasswordResetToken]:
        """Get the unused reset token of a student matching the hash"""
        pass

    @abstractmethod
    async def get_latest_active_by_user_id(self, user_id: UUID) -> Optional[PasswordResetToken]:
        """Get the newest unused reset token of a student"""
        pass

    @abstractmethod
    async def invalidate_all_by_user_id(self, user_id: UUID) -> int:
        """Mark every unused token of a student as used. Returns count."""
        pass

    @abstractmethod
    async def update(self, token: PasswordResetToken) -> PasswordResetToken:
        """Update existing password reset token"""
        pass
