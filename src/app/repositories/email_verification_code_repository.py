from abc import ABC, abstractmethod
from typing import Optional

from src.domain.entities import EmailVerificationCode


class IEmailVerificationCodeRepository(ABC):
    """EmailVerificationCode repository interface - application layer"""

    @abstractmethod
    async def create(self, code: EmailVerificationCode) -> EmailVerificationCode:
        """Create a new verification code"""
        pass

    @abstractmethod
    async def get_latest_active_by_email(self, email: str) -> Optional[EmailVerificationCode]:
        """Get the newest unused verification code of an email"""
        pass

    @abstractmethod
    async def invalidate_all_by_email(self, email: str) -> int:
        """Mark every unused code of an email as used. Returns count."""
        pass

    @abstractmethod
    async def update(self, code: EmailVerificationCode) -> EmailVerificationCode:
        """Update existing verification code"""
        pass
