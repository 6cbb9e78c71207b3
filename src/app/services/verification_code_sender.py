import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class IVerificationCodeSender(ABC):
    """Delivers a signup verification code to an email address"""

    @abstractmethod
    async def send(self, email: str, name: str, code: str) -> None:
        pass


class LoggingVerificationCodeSender(IVerificationCodeSender):
    """Records that a signup code was issued; the code itself is never logged."""

    async def send(self, email: str, name: str, code: str) -> None:
        logger.info(f"Signup verification code issued for {email}")
