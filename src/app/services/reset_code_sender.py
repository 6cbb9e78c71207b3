import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class IResetCodeSender(ABC):
    """Delivers a password reset code to a student"""

    @abstractmethod
    async def send(self, email: str, code: str) -> None:
        pass


class LoggingResetCodeSender(IResetCodeSender):
    """
    Records that a code was issued without delivering it.

    Outbound email is owned by the notification service; this keeps the
    auth service runnable on its own. The code itself is never logged.
    """

    async def send(self, email: str, code: str) -> None:
        logger.info(f"Password reset code issued for {email}")
