from abc import ABC, abstractmethod

from src.app.repositories.admin_repository import IAdminRepository
from src.app.repositories.email_verification_code_repository import (
    IEmailVerificationCodeRepository,
)
from src.app.repositories.password_reset_token_repository import IPasswordResetTokenRepository
from src.app.repositories.session_repository import ISessionRepository
from src.app.repositories.student_repository import IStudentRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    students: IStudentRepository
    admins: IAdminRepository
    sessions: ISessionRepository
    password_reset_tokens: IPasswordResetTokenRepository
    email_verification_codes: IEmailVerificationCodeRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
