from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.admin_repository import AdminRepository
from src.adapter.repositories.email_verification_code_repository import (
    EmailVerificationCodeRepository,
)
from src.adapter.repositories.password_reset_token_repository import PasswordResetTokenRepository
from src.adapter.repositories.session_repository import SessionRepository
from src.adapter.repositories.student_repository import StudentRepository
from src.app.services.unit_of_work import UnitOfWork
from src.domain.errors import DuplicateRecordError, PersistenceError


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.students = StudentRepository(self.session)
        self.admins = AdminRepository(self.session)
        self.sessions = SessionRepository(self.session)
        self.password_reset_tokens = PasswordResetTokenRepository(self.session)
        self.email_verification_codes = EmailVerificationCodeRepository(self.session)
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        try:
            await self.session.commit()
        except IntegrityError as exc:
            raise DuplicateRecordError("Commit rejected by a unique constraint") from exc
        except SQLAlchemyError as exc:
            raise PersistenceError("Failed to commit transaction") from exc

    async def rollback(self):
        await self.session.rollback()
