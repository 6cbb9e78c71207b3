"""
Login Use Case

Authenticates a student and starts the only live session of the account.
"""

import logging
from typing import Optional

from src.libs.result import Error, Result, Return
from src.app.services.password_hasher import PasswordHasher
from src.app.services.session_manager import SessionManager
from src.app.services.unit_of_work import UnitOfWork
from src.domain.errors import SessionCreationError
from .dtos import LoginResponse, StudentInfo

logger = logging.getLogger(__name__)


class LoginUseCase:
    """
    Use case for student login and token issuance.

    Business Rules:
    - Identifier may be the email or the username
    - Unknown identifiers cost the same bcrypt time as wrong passwords
    - Same error for unknown account and wrong password (no enumeration)
    - Every earlier session of the account is deleted (single device)
    - Login fails if the new session cannot be persisted
    """

    def __init__(
        self,
        uow: UnitOfWork,
        session_manager: SessionManager,
        password_hasher: PasswordHasher,
    ):
        self.uow = uow
        self.session_manager = session_manager
        self.password_hasher = password_hasher

    async def execute(
        self,
        identifier: str,
        password: str,
        user_agent: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> Result[LoginResponse]:
        """
        Execute login use case.

        Args:
            identifier: Student email or username
            password: Plain text password
            user_agent: Device metadata stored on the session
            ip_address: Source address stored on the session

        Returns:
            Result with LoginResponse containing tokens and student info, or Error
        """
        async with self.uow:
            student = await self.uow.students.get_by_identifier(identifier)

            if student is None:
                self.password_hasher.dummy_verify(password)
                return Return.err(Error("INVALID_CREDENTIALS", "Invalid credentials"))

            if not self.password_hasher.verify(password, student.password_hash):
                return Return.err(Error("INVALID_CREDENTIALS", "Invalid credentials"))

            try:
                issued = await self.session_manager.login(
                    student.id, student.email, user_agent, ip_address
                )
            except SessionCreationError:
                return Return.err(
                    Error("SESSION_CREATION_FAILED", "Failed to create session")
                )

            await self.uow.commit()

            logger.info(f"User logged in: {student.email}, Session ID: {issued.session_id}")

            return Return.ok(
                LoginResponse(session=issued.tokens, user=StudentInfo.from_entity(student))
            )
