"""
Confirm Password Reset Use Case

Validates a reset code, sets the new password and signs the student out
everywhere.
"""

import hashlib
import logging
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.password_hasher import PasswordHasher
from src.app.services.session_manager import SessionManager
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from .dtos import ConfirmPasswordResetResponse

logger = logging.getLogger(__name__)

MAX_RESET_ATTEMPTS = 5


class ConfirmPasswordResetUseCase:
    """
    Use case for confirming password reset.

    Business Rules:
    - Code is matched by SHA-256 hash, scoped to the student's email
    - Code must not be expired or already used
    - Five wrong codes burn the outstanding code
    - New password must be 8 to 72 characters
    - Password is re-hashed with bcrypt
    - All sessions of the student are deleted
    - Code is marked as used after a successful reset
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

    def _validate_password(self, password: str) -> Result[None]:
        if len(password) < 8:
            return Return.err(
                Error("INVALID_PASSWORD", "Password must be at least 8 characters long")
            )
        if len(password.encode("utf-8")) > 72:
            return Return.err(
                Error("INVALID_PASSWORD", "Password must be at most 72 bytes long")
            )
        return Return.ok(None)

    async def _record_failed_attempt(self, student_id: UUID) -> None:
        reset_token = await self.uow.password_reset_tokens.get_latest_active_by_user_id(student_id)
        if reset_token is None:
            return

        reset_token.attempts += 1
        if reset_token.attempts >= MAX_RESET_ATTEMPTS:
            reset_token.used = True
            logger.warning(
                f"Reset code {reset_token.id} burned after {reset_token.attempts} wrong guesses"
            )
        await self.uow.password_reset_tokens.update(reset_token)
        await self.uow.commit()

    async def execute(
        self, email: str, code: str, new_password: str
    ) -> Result[ConfirmPasswordResetResponse]:
        """
        Execute confirm password reset use case.

        Errors:
            - INVALID_PASSWORD: Password does not meet requirements
            - INVALID_TOKEN: Unknown email or code
            - TOKEN_EXPIRED: Code has expired
        """
        password_validation = self._validate_password(new_password)
        if password_validation.is_err():
            return Return.err(password_validation.error)

        async with self.uow:
            student = await self.uow.students.get_by_email(email)
            if student is None:
                return Return.err(Error("INVALID_TOKEN", "Invalid or expired reset code"))

            token_hash = hashlib.sha256(code.encode()).hexdigest()
            reset_token = await self.uow.password_reset_tokens.get_active_by_user_and_hash(
                student.id, token_hash
            )
            if reset_token is None:
                await self._record_failed_attempt(student.id)
                return Return.err(Error("INVALID_TOKEN", "Invalid or expired reset code"))

            if reset_token.expires_at < utcnow():
                return Return.err(Error("TOKEN_EXPIRED", "Reset code has expired"))

            student.password_hash = self.password_hasher.hash(new_password)
            student.updated_at = utcnow()
            await self.uow.students.update(student)

            reset_token.used = True
            await self.uow.password_reset_tokens.update(reset_token)

            removed = await self.session_manager.logout_all(student.id)

            await self.uow.commit()

            logger.info(f"Password reset for {student.email}, {removed} session(s) removed")

            return Return.ok(
                ConfirmPasswordResetResponse(message="Password has been reset successfully")
            )
