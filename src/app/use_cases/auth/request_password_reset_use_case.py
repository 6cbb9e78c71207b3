"""
Request Password Reset Use Case

Handles generating and delivering password reset codes.
"""

import hashlib
import logging
import secrets
from datetime import timedelta

from src.libs.result import Result, Return
from src.app.services.reset_code_sender import IResetCodeSender
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import PasswordResetToken
from .dtos import RequestPasswordResetResponse

logger = logging.getLogger(__name__)

GENERIC_MESSAGE = "If the email is registered, a password reset code has been sent"


class RequestPasswordResetUseCase:
    """
    Use case for requesting password reset.

    Business Rules:
    - Six digit code from a cryptographically secure source
    - Code hashed with SHA-256 before storing
    - Code expires in 10 minutes
    - A new request invalidates earlier unused codes
    - No email enumeration (same response for valid/invalid emails)
    """

    def __init__(
        self,
        uow: UnitOfWork,
        code_sender: IResetCodeSender,
        expires_in: timedelta = timedelta(minutes=10),
    ):
        self.uow = uow
        self.code_sender = code_sender
        self.expires_in = expires_in

    async def execute(self, email: str) -> Result[RequestPasswordResetResponse]:
        async with self.uow:
            student = await self.uow.students.get_by_email(email)

            if student is None:
                return Return.ok(RequestPasswordResetResponse(message=GENERIC_MESSAGE))

            await self.uow.password_reset_tokens.invalidate_all_by_user_id(student.id)

            code = f"{secrets.randbelow(1_000_000):06d}"
            reset_token = PasswordResetToken(
                user_id=student.id,
                token_hash=hashlib.sha256(code.encode()).hexdigest(),
                used=False,
                expires_at=utcnow() + self.expires_in,
            )
            await self.uow.password_reset_tokens.create(reset_token)

            await self.uow.commit()

        await self.code_sender.send(student.email, code)

        return Return.ok(RequestPasswordResetResponse(message=GENERIC_MESSAGE))
