"""
Request Signup OTP Use Case

Issues the one-time code that proves a prospective student owns the email.
"""

import hashlib
import logging
import secrets
from datetime import timedelta

from src.libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.verification_code_sender import IVerificationCodeSender
from src.domain.base import normalize_email, utcnow
from src.domain.entities import EmailVerificationCode
from .dtos import RequestSignupOtpResponse

logger = logging.getLogger(__name__)


class RequestSignupOtpUseCase:
    """
    Use case for requesting a signup verification code.

    Business Rules:
    - Registered emails are refused; they log in or reset instead
    - Six digit code from a cryptographically secure source
    - Code hashed with SHA-256 before storing, expires in 10 minutes
    - A new request invalidates earlier unused codes for the email
    """

    def __init__(
        self,
        uow: UnitOfWork,
        code_sender: IVerificationCodeSender,
        expires_in: timedelta = timedelta(minutes=10),
    ):
        self.uow = uow
        self.code_sender = code_sender
        self.expires_in = expires_in

    async def execute(self, email: str, name: str) -> Result[RequestSignupOtpResponse]:
        email = normalize_email(email)

        async with self.uow:
            if await self.uow.students.get_by_email(email):
                return Return.err(
                    Error(
                        "EMAIL_ALREADY_EXISTS",
                        "Email already registered. Please login or use forgot password.",
                    )
                )

            await self.uow.email_verification_codes.invalidate_all_by_email(email)

            code = f"{secrets.randbelow(1_000_000):06d}"
            await self.uow.email_verification_codes.create(
                EmailVerificationCode(
                    email=email,
                    code_hash=hashlib.sha256(code.encode()).hexdigest(),
                    expires_at=utcnow() + self.expires_in,
                )
            )

            await self.uow.commit()

        await self.code_sender.send(email, name, code)

        return Return.ok(
            RequestSignupOtpResponse(message="OTP sent to your email. Please check your inbox.")
        )
