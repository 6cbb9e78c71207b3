"""
Verify OTP Signup Use Case

Checks the signup code and creates the student with a verified email.
"""

import hashlib
import hmac
import logging
from typing import Optional

from src.libs.result import Error, Result, Return
from src.app.services.password_hasher import PasswordHasher
from src.app.services.session_manager import SessionManager
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import normalize_email, utcnow
from .signup_dto import SignupCommand, SignupResponse
from .signup_use_case import SignupUseCase

logger = logging.getLogger(__name__)

MAX_OTP_ATTEMPTS = 5


class VerifyOtpSignupUseCase:
    """
    Use case for completing signup with a verification code.

    Business Rules:
    - Only the newest unused code of the email is accepted
    - Expired codes are refused
    - Five wrong codes burn the outstanding code
    - Account creation follows the regular signup rules
    - The new student has is_verified and email_verified set
    - Code is marked as used in the same transaction as the signup
    """

    def __init__(
        self,
        uow: UnitOfWork,
        session_manager: SessionManager,
        password_hasher: PasswordHasher,
    ):
        self.uow = uow
        self.signup = SignupUseCase(uow, session_manager, password_hasher)

    async def execute(
        self,
        command: SignupCommand,
        otp: str,
        user_agent: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> Result[SignupResponse]:
        """
        Errors:
            - INVALID_OTP: No outstanding code, or wrong code
            - OTP_EXPIRED: Code has expired
            - EMAIL_ALREADY_EXISTS, USERNAME_TAKEN, PHONE_TAKEN: as signup
        """
        email = normalize_email(command.email)

        async with self.uow:
            verification = await self.uow.email_verification_codes.get_latest_active_by_email(
                email
            )
            if verification is None:
                return Return.err(
                    Error("INVALID_OTP", "No OTP found for this email. Please request a new one.")
                )

            if verification.expires_at < utcnow():
                return Return.err(
                    Error("OTP_EXPIRED", "OTP has expired. Please request a new one.")
                )

            code_hash = hashlib.sha256(otp.strip().encode()).hexdigest()
            if not hmac.compare_digest(code_hash, verification.code_hash):
                verification.attempts += 1
                if verification.attempts >= MAX_OTP_ATTEMPTS:
                    verification.used = True
                    logger.warning(f"Signup code for {email} burned after too many wrong guesses")
                await self.uow.email_verification_codes.update(verification)
                await self.uow.commit()
                return Return.err(Error("INVALID_OTP", "Incorrect OTP. Please try again."))

            verification.used = True
            await self.uow.email_verification_codes.update(verification)

            return await self.signup.register(
                email, command, user_agent, ip_address, verified=True
            )
