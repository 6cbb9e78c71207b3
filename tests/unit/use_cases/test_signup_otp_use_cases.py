"""
Unit tests for RequestSignupOtpUseCase and VerifyOtpSignupUseCase
"""

import hashlib
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from src.app.use_cases.auth.request_signup_otp_use_case import RequestSignupOtpUseCase
from src.app.use_cases.auth.signup_dto import SignupCommand
from src.app.use_cases.auth.verify_otp_signup_use_case import (
    MAX_OTP_ATTEMPTS,
    VerifyOtpSignupUseCase,
)
from src.domain.base import utcnow
from src.domain.entities import EmailVerificationCode, Student


@pytest.fixture
def code_sender():
    sender = MagicMock()
    sender.send = AsyncMock()
    return sender


@pytest.fixture
def command():
    return SignupCommand(
        name="New Student",
        email="New@Example.com",
        username="newbie",
        phone="0911111111",
        password="SecurePass123!",
    )


def _verification(code="123456", expires_in=timedelta(minutes=10)):
    return EmailVerificationCode(
        id=uuid4(),
        email="new@example.com",
        code_hash=hashlib.sha256(code.encode()).hexdigest(),
        expires_at=utcnow() + expires_in,
    )


@pytest.mark.asyncio
async def test_otp_issued(mock_uow, code_sender):
    use_case = RequestSignupOtpUseCase(mock_uow, code_sender)
    result = await use_case.execute("New@Example.com", "New Student")

    assert result.is_ok()
    mock_uow.email_verification_codes.invalidate_all_by_email.assert_called_once_with(
        "new@example.com"
    )

    stored = mock_uow.email_verification_codes.create.call_args[0][0]
    email, name, code = code_sender.send.call_args[0]
    assert (email, name) == ("new@example.com", "New Student")
    assert len(code) == 6 and code.isdigit()
    assert stored.code_hash == hashlib.sha256(code.encode()).hexdigest()
    assert stored.expires_at > utcnow() + timedelta(minutes=9)
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_otp_refused_for_registered_email(mock_uow, code_sender):
    mock_uow.students.get_by_email.return_value = Student(
        id=uuid4(),
        email="new@example.com",
        username="taken",
        name="Taken",
        phone="0900000000",
        password_hash="hash",
    )

    use_case = RequestSignupOtpUseCase(mock_uow, code_sender)
    result = await use_case.execute("new@example.com", "New Student")

    assert result.is_err()
    assert result.error.code == "EMAIL_ALREADY_EXISTS"
    mock_uow.email_verification_codes.create.assert_not_called()
    code_sender.send.assert_not_called()


@pytest.mark.asyncio
async def test_verify_creates_verified_student(
    mock_uow, session_manager, password_hasher, command
):
    verification = _verification()
    mock_uow.email_verification_codes.get_latest_active_by_email.return_value = verification

    use_case = VerifyOtpSignupUseCase(mock_uow, session_manager, password_hasher)
    result = await use_case.execute(command, "123456", "pytest", "127.0.0.1")

    assert result.is_ok()
    assert result.value.user.email == "new@example.com"

    created = mock_uow.students.create.call_args[0][0]
    assert created.is_verified is True
    assert created.email_verified is True
    assert verification.used is True
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_verify_without_outstanding_code(
    mock_uow, session_manager, password_hasher, command
):
    use_case = VerifyOtpSignupUseCase(mock_uow, session_manager, password_hasher)
    result = await use_case.execute(command, "123456")

    assert result.is_err()
    assert result.error.code == "INVALID_OTP"
    mock_uow.students.create.assert_not_called()


@pytest.mark.asyncio
async def test_verify_expired_code(mock_uow, session_manager, password_hasher, command):
    mock_uow.email_verification_codes.get_latest_active_by_email.return_value = _verification(
        expires_in=timedelta(minutes=-1)
    )

    use_case = VerifyOtpSignupUseCase(mock_uow, session_manager, password_hasher)
    result = await use_case.execute(command, "123456")

    assert result.is_err()
    assert result.error.code == "OTP_EXPIRED"
    mock_uow.students.create.assert_not_called()


@pytest.mark.asyncio
async def test_verify_wrong_code_counts_attempt(
    mock_uow, session_manager, password_hasher, command
):
    verification = _verification()
    mock_uow.email_verification_codes.get_latest_active_by_email.return_value = verification

    use_case = VerifyOtpSignupUseCase(mock_uow, session_manager, password_hasher)
    result = await use_case.execute(command, "000000")

    assert result.is_err()
    assert result.error.code == "INVALID_OTP"
    assert verification.attempts == 1
    assert verification.used is False
    mock_uow.commit.assert_called_once()
    mock_uow.students.create.assert_not_called()


@pytest.mark.asyncio
async def test_verify_code_burned_after_max_attempts(
    mock_uow, session_manager, password_hasher, command
):
    verification = _verification()
    verification.attempts = MAX_OTP_ATTEMPTS - 1
    mock_uow.email_verification_codes.get_latest_active_by_email.return_value = verification

    use_case = VerifyOtpSignupUseCase(mock_uow, session_manager, password_hasher)
    result = await use_case.execute(command, "000000")

    assert result.is_err()
    assert verification.used is True


@pytest.mark.asyncio
async def test_verify_username_taken(mock_uow, session_manager, password_hasher, command):
    mock_uow.email_verification_codes.get_latest_active_by_email.return_value = _verification()
    mock_uow.students.get_by_username.return_value = Student(
        id=uuid4(),
        email="someone@example.com",
        username="newbie",
        name="Someone",
        phone="0900000000",
        password_hash="hash",
    )

    use_case = VerifyOtpSignupUseCase(mock_uow, session_manager, password_hasher)
    result = await use_case.execute(command, "123456")

    assert result.is_err()
    assert result.error.code == "USERNAME_TAKEN"
    mock_uow.commit.assert_not_called()
