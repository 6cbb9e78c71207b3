"""
Unit tests for RequestPasswordResetUseCase
"""

import hashlib
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from src.app.use_cases.auth.request_password_reset_use_case import (
    GENERIC_MESSAGE,
    RequestPasswordResetUseCase,
)
from src.domain.base import utcnow
from src.domain.entities import Student


@pytest.fixture
def code_sender():
    sender = MagicMock()
    sender.send = AsyncMock()
    return sender


@pytest.mark.asyncio
async def test_reset_code_issued(mock_uow, code_sender):
    student = Student(
        id=uuid4(),
        email="student@example.com",
        username="student01",
        name="Test Student",
        phone="0912345678",
        password_hash="hash",
    )
    mock_uow.students.get_by_email.return_value = student

    use_case = RequestPasswordResetUseCase(mock_uow, code_sender)
    result = await use_case.execute("student@example.com")

    assert result.is_ok()
    assert result.value.message == GENERIC_MESSAGE
    mock_uow.password_reset_tokens.invalidate_all_by_user_id.assert_called_once_with(student.id)

    email, code = code_sender.send.call_args[0]
    assert email == "student@example.com"
    assert len(code) == 6 and code.isdigit()

    stored = mock_uow.password_reset_tokens.create.call_args[0][0]
    assert stored.user_id == student.id
    assert stored.token_hash == hashlib.sha256(code.encode()).hexdigest()
    assert stored.used is False
    assert stored.expires_at - utcnow() <= timedelta(minutes=10)
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_unknown_email_same_response(mock_uow, code_sender):
    use_case = RequestPasswordResetUseCase(mock_uow, code_sender)
    result = await use_case.execute("nobody@example.com")

    assert result.is_ok()
    assert result.value.message == GENERIC_MESSAGE
    mock_uow.password_reset_tokens.create.assert_not_called()
    code_sender.send.assert_not_called()
