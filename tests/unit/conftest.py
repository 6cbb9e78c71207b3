from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.app.services.password_hasher import PasswordHasher
from src.app.services.session_manager import SessionManager
from src.app.services.token_codec import TokenCodec


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.students = MagicMock()
    uow.students.get_by_id = AsyncMock(return_value=None)
    uow.students.get_by_email = AsyncMock(return_value=None)
    uow.students.get_by_username = AsyncMock(return_value=None)
    uow.students.get_by_phone = AsyncMock(return_value=None)
    uow.students.get_by_identifier = AsyncMock(return_value=None)
    uow.students.create = AsyncMock(side_effect=lambda student: student)
    uow.students.update = AsyncMock(side_effect=lambda student: student)

    uow.admins = MagicMock()
    uow.admins.get_by_id = AsyncMock(return_value=None)
    uow.admins.get_by_email = AsyncMock(return_value=None)

    uow.sessions = MagicMock()
    uow.sessions.create = AsyncMock(side_effect=lambda session: session)
    uow.sessions.get_by_id = AsyncMock(return_value=None)
    uow.sessions.get_by_id_and_user_id = AsyncMock(return_value=None)
    uow.sessions.delete_all_by_user_id = AsyncMock(return_value=0)
    uow.sessions.update_refresh_token_hash = AsyncMock()
    uow.sessions.delete_by_id = AsyncMock(return_value=True)
    uow.sessions.touch = AsyncMock()
    uow.sessions.delete_expired = AsyncMock(return_value=0)

    uow.password_reset_tokens = MagicMock()
    uow.password_reset_tokens.create = AsyncMock(side_effect=lambda token: token)
    uow.password_reset_tokens.get_active_by_user_and_hash = AsyncMock(return_value=None)
    uow.password_reset_tokens.get_latest_active_by_user_id = AsyncMock(return_value=None)
    uow.password_reset_tokens.invalidate_all_by_user_id = AsyncMock(return_value=0)
    uow.password_reset_tokens.update = AsyncMock(side_effect=lambda token: token)

    uow.email_verification_codes = MagicMock()
    uow.email_verification_codes.create = AsyncMock(side_effect=lambda code: code)
    uow.email_verification_codes.get_latest_active_by_email = AsyncMock(return_value=None)
    uow.email_verification_codes.invalidate_all_by_email = AsyncMock(return_value=0)
    uow.email_verification_codes.update = AsyncMock(side_effect=lambda code: code)
    return uow


@pytest.fixture
def token_codec():
    return TokenCodec(access_secret="unit-access-secret", refresh_secret="unit-refresh-secret")


@pytest.fixture
def password_hasher():
    # Lowest bcrypt cost keeps the suite fast
    return PasswordHasher(rounds=4)


@pytest.fixture
def session_manager(mock_uow, token_codec):
    return SessionManager(mock_uow, token_codec, session_ttl=timedelta(days=30))
