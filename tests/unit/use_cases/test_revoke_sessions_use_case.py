"""
Unit tests for RevokeSessionsUseCase
"""

from datetime import timedelta
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from src.app.services.token_codec import TokenCodec
from src.app.use_cases.sessions.revoke_sessions_use_case import RevokeSessionsUseCase
from src.domain.entities import Student


@pytest.mark.asyncio
async def test_logout_deletes_session(mock_uow, token_codec, session_manager):
    session_id = uuid4()
    token = token_codec.issue_refresh(str(uuid4()), "student@example.com", str(session_id))

    use_case = RevokeSessionsUseCase(mock_uow, token_codec, session_manager)
    result = await use_case.logout(token)

    assert result.is_ok()
    assert result.value.success is True
    mock_uow.sessions.delete_by_id.assert_called_once_with(session_id)
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_logout_twice_succeeds(mock_uow, token_codec, session_manager):
    token = token_codec.issue_refresh(str(uuid4()), "student@example.com", str(uuid4()))
    mock_uow.sessions.delete_by_id = AsyncMock(side_effect=[True, False])

    use_case = RevokeSessionsUseCase(mock_uow, token_codec, session_manager)

    assert (await use_case.logout(token)).is_ok()
    assert (await use_case.logout(token)).is_ok()


@pytest.mark.asyncio
async def test_logout_accepts_expired_refresh_token(mock_uow, session_manager):
    codec = TokenCodec(access_secret="unit-access-secret", refresh_ttl=timedelta(seconds=-10))
    session_id = uuid4()
    token = codec.issue_refresh(str(uuid4()), "student@example.com", str(session_id))

    use_case = RevokeSessionsUseCase(mock_uow, codec, session_manager)
    result = await use_case.logout(token)

    assert result.is_ok()
    mock_uow.sessions.delete_by_id.assert_called_once_with(session_id)


@pytest.mark.asyncio
async def test_logout_rejects_invalid_token(mock_uow, token_codec, session_manager):
    use_case = RevokeSessionsUseCase(mock_uow, token_codec, session_manager)
    result = await use_case.logout("garbage")

    assert result.is_err()
    assert result.error.code == "INVALID_TOKEN"
    mock_uow.sessions.delete_by_id.assert_not_called()


@pytest.mark.asyncio
async def test_logout_rejects_access_token(mock_uow, token_codec, session_manager):
    token = token_codec.issue_access(str(uuid4()), "student@example.com", str(uuid4()))

    use_case = RevokeSessionsUseCase(mock_uow, token_codec, session_manager)
    result = await use_case.logout(token)

    assert result.is_err()
    assert result.error.code == "INVALID_TOKEN"


@pytest.mark.asyncio
async def test_logout_legacy_token_is_noop(mock_uow, token_codec, session_manager):
    token = token_codec.issue_refresh(str(uuid4()), "student@example.com")

    use_case = RevokeSessionsUseCase(mock_uow, token_codec, session_manager)
    result = await use_case.logout(token)

    assert result.is_ok()
    mock_uow.sessions.delete_by_id.assert_not_called()


@pytest.mark.asyncio
async def test_logout_all(mock_uow, token_codec, session_manager):
    user_id = uuid4()
    mock_uow.sessions.delete_all_by_user_id = AsyncMock(return_value=1)

    use_case = RevokeSessionsUseCase(mock_uow, token_codec, session_manager)
    result = await use_case.logout_all(str(user_id))

    assert result.is_ok()
    assert result.value.sessions_removed == 1
    mock_uow.sessions.delete_all_by_user_id.assert_called_once_with(user_id)
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_force_logout_all(mock_uow, token_codec, session_manager):
    target_id = uuid4()
    mock_uow.students.get_by_id.return_value = Student(
        id=target_id,
        email="student@example.com",
        username="student01",
        name="Test Student",
        phone="0912345678",
        password_hash="hash",
    )
    mock_uow.sessions.delete_all_by_user_id = AsyncMock(return_value=1)

    use_case = RevokeSessionsUseCase(mock_uow, token_codec, session_manager)
    result = await use_case.force_logout_all(target_id, str(uuid4()))

    assert result.is_ok()
    assert result.value.sessions_removed == 1
    mock_uow.sessions.delete_all_by_user_id.assert_called_once_with(target_id)


@pytest.mark.asyncio
async def test_force_logout_unknown_account(mock_uow, token_codec, session_manager):
    use_case = RevokeSessionsUseCase(mock_uow, token_codec, session_manager)
    result = await use_case.force_logout_all(uuid4(), str(uuid4()))

    assert result.is_err()
    assert result.error.code == "USER_NOT_FOUND"
    mock_uow.sessions.delete_all_by_user_id.assert_not_called()
