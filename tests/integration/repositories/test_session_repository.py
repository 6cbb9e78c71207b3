"""
Session store and lifecycle manager against a real database
"""

from datetime import timedelta
from uuid import UUID, uuid4

import pytest
from sqlmodel import select

from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.session_manager import SessionManager
from src.app.services.token_codec import TokenCodec
from src.domain.base import utcnow
from src.domain.entities import Session
from src.domain.errors import PersistenceError, SessionExpiredError, SessionNotFoundError


@pytest.fixture
def uow(db_session):
    return SqlAlchemyUnitOfWork(db_session)


@pytest.fixture
def manager(uow):
    return SessionManager(uow, TokenCodec(access_secret="integration-secret"))


def _session(user_id, expires_in=timedelta(days=30)):
    now = utcnow()
    return Session(user_id=user_id, created_at=now, expires_at=now + expires_in, last_used_at=now)


@pytest.mark.asyncio
async def test_login_replaces_all_sessions(uow, manager, db_session):
    account_id = uuid4()

    async with uow:
        await uow.sessions.create(_session(account_id))
        await uow.sessions.create(_session(account_id))
        await uow.commit()

    async with uow:
        issued = await manager.login(account_id, "student@example.com")
        await uow.commit()

    sessions = (await db_session.exec(select(Session).where(Session.user_id == account_id))).all()
    assert [str(s.id) for s in sessions] == [issued.session_id]
    assert sessions[0].refresh_token_hash == TokenCodec.hash_refresh_token(
        issued.tokens.refresh_token
    )


@pytest.mark.asyncio
async def test_login_leaves_other_accounts_alone(uow, manager, db_session):
    other_account = uuid4()

    async with uow:
        await uow.sessions.create(_session(other_account))
        await manager.login(uuid4(), "student@example.com")
        await uow.commit()

    others = (await db_session.exec(select(Session).where(Session.user_id == other_account))).all()
    assert len(others) == 1


@pytest.mark.asyncio
async def test_session_bound_to_its_account(uow, manager):
    account_id = uuid4()

    async with uow:
        issued = await manager.login(account_id, "student@example.com")
        await uow.commit()

        assert await manager.validate_request_session(issued.session_id, account_id)
        with pytest.raises(SessionNotFoundError):
            await manager.validate_request_session(issued.session_id, uuid4())


@pytest.mark.asyncio
async def test_expired_session_rejected(uow, manager):
    account_id = uuid4()

    async with uow:
        session = await uow.sessions.create(_session(account_id, expires_in=timedelta(seconds=-1)))
        await uow.commit()

        with pytest.raises(SessionExpiredError):
            await manager.validate_request_session(session.id, account_id)


@pytest.mark.asyncio
async def test_logout_is_idempotent(uow, manager):
    account_id = uuid4()

    async with uow:
        issued = await manager.login(account_id, "student@example.com")
        await uow.commit()

    async with uow:
        await manager.logout(issued.session_id)
        await manager.logout(issued.session_id)
        await uow.commit()

        assert await uow.sessions.get_by_id(UUID(issued.session_id)) is None
        with pytest.raises(SessionNotFoundError):
            await manager.validate_request_session(issued.session_id, account_id)


@pytest.mark.asyncio
async def test_update_hash_of_missing_session(uow):
    async with uow:
        with pytest.raises(PersistenceError):
            await uow.sessions.update_refresh_token_hash(uuid4(), "hash")


@pytest.mark.asyncio
async def test_purge_expired(uow, manager, db_session):
    live_account = uuid4()

    async with uow:
        await uow.sessions.create(_session(uuid4(), expires_in=timedelta(seconds=-1)))
        await uow.sessions.create(_session(uuid4(), expires_in=timedelta(seconds=-1)))
        await uow.sessions.create(_session(live_account))
        await uow.commit()

    async with uow:
        assert await manager.purge_expired() == 2
        await uow.commit()

    remaining = (await db_session.exec(select(Session))).all()
    assert [s.user_id for s in remaining] == [live_account]


@pytest.mark.asyncio
async def test_touch_updates_last_used(uow, manager, db_session):
    account_id = uuid4()
    session = _session(account_id)
    session.last_used_at = utcnow() - timedelta(days=1)

    async with uow:
        session = await uow.sessions.create(session)
        await uow.commit()
    stale = session.last_used_at
    session_id = session.id

    async with uow:
        await manager.touch(session.id)
        await uow.commit()

    db_session.expire_all()
    touched = (await db_session.exec(select(Session).where(Session.id == session_id))).one()
    assert touched.last_used_at > stale


@pytest.mark.asyncio
async def test_second_login_invalidates_first(uow, manager):
    account_id = uuid4()

    async with uow:
        first = await manager.login(account_id, "student@example.com")
        second = await manager.login(account_id, "student@example.com")
        await uow.commit()

        with pytest.raises(SessionNotFoundError):
            await manager.validate_request_session(first.session_id, account_id)
        live = await manager.validate_request_session(second.session_id, account_id)
        assert str(live.id) == second.session_id
