import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import delete, update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.session_repository import ISessionRepository
from src.domain.base import utcnow
from src.domain.entities import Session
from src.domain.errors import PersistenceError

logger = logging.getLogger(__name__)


class SessionRepository(ISessionRepository):
    """Session repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, session_obj: Session) -> Session:
        """Insert a new session row"""
        try:
            self.session.add(session_obj)
            await self.session.flush()
            await self.session.refresh(session_obj)
        except SQLAlchemyError as exc:
            logger.error(f"Failed to insert session for user {session_obj.user_id}: {exc}")
            raise PersistenceError("Failed to insert session") from exc
        return session_obj

    async def get_by_id(self, session_id: UUID) -> Optional[Session]:
        """Get session by ID"""
        stmt = select(Session).where(Session.id == session_id)
        try:
            result = await self.session.exec(stmt)
            return result.one_or_none()
        except SQLAlchemyError as exc:
            raise PersistenceError("Failed to load session") from exc

    async def get_by_id_and_user_id(
        self, session_id: UUID, user_id: UUID
    ) -> Optional[Session]:
        """Get session by ID only if it belongs to the given account"""
        stmt = select(Session).where(Session.id == session_id, Session.user_id == user_id)
        try:
            result = await self.session.exec(stmt)
            return result.one_or_none()
        except SQLAlchemyError as exc:
            raise PersistenceError("Failed to load session") from exc

    async def delete_all_by_user_id(self, user_id: UUID) -> int:
        """Delete every session of an account"""
        stmt = delete(Session).where(Session.user_id == user_id)
        try:
            result = await self.session.execute(stmt)
            await self.session.flush()
        except SQLAlchemyError as exc:
            raise PersistenceError("Failed to delete sessions") from exc
        return result.rowcount

    async def update_refresh_token_hash(
        self, session_id: UUID, refresh_token_hash: str
    ) -> Session:
        """Overwrite the refresh token hash and touch last_used_at"""
        session_obj = await self.get_by_id(session_id)
        if session_obj is None:
            raise PersistenceError(f"Session {session_id} no longer exists")

        session_obj.refresh_token_hash = refresh_token_hash
        session_obj.last_used_at = utcnow()
        try:
            self.session.add(session_obj)
            await self.session.flush()
            await self.session.refresh(session_obj)
        except SQLAlchemyError as exc:
            raise PersistenceError("Failed to update session") from exc
        return session_obj

    async def delete_by_id(self, session_id: UUID) -> bool:
        """Delete one session by ID"""
        stmt = delete(Session).where(Session.id == session_id)
        try:
            result = await self.session.execute(stmt)
            await self.session.flush()
        except SQLAlchemyError as exc:
            raise PersistenceError("Failed to delete session") from exc
        return result.rowcount > 0

    async def touch(self, session_id: UUID) -> None:
        """Set last_used_at to now"""
        stmt = update(Session).where(Session.id == session_id).values(last_used_at=utcnow())
        try:
            await self.session.execute(stmt)
            await self.session.flush()
        except SQLAlchemyError as exc:
            raise PersistenceError("Failed to touch session") from exc

    async def delete_expired(self) -> int:
        """Delete sessions past expires_at"""
        stmt = delete(Session).where(Session.expires_at < utcnow())
        try:
            result = await self.session.execute(stmt)
            await self.session.flush()
        except SQLAlchemyError as exc:
            raise PersistenceError("Failed to purge expired sessions") from exc
        return result.rowcount
