from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import Session


class ISessionRepository(ABC):
    """
    Session repository interface - application layer

    Pure persistence, no policy. Implementations raise PersistenceError
    when the data store fails.
    """

    @abstractmethod
    async def create(self, session: Session) -> Session:
        """Insert a new session row"""
        pass

    @abstractmethod
    async def get_by_id(self, session_id: UUID) -> Optional[Session]:
        """Get session by ID"""
        pass

    @abstractmethod
    async def get_by_id_and_user_id(
        self, session_id: UUID, user_id: UUID
    ) -> Optional[Session]:
        """Get session by ID only if it belongs to the given account"""
        pass

    @abstractmethod
    async def delete_all_by_user_id(self, user_id: UUID) -> int:
        """Delete every session of an account. Returns count of deleted rows."""
        pass

    @abstractmethod
    async def update_refresh_token_hash(
        self, session_id: UUID, refresh_token_hash: str
    ) -> Session:
        """Overwrite the refresh token hash and touch last_used_at"""
        pass

    @abstractmethod
    async def delete_by_id(self, session_id: UUID) -> bool:
        """Delete one session. Returns True if a row was removed."""
        pass

    @abstractmethod
    async def touch(self, session_id: UUID) -> None:
        """Set last_used_at to now"""
        pass

    @abstractmethod
    async def delete_expired(self) -> int:
        """Delete sessions past expires_at. Returns count of deleted rows."""
        pass
