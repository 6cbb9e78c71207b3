"""
Session Lifecycle Manager

Single-device login: every login deletes all earlier sessions of the
account before creating its own ("last login wins"). Per account the
session moves NoSession -> Live -> Expired | Superseded | LoggedOut.

The manager works inside the caller's unit of work (already entered);
the caller commits.
"""

import logging
from datetime import timedelta
from typing import Optional, Union
from uuid import UUID

from pydantic import BaseModel

from src.app.services.token_codec import TokenCodec, TokenPair
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import Session
from src.domain.errors import (
    PersistenceError,
    SessionCreationError,
    SessionExpiredError,
    SessionNotFoundError,
)

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL = timedelta(days=30)


class IssuedSession(BaseModel):
    """Token pair minted by a login, with the session it is bound to"""

    session_id: str
    tokens: TokenPair


def _as_uuid(value: Union[str, UUID]) -> UUID:
    return value if isinstance(value, UUID) else UUID(str(value))


class SessionManager:
    def __init__(
        self,
        uow: UnitOfWork,
        token_codec: TokenCodec,
        session_ttl: timedelta = DEFAULT_SESSION_TTL,
    ):
        self.uow = uow
        self.token_codec = token_codec
        self.session_ttl = session_ttl

    async def login(
        self,
        account_id: UUID,
        login_id: str,
        user_agent: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> IssuedSession:
        """
        Start the only live session of an account and mint tokens bound to it.

        Args:
            account_id: Student or admin ID
            login_id: Email carried in the tokens
            user_agent: Informational device metadata
            ip_address: Informational source address

        Returns:
            IssuedSession with the token pair and the new session ID

        Raises:
            SessionCreationError: the session row could not be persisted
            PersistenceError: purging old sessions or storing the hash failed
        """
        # Single-device enforcement point: unconditional, ignores expiry
        removed = await self.uow.sessions.delete_all_by_user_id(account_id)
        if removed:
            logger.info(f"Cleared {removed} existing session(s) for account {account_id}")

        now = utcnow()
        session = Session(
            user_id=account_id,
            refresh_token_hash="",
            user_agent=user_agent,
            ip_address=ip_address,
            created_at=now,
            expires_at=now + self.session_ttl,
            last_used_at=now,
        )
        try:
            session = await self.uow.sessions.create(session)
        except PersistenceError as exc:
            logger.error(f"Failed to create session for account {account_id}")
            raise SessionCreationError("Failed to create session") from exc

        # The session ID must exist before it can be embedded in the tokens
        tokens = self.token_codec.issue_pair(str(account_id), login_id, str(session.id))
        await self.uow.sessions.update_refresh_token_hash(
            session.id, self.token_codec.hash_refresh_token(tokens.refresh_token)
        )

        logger.info(f"Session {session.id} started for account {account_id}")
        return IssuedSession(session_id=str(session.id), tokens=tokens)

    async def validate_request_session(
        self, session_id: Union[str, UUID], account_id: Union[str, UUID]
    ) -> Session:
        """
        Confirm the session claimed by a token is still live for its account.

        Raises:
            SessionNotFoundError: superseded by another login or logged out
            SessionExpiredError: row present but past expires_at
        """
        try:
            session_uuid = _as_uuid(session_id)
            account_uuid = _as_uuid(account_id)
        except ValueError as exc:
            raise SessionNotFoundError(f"Malformed session reference {session_id}") from exc

        session = await self.uow.sessions.get_by_id_and_user_id(session_uuid, account_uuid)
        if session is None:
            raise SessionNotFoundError(f"Session {session_id} not found for {account_id}")

        if session.is_expired():
            raise SessionExpiredError(f"Session {session_id} expired at {session.expires_at}")

        return session

    async def touch(self, session_id: Union[str, UUID]) -> None:
        """Best-effort last_used_at update; failures are logged, never raised"""
        try:
            await self.uow.sessions.touch(_as_uuid(session_id))
        except (PersistenceError, ValueError) as exc:
            logger.warning(f"Could not touch session {session_id}: {exc}")

    async def rotate(self, session: Session, login_id: str) -> TokenPair:
        """
        Mint a new pair bound to an existing session and replace its refresh hash.

        Session expiry is fixed at creation and is not extended here.
        """
        tokens = self.token_codec.issue_pair(str(session.user_id), login_id, str(session.id))
        await self.uow.sessions.update_refresh_token_hash(
            session.id, self.token_codec.hash_refresh_token(tokens.refresh_token)
        )
        return tokens

    async def logout(self, session_id: Union[str, UUID]) -> None:
        """Delete exactly the named session; unknown sessions are not an error"""
        try:
            session_uuid = _as_uuid(session_id)
        except ValueError:
            logger.info(f"Ignoring logout for malformed session id {session_id}")
            return
        deleted = await self.uow.sessions.delete_by_id(session_uuid)
        if not deleted:
            logger.info(f"Logout for session {session_id} which no longer exists")

    async def logout_all(self, account_id: UUID) -> int:
        count = await self.uow.sessions.delete_all_by_user_id(account_id)
        logger.info(f"Removed {count} session(s) for account {account_id}")
        return count

    async def purge_expired(self) -> int:
        count = await self.uow.sessions.delete_expired()
        if count:
            logger.info(f"Purged {count} expired session(s)")
        return count
