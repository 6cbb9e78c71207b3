"""
Authenticate Request Use Case

Per-request authentication gate: bearer token -> verified claims ->
resolved account -> live session. Returns the account context or a coded
error; translating the error to HTTP is left to the API layer.
"""

import logging
from typing import Optional, Union
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.session_manager import SessionManager
from src.app.services.token_codec import TokenCodec
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import TokenType
from src.domain.errors import (
    InvalidTokenError,
    PersistenceError,
    SessionExpiredError,
    SessionNotFoundError,
    TokenExpiredError,
)
from .dtos import AuthContext, PrivilegedAccount, StandardAccount

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


class AuthenticateRequestUseCase:
    """
    Use case guarding every authenticated request.

    Business Rules:
    - Authorization header must read "Bearer <token>"
    - Only access tokens are accepted
    - Admins are looked up before students; the first match wins
    - Tokens carrying session_id need a live session of the same account
    - Tokens without session_id (legacy) skip the session check
    - No retries; every failure ends the request
    """

    def __init__(
        self,
        uow: UnitOfWork,
        token_codec: TokenCodec,
        session_manager: SessionManager,
        touch_sessions: bool = True,
    ):
        self.uow = uow
        self.token_codec = token_codec
        self.session_manager = session_manager
        self.touch_sessions = touch_sessions

    @staticmethod
    def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
        if not authorization or not authorization.startswith(BEARER_PREFIX):
            return None
        token = authorization[len(BEARER_PREFIX):].strip()
        return token or None

    async def execute(self, authorization: Optional[str]) -> Result[AuthContext]:
        """
        Execute the gate for one request.

        Args:
            authorization: Raw Authorization header value

        Returns:
            Result with AuthContext, or Error with one of MISSING_TOKEN,
            TOKEN_EXPIRED, INVALID_TOKEN, WRONG_TOKEN_TYPE, ACCOUNT_NOT_FOUND,
            SESSION_INVALIDATED, SESSION_EXPIRED, AUTHENTICATION_FAILED
        """
        token = self.extract_bearer_token(authorization)
        if token is None:
            return Return.err(Error("MISSING_TOKEN", "No authorization token provided"))

        try:
            claims = self.token_codec.verify(token)
        except TokenExpiredError:
            return Return.err(Error("TOKEN_EXPIRED", "Token expired"))
        except InvalidTokenError:
            return Return.err(Error("INVALID_TOKEN", "Invalid token"))

        if claims.type != TokenType.access:
            return Return.err(
                Error("WRONG_TOKEN_TYPE", "Invalid token type. Access token required.")
            )

        try:
            async with self.uow:
                account = await self._resolve_account(claims.user_id)
                if account is None:
                    logger.warning(f"User not found for user_id: {claims.user_id}")
                    return Return.err(Error("ACCOUNT_NOT_FOUND", "User not found"))

                if claims.is_legacy:
                    logger.warning(
                        f"[Single Device] Legacy token without session_id accepted for: {claims.user_id}"
                    )
                    return Return.ok(AuthContext(account=account, legacy_token=True))

                try:
                    await self.session_manager.validate_request_session(
                        claims.session_id, claims.user_id
                    )
                except SessionNotFoundError:
                    logger.warning(
                        f"[Single Device] Session {claims.session_id} not found for user: {claims.user_id}"
                    )
                    return Return.err(
                        Error(
                            "SESSION_INVALIDATED",
                            "Session expired. You have been logged in on another device.",
                        )
                    )
                except SessionExpiredError:
                    logger.warning(f"[Single Device] Session {claims.session_id} expired")
                    return Return.err(Error("SESSION_EXPIRED", "Session expired."))

                if self.touch_sessions:
                    await self._touch(claims.session_id)

                return Return.ok(
                    AuthContext(account=account, session_id=claims.session_id)
                )
        except PersistenceError as exc:
            logger.error(f"Auth gate error: {exc}")
            return Return.err(Error("AUTHENTICATION_FAILED", "Authentication failed"))

    async def _resolve_account(
        self, subject_id: str
    ) -> Optional[Union[PrivilegedAccount, StandardAccount]]:
        try:
            account_id = UUID(subject_id)
        except ValueError:
            return None

        admin = await self.uow.admins.get_by_id(account_id)
        if admin is not None:
            return PrivilegedAccount.from_entity(admin)

        student = await self.uow.students.get_by_id(account_id)
        if student is not None:
            return StandardAccount.from_entity(student)

        return None

    async def _touch(self, session_id: str) -> None:
        await self.session_manager.touch(session_id)
        try:
            await self.uow.commit()
        except PersistenceError as exc:
            logger.warning(f"Could not record last use of session {session_id}: {exc}")
