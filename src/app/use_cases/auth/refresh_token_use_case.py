"""
Refresh Token Use Case

Exchanges a refresh token for a new token pair bound to the same session.
"""

import hmac
import logging

from src.libs.result import Error, Result, Return
from src.app.services.session_manager import SessionManager
from src.app.services.token_codec import TokenCodec
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import TokenType
from src.domain.errors import (
    InvalidTokenError,
    SessionExpiredError,
    SessionNotFoundError,
    TokenExpiredError,
)
from .dtos import RefreshTokenResponse

logger = logging.getLogger(__name__)


class RefreshTokenUseCase:
    """
    Use case for refreshing access tokens.

    Business Rules:
    - Token must be a refresh token signed with the refresh key
    - Refresh tokens without a session are refused; the client logs in again
    - Session must still exist for the token's account and not be expired
    - Presented token must match the stored hash (rotation: old tokens die)
    - Session expiry is not extended by a refresh
    """

    def __init__(
        self,
        uow: UnitOfWork,
        token_codec: TokenCodec,
        session_manager: SessionManager,
    ):
        self.uow = uow
        self.token_codec = token_codec
        self.session_manager = session_manager

    async def execute(self, refresh_token: str) -> Result[RefreshTokenResponse]:
        """
        Execute refresh token use case.

        Args:
            refresh_token: The refresh token to verify and rotate

        Returns:
            Result with RefreshTokenResponse containing new tokens, or Error
        """
        try:
            claims = self.token_codec.verify(refresh_token)
        except TokenExpiredError:
            return Return.err(Error("TOKEN_EXPIRED", "Refresh token expired"))
        except InvalidTokenError:
            return Return.err(Error("INVALID_TOKEN", "Invalid refresh token"))

        if claims.type != TokenType.refresh:
            return Return.err(
                Error("INVALID_TOKEN", "Invalid token type. Refresh token required.")
            )

        if claims.is_legacy:
            logger.warning(f"Refresh refused for legacy token of account {claims.user_id}")
            return Return.err(
                Error("INVALID_TOKEN", "Invalid token format. Please log in again.")
            )

        async with self.uow:
            try:
                session = await self.session_manager.validate_request_session(
                    claims.session_id, claims.user_id
                )
            except SessionNotFoundError:
                return Return.err(
                    Error(
                        "SESSION_INVALIDATED",
                        "Session expired. You have been logged in on another device.",
                    )
                )
            except SessionExpiredError:
                return Return.err(Error("SESSION_EXPIRED", "Session expired."))

            presented_hash = self.token_codec.hash_refresh_token(refresh_token)
            if not hmac.compare_digest(session.refresh_token_hash, presented_hash):
                logger.warning(f"Rotated-out refresh token presented for session {session.id}")
                return Return.err(Error("INVALID_TOKEN", "Invalid refresh token"))

            tokens = await self.session_manager.rotate(session, claims.email)

            await self.uow.commit()

            return Return.ok(RefreshTokenResponse(session=tokens))
