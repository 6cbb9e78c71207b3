"""
Revoke Sessions Use Case

Logout of one session, logout of every session, and admin-forced logout.
"""

import logging
from typing import Union
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.session_manager import SessionManager
from src.app.services.token_codec import TokenCodec
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import TokenType
from src.domain.errors import InvalidTokenError
from .dtos import LogoutAllResponse, LogoutResponse

logger = logging.getLogger(__name__)


class RevokeSessionsUseCase:
    """
    Use case for ending sessions.

    Business Rules:
    - Logout names its session through the refresh token; expired refresh
      tokens are still accepted if the signature is valid
    - Logging out an already-deleted session succeeds (idempotent)
    - Logout-all deletes every session of the caller
    - Admins can force logout-all on any account
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

    async def logout(self, refresh_token: str) -> Result[LogoutResponse]:
        """
        End the session the refresh token is bound to.

        Args:
            refresh_token: Refresh token issued with the session

        Returns:
            Result with LogoutResponse, or Error(INVALID_TOKEN)
        """
        try:
            claims = self.token_codec.verify(refresh_token, verify_exp=False)
        except InvalidTokenError:
            return Return.err(Error("INVALID_TOKEN", "Invalid refresh token"))

        if claims.type != TokenType.refresh:
            return Return.err(
                Error("INVALID_TOKEN", "Invalid token type. Refresh token required.")
            )

        if claims.is_legacy:
            # Nothing server-side to end for tokens minted without a session
            return Return.ok(LogoutResponse(message="Logged out successfully"))

        async with self.uow:
            await self.session_manager.logout(claims.session_id)
            await self.uow.commit()

        logger.info(f"User logged out: {claims.email}, Session ID: {claims.session_id}")
        return Return.ok(LogoutResponse(message="Logged out successfully"))

    async def logout_all(self, account_id: Union[str, UUID]) -> Result[LogoutAllResponse]:
        """Delete every session of the calling account"""
        async with self.uow:
            count = await self.session_manager.logout_all(UUID(str(account_id)))
            await self.uow.commit()

        return Return.ok(
            LogoutAllResponse(
                message="Logged out from all devices",
                sessions_removed=count,
            )
        )

    async def force_logout_all(
        self, target_account_id: UUID, requesting_admin_id: str
    ) -> Result[LogoutAllResponse]:
        """
        Admin-initiated logout of another account.

        Returns:
            Result with count of removed sessions, or Error(USER_NOT_FOUND)
        """
        async with self.uow:
            target = await self.uow.admins.get_by_id(target_account_id)
            if target is None:
                target = await self.uow.students.get_by_id(target_account_id)
            if target is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            count = await self.session_manager.logout_all(target_account_id)
            await self.uow.commit()

        logger.info(
            f"Admin {requesting_admin_id} removed {count} session(s) of account {target_account_id}"
        )
        return Return.ok(
            LogoutAllResponse(
                message="Account logged out from all devices",
                sessions_removed=count,
            )
        )
