"""
Admin Login Use Case

Authenticates a privileged account. Admin sessions follow the same
single-device policy as student sessions.
"""

import logging
from typing import Optional

from src.libs.result import Error, Result, Return
from src.app.services.password_hasher import PasswordHasher
from src.app.services.session_manager import SessionManager
from src.app.services.unit_of_work import UnitOfWork
from src.domain.errors import SessionCreationError
from .dtos import AdminInfo, AdminLoginResponse

logger = logging.getLogger(__name__)


class AdminLoginUseCase:
    def __init__(
        self,
        uow: UnitOfWork,
        session_manager: SessionManager,
        password_hasher: PasswordHasher,
    ):
        self.uow = uow
        self.session_manager = session_manager
        self.password_hasher = password_hasher

    async def execute(
        self,
        email: str,
        password: str,
        user_agent: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> Result[AdminLoginResponse]:
        async with self.uow:
            admin = await self.uow.admins.get_by_email(email)

            if admin is None:
                self.password_hasher.dummy_verify(password)
                return Return.err(Error("INVALID_CREDENTIALS", "Invalid admin credentials"))

            if not self.password_hasher.verify(password, admin.password_hash):
                logger.warning(f"Failed admin login attempt for {email}")
                return Return.err(Error("INVALID_CREDENTIALS", "Invalid admin credentials"))

            try:
                issued = await self.session_manager.login(
                    admin.id, admin.email, user_agent, ip_address
                )
            except SessionCreationError:
                return Return.err(
                    Error("SESSION_CREATION_FAILED", "Failed to create session")
                )

            await self.uow.commit()

            logger.info(f"Admin logged in: {admin.email}, Session ID: {issued.session_id}")

            return Return.ok(
                AdminLoginResponse(
                    session=issued.tokens,
                    admin=AdminInfo(
                        id=str(admin.id),
                        email=admin.email,
                        name=admin.name,
                        role=admin.role.value,
                    ),
                )
            )
