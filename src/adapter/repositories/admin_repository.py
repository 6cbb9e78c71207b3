from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.admin_repository import IAdminRepository
from src.domain.base import normalize_email
from src.domain.entities import Admin
from src.domain.errors import DuplicateRecordError, PersistenceError


class AdminRepository(IAdminRepository):
    """Admin repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, admin_id: UUID) -> Optional[Admin]:
        """Get admin by ID"""
        stmt = select(Admin).where(Admin.id == admin_id)
        try:
            result = await self.session.exec(stmt)
            return result.one_or_none()
        except SQLAlchemyError as exc:
            raise PersistenceError("Failed to load admin") from exc

    async def get_by_email(self, email: str) -> Optional[Admin]:
        """Get admin by email address"""
        stmt = select(Admin).where(Admin.email == normalize_email(email))
        try:
            result = await self.session.exec(stmt)
            return result.one_or_none()
        except SQLAlchemyError as exc:
            raise PersistenceError("Failed to load admin") from exc

    async def create(self, admin: Admin) -> Admin:
        """Create a new admin"""
        admin.email = normalize_email(admin.email)
        try:
            self.session.add(admin)
            await self.session.flush()
            await self.session.refresh(admin)
        except IntegrityError as exc:
            raise DuplicateRecordError("Admin email already registered") from exc
        except SQLAlchemyError as exc:
            raise PersistenceError("Failed to insert admin") from exc
        return admin

    async def update(self, admin: Admin) -> Admin:
        """Update existing admin"""
        try:
            self.session.add(admin)
            await self.session.flush()
            await self.session.refresh(admin)
        except SQLAlchemyError as exc:
            raise PersistenceError("Failed to update admin") from exc
        return admin
