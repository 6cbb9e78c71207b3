from typing import Optional
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.student_repository import IStudentRepository
from src.domain.base import normalize_email
from src.domain.entities import Student
from src.domain.errors import DuplicateRecordError, PersistenceError


class StudentRepository(IStudentRepository):
    """Student repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _one_or_none(self, stmt) -> Optional[Student]:
        try:
            result = await self.session.exec(stmt)
            return result.one_or_none()
        except SQLAlchemyError as exc:
            raise PersistenceError("Failed to load student") from exc

    async def get_by_id(self, student_id: UUID) -> Optional[Student]:
        """Get student by ID"""
        return await self._one_or_none(select(Student).where(Student.id == student_id))

    async def get_by_email(self, email: str) -> Optional[Student]:
        """Get student by email address"""
        return await self._one_or_none(
            select(Student).where(Student.email == normalize_email(email))
        )

    async def get_by_username(self, username: str) -> Optional[Student]:
        """Get student by username"""
        return await self._one_or_none(select(Student).where(Student.username == username))

    async def get_by_phone(self, phone: str) -> Optional[Student]:
        """Get student by phone number"""
        return await self._one_or_none(select(Student).where(Student.phone == phone))

    async def get_by_identifier(self, identifier: str) -> Optional[Student]:
        """Get student whose email or username equals identifier"""
        stmt = select(Student).where(
            or_(
                Student.email == normalize_email(identifier),
                Student.username == identifier,
            )
        )
        try:
            result = await self.session.exec(stmt)
            return result.first()
        except SQLAlchemyError as exc:
            raise PersistenceError("Failed to load student") from exc

    async def create(self, student: Student) -> Student:
        """Create a new student"""
        student.email = normalize_email(student.email)
        return await self._save(student, "Failed to insert student")

    async def update(self, student: Student) -> Student:
        """Update existing student"""
        return await self._save(student, "Failed to update student")

    async def _save(self, student: Student, message: str) -> Student:
        try:
            self.session.add(student)
            await self.session.flush()
            await self.session.refresh(student)
        except IntegrityError as exc:
            raise DuplicateRecordError(message) from exc
        except SQLAlchemyError as exc:
            raise PersistenceError(message) from exc
        return student
