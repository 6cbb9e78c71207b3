from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import Student


class IStudentRepository(ABC):
    """Student repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, student_id: UUID) -> Optional[Student]:
        """Get student by ID"""
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[Student]:
        """Get student by email address"""
        pass

    @abstractmethod
    async def get_by_username(self, username: str) -> Optional[Student]:
        """Get student by username"""
        pass

    @abstractmethod
    async def get_by_phone(self, phone: str) -> Optional[Student]:
        """Get student by phone number"""
        pass

    @abstractmethod
    async def get_by_identifier(self, identifier: str) -> Optional[Student]:
        """Get student whose email or username equals identifier"""
        pass

    @abstractmethod
    async def create(self, student: Student) -> Student:
        """Create a new student"""
        pass

    @abstractmethod
    async def update(self, student: Student) -> Student:
        """Update existing student"""
        pass
