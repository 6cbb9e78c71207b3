"""
Student Entity

Standard account of the platform.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow


class Student(SQLModel, table=True):
    """
    Student entity - standard account created at signup.

    Business Rules:
    - Email, username and phone are unique
    - Login accepts either email or username as identifier
    - Password stored as bcrypt hash (cost factor 10)
    - Never hard-deleted by the auth service
    """

    __tablename__ = "students"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    username: str = Field(unique=True, index=True, max_length=50)
    name: str = Field(max_length=255)
    phone: str = Field(unique=True, index=True, max_length=20)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars

    is_verified: bool = Field(default=False)
    email_verified: bool = Field(default=False)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_student_email_verified", "email_verified"),)
