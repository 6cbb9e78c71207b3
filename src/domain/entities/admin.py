"""
Admin Entity

Privileged account, pre-provisioned (see scripts/create_admin.py).
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.base import utcnow
from .enums import AdminRole


class Admin(SQLModel, table=True):
    __tablename__ = "admins"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    name: str = Field(default="Administrator", max_length=255)
    password_hash: str = Field(max_length=60)
    role: AdminRole = Field(default=AdminRole.admin)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
