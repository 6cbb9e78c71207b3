"""
PasswordResetToken Entity

Short-lived reset codes for standard accounts.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow


class PasswordResetToken(SQLModel, table=True):
    """
    PasswordResetToken entity - six digit reset codes.

    Business Rules:
    - Expires after 10 minutes
    - Stored as SHA-256 hash of the code
    - Single-use: marked as used after confirmation
    - Burned after 5 wrong guesses
    - A new request invalidates older unused codes for the same student
    """

    __tablename__ = "password_reset_tokens"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(foreign_key="students.id", index=True)
    token_hash: str = Field(max_length=64)  # SHA-256 output

    used: bool = Field(default=False)
    attempts: int = Field(default=0)

    # Timestamps
    expires_at: datetime = Field(sa_column=Column(DateTime))
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_password_reset_expires_at", "expires_at"),
        Index("idx_password_reset_used", "used"),
    )
