"""
EmailVerificationCode Entity

One-time codes proving ownership of an email before the student account
exists.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow


class EmailVerificationCode(SQLModel, table=True):
    """
    EmailVerificationCode entity - six digit signup codes.

    Business Rules:
    - Keyed by email; no student row exists yet
    - Stored as SHA-256 hash of the code
    - Expires after 10 minutes
    - Burned after 5 wrong guesses
    - A new request invalidates older unused codes for the same email
    """

    __tablename__ = "email_verification_codes"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    email: str = Field(index=True, max_length=255)
    code_hash: str = Field(max_length=64)  # SHA-256 output

    used: bool = Field(default=False)
    attempts: int = Field(default=0)

    # Timestamps
    expires_at: datetime = Field(sa_column=Column(DateTime))
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_email_verification_used", "used"),)
