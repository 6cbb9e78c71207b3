"""
Session Entity

One row per live login. Holds the hash of the refresh token minted with it.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow


class Session(SQLModel, table=True):
    """
    Session entity - one authenticated device/browser.

    Business Rules:
    - At most one session per account; a new login deletes the others
    - Refresh tokens are stored as SHA-256 hex digests, never raw
    - Expires a fixed 30 days after creation; refresh does not extend it
    - user_agent and ip_address are informational only
    - user_id references either a student or an admin
    """

    __tablename__ = "sessions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(nullable=False, index=True)

    # Empty until the tokens bound to this session are minted
    refresh_token_hash: str = Field(default="", max_length=64)

    user_agent: Optional[str] = Field(default=None, max_length=512)
    ip_address: Optional[str] = Field(default=None, max_length=64)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    last_used_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_session_expires_at", "expires_at"),)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or utcnow()) > self.expires_at
