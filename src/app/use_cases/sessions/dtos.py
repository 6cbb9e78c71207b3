"""
Session Use Case DTOs
"""

from pydantic import BaseModel


class LogoutResponse(BaseModel):
    """Response for single-session logout"""

    success: bool = True
    message: str


class LogoutAllResponse(BaseModel):
    """Response for logout of every session of an account"""

    success: bool = True
    message: str
    sessions_removed: int
