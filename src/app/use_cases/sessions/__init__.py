"""
Session Use Cases

Ending sessions: single logout, logout-all, admin-forced logout.
"""

from .revoke_sessions_use_case import RevokeSessionsUseCase
from .dtos import LogoutAllResponse, LogoutResponse

__all__ = [
    "RevokeSessionsUseCase",
    "LogoutResponse",
    "LogoutAllResponse",
]
