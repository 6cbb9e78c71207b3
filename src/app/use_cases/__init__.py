"""
Use Cases

Organized by domain folder:
- auth/: Authentication flows and the request gate
- sessions/: Ending sessions
"""

from .auth import (
    AdminLoginUseCase,
    AuthenticateRequestUseCase,
    ConfirmPasswordResetUseCase,
    LoginUseCase,
    RefreshTokenUseCase,
    RequestPasswordResetUseCase,
    SignupCommand,
    SignupResponse,
    SignupUseCase,
)
from .sessions import RevokeSessionsUseCase

__all__ = [
    # Auth
    "SignupUseCase",
    "SignupCommand",
    "SignupResponse",
    "LoginUseCase",
    "AdminLoginUseCase",
    "RefreshTokenUseCase",
    "AuthenticateRequestUseCase",
    "RequestPasswordResetUseCase",
    "ConfirmPasswordResetUseCase",
    # Sessions
    "RevokeSessionsUseCase",
]
