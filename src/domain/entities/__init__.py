"""
Domain Entities

Tables and enums of the authentication service, one entity per file.
"""

from .enums import AccountKind, AdminRole, TokenType

from .student import Student
from .admin import Admin
from .session import Session
from .password_reset_token import PasswordResetToken
from .email_verification_code import EmailVerificationCode

__all__ = [
    # Enums
    "AccountKind",
    "AdminRole",
    "TokenType",
    # Entities
    "Student",
    "Admin",
    "Session",
    "PasswordResetToken",
    "EmailVerificationCode",
]
