"""
Authentication Use Cases

All authentication-related business logic.
"""

from .signup_use_case import SignupUseCase
from .signup_dto import SignupCommand, SignupResponse
from .login_use_case import LoginUseCase
from .admin_login_use_case import AdminLoginUseCase
from .refresh_token_use_case import RefreshTokenUseCase
from .authenticate_request_use_case import AuthenticateRequestUseCase
from .request_password_reset_use_case import RequestPasswordResetUseCase
from .confirm_password_reset_use_case import ConfirmPasswordResetUseCase
from .request_signup_otp_use_case import RequestSignupOtpUseCase
from .verify_otp_signup_use_case import VerifyOtpSignupUseCase
from .dtos import (
    AdminInfo,
    AdminLoginResponse,
    AuthContext,
    ConfirmPasswordResetResponse,
    CurrentAccount,
    LoginResponse,
    MeResponse,
    PrivilegedAccount,
    RefreshTokenResponse,
    RequestPasswordResetResponse,
    RequestSignupOtpResponse,
    StandardAccount,
    StudentInfo,
)

__all__ = [
    # Use Cases
    "SignupUseCase",
    "LoginUseCase",
    "AdminLoginUseCase",
    "RefreshTokenUseCase",
    "AuthenticateRequestUseCase",
    "RequestPasswordResetUseCase",
    "ConfirmPasswordResetUseCase",
    "RequestSignupOtpUseCase",
    "VerifyOtpSignupUseCase",
    # DTOs - Commands
    "SignupCommand",
    # DTOs - Responses
    "SignupResponse",
    "LoginResponse",
    "AdminLoginResponse",
    "RefreshTokenResponse",
    "MeResponse",
    "RequestPasswordResetResponse",
    "ConfirmPasswordResetResponse",
    "RequestSignupOtpResponse",
    # DTOs - Account context
    "AuthContext",
    "CurrentAccount",
    "PrivilegedAccount",
    "StandardAccount",
    # DTOs - Nested Models
    "StudentInfo",
    "AdminInfo",
]
