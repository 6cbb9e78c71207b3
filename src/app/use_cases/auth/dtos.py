"""
Authentication Use Case DTOs (Data Transfer Objects)

Response classes for the auth domain and the account context the
authentication gate hands to downstream handlers.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

from src.app.services.token_codec import TokenPair
from src.domain.entities import AccountKind, Admin, Student


# ============================================================================
# Account context (tagged union resolved once by the gate)
# ============================================================================


class StandardAccount(BaseModel):
    """Student identity attached to an authenticated request"""

    kind: Literal["standard"] = AccountKind.standard.value
    id: str
    email: str
    name: str
    username: str
    phone: str
    is_verified: bool
    email_verified: bool

    @classmethod
    def from_entity(cls, student: Student) -> "StandardAccount":
        return cls(
            id=str(student.id),
            email=student.email,
            name=student.name,
            username=student.username,
            phone=student.phone,
            is_verified=student.is_verified,
            email_verified=student.email_verified,
        )


class PrivilegedAccount(BaseModel):
    """Admin identity attached to an authenticated request"""

    kind: Literal["privileged"] = AccountKind.privileged.value
    id: str
    email: str
    name: str
    role: str

    @classmethod
    def from_entity(cls, admin: Admin) -> "PrivilegedAccount":
        return cls(
            id=str(admin.id),
            email=admin.email,
            name=admin.name,
            role=admin.role.value,
        )


CurrentAccount = Annotated[
    Union[PrivilegedAccount, StandardAccount], Field(discriminator="kind")
]


class AuthContext(BaseModel):
    """Outcome of a successful gate check"""

    account: CurrentAccount
    session_id: Optional[str] = None
    legacy_token: bool = False

    @property
    def is_privileged(self) -> bool:
        return self.account.kind == AccountKind.privileged.value


# ============================================================================
# Response DTOs
# ============================================================================


class StudentInfo(BaseModel):
    """Student information in authentication responses"""

    id: str
    email: str
    username: str
    name: str
    phone: str

    @classmethod
    def from_entity(cls, student: Student) -> "StudentInfo":
        return cls(
            id=str(student.id),
            email=student.email,
            username=student.username,
            name=student.name,
            phone=student.phone,
        )


class AdminInfo(BaseModel):
    """Admin information in admin login responses"""

    id: str
    email: str
    name: str
    role: str


class LoginResponse(BaseModel):
    """Response for student login use case"""

    success: bool = True
    session: TokenPair
    user: StudentInfo


class AdminLoginResponse(BaseModel):
    """Response for admin login use case"""

    success: bool = True
    session: TokenPair
    admin: AdminInfo


class RefreshTokenResponse(BaseModel):
    """Response for refresh token use case"""

    success: bool = True
    session: TokenPair


class MeResponse(BaseModel):
    """Current account context"""

    success: bool = True
    account: CurrentAccount
    session_id: Optional[str] = None


class RequestPasswordResetResponse(BaseModel):
    """Response for request password reset use case"""

    success: bool = True
    message: str


class ConfirmPasswordResetResponse(BaseModel):
    """Response for confirm password reset use case"""

    success: bool = True
    message: str


class RequestSignupOtpResponse(BaseModel):
    """Response for request signup OTP use case"""

    success: bool = True
    message: str
