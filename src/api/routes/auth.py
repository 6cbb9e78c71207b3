from datetime import timedelta

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, EmailStr, Field

from config import ApplicationConfig
from src.api.error import ClientError, ServerError
from src.api.utils.rate_limit import rate_limit
from src.app.services.password_hasher import PasswordHasher
from src.app.services.reset_code_sender import IResetCodeSender
from src.app.services.session_manager import SessionManager
from src.app.services.token_codec import TokenCodec
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.verification_code_sender import IVerificationCodeSender
from src.app.use_cases.auth import (
    AdminLoginResponse,
    AdminLoginUseCase,
    AuthContext,
    ConfirmPasswordResetResponse,
    ConfirmPasswordResetUseCase,
    LoginResponse,
    LoginUseCase,
    MeResponse,
    RefreshTokenResponse,
    RefreshTokenUseCase,
    RequestPasswordResetResponse,
    RequestPasswordResetUseCase,
    RequestSignupOtpResponse,
    RequestSignupOtpUseCase,
    SignupCommand,
    SignupResponse,
    SignupUseCase,
    VerifyOtpSignupUseCase,
)
from src.depends import (
    get_client_metadata,
    get_current_account,
    get_password_hasher,
    get_reset_code_sender,
    get_session_manager,
    get_token_codec,
    get_unit_of_work,
    get_verification_code_sender,
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


class SignupRequest(BaseModel):
    """
    Signup HTTP request payload

    Validates incoming HTTP request before converting to SignupCommand.
    """

    name: str = Field(..., min_length=1, max_length=255, description="Full name")
    email: EmailStr = Field(..., description="Student email address")
    username: str = Field(
        ..., min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_.]+$", description="Username"
    )
    phone: str = Field(..., pattern=r"^\+?[0-9]{10,15}$", description="Phone number")
    password: str = Field(
        ..., min_length=8, max_length=72, description="Password (8-72 chars)"
    )


@router.post(
    "/signup",
    status_code=status.HTTP_201_CREATED,
    response_model=SignupResponse,
    dependencies=[Depends(rate_limit)],
)
async def signup(
    request: SignupRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    session_manager: SessionManager = Depends(get_session_manager),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
    client: dict = Depends(get_client_metadata),
):
    """
    Student Signup

    Creates a student account and signs it in (single session).

    Raises:
        - 409 Conflict: Email, username or phone already registered
        - 400 Bad Request: Invalid input
        - 500 Internal Server Error: Session could not be created
    """
    command = SignupCommand(
        name=request.name,
        email=request.email,
        username=request.username,
        phone=request.phone,
        password=request.password,
    )

    use_case = SignupUseCase(uow, session_manager, password_hasher)
    result = await use_case.execute(command, client["user_agent"], client["ip_address"])

    if result.is_err():
        error = result.error
        if error.code in ("EMAIL_ALREADY_EXISTS", "USERNAME_TAKEN", "PHONE_TAKEN"):
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        raise ServerError(error)

    return result.value


class RequestOtpRequest(BaseModel):
    """Request signup OTP HTTP request payload"""

    email: EmailStr = Field(..., description="Email to verify")
    name: str = Field(..., min_length=1, max_length=255, description="Full name")


@router.post(
    "/request-otp",
    status_code=status.HTTP_200_OK,
    response_model=RequestSignupOtpResponse,
    dependencies=[Depends(rate_limit)],
)
async def request_otp(
    request: RequestOtpRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    code_sender: IVerificationCodeSender = Depends(get_verification_code_sender),
):
    """
    Request Signup OTP

    Sends a six digit code proving ownership of the email.

    Raises:
        - 409 Conflict: Email already registered
    """
    use_case = RequestSignupOtpUseCase(
        uow,
        code_sender,
        expires_in=timedelta(minutes=ApplicationConfig.SIGNUP_OTP_EXPIRY_MINUTES),
    )
    result = await use_case.execute(request.email, request.name)

    if result.is_err():
        error = result.error
        if error.code == "EMAIL_ALREADY_EXISTS":
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        raise ServerError(error)

    return result.value


class SignupDetails(BaseModel):
    """Profile submitted together with the signup OTP"""

    name: str = Field(..., min_length=1, max_length=255, description="Full name")
    username: str = Field(
        ..., min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_.]+$", description="Username"
    )
    phone: str = Field(..., pattern=r"^\+?[0-9]{10,15}$", description="Phone number")
    password: str = Field(
        ..., min_length=8, max_length=72, description="Password (8-72 chars)"
    )


class VerifyOtpSignupRequest(BaseModel):
    """Verify OTP and signup HTTP request payload"""

    email: EmailStr = Field(..., description="Email the OTP was sent to")
    otp: str = Field(..., pattern=r"^[0-9]{6}$", description="Six digit code")
    signup_data: SignupDetails


@router.post(
    "/verify-otp-signup",
    status_code=status.HTTP_201_CREATED,
    response_model=SignupResponse,
    dependencies=[Depends(rate_limit)],
)
async def verify_otp_signup(
    request: VerifyOtpSignupRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    session_manager: SessionManager = Depends(get_session_manager),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
    client: dict = Depends(get_client_metadata),
):
    """
    Verify OTP and Signup

    Creates the student with a verified email and signs it in.

    Raises:
        - 400 Bad Request: Missing or wrong OTP
        - 410 Gone: Expired OTP
        - 409 Conflict: Email, username or phone already registered
    """
    command = SignupCommand(email=request.email, **request.signup_data.model_dump())

    use_case = VerifyOtpSignupUseCase(uow, session_manager, password_hasher)
    result = await use_case.execute(
        command, request.otp, client["user_agent"], client["ip_address"]
    )

    if result.is_err():
        error = result.error
        if error.code == "INVALID_OTP":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "OTP_EXPIRED":
            raise ClientError(error, status_code=status.HTTP_410_GONE)
        elif error.code in ("EMAIL_ALREADY_EXISTS", "USERNAME_TAKEN", "PHONE_TAKEN"):
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        raise ServerError(error)

    return result.value


class LoginRequest(BaseModel):
    """Login HTTP request payload"""

    identifier: str = Field(..., min_length=1, description="Email or username")
    password: str = Field(..., min_length=1, description="Password")


@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    response_model=LoginResponse,
    dependencies=[Depends(rate_limit)],
)
async def login(
    request: LoginRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    session_manager: SessionManager = Depends(get_session_manager),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
    client: dict = Depends(get_client_metadata),
):
    """
    Student Login

    Deletes every other session of the student before issuing tokens,
    so a login on a new device signs the previous device out.

    Raises:
        - 401 Unauthorized: Invalid credentials
        - 500 Internal Server Error: Session could not be created
    """
    use_case = LoginUseCase(uow, session_manager, password_hasher)
    result = await use_case.execute(
        request.identifier, request.password, client["user_agent"], client["ip_address"]
    )

    if result.is_err():
        error = result.error
        if error.code == "INVALID_CREDENTIALS":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        raise ServerError(error)

    return result.value


class AdminLoginRequest(BaseModel):
    """Admin login HTTP request payload"""

    email: EmailStr = Field(..., description="Admin email address")
    password: str = Field(..., min_length=1, description="Admin password")


@router.post(
    "/admin/login",
    status_code=status.HTTP_200_OK,
    response_model=AdminLoginResponse,
    dependencies=[Depends(rate_limit)],
)
async def admin_login(
    request: AdminLoginRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    session_manager: SessionManager = Depends(get_session_manager),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
    client: dict = Depends(get_client_metadata),
):
    """
    Admin Login

    Raises:
        - 401 Unauthorized: Invalid credentials
        - 500 Internal Server Error: Session could not be created
    """
    use_case = AdminLoginUseCase(uow, session_manager, password_hasher)
    result = await use_case.execute(
        request.email, request.password, client["user_agent"], client["ip_address"]
    )

    if result.is_err():
        error = result.error
        if error.code == "INVALID_CREDENTIALS":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        raise ServerError(error)

    return result.value


class RefreshRequest(BaseModel):
    """Refresh token HTTP request payload"""

    refresh_token: str = Field(..., min_length=1, description="Refresh token")


@router.post(
    "/refresh", status_code=status.HTTP_200_OK, response_model=RefreshTokenResponse
)
async def refresh(
    request: RefreshRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_codec: TokenCodec = Depends(get_token_codec),
    session_manager: SessionManager = Depends(get_session_manager),
):
    """
    Refresh Tokens

    Issues a new pair bound to the same session and rotates the stored
    refresh token hash.

    Raises:
        - 401 Unauthorized: Invalid/expired token, superseded or expired session
        - 500 Internal Server Error: Server error
    """
    use_case = RefreshTokenUseCase(uow, token_codec, session_manager)
    result = await use_case.execute(request.refresh_token)

    if result.is_err():
        error = result.error
        if error.code in (
            "INVALID_TOKEN",
            "TOKEN_EXPIRED",
            "SESSION_INVALIDATED",
            "SESSION_EXPIRED",
        ):
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        raise ServerError(error)

    return result.value


@router.get("/me", status_code=status.HTTP_200_OK, response_model=MeResponse)
async def get_me(context: AuthContext = Depends(get_current_account)):
    """Current account, as resolved by the authentication gate"""
    return MeResponse(account=context.account, session_id=context.session_id)


class RequestPasswordResetRequest(BaseModel):
    """Request password reset HTTP request payload"""

    email: EmailStr = Field(..., description="Student email address")


@router.post(
    "/request-password-reset",
    status_code=status.HTTP_200_OK,
    response_model=RequestPasswordResetResponse,
    dependencies=[Depends(rate_limit)],
)
async def request_password_reset(
    request: RequestPasswordResetRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    code_sender: IResetCodeSender = Depends(get_reset_code_sender),
):
    """
    Request Password Reset

    Always answers 200 with the same message (no email enumeration).
    """
    use_case = RequestPasswordResetUseCase(
        uow,
        code_sender,
        expires_in=timedelta(minutes=ApplicationConfig.PASSWORD_RESET_EXPIRY_MINUTES),
    )
    result = await use_case.execute(request.email)

    if result.is_err():
        raise ServerError(result.error)

    return result.value


class ConfirmPasswordResetRequest(BaseModel):
    """Confirm password reset HTTP request payload"""

    email: EmailStr = Field(..., description="Student email address")
    code: str = Field(..., pattern=r"^[0-9]{6}$", description="Six digit reset code")
    new_password: str = Field(..., description="New password (8-72 chars)")


@router.post(
    "/confirm-password-reset",
    status_code=status.HTTP_200_OK,
    response_model=ConfirmPasswordResetResponse,
    dependencies=[Depends(rate_limit)],
)
async def confirm_password_reset(
    request: ConfirmPasswordResetRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    session_manager: SessionManager = Depends(get_session_manager),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
):
    """
    Confirm Password Reset

    Sets the new password and signs the student out of every device.

    Raises:
        - 400 Bad Request: Invalid code or password
        - 410 Gone: Expired code
        - 500 Internal Server Error: Server error
    """
    use_case = ConfirmPasswordResetUseCase(uow, session_manager, password_hasher)
    result = await use_case.execute(request.email, request.code, request.new_password)

    if result.is_err():
        error = result.error
        if error.code in ("INVALID_TOKEN", "INVALID_PASSWORD"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "TOKEN_EXPIRED":
            raise ClientError(error, status_code=status.HTTP_410_GONE)
        raise ServerError(error)

    return result.value
