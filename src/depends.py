from datetime import timedelta
from typing import Optional

from fastapi import Depends, Header, Request, status
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError, ServerError
from src.app.services.password_hasher import PasswordHasher
from src.app.services.reset_code_sender import IResetCodeSender, LoggingResetCodeSender
from src.app.services.session_manager import SessionManager
from src.app.services.token_codec import TokenCodec
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.verification_code_sender import (
    IVerificationCodeSender,
    LoggingVerificationCodeSender,
)
from src.app.use_cases.auth import AuthContext, AuthenticateRequestUseCase
from src.libs.result import Error

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

# Codes the client may act on; other gate failures get a bare message
EXPOSED_AUTH_CODES = {"TOKEN_EXPIRED", "SESSION_INVALIDATED", "SESSION_EXPIRED"}

_token_codec = TokenCodec(
    access_secret=ApplicationConfig.JWT_SECRET,
    refresh_secret=ApplicationConfig.JWT_REFRESH_SECRET,
    access_ttl=timedelta(minutes=ApplicationConfig.JWT_ACCESS_EXPIRY_MINUTES),
    refresh_ttl=timedelta(days=ApplicationConfig.JWT_REFRESH_EXPIRY_DAYS),
)
_password_hasher = PasswordHasher(rounds=ApplicationConfig.BCRYPT_ROUNDS)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_token_codec() -> TokenCodec:
    return _token_codec


def get_password_hasher() -> PasswordHasher:
    return _password_hasher


def get_reset_code_sender() -> IResetCodeSender:
    return LoggingResetCodeSender()


def get_verification_code_sender() -> IVerificationCodeSender:
    return LoggingVerificationCodeSender()


def get_session_manager(
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_codec: TokenCodec = Depends(get_token_codec),
) -> SessionManager:
    return SessionManager(
        uow,
        token_codec,
        session_ttl=timedelta(days=ApplicationConfig.SESSION_TTL_DAYS),
    )


def get_client_metadata(
    request: Request,
    user_agent: Optional[str] = Header(None),
    x_forwarded_for: Optional[str] = Header(None),
) -> dict:
    """Device metadata stored on new sessions; informational only"""
    ip_address = None
    if x_forwarded_for:
        ip_address = x_forwarded_for.split(",")[0].strip() or None
    elif request.client is not None:
        ip_address = request.client.host
    return {"user_agent": user_agent, "ip_address": ip_address}


async def get_current_account(
    authorization: Optional[str] = Header(None),
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_codec: TokenCodec = Depends(get_token_codec),
    session_manager: SessionManager = Depends(get_session_manager),
) -> AuthContext:
    """
    Dependency guarding authenticated routes.

    Runs the authentication gate and translates its errors into HTTP:
    401 for every token, account and session failure, 500 when the data
    store fails.

    Returns:
        AuthContext with the resolved account (privileged or standard)

    Raises:
        ClientError: 401, with code TOKEN_EXPIRED, SESSION_INVALIDATED or
            SESSION_EXPIRED where the client can act on it
        ServerError: 500 "Authentication failed"
    """
    use_case = AuthenticateRequestUseCase(
        uow,
        token_codec,
        session_manager,
        touch_sessions=ApplicationConfig.SESSION_TOUCH_ON_REQUEST,
    )
    result = await use_case.execute(authorization)

    if result.is_err():
        error = result.error
        if error.code == "AUTHENTICATION_FAILED":
            raise ServerError(error, public_message="Authentication failed")
        raise ClientError(
            error,
            status_code=status.HTTP_401_UNAUTHORIZED,
            expose_code=error.code in EXPOSED_AUTH_CODES,
        )

    return result.value


async def require_privileged(
    context: AuthContext = Depends(get_current_account),
) -> AuthContext:
    if not context.is_privileged:
        raise ClientError(
            Error("FORBIDDEN", "Admin access required"),
            status_code=status.HTTP_403_FORBIDDEN,
        )
    return context
