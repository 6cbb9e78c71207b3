from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from src.api.error import ClientError, ServerError
from src.app.services.session_manager import SessionManager
from src.app.services.token_codec import TokenCodec
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import AuthContext
from src.app.use_cases.sessions import (
    LogoutAllResponse,
    LogoutResponse,
    RevokeSessionsUseCase,
)
from src.depends import (
    get_current_account,
    get_session_manager,
    get_token_codec,
    get_unit_of_work,
)

router = APIRouter(prefix="/auth", tags=["Sessions"])


class LogoutRequest(BaseModel):
    """Logout HTTP request payload"""

    refresh_token: str = Field(..., min_length=1, description="Refresh token of the session")


@router.post("/logout", status_code=status.HTTP_200_OK, response_model=LogoutResponse)
async def logout(
    request: LogoutRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_codec: TokenCodec = Depends(get_token_codec),
    session_manager: SessionManager = Depends(get_session_manager),
):
    """
    Logout

    Deletes the session the refresh token belongs to. Repeating the call
    succeeds.

    Raises:
        - 401 Unauthorized: Token signature invalid or not a refresh token
    """
    use_case = RevokeSessionsUseCase(uow, token_codec, session_manager)
    result = await use_case.logout(request.refresh_token)

    if result.is_err():
        error = result.error
        if error.code == "INVALID_TOKEN":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        raise ServerError(error)

    return result.value


@router.post(
    "/logout-all", status_code=status.HTTP_200_OK, response_model=LogoutAllResponse
)
async def logout_all(
    context: AuthContext = Depends(get_current_account),
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_codec: TokenCodec = Depends(get_token_codec),
    session_manager: SessionManager = Depends(get_session_manager),
):
    """
    Logout From All Devices

    Deletes every session of the calling account, including the current one.
    """
    use_case = RevokeSessionsUseCase(uow, token_codec, session_manager)
    result = await use_case.logout_all(context.account.id)

    if result.is_err():
        raise ServerError(result.error)

    return result.value
