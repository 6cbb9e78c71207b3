from uuid import UUID

from fastapi import APIRouter, Depends, status

from src.api.error import ClientError, ServerError
from src.app.services.session_manager import SessionManager
from src.app.services.token_codec import TokenCodec
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import AuthContext
from src.app.use_cases.sessions import LogoutAllResponse, RevokeSessionsUseCase
from src.depends import (
    get_session_manager,
    get_token_codec,
    get_unit_of_work,
    require_privileged,
)

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post(
    "/accounts/{account_id}/logout-all",
    status_code=status.HTTP_200_OK,
    response_model=LogoutAllResponse,
)
async def force_logout_all(
    account_id: UUID,
    context: AuthContext = Depends(require_privileged),
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_codec: TokenCodec = Depends(get_token_codec),
    session_manager: SessionManager = Depends(get_session_manager),
):
    """
    Force Logout

    Signs any account out of every device.

    Raises:
        - 401 Unauthorized: Caller not authenticated
        - 403 Forbidden: Caller is not an admin
        - 404 Not Found: Account does not exist
    """
    use_case = RevokeSessionsUseCase(uow, token_codec, session_manager)
    result = await use_case.force_logout_all(account_id, context.account.id)

    if result.is_err():
        error = result.error
        if error.code == "USER_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value
