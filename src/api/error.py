from fastapi import status
from src.libs.result import Error


class ClientError(Exception):
    """
    Request failed because of the client.

    expose_code=False keeps the machine code out of the response body, used
    for generic authentication failures.
    """

    def __init__(
        self,
        base_error: Error,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        expose_code: bool = True,
    ):
        self.base_error = base_error
        self.status_code = status_code
        self.expose_code = expose_code
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error, public_message: str = "Internal server error"):
        self.base_error = base_error
        self.public_message = public_message
        super().__init__(base_error.message)
