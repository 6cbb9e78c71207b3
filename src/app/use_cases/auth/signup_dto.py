"""
Signup Use Case DTOs (Data Transfer Objects)

Command/Response pattern for clean architecture separation:
- SignupCommand: Input to use case (validated business intent)
- SignupResponse: Output from use case (structured result)
"""

from pydantic import BaseModel

from src.app.services.token_codec import TokenPair
from .dtos import StudentInfo


class SignupCommand(BaseModel):
    """
    Signup command - represents validated signup intent

    Created by API layer after request validation passes.
    Contains only business-relevant data (no HTTP concerns).
    """

    name: str
    email: str
    username: str
    phone: str
    password: str


class SignupResponse(BaseModel):
    """
    Signup response - structured output from use case

    Same shape as a login response: the new student is signed in.
    """

    success: bool = True
    session: TokenPair
    user: StudentInfo
