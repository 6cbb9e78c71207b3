"""
Token Codec

Signs and verifies the access/refresh JWTs. Each token class has its own
signing key and TTL; verify picks the key from the token's type claim and
then checks signature and expiry with it.
"""

import hashlib
import uuid
from datetime import UTC, datetime, timedelta
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import BaseModel, ValidationError

from src.domain.entities import TokenType
from src.domain.errors import InvalidTokenError, TokenExpiredError

ALGORITHM = "HS256"

# Reported to clients as expires_in; fixed, not derived from the access TTL
ACCESS_TOKEN_EXPIRES_IN = 900


class TokenClaims(BaseModel):
    """Decoded payload of a verified token"""

    user_id: str
    email: str
    type: TokenType
    session_id: Optional[str] = None
    iat: Optional[int] = None
    exp: int

    @property
    def is_legacy(self) -> bool:
        return self.session_id is None


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str
    expires_in: int = ACCESS_TOKEN_EXPIRES_IN


class TokenCodec:
    def __init__(
        self,
        access_secret: str,
        refresh_secret: Optional[str] = None,
        access_ttl: timedelta = timedelta(minutes=15),
        refresh_ttl: timedelta = timedelta(days=30),
    ):
        self.access_secret = access_secret
        self.refresh_secret = refresh_secret or access_secret
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl

    def _secret_for(self, token_type: TokenType) -> str:
        if token_type == TokenType.refresh:
            return self.refresh_secret
        return self.access_secret

    def _issue(
        self,
        token_type: TokenType,
        subject_id: str,
        login_id: str,
        session_id: Optional[str],
        ttl: timedelta,
    ) -> str:
        now = datetime.now(UTC)
        payload = {
            "user_id": str(subject_id),
            "email": login_id,
            "type": token_type.value,
            "iat": now,
            "exp": now + ttl,
            "jti": uuid.uuid4().hex,
        }
        # Tokens without session_id are legacy tokens; never emit a null claim
        if session_id is not None:
            payload["session_id"] = str(session_id)
        return jwt.encode(payload, self._secret_for(token_type), algorithm=ALGORITHM)

    def issue_access(
        self, subject_id: str, login_id: str, session_id: Optional[str] = None
    ) -> str:
        """Short-lived token authorizing API requests"""
        return self._issue(TokenType.access, subject_id, login_id, session_id, self.access_ttl)

    def issue_refresh(
        self, subject_id: str, login_id: str, session_id: Optional[str] = None
    ) -> str:
        """Long-lived token used to mint new access tokens"""
        return self._issue(TokenType.refresh, subject_id, login_id, session_id, self.refresh_ttl)

    def issue_pair(
        self, subject_id: str, login_id: str, session_id: Optional[str] = None
    ) -> TokenPair:
        return TokenPair(
            access_token=self.issue_access(subject_id, login_id, session_id),
            refresh_token=self.issue_refresh(subject_id, login_id, session_id),
        )

    def verify(self, token: str, verify_exp: bool = True) -> TokenClaims:
        """
        Verify signature and expiry and return the decoded claims.

        verify_exp=False still checks the signature; logout uses it so an
        expired refresh token can end its session.

        Raises:
            TokenExpiredError: signature valid, exp in the past
            InvalidTokenError: anything else (bad signature, malformed, bad claims)
        """
        try:
            unverified = jwt.get_unverified_claims(token)
            token_type = TokenType(unverified.get("type"))
        except (JWTError, ValueError, AttributeError) as exc:
            raise InvalidTokenError("Malformed token") from exc

        try:
            payload = jwt.decode(
                token,
                self._secret_for(token_type),
                algorithms=[ALGORITHM],
                options={"verify_exp": verify_exp},
            )
        except ExpiredSignatureError as exc:
            raise TokenExpiredError("Token expired") from exc
        except JWTError as exc:
            raise InvalidTokenError("Invalid token") from exc

        try:
            return TokenClaims.model_validate(payload)
        except ValidationError as exc:
            raise InvalidTokenError("Token is missing required claims") from exc

    @staticmethod
    def hash_refresh_token(refresh_token: str) -> str:
        """SHA-256 hex digest; the only form of a refresh token that is stored"""
        return hashlib.sha256(refresh_token.encode()).hexdigest()
