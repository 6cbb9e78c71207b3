"""
Typed failures raised below the use-case layer.

Token codec, session store and session manager raise these; the use cases
and the API layer translate them into Result errors and HTTP responses.
"""


class TokenError(Exception):
    """Token could not be accepted"""


class InvalidTokenError(TokenError):
    """Bad signature, malformed token or missing claims"""


class TokenExpiredError(TokenError):
    """Signature is valid but the exp claim is in the past"""


class PersistenceError(Exception):
    """The data store rejected or failed an operation"""


class SessionError(Exception):
    """Session is not live for the request"""


class SessionNotFoundError(SessionError):
    """No session row matches; superseded by another login or logged out"""


class SessionExpiredError(SessionError):
    """Session row exists but expires_at has passed"""


class SessionCreationError(Exception):
    """Login could not persist its session"""


class DuplicateRecordError(PersistenceError):
    """A unique constraint rejected the write"""
