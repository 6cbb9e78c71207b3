"""
Domain Enums

Enumeration types shared by entities, tokens and account contexts.
"""

from enum import Enum


class TokenType(str, Enum):
    """Token class carried in the type claim"""

    access = "access"
    refresh = "refresh"


class AccountKind(str, Enum):
    """Which account table a subject resolved from"""

    standard = "standard"
    privileged = "privileged"


class AdminRole(str, Enum):
    """Role marker for privileged accounts"""

    admin = "admin"
