"""Autenticação OAuth2 dos provedores bancários.

Cada adaptador possui exatamente um TokenManager; o token nunca é
compartilhado entre instâncias.
"""

from .grants import ClientCredentialsGrant, OAuthGrant, PasswordGrant
from .rwlock import LockTimeoutError, ReadWriteLock
from .token import EXPIRY_SKEW_SECONDS, Token, TokenState
from .token_manager import TokenManager

__all__ = [
    "EXPIRY_SKEW_SECONDS",
    "ClientCredentialsGrant",
    "LockTimeoutError",
    "OAuthGrant",
    "PasswordGrant",
    "ReadWriteLock",
    "Token",
    "TokenManager",
    "TokenState",
]
