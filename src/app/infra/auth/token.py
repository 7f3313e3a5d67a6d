"""Token OAuth2 em memória e sua máquina de estados."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

# Margem antes da expiração em que o token deixa de ser usado
EXPIRY_SKEW_SECONDS = 30.0


class TokenState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    VALID = "valid"
    NEAR_EXPIRY = "near_expiry"
    EXPIRED = "expired"
    REFRESH_FAILED = "refresh_failed"


@dataclass(frozen=True)
class Token:
    """Par access/refresh com instantes absolutos de expiração (epoch)."""

    access_token: str
    expires_at: float
    token_type: str = "Bearer"
    refresh_token: str | None = None
    refresh_expires_at: float | None = None
    scope: str | None = None

    def is_valid(self, now: float, skew: float = EXPIRY_SKEW_SECONDS) -> bool:
        return now < self.expires_at - skew

    def can_refresh(self, now: float, skew: float = EXPIRY_SKEW_SECONDS) -> bool:
        if not self.refresh_token or self.refresh_expires_at is None:
            return False
        return now < self.refresh_expires_at - skew

    def state(self, now: float, skew: float = EXPIRY_SKEW_SECONDS) -> TokenState:
        if self.is_valid(now, skew):
            return TokenState.VALID
        if self.can_refresh(now, skew):
            return TokenState.NEAR_EXPIRY
        return TokenState.EXPIRED

    @classmethod
    def from_response(cls, payload: Any, now: float, *, keep_refresh: bool) -> Token:
        """Monta Token a partir do JSON do endpoint de token.

        Args:
            payload: JSON decodificado
            now: Instante da emissão (epoch)
            keep_refresh: False para grants sem refresh (client_credentials)

        Raises:
            ValueError: Se access_token/expires_in ausentes ou inválidos.
        """
        if not isinstance(payload, dict):
            raise ValueError("Resposta de token não é um objeto JSON")
        access_token = payload.get("access_token")
        if not access_token or not isinstance(access_token, str):
            raise ValueError("access_token ausente na resposta de token")
        expires_in = float(payload.get("expires_in") or 0)
        if expires_in <= 0:
            raise ValueError("expires_in ausente ou inválido na resposta de token")

        refresh_token = None
        refresh_expires_at = None
        if keep_refresh and payload.get("refresh_token"):
            refresh_token = str(payload["refresh_token"])
            refresh_expires_in = float(payload.get("refresh_expires_in") or 0)
            if refresh_expires_in > 0:
                refresh_expires_at = now + refresh_expires_in

        return cls(
            access_token=access_token,
            expires_at=now + expires_in,
            token_type=str(payload.get("token_type") or "Bearer"),
            refresh_token=refresh_token,
            refresh_expires_at=refresh_expires_at,
            scope=payload.get("scope"),
        )
