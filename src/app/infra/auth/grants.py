"""Grants OAuth2 suportados pelos provedores.

Cada grant sabe montar o formulário do endpoint de token e os headers
extras exigidos pelo banco. O corpo é sempre
application/x-www-form-urlencoded.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol


class OAuthGrant(Protocol):
    supports_refresh: bool
    extra_headers: dict[str, str]

    def token_form(self) -> dict[str, str]: ...

    def refresh_form(self, refresh_token: str) -> dict[str, str]: ...


@dataclass(frozen=True)
class ClientCredentialsGrant:
    """grant_type=client_credentials (Sicoob). Nunca faz refresh."""

    client_id: str
    client_secret: str
    scope: str
    extra_headers: dict[str, str] = field(default_factory=dict)
    supports_refresh: bool = field(default=False, init=False)

    def token_form(self) -> dict[str, str]:
        form = {"grant_type": "client_credentials", "client_id": self.client_id}
        if self.client_secret:
            form["client_secret"] = self.client_secret
        form["scope"] = self.scope
        return form

    def refresh_form(self, refresh_token: str) -> dict[str, str]:
        raise NotImplementedError("client_credentials não suporta refresh_token")


@dataclass(frozen=True)
class PasswordGrant:
    """grant_type=password com refresh_token (Sicredi)."""

    username: str
    password: str
    scope: str
    extra_headers: dict[str, str] = field(default_factory=dict)
    supports_refresh: bool = field(default=True, init=False)

    def token_form(self) -> dict[str, str]:
        return {
            "grant_type": "password",
            "username": self.username,
            "password": self.password,
            "scope": self.scope,
        }

    def refresh_form(self, refresh_token: str) -> dict[str, str]:
        return {"grant_type": "refresh_token", "refresh_token": refresh_token}
