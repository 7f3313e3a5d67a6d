"""Settings do provedor Sicoob (API Cobrança Bancária v2 + PIX).

Autenticação OAuth2 client_credentials; em produção a API exige mTLS com
o certificado ICP-Brasil cadastrado no portal do desenvolvedor.
Portal: https://developers.sicoob.com.br/portal/
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from config.settings.base import BankEnvironment, parse_bank_environment

SICOOB_SANDBOX_AUTH_URL: str = "https://sandbox.sicoob.com.br/sicoob/sandbox/oauth/token"
SICOOB_SANDBOX_API_URL: str = "https://sandbox.sicoob.com.br/sicoob/sandbox"
SICOOB_PRODUCTION_AUTH_URL: str = (
    "https://auth.sicoob.com.br/auth/realms/cooperado/protocol/openid-connect/token"
)
SICOOB_PRODUCTION_API_URL: str = "https://api.sicoob.com.br"

SICOOB_SCOPES: tuple[str, ...] = (
    "cobranca_boletos_consultar",
    "cobranca_boletos_incluir",
    "cobranca_boletos_alterar",
    "cobranca_pagadores_consultar",
    "cob.read",
    "cob.write",
    "pix.read",
    "pix.write",
)


@dataclass(frozen=True)
class SicoobSettings:
    """Credenciais e parâmetros do Sicoob.

    Attributes:
        client_id: Client ID do aplicativo no portal
        client_secret: Client secret do aplicativo
        numero_contrato: Número do contrato de cobrança
        api_key: Valor opcional do header x-api-key
        environment: sandbox|production
        cert_path: Caminho do certificado PEM (mTLS, produção)
        key_path: Caminho da chave privada PEM (mTLS, produção)
        request_timeout_seconds: Timeout padrão por requisição
        max_retries: Máximo de novas tentativas em leituras idempotentes
    """

    client_id: str = ""
    client_secret: str = ""
    numero_contrato: str = ""
    api_key: str = ""

    environment: BankEnvironment = "sandbox"

    cert_path: str = ""
    key_path: str = ""

    request_timeout_seconds: float = 30.0
    max_retries: int = 3

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def auth_url(self) -> str:
        """URL do endpoint de token conforme ambiente."""
        if self.is_production:
            return SICOOB_PRODUCTION_AUTH_URL
        return SICOOB_SANDBOX_AUTH_URL

    @property
    def api_base_url(self) -> str:
        """URL base da API conforme ambiente."""
        if self.is_production:
            return SICOOB_PRODUCTION_API_URL
        return SICOOB_SANDBOX_API_URL

    @property
    def scope(self) -> str:
        return " ".join(SICOOB_SCOPES)

    @property
    def uses_mtls(self) -> bool:
        """mTLS só é usado contra a URL de produção."""
        return self.is_production and bool(self.cert_path) and bool(self.key_path)

    def validate(self) -> list[str]:
        """Valida configurações mínimas do Sicoob.

        Returns:
            Lista de erros de validação (vazia = tudo OK).
        """
        errors: list[str] = []

        if not self.client_id:
            errors.append("SICOOB_CLIENT_ID não configurado")

        if self.is_production and not self.client_secret:
            errors.append("SICOOB_CLIENT_SECRET não configurado")

        if not self.numero_contrato:
            errors.append("SICOOB_NUMERO_CONTRATO não configurado")

        if self.is_production and not self.uses_mtls:
            errors.append("SICOOB_CERT_PATH e SICOOB_KEY_PATH são obrigatórios em produção")

        if bool(self.cert_path) != bool(self.key_path):
            errors.append("SICOOB_CERT_PATH e SICOOB_KEY_PATH devem ser informados juntos")

        if self.request_timeout_seconds <= 0:
            errors.append("SICOOB_REQUEST_TIMEOUT_SECONDS deve ser > 0")

        if self.max_retries < 0:
            errors.append("SICOOB_MAX_RETRIES deve ser >= 0")

        return errors


def _load_from_env() -> SicoobSettings:
    """Carrega SicoobSettings a partir de variáveis de ambiente."""
    return SicoobSettings(
        client_id=os.getenv("SICOOB_CLIENT_ID", ""),
        client_secret=os.getenv("SICOOB_CLIENT_SECRET", ""),
        numero_contrato=os.getenv("SICOOB_NUMERO_CONTRATO", ""),
        api_key=os.getenv("SICOOB_API_KEY", ""),
        environment=parse_bank_environment(os.getenv("SICOOB_ENVIRONMENT", "sandbox")),
        cert_path=os.getenv("SICOOB_CERT_PATH", ""),
        key_path=os.getenv("SICOOB_KEY_PATH", ""),
        request_timeout_seconds=float(os.getenv("SICOOB_REQUEST_TIMEOUT_SECONDS", "30")),
        max_retries=int(os.getenv("SICOOB_MAX_RETRIES", "3")),
    )


@lru_cache(maxsize=1)
def get_sicoob_settings() -> SicoobSettings:
    """Retorna instância cacheada de SicoobSettings."""
    return _load_from_env()
