"""Settings do provedor Sicredi (API Cobrança Boleto v1 + PIX).

Autenticação OAuth2 password com refresh_token. Todas as chamadas levam
x-api-key (token do Portal do Desenvolvedor) e os headers cooperativa,
posto e codigoBeneficiario.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from config.settings.base import BankEnvironment, parse_bank_environment

SICREDI_PRODUCTION_AUTH_URL: str = "https://api-parceiro.sicredi.com.br/auth/openapi/token"
SICREDI_PRODUCTION_API_URL: str = "https://api-parceiro.sicredi.com.br/cobranca/boleto/v1"
SICREDI_SANDBOX_AUTH_URL: str = "https://api-parceiro.sicredi.com.br/sb/auth/openapi/token"
SICREDI_SANDBOX_API_URL: str = "https://api-parceiro.sicredi.com.br/sb/cobranca/boleto/v1"

SICREDI_PRODUCTION_PIX_URL: str = "https://api-pix.sicredi.com.br/api/v2"
SICREDI_SANDBOX_PIX_URL: str = "https://api-pix-h.sicredi.com.br/api/v2"

# Header "context" e scope exigidos pelo endpoint de token
SICREDI_AUTH_CONTEXT: str = "COBRANCA"
SICREDI_AUTH_SCOPE: str = "cobranca"


@dataclass(frozen=True)
class SicrediSettings:
    """Credenciais e parâmetros do Sicredi.

    Attributes:
        api_key: x-api-key (Access Token do Portal do Desenvolvedor)
        username: Código do beneficiário + código da cooperativa
        password: Código de acesso gerado no Internet Banking
        cooperativa: Código da cooperativa (4 dígitos)
        posto: Código do posto/agência (2 dígitos)
        codigo_beneficiario: Código do beneficiário (5 dígitos)
        environment: sandbox|production
        pix_base_url: URL base da API PIX (vazio = padrão do ambiente)
        request_timeout_seconds: Timeout padrão por requisição
        max_retries: Máximo de novas tentativas em leituras idempotentes
    """

    api_key: str = ""
    username: str = ""
    password: str = ""

    cooperativa: str = ""
    posto: str = ""
    codigo_beneficiario: str = ""

    environment: BankEnvironment = "sandbox"
    pix_base_url: str = ""

    request_timeout_seconds: float = 30.0
    max_retries: int = 3

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def auth_url(self) -> str:
        if self.is_production:
            return SICREDI_PRODUCTION_AUTH_URL
        return SICREDI_SANDBOX_AUTH_URL

    @property
    def api_base_url(self) -> str:
        if self.is_production:
            return SICREDI_PRODUCTION_API_URL
        return SICREDI_SANDBOX_API_URL

    @property
    def pix_api_base_url(self) -> str:
        if self.pix_base_url:
            return self.pix_base_url.rstrip("/")
        if self.is_production:
            return SICREDI_PRODUCTION_PIX_URL
        return SICREDI_SANDBOX_PIX_URL

    def validate(self) -> list[str]:
        """Valida configurações mínimas do Sicredi.

        Returns:
            Lista de erros de validação (vazia = tudo OK).
        """
        errors: list[str] = []

        if not self.api_key:
            errors.append("SICREDI_API_KEY não configurado")

        if not self.username or not self.password:
            errors.append("SICREDI_USERNAME e SICREDI_PASSWORD são obrigatórios")

        if len(self.cooperativa) != 4 or not self.cooperativa.isdigit():
            errors.append("SICREDI_COOPERATIVA deve ter 4 dígitos")

        if len(self.posto) != 2 or not self.posto.isdigit():
            errors.append("SICREDI_POSTO deve ter 2 dígitos")

        if len(self.codigo_beneficiario) != 5 or not self.codigo_beneficiario.isdigit():
            errors.append("SICREDI_CODIGO_BENEFICIARIO deve ter 5 dígitos")

        if self.request_timeout_seconds <= 0:
            errors.append("SICREDI_REQUEST_TIMEOUT_SECONDS deve ser > 0")

        if self.max_retries < 0:
            errors.append("SICREDI_MAX_RETRIES deve ser >= 0")

        return errors


def _load_from_env() -> SicrediSettings:
    """Carrega SicrediSettings a partir de variáveis de ambiente."""
    return SicrediSettings(
        api_key=os.getenv("SICREDI_API_KEY", ""),
        username=os.getenv("SICREDI_USERNAME", ""),
        password=os.getenv("SICREDI_PASSWORD", ""),
        cooperativa=os.getenv("SICREDI_COOPERATIVA", ""),
        posto=os.getenv("SICREDI_POSTO", ""),
        codigo_beneficiario=os.getenv("SICREDI_CODIGO_BENEFICIARIO", ""),
        environment=parse_bank_environment(os.getenv("SICREDI_ENVIRONMENT", "sandbox")),
        pix_base_url=os.getenv("SICREDI_PIX_BASE_URL", ""),
        request_timeout_seconds=float(os.getenv("SICREDI_REQUEST_TIMEOUT_SECONDS", "30")),
        max_retries=int(os.getenv("SICREDI_MAX_RETRIES", "3")),
    )


@lru_cache(maxsize=1)
def get_sicredi_settings() -> SicrediSettings:
    """Retorna instância cacheada de SicrediSettings."""
    return _load_from_env()
