"""Settings base do serviço de cobrança.

Configurações comuns a todos os provedores bancários.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

Environment = Literal["development", "staging", "production"]

# Ambiente do provedor bancário (independente do ambiente do serviço)
BankEnvironment = Literal["sandbox", "production"]

SUPPORTED_PROVIDERS = frozenset({"SICOOB", "SICREDI"})


@dataclass(frozen=True)
class BaseSettings:
    """Configurações base do sistema.

    Attributes:
        environment: Ambiente de execução (development|staging|production)
        service_name: Nome do serviço para logs
        debug: Modo debug ativo
        log_level: Nível de log do handler raiz
        bank_provider: Provedor bancário padrão (SICOOB|SICREDI)
    """

    environment: Environment = "development"
    service_name: str = "cobranca-bancos"
    debug: bool = False
    log_level: str = "INFO"
    bank_provider: str = "SICREDI"

    @property
    def is_production(self) -> bool:
        """Retorna True se ambiente é produção."""
        return self.environment == "production"

    def validate(self) -> list[str]:
        """Valida configurações base.

        Returns:
            Lista de erros (vazia = OK).
        """
        errors: list[str] = []

        valid_envs = {"development", "staging", "production"}
        if self.environment not in valid_envs:
            errors.append(f"ENVIRONMENT inválido: {self.environment}")

        if not self.service_name:
            errors.append("SERVICE_NAME não pode ser vazio")

        if self.bank_provider not in SUPPORTED_PROVIDERS:
            errors.append(f"BANK_PROVIDER não suportado: {self.bank_provider}")

        return errors


def _parse_environment(env_str: str) -> Environment:
    """Converte string de ambiente para tipo Environment."""
    env_lower = env_str.lower()
    if env_lower in ("production", "prod"):
        return "production"
    if env_lower in ("staging", "stage"):
        return "staging"
    return "development"


def parse_bank_environment(env_str: str) -> BankEnvironment:
    """Converte string para BankEnvironment (padrão: sandbox)."""
    if env_str.strip().lower() in ("production", "prod", "producao"):
        return "production"
    return "sandbox"


def _load_base_from_env() -> BaseSettings:
    """Carrega BaseSettings de variáveis de ambiente."""
    return BaseSettings(
        environment=_parse_environment(os.getenv("ENVIRONMENT", "development")),
        service_name=os.getenv("SERVICE_NAME", "cobranca-bancos"),
        debug=os.getenv("DEBUG", "").lower() in ("true", "1", "yes"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        bank_provider=os.getenv("BANK_PROVIDER", "SICREDI").strip().upper(),
    )


@lru_cache(maxsize=1)
def get_base_settings() -> BaseSettings:
    """Retorna instância cacheada de BaseSettings."""
    return _load_base_from_env()
