"""Bootstrap da aplicação: inicialização e wiring.

Este módulo é o composition root: configura logging, valida settings e
conecta o adaptador bancário concreto ao BankProviderProtocol.

Uso:
    from app.bootstrap import initialize_app, get_bank_provider

    initialize_app()
    provider = get_bank_provider()
    boleto = provider.create_boleto(request)
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

from app.bootstrap.providers import (
    create_bank_provider,
    provider_settings_errors,
    resolve_provider_name,
)
from app.observability import get_correlation_id
from config.logging import configure_logging
from config.settings import get_base_settings

if TYPE_CHECKING:
    from app.protocols.bank_provider import BankProviderProtocol

# Nome do serviço para logs
SERVICE_NAME = "cobranca_bancos"

STRICT_VALIDATION_ENVS = {"staging", "production"}

logger = logging.getLogger(__name__)


def initialize_app() -> None:
    """Configura logging JSON estruturado com correlation_id.

    Deve ser chamada uma vez no início do processo.
    """
    settings = get_base_settings()
    configure_logging(
        level="DEBUG" if settings.debug else settings.log_level,
        service_name=settings.service_name or SERVICE_NAME,
        correlation_id_getter=get_correlation_id,
    )


def initialize_test_app() -> None:
    """Configura logging em nível DEBUG para testes."""
    configure_logging(
        level="DEBUG",
        service_name=f"{SERVICE_NAME}_test",
        correlation_id_getter=get_correlation_id,
    )


def validate_runtime_settings(provider: str | None = None) -> None:
    """Valida settings obrigatórias no startup.

    Em `staging`/`production` falha rápido para impedir boot inválido.
    Em `development` mantém alerta sem bloquear execução local.
    """
    base = get_base_settings()
    strict_mode = base.environment in STRICT_VALIDATION_ENVS
    errors = [f"base: {error}" for error in base.validate()]

    if not errors:
        name = resolve_provider_name(provider)
        errors.extend(
            f"{name.value.lower()}: {error}" for error in provider_settings_errors(name)
        )

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": base.environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": base.environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if strict_mode:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {base.environment}:\n{details}")


@lru_cache(maxsize=1)
def get_bank_provider() -> BankProviderProtocol:
    """Adaptador do provedor configurado (singleton por processo)."""
    return create_bank_provider()


__all__ = [
    "SERVICE_NAME",
    "create_bank_provider",
    "get_bank_provider",
    "initialize_app",
    "initialize_test_app",
    "validate_runtime_settings",
]
