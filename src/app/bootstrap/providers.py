"""Factory de adaptadores bancários.

Seleciona o provedor pela configuração (BANK_PROVIDER) ou pelo nome
informado e devolve um BankProviderProtocol. O código chamador nunca
importa um adaptador concreto.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.domain.enums import ProviderName
from config.settings import get_base_settings, get_sicoob_settings, get_sicredi_settings

if TYPE_CHECKING:
    import httpx

    from app.protocols.bank_provider import BankProviderProtocol

logger = logging.getLogger(__name__)


def resolve_provider_name(name: str | ProviderName | None = None) -> ProviderName:
    """Resolve nome do provedor (padrão: BANK_PROVIDER).

    Raises:
        ValueError: Se o provedor não é suportado.
    """
    raw = name.value if isinstance(name, ProviderName) else name
    value = (raw or get_base_settings().bank_provider).strip().upper()
    try:
        return ProviderName(value)
    except ValueError as exc:
        supported = ", ".join(member.value for member in ProviderName)
        raise ValueError(f"Provedor não suportado: {value}. Válidos: {supported}") from exc


def provider_settings_errors(provider: ProviderName) -> list[str]:
    """Erros de configuração do provedor (vazia = OK)."""
    if provider is ProviderName.SICOOB:
        return get_sicoob_settings().validate()
    return get_sicredi_settings().validate()


def create_bank_provider(
    name: str | ProviderName | None = None,
    *,
    transport: httpx.BaseTransport | None = None,
) -> BankProviderProtocol:
    """Cria o adaptador do provedor com settings do ambiente.

    Args:
        name: SICOOB|SICREDI (None = BANK_PROVIDER)
        transport: Transport httpx alternativo (testes)

    Raises:
        ValueError: Provedor desconhecido
        RuntimeError: Configuração do provedor inválida
    """
    provider = resolve_provider_name(name)
    errors = provider_settings_errors(provider)
    if errors:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {provider.value}:\n{details}")

    # Import local para manter app/ sem dependência estática de api/
    if provider is ProviderName.SICOOB:
        from api.connectors.sicoob import SicoobAdapter

        adapter: BankProviderProtocol = SicoobAdapter(get_sicoob_settings(), transport=transport)
    else:
        from api.connectors.sicredi import SicrediAdapter

        adapter = SicrediAdapter(get_sicredi_settings(), transport=transport)

    logger.info("bank_provider_created", extra={"provider": provider.value})
    return adapter
