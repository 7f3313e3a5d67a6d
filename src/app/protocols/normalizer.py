"""Protocolos de normalização de respostas dos provedores."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.domain.boleto import Boleto


class BoletoNormalizerProtocol(Protocol):
    """Converte o JSON de boleto do provedor em Boleto."""

    def normalize(self, payload: dict[str, Any]) -> Boleto: ...
