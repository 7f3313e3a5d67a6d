"""Protocolos de construção de payload de fio dos provedores."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.domain.boleto import BoletoRequest
    from app.domain.pix import PixChargeRequest


class BoletoPayloadBuilderProtocol(Protocol):
    """Traduz BoletoRequest para o JSON de registro do provedor."""

    def build(self, request: BoletoRequest) -> dict[str, Any]: ...


class PixPayloadBuilderProtocol(Protocol):
    """Traduz PixChargeRequest para o corpo de /cob."""

    def build(self, request: PixChargeRequest) -> dict[str, Any]: ...
