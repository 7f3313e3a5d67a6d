"""Payload de criação de cobrança PIX imediata.

Formato BACEN compartilhado por Sicoob e Sicredi. valor.original é string
decimal com duas casas ("150.00"), não número.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from app.domain.money import format_amount

if TYPE_CHECKING:
    from app.domain.pix import PixChargeRequest


class PixChargePayloadBuilder:
    """Builder para o corpo de PUT/POST /cob."""

    def build(self, request: PixChargeRequest) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "calendario": {"expiracao": request.expiration_seconds},
        }
        if request.debtor is not None:
            document_key = "cnpj" if request.debtor.is_company else "cpf"
            payload["devedor"] = {
                document_key: request.debtor.document,
                "nome": request.debtor.name,
            }
        payload["valor"] = {"original": format_amount(request.amount)}
        payload["chave"] = request.key
        if request.payer_request:
            payload["solicitacaoPagador"] = request.payer_request
        if request.additional_info:
            payload["infoAdicionais"] = [
                {"nome": info.name, "valor": info.value} for info in request.additional_info
            ]
        return payload
