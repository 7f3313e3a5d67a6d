"""Builder do payload de registro de boleto no Sicoob.

Valores monetários vão como número com duas casas (Decimal quantizado,
serializado como 150.00); datas em ISO. Campos opcionais ausentes não
entram no payload.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from app.domain.money import quantize_amount, quantize_rate

if TYPE_CHECKING:
    from api.connectors.common.catalog import ProviderCatalog
    from app.domain.boleto import BoletoRequest, ChargePolicy, Payer


def _put(payload: dict[str, Any], key: str, value: Any) -> None:
    if value is not None and value != "":
        payload[key] = value


class SicoobBoletoPayloadBuilder:
    """Traduz BoletoRequest para POST /cobranca-bancaria/v2/boletos."""

    def __init__(self, catalog: ProviderCatalog, numero_contrato: str) -> None:
        self._catalog = catalog
        self._numero_contrato = numero_contrato

    def build(self, request: BoletoRequest) -> dict[str, Any]:
        payload: dict[str, Any] = {"numeroContrato": self._numero_contrato}
        if request.nosso_numero:
            payload["nossoNumero"] = int(request.nosso_numero)
        payload["seuNumero"] = request.seu_numero
        payload["valor"] = quantize_amount(request.amount)
        payload["dataVencimento"] = request.due_date
        _put(payload, "dataEmissao", request.issue_date)
        payload["especieDocumento"] = self._catalog.code("species", request.species)

        if request.interest is not None:
            self._charge(payload, request.interest, "interest_type", "JurosMora")
        if request.fine is not None:
            self._charge(payload, request.fine, "fine_type", "Multa")

        for position, tier in enumerate(request.discounts, start=1):
            payload[f"tipoDesconto{position}"] = self._catalog.code(
                "discount_type", tier.discount_type
            )
            payload[f"valorDesconto{position}"] = quantize_amount(tier.amount)
            payload[f"dataDesconto{position}"] = tier.limit_date

        payload["pagador"] = self._payer(request.payer)

        for position, message in enumerate(request.messages, start=1):
            payload[f"mensagem{position}"] = message

        if request.hybrid_pix:
            payload["gerarPix"] = True
        return payload

    def _charge(
        self, payload: dict[str, Any], policy: ChargePolicy, kind: str, suffix: str
    ) -> None:
        payload[f"tipo{suffix}"] = self._catalog.code(kind, policy.charge_type)
        if policy.is_exempt:
            return
        if policy.value is not None:
            payload[f"valor{suffix}"] = quantize_rate(policy.value)
        _put(payload, f"data{suffix}", policy.start_date)

    def _payer(self, payer: Payer) -> dict[str, Any]:
        data: dict[str, Any] = {
            "tipoPessoa": self._catalog.code("person_type", payer.person_type),
            "cpfCnpj": payer.document,
            "nome": payer.name,
        }
        street = ", ".join(
            part for part in (payer.address, payer.address_number, payer.complement) if part
        )
        _put(data, "endereco", street)
        _put(data, "bairro", payer.neighborhood)
        _put(data, "cidade", payer.city)
        _put(data, "uf", payer.state)
        _put(data, "cep", payer.zip_code)
        _put(data, "email", payer.email)
        _put(data, "telefone", payer.phone)
        return data
