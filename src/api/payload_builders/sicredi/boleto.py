"""Builder do payload de registro de boleto no Sicredi.

Boleto híbrido (tipoCobranca HIBRIDO) gera também QR Code PIX, válido por
validadeAposVencimento dias após o vencimento.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from app.domain.money import quantize_amount, quantize_rate

if TYPE_CHECKING:
    from api.connectors.common.catalog import ProviderCatalog
    from app.domain.boleto import BoletoRequest, Payer


def _put(payload: dict[str, Any], key: str, value: Any) -> None:
    if value is not None and value != "":
        payload[key] = value


class SicrediBoletoPayloadBuilder:
    """Traduz BoletoRequest para POST /boletos."""

    def __init__(self, catalog: ProviderCatalog, codigo_beneficiario: str) -> None:
        self._catalog = catalog
        self._codigo_beneficiario = codigo_beneficiario

    def build(self, request: BoletoRequest) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "tipoCobranca": "HIBRIDO" if request.hybrid_pix else "NORMAL",
            "codigoBeneficiario": self._codigo_beneficiario,
            "pagador": self._payer(request.payer),
        }
        if request.final_beneficiary is not None:
            payload["beneficiarioFinal"] = self._final_beneficiary(request.final_beneficiary)
        payload["especieDocumento"] = self._catalog.code("species", request.species)
        _put(payload, "nossoNumero", request.nosso_numero)
        payload["seuNumero"] = request.seu_numero
        payload["dataVencimento"] = request.due_date
        payload["valor"] = quantize_amount(request.amount)
        _put(payload, "diasProtestoAuto", request.protest_days)
        if request.hybrid_pix:
            _put(payload, "validadeAposVencimento", request.pix_validity_days)

        if request.discounts:
            payload["tipoDesconto"] = self._catalog.code("discount_type", request.discount_type)
            for position, tier in enumerate(request.discounts, start=1):
                payload[f"valorDesconto{position}"] = quantize_amount(tier.amount)
                payload[f"dataDesconto{position}"] = tier.limit_date

        if request.interest is not None and not request.interest.is_exempt:
            payload["tipoJuros"] = self._catalog.code("interest_type", request.interest.charge_type)
            _put(payload, "juros", _rate(request.interest.value))
        if request.fine is not None and not request.fine.is_exempt:
            # Valida tipo: multa Sicredi só percentual
            self._catalog.code("fine_type", request.fine.charge_type)
            _put(payload, "multa", _rate(request.fine.value))

        if request.messages:
            payload["mensagens"] = list(request.messages)
        return payload

    def _payer(self, payer: Payer) -> dict[str, Any]:
        data: dict[str, Any] = {
            "tipoPessoa": self._catalog.code("person_type", payer.person_type),
            "documento": payer.document,
            "nome": payer.name,
        }
        street = ", ".join(
            part for part in (payer.address, payer.address_number, payer.complement) if part
        )
        _put(data, "endereco", street)
        _put(data, "cidade", payer.city)
        _put(data, "uf", payer.state)
        _put(data, "cep", payer.zip_code)
        _put(data, "telefone", payer.phone)
        _put(data, "email", payer.email)
        return data

    def _final_beneficiary(self, beneficiary: Payer) -> dict[str, Any]:
        data: dict[str, Any] = {
            "tipoPessoa": self._catalog.code("person_type", beneficiary.person_type),
            "documento": beneficiary.document,
            "nome": beneficiary.name,
        }
        _put(data, "logradouro", beneficiary.address)
        _put(data, "complemento", beneficiary.complement)
        _put(data, "numeroEndereco", beneficiary.address_number)
        _put(data, "cidade", beneficiary.city)
        _put(data, "uf", beneficiary.state)
        _put(data, "cep", beneficiary.zip_code)
        _put(data, "telefone", beneficiary.phone)
        _put(data, "email", beneficiary.email)
        return data


def _rate(value: Any) -> Any:
    return quantize_rate(value) if value is not None else None
