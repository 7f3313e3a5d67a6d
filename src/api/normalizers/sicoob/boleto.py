"""Normalizer de boleto Sicoob.

As respostas vêm envelopadas em {"resultado": ...} (objeto na emissão,
lista na consulta/listagem). Descontos chegam como campos numerados
(tipoDesconto1, valorDesconto1, dataDesconto1, ...).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from api.normalizers.bank_shared import first_present, nested_object, parse_date, text_or_none
from app.domain.boleto import Boleto, DiscountTier
from app.domain.enums import DiscountType
from app.domain.money import parse_amount

if TYPE_CHECKING:
    from api.connectors.common.catalog import ProviderCatalog


def unwrap_resultado(data: Any) -> list[dict[str, Any]]:
    """Extrai a lista de boletos do envelope "resultado".

    Aceita {"resultado": [...]}, {"resultado": {...}}, lista crua ou o
    próprio objeto de boleto.
    """
    if isinstance(data, dict) and "resultado" in data:
        data = data["resultado"]
    if data is None:
        return []
    if isinstance(data, dict):
        return [data]
    if isinstance(data, list):
        return [item for item in data if isinstance(item, dict)]
    raise ValueError("Envelope de resposta Sicoob inesperado")


class SicoobBoletoNormalizer:
    """Converte boleto Sicoob em Boleto."""

    def __init__(self, catalog: ProviderCatalog) -> None:
        self._catalog = catalog

    def normalize(self, payload: dict[str, Any]) -> Boleto:
        nosso_numero = text_or_none(payload.get("nossoNumero"))
        if nosso_numero is None:
            raise ValueError("Boleto Sicoob sem nossoNumero")

        payer = nested_object(payload, "pagador")
        return Boleto(
            nosso_numero=nosso_numero,
            seu_numero=text_or_none(payload.get("seuNumero")),
            linha_digitavel=text_or_none(payload.get("linhaDigitavel")),
            codigo_barras=text_or_none(payload.get("codigoBarras")),
            amount=parse_amount(payload.get("valor")),
            issue_date=parse_date(payload.get("dataEmissao")),
            due_date=parse_date(payload.get("dataVencimento")),
            status=text_or_none(first_present(payload, "situacaoBoleto", "situacao")),
            txid=text_or_none(first_present(payload, "txId", "txid")),
            pix_copia_e_cola=text_or_none(first_present(payload, "qrCode", "pixCopiaECola")),
            payer_name=text_or_none(payer.get("nome")),
            payer_document=text_or_none(payer.get("cpfCnpj")),
            discounts=self._discounts(payload),
            paid_amount=parse_amount(first_present(payload, "valorPago", "valorLiquidado")),
            paid_date=parse_date(first_present(payload, "dataLiquidacao", "dataPagamento")),
        )

    def _discounts(self, payload: dict[str, Any]) -> list[DiscountTier]:
        tiers: list[DiscountTier] = []
        for position in (1, 2, 3):
            amount = parse_amount(payload.get(f"valorDesconto{position}"))
            limit = parse_date(payload.get(f"dataDesconto{position}"))
            if not amount or limit is None:
                continue
            canonical = self._catalog.decode(
                "discount_type", payload.get(f"tipoDesconto{position}")
            )
            tiers.append(
                DiscountTier(
                    discount_type=DiscountType(canonical) if canonical else DiscountType.FIXED_AMOUNT,
                    amount=amount,
                    limit_date=limit,
                )
            )
        return tiers
