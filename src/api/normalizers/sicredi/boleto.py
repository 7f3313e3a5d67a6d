"""Normalizer de boleto Sicredi.

Três formatos de entrada:
- resposta de emissão (linhaDigitavel, codigoBarras, txid, qrCode)
- consulta por nosso número (valorNominal, situacao, descontos, dadosLiquidacao)
- item de liquidados por dia (valor, valorLiquidado, dataPagamento)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from api.normalizers.bank_shared import (
    first_present,
    nested_object,
    parse_date,
    parse_int,
    text_or_none,
)
from app.domain.boleto import Boleto, DiscountTier
from app.domain.enums import DiscountType
from app.domain.money import parse_amount

if TYPE_CHECKING:
    from api.connectors.common.catalog import ProviderCatalog

SETTLED_STATUS = "LIQUIDADO"


class SicrediBoletoNormalizer:
    """Converte boleto Sicredi em Boleto."""

    def __init__(self, catalog: ProviderCatalog) -> None:
        self._catalog = catalog

    def normalize(self, payload: dict[str, Any]) -> Boleto:
        nosso_numero = text_or_none(payload.get("nossoNumero"))
        if nosso_numero is None:
            raise ValueError("Boleto Sicredi sem nossoNumero")

        payer = nested_object(payload, "pagador")
        settlement = nested_object(payload, "dadosLiquidacao")
        return Boleto(
            nosso_numero=nosso_numero,
            seu_numero=text_or_none(payload.get("seuNumero")),
            linha_digitavel=text_or_none(payload.get("linhaDigitavel")),
            codigo_barras=text_or_none(payload.get("codigoBarras")),
            amount=parse_amount(first_present(payload, "valorNominal", "valor")),
            issue_date=parse_date(payload.get("dataEmissao")),
            due_date=parse_date(payload.get("dataVencimento")),
            status=text_or_none(payload.get("situacao")),
            txid=text_or_none(first_present(payload, "txId", "txid")),
            pix_copia_e_cola=text_or_none(first_present(payload, "codigoQrCode", "qrCode")),
            payer_name=text_or_none(payer.get("nome")),
            payer_document=text_or_none(payer.get("documento")),
            discounts=self._discounts(payload),
            paid_amount=parse_amount(settlement.get("valor")),
            paid_date=parse_date(settlement.get("data")),
        )

    def normalize_settled(self, item: dict[str, Any]) -> Boleto:
        """Item de /boletos/liquidados/dia."""
        nosso_numero = text_or_none(item.get("nossoNumero"))
        if nosso_numero is None:
            raise ValueError("Boleto liquidado Sicredi sem nossoNumero")
        return Boleto(
            nosso_numero=nosso_numero,
            seu_numero=text_or_none(item.get("seuNumero")),
            amount=parse_amount(item.get("valor")),
            status=SETTLED_STATUS,
            paid_amount=parse_amount(item.get("valorLiquidado")),
            paid_date=parse_date(item.get("dataPagamento")),
        )

    def _discounts(self, payload: dict[str, Any]) -> list[DiscountTier]:
        entries = payload.get("descontos")
        if not isinstance(entries, list):
            return []
        canonical = self._catalog.decode("discount_type", payload.get("tipoDesconto"))
        discount_type = DiscountType(canonical) if canonical else DiscountType.FIXED_AMOUNT

        tiers: list[tuple[int, DiscountTier]] = []
        for position, entry in enumerate(entries, start=1):
            if not isinstance(entry, dict):
                continue
            amount = parse_amount(entry.get("valorDesconto"))
            limit = parse_date(entry.get("dataLimite"))
            if not amount or limit is None:
                continue
            order = parse_int(entry.get("numeroOrdem")) or position
            tiers.append(
                (order, DiscountTier(discount_type=discount_type, amount=amount, limit_date=limit))
            )
        return [tier for _, tier in sorted(tiers, key=lambda pair: pair[0])]
