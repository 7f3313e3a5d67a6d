"""Normalizer da resposta de /cob (criação e consulta)."""

from __future__ import annotations

from typing import Any

from api.normalizers.bank_shared import first_present, nested_object, parse_int, text_or_none
from app.domain.money import parse_amount
from app.domain.pix import PixCharge


def normalize_pix_charge(payload: dict[str, Any]) -> PixCharge:
    """Converte resposta /cob em PixCharge.

    Raises:
        ValueError: Se a resposta não traz txid
    """
    txid = text_or_none(payload.get("txid"))
    if txid is None:
        raise ValueError("Resposta de cobrança PIX sem txid")

    calendar = nested_object(payload, "calendario")
    value = nested_object(payload, "valor")
    loc = nested_object(payload, "loc")

    return PixCharge(
        txid=txid,
        status=text_or_none(payload.get("status")),
        location=text_or_none(first_present(payload, "location") or loc.get("location")),
        pix_copia_e_cola=text_or_none(payload.get("pixCopiaECola")),
        amount=parse_amount(value.get("original")),
        key=text_or_none(payload.get("chave")),
        created_at=text_or_none(calendar.get("criacao")),
        expiration_seconds=parse_int(calendar.get("expiracao")),
        revision=parse_int(payload.get("revisao")),
    )
