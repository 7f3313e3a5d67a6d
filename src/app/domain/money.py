"""Helpers de valores monetários.

Valores trafegam como Decimal desde a entrada até o payload: float nunca é
usado para dinheiro.
"""

from __future__ import annotations

from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation
from typing import Any

CENT = Decimal("0.01")

# Percentuais de juros diários chegam a 3-5 casas (ex.: 0.033% ao dia)
MAX_RATE_PLACES = 5


def to_decimal(value: Any) -> Decimal:
    """Converte int/str/float/Decimal para Decimal sem ruído binário.

    Raises:
        ValueError: Se o valor não for numérico.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Valor monetário inválido: {value!r}")
    if isinstance(value, float):
        # str(float) devolve a menor representação exata (150.0, 0.1)
        value = str(value)
    try:
        return Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError(f"Valor monetário inválido: {value!r}") from exc


def quantize_amount(value: Any) -> Decimal:
    """Arredonda para centavos (2 casas)."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_EVEN)


def format_amount(value: Any) -> str:
    """Formata valor com exatamente duas casas decimais ("150.00")."""
    return f"{quantize_amount(value):f}"


def quantize_rate(value: Any) -> Decimal:
    """Percentual/taxa com no mínimo duas e no máximo cinco casas (0.033 -> 0.033)."""
    rate = to_decimal(value)
    exponent = rate.normalize().as_tuple().exponent
    places = -exponent if isinstance(exponent, int) and exponent < 0 else 0
    places = min(max(places, 2), MAX_RATE_PLACES)
    return rate.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_EVEN)


def format_rate(value: Any) -> str:
    return f"{quantize_rate(value):f}"


def parse_amount(raw: Any) -> Decimal | None:
    """Converte valor vindo do provedor (número ou string) para Decimal.

    Retorna None para ausente/vazio.
    """
    if raw is None or raw == "":
        return None
    return quantize_amount(raw)
