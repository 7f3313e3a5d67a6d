"""Testes dos helpers monetários."""

from __future__ import annotations

from decimal import Decimal

import pytest

from app.domain.money import (
    format_amount,
    format_rate,
    parse_amount,
    quantize_amount,
    quantize_rate,
    to_decimal,
)


class TestToDecimal:
    """Conversão sem ruído binário."""

    def test_float_uses_shortest_repr(self) -> None:
        """0.1 vira Decimal('0.1'), não 0.1000000000000000055..."""
        assert to_decimal(0.1) == Decimal("0.1")

    def test_string_and_int(self) -> None:
        """Strings e inteiros são aceitos."""
        assert to_decimal(" 150.5 ") == Decimal("150.5")
        assert to_decimal(150) == Decimal(150)

    @pytest.mark.parametrize("value", [True, "abc", None])
    def test_invalid_values(self, value: object) -> None:
        """Booleanos e não numéricos são rejeitados."""
        with pytest.raises(ValueError):
            to_decimal(value)


class TestAmounts:
    """Centavos com duas casas."""

    def test_format_amount(self) -> None:
        """150 -> "150.00"."""
        assert format_amount(150) == "150.00"
        assert format_amount("150.5") == "150.50"

    def test_quantize_half_even(self) -> None:
        """Arredondamento bancário."""
        assert quantize_amount("0.125") == Decimal("0.12")
        assert quantize_amount("0.135") == Decimal("0.14")

    def test_parse_amount_empty(self) -> None:
        """Ausente ou vazio devolve None."""
        assert parse_amount(None) is None
        assert parse_amount("") is None
        assert parse_amount(Decimal("10")) == Decimal("10.00")


class TestRates:
    """Percentuais com 2 a 5 casas."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("1", "1.00"), ("2.5", "2.50"), ("0.033", "0.033"), ("0.1234567", "0.12346"), ("10", "10.00")],
    )
    def test_format_rate(self, raw: str, expected: str) -> None:
        """Mantém casas significativas dentro do intervalo."""
        assert format_rate(raw) == expected
        assert quantize_rate(raw) == Decimal(expected)
