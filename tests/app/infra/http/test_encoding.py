"""Testes de serialização de corpos e templates de endpoint."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from app.domain.enums import ProviderName
from app.infra.http import Endpoint, backoff_seconds, decode_json, encode_form, encode_json


class TestEncodeJson:
    """encode_json preserva a escala do Decimal."""

    def test_decimal_is_numeric_literal(self) -> None:
        """150.00 continua 150.00, sem aspas."""
        assert encode_json({"valor": Decimal("150.00")}) == b'{"valor":150.00}'

    def test_nested_values(self) -> None:
        """Datas em ISO, enums pelo valor, listas e None."""
        payload = {
            "dataVencimento": date(2026, 3, 1),
            "provedor": ProviderName.SICOOB,
            "mensagens": ["a", "ç"],
            "pix": None,
            "gerarPix": True,
        }
        assert encode_json(payload).decode("utf-8") == (
            '{"dataVencimento":"2026-03-01","provedor":"SICOOB",'
            '"mensagens":["a","ç"],"pix":null,"gerarPix":true}'
        )

    def test_small_rate_is_not_scientific(self) -> None:
        """Taxas pequenas saem em notação decimal."""
        assert encode_json({"juros": Decimal("0.00033")}) == b'{"juros":0.00033}'

    def test_non_finite_decimal_raises(self) -> None:
        """NaN não é serializável."""
        with pytest.raises(TypeError):
            encode_json({"valor": Decimal("NaN")})

    def test_unknown_type_raises(self) -> None:
        """Objetos arbitrários são rejeitados."""
        with pytest.raises(TypeError):
            encode_json({"x": object()})


class TestDecodeJson:
    """decode_json lê números decimais como Decimal."""

    def test_preserves_cents(self) -> None:
        """0.1 + 0.2 em Decimal é exato."""
        data = decode_json(b'{"a": 0.10, "b": 0.20}')
        assert data["a"] + data["b"] == Decimal("0.30")

    def test_invalid_json_raises_value_error(self) -> None:
        """JSON inválido levanta ValueError."""
        with pytest.raises(ValueError):
            decode_json(b"<html>")


class TestEncodeForm:
    """Corpo urlencoded do endpoint de token."""

    def test_form_encoding(self) -> None:
        """Espaços e símbolos são escapados."""
        body = encode_form({"grant_type": "client_credentials", "scope": "cob.read cob.write"})
        assert body == b"grant_type=client_credentials&scope=cob.read+cob.write"


class TestEndpoint:
    """Template de path."""

    def test_render_path_escapes_params(self) -> None:
        """Barra em parâmetro não cria segmento novo."""
        endpoint = Endpoint(
            name="x", method="GET", path="/boletos/{nosso_numero}/pdf", success_statuses=frozenset({200})
        )
        assert endpoint.render_path({"nosso_numero": "12/3"}) == "/boletos/12%2F3/pdf"

    def test_render_path_without_params(self) -> None:
        """Sem parâmetros o path é devolvido intacto."""
        endpoint = Endpoint(name="x", method="GET", path="/cob", success_statuses=frozenset({200}))
        assert endpoint.render_path() == "/cob"


class TestBackoff:
    """min(2**tentativa * base, teto)."""

    @pytest.mark.parametrize(
        ("attempt", "expected"),
        [(0, 0.5), (1, 1.0), (2, 2.0), (3, 4.0), (4, 8.0), (5, 8.0)],
    )
    def test_backoff_seconds(self, attempt: int, expected: float) -> None:
        """Dobra a cada tentativa até o teto."""
        assert backoff_seconds(attempt, 0.5, 8.0) == expected
