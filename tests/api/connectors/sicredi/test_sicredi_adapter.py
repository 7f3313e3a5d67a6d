"""Testes do SicrediAdapter contra um banco falso."""

from __future__ import annotations

import json
from datetime import date
from decimal import Decimal

import httpx
import pytest

from api.connectors.sicredi import SicrediAdapter, build_sicredi_headers
from app.domain.boleto import BoletoListFilter, BoletoRequest, ChargePolicy, DiscountTier, Payer
from app.domain.enums import ChargeType, DiscountType, InstructionName, PersonType
from app.infra.http import (
    ErrorCategory,
    PartialInstructionError,
    ProviderAPIError,
    RequestValidationError,
    UndecodedProviderError,
)
from config.settings import SicrediSettings
from tests.fakes.bank import FakeBank, FakeClock, form_of, token_response

TOKEN = "/auth/openapi/token"
BOLETOS = "/cobranca/boleto/v1/boletos"
SETTLED = "/boletos/liquidados/dia"
NOSSO_NUMERO = "211001290"


def _settings() -> SicrediSettings:
    return SicrediSettings(
        api_key="api-key",
        username="123450101",
        password="senha",
        cooperativa="0101",
        posto="03",
        codigo_beneficiario="12345",
        max_retries=1,
    )


def _adapter(bank: FakeBank, clock: FakeClock | None = None) -> SicrediAdapter:
    return SicrediAdapter(
        _settings(), transport=bank.transport, clock=clock or FakeClock(), sleep=lambda _: None
    )


def _bank() -> FakeBank:
    return FakeBank().add(
        "POST",
        TOKEN,
        token_response("tok-sicredi", expires_in=300, refresh_token="r-1", refresh_expires_in=1800),
    )


def _request(**overrides: object) -> BoletoRequest:
    data: dict[str, object] = {
        "seu_numero": "PED-1",
        "amount": Decimal("150.00"),
        "due_date": date(2026, 3, 1),
        "payer": Payer(person_type=PersonType.FISICA, document="12345678909", name="Maria Silva"),
    }
    data.update(overrides)
    return BoletoRequest(**data)


def _body(request: httpx.Request) -> dict:
    return json.loads(request.content, parse_float=Decimal)


def _accepted() -> httpx.Response:
    return httpx.Response(
        202,
        json={
            "transactionId": "c4a6d1f0",
            "statusComando": "MOVIMENTO_ENVIADO",
            "dataHoraRegistro": "2026-01-10T10:00:00",
        },
    )


class TestAuthAndHeaders:
    """password grant e headers de negócio."""

    def test_business_headers(self) -> None:
        """x-api-key, cooperativa, posto e codigoBeneficiario."""
        assert build_sicredi_headers(_settings()) == {
            "x-api-key": "api-key",
            "cooperativa": "0101",
            "posto": "03",
            "codigoBeneficiario": "12345",
        }

    def test_token_request(self) -> None:
        """Token com context COBRANCA, scope cobranca e x-api-key."""
        bank = _bank()

        _adapter(bank).authenticate()

        request = bank.requests[0]
        assert request.headers["x-api-key"] == "api-key"
        assert request.headers["context"] == "COBRANCA"
        assert form_of(request) == {
            "grant_type": "password",
            "username": "123450101",
            "password": "senha",
            "scope": "cobranca",
        }

    def test_refresh_after_expiry(self) -> None:
        """Após expirar, a próxima chamada faz refresh antes da consulta."""
        clock = FakeClock()
        bank = FakeBank().add(
            "POST",
            TOKEN,
            token_response("tok-1", expires_in=300, refresh_token="r-1", refresh_expires_in=1800),
            token_response("tok-2", expires_in=300, refresh_token="r-2", refresh_expires_in=1800),
        ).add("GET", BOLETOS, httpx.Response(200, json={"nossoNumero": NOSSO_NUMERO}))
        adapter = _adapter(bank, clock)

        adapter.query_boleto(NOSSO_NUMERO)
        clock.advance(301)
        adapter.query_boleto(NOSSO_NUMERO)

        token_calls = bank.calls("POST", TOKEN)
        assert [form_of(call)["grant_type"] for call in token_calls] == ["password", "refresh_token"]
        assert bank.calls("GET", BOLETOS)[1].headers["authorization"] == "Bearer tok-2"


class TestCreateBoleto:
    """Emissão."""

    def test_hybrid_boleto(self) -> None:
        """Boleto híbrido com desconto, juros e multa percentuais."""
        bank = _bank().add(
            "POST",
            BOLETOS,
            httpx.Response(
                201,
                json={
                    "txid": "a1b2c3d4e5f6a1b2c3d4e5f6a1",
                    "qrCode": "00020101021226870014br.gov.bcb.pix",
                    "linhaDigitavel": "74891121150012345678901234567890100000000015000",
                    "codigoBarras": "74891000000000150001121100123456789012345678",
                    "cooperativa": "0101",
                    "posto": "03",
                    "nossoNumero": NOSSO_NUMERO,
                },
            ),
        )
        request = _request(
            hybrid_pix=True,
            pix_validity_days=10,
            discounts=[DiscountTier(amount=Decimal("10"), limit_date=date(2026, 2, 1))],
            interest=ChargePolicy(charge_type=ChargeType.PERCENTAGE, value=Decimal("0.033")),
            fine=ChargePolicy(charge_type=ChargeType.PERCENTAGE, value=Decimal("2")),
            messages=["Não receber após 30 dias"],
        )

        boleto = _adapter(bank).create_boleto(request)

        http_request = bank.calls("POST", BOLETOS)[0]
        assert b'"valor":150.00' in http_request.content
        body = _body(http_request)
        assert body["tipoCobranca"] == "HIBRIDO"
        assert body["codigoBeneficiario"] == "12345"
        assert body["especieDocumento"] == "DUPLICATA_MERCANTIL_INDICACAO"
        assert body["pagador"] == {
            "tipoPessoa": "PESSOA_FISICA",
            "documento": "12345678909",
            "nome": "Maria Silva",
        }
        assert body["validadeAposVencimento"] == 10
        assert body["tipoDesconto"] == "VALOR"
        assert body["valorDesconto1"] == Decimal("10.00")
        assert body["tipoJuros"] == "PERCENTUAL"
        assert body["juros"] == Decimal("0.033")
        assert body["multa"] == Decimal("2.00")
        assert body["mensagens"] == ["Não receber após 30 dias"]
        for header, value in build_sicredi_headers(_settings()).items():
            assert http_request.headers[header] == value

        assert boleto.nosso_numero == NOSSO_NUMERO
        assert boleto.txid == "a1b2c3d4e5f6a1b2c3d4e5f6a1"
        assert boleto.pix_copia_e_cola == "00020101021226870014br.gov.bcb.pix"
        assert boleto.amount == Decimal("150.00")
        assert boleto.seu_numero == "PED-1"
        assert boleto.discounts[0].amount == Decimal("10.00")

    def test_normal_boleto_omits_exempt_charges(self) -> None:
        """Juros isento não entra no payload; tipoCobranca NORMAL."""
        bank = _bank().add("POST", BOLETOS, httpx.Response(201, json={"nossoNumero": NOSSO_NUMERO}))

        _adapter(bank).create_boleto(_request(interest=ChargePolicy(charge_type=ChargeType.NONE)))

        body = _body(bank.calls("POST", BOLETOS)[0])
        assert body["tipoCobranca"] == "NORMAL"
        assert "tipoJuros" not in body
        assert "tipoDesconto" not in body
        assert "validadeAposVencimento" not in body

    def test_fixed_fine_rejected(self) -> None:
        """Multa em valor fixo não é aceita pelo Sicredi."""
        bank = _bank()
        request = _request(fine=ChargePolicy(charge_type=ChargeType.FIXED_AMOUNT, value=Decimal("5.00")))

        with pytest.raises(RequestValidationError, match="fine_type"):
            _adapter(bank).create_boleto(request)
        assert bank.requests == []


class TestQuery:
    """Consulta e PDF."""

    def test_query_normalizes_discounts_and_settlement(self) -> None:
        """Descontos ordenados por numeroOrdem e dados de liquidação."""
        bank = _bank().add(
            "GET",
            BOLETOS,
            httpx.Response(
                200,
                json={
                    "nossoNumero": NOSSO_NUMERO,
                    "seuNumero": "PED-1",
                    "linhaDigitavel": "74891121150012345678901234567890100000000015000",
                    "valorNominal": 150.0,
                    "dataVencimento": "2026-03-01",
                    "situacao": "LIQUIDADO",
                    "tipoDesconto": "PERCENTUAL",
                    "descontos": [
                        {"numeroOrdem": 2, "valorDesconto": 1.5, "dataLimite": "2026-02-15"},
                        {"numeroOrdem": 1, "valorDesconto": 3, "dataLimite": "2026-02-01"},
                    ],
                    "pagador": {"nome": "Maria Silva", "documento": "12345678909"},
                    "dadosLiquidacao": {"data": "2026-02-10", "valor": 147.0},
                },
            ),
        )

        boleto = _adapter(bank).query_boleto(NOSSO_NUMERO)

        params = bank.calls("GET", BOLETOS)[0].url.params
        assert params["codigoBeneficiario"] == "12345"
        assert params["nossoNumero"] == NOSSO_NUMERO
        assert [tier.amount for tier in boleto.discounts] == [Decimal("3.00"), Decimal("1.50")]
        assert boleto.discounts[0].discount_type is DiscountType.PERCENTAGE
        assert boleto.paid_amount == Decimal("147.00")
        assert boleto.paid_date == date(2026, 2, 10)
        assert boleto.is_open is False

    def test_query_http_404_envelope(self) -> None:
        """404 do Sicredi vira ProviderAPIError com o código do envelope."""
        bank = _bank().add(
            "GET",
            BOLETOS,
            httpx.Response(404, json={"status": "NOT_FOUND", "message": "Boleto não encontrado"}),
        )

        with pytest.raises(ProviderAPIError) as exc_info:
            _adapter(bank).query_boleto(NOSSO_NUMERO)

        assert exc_info.value.code == "NOT_FOUND"
        assert exc_info.value.status_code == 404
        assert len(bank.calls("GET", BOLETOS)) == 1
        assert exc_info.value.to_provider_error().http_status == 404

    def test_pdf_looks_up_linha_digitavel(self) -> None:
        """Sem linha digitável, consulta o boleto antes do PDF."""
        linha = "74891121150012345678901234567890100000000015000"
        bank = _bank().add(
            "GET", BOLETOS, httpx.Response(200, json={"nossoNumero": NOSSO_NUMERO, "linhaDigitavel": linha})
        ).add(
            "GET",
            "/boletos/pdf",
            httpx.Response(200, content=b"%PDF-sicredi", headers={"content-type": "application/pdf"}),
        )

        assert _adapter(bank).print_boleto_pdf(NOSSO_NUMERO) == b"%PDF-sicredi"
        assert bank.calls("GET", "/boletos/pdf")[0].url.params["linhaDigitavel"] == linha

    def test_pdf_with_known_linha_digitavel(self) -> None:
        """Com linha digitável informada, só o PDF é buscado."""
        bank = _bank().add(
            "GET",
            "/boletos/pdf",
            httpx.Response(200, content=b"%PDF", headers={"content-type": "application/pdf"}),
        )

        _adapter(bank).print_boleto_pdf(NOSSO_NUMERO, linha_digitavel="7489")

        assert bank.calls("GET", BOLETOS) == []


class TestListSettled:
    """Listagem de liquidados por dia."""

    def test_paginates_each_day(self) -> None:
        """Segue hasNext em cada dia do intervalo."""
        bank = _bank().add(
            "GET",
            SETTLED,
            httpx.Response(
                200,
                json={
                    "items": [
                        {
                            "nossoNumero": "1",
                            "valor": 10,
                            "valorLiquidado": 10,
                            "dataPagamento": "2026-01-05",
                        }
                    ],
                    "hasNext": True,
                },
            ),
            httpx.Response(
                200,
                json={"items": [{"nossoNumero": "2", "valor": 20, "valorLiquidado": 19.5}], "hasNext": False},
            ),
            httpx.Response(200, json={"items": [], "hasNext": False}),
        )

        boletos = _adapter(bank).list_boletos(
            BoletoListFilter(start_date=date(2026, 1, 5), end_date=date(2026, 1, 6), status="LIQUIDADO")
        )

        assert [b.nosso_numero for b in boletos] == ["1", "2"]
        assert boletos[1].paid_amount == Decimal("19.50")
        assert all(b.status == "LIQUIDADO" for b in boletos)

        params = [call.url.params for call in bank.calls("GET", SETTLED)]
        assert [p["dia"] for p in params] == ["05/01/2026", "05/01/2026", "06/01/2026"]
        assert "pagina" not in params[0]
        assert params[1]["pagina"] == "1"
        assert params[0]["codigoBeneficiario"] == "12345"

    def test_only_settled_status(self) -> None:
        """Situação diferente de LIQUIDADO é rejeitada."""
        bank = _bank()
        with pytest.raises(RequestValidationError, match="LIQUIDADO"):
            _adapter(bank).list_boletos(
                BoletoListFilter(start_date=date(2026, 1, 1), end_date=date(2026, 1, 2), status="EM_ABERTO")
            )
        assert bank.requests == []

    def test_requires_range(self) -> None:
        """Listagem só por situação é rejeitada."""
        with pytest.raises(RequestValidationError):
            _adapter(_bank()).list_boletos(BoletoListFilter(status="LIQUIDADO"))

    def test_range_limit(self) -> None:
        """Intervalo maior que 31 dias é rejeitado."""
        with pytest.raises(RequestValidationError, match="31 dias"):
            _adapter(_bank()).list_boletos(
                BoletoListFilter(start_date=date(2026, 1, 1), end_date=date(2026, 2, 1))
            )


class TestInstructions:
    """Comandos PATCH do Sicredi."""

    def test_change_discount_splits_amounts_and_dates(self) -> None:
        """Valores vão em /desconto e datas em /data-desconto."""
        bank = _bank().add("PATCH", "/desconto", _accepted()).add("PATCH", "/data-desconto", _accepted())
        tiers = [
            DiscountTier(amount=Decimal("10"), limit_date=date(2026, 2, 1)),
            DiscountTier(amount=Decimal("5"), limit_date=date(2026, 2, 15)),
        ]

        results = _adapter(bank).change_discount(NOSSO_NUMERO, tiers)

        amounts = bank.calls("PATCH", f"/{NOSSO_NUMERO}/desconto")
        dates = bank.calls("PATCH", f"/{NOSSO_NUMERO}/data-desconto")
        assert _body(amounts[0]) == {"valorDesconto1": Decimal("10.00"), "valorDesconto2": Decimal("5.00")}
        assert _body(dates[0]) == {"data1": "2026-02-01", "data2": "2026-02-15"}
        assert [result.command for result in results] == [
            InstructionName.CHANGE_DISCOUNT,
            InstructionName.CHANGE_DISCOUNT_DATES,
        ]
        assert results[0].transaction_id == "c4a6d1f0"
        assert results[0].status == "MOVIMENTO_ENVIADO"
        assert results[0].http_status == 202

    def test_change_discount_dates_failure_reports_applied_amounts(self) -> None:
        """Falha em /data-desconto após /desconto aceito expõe o que já foi aplicado."""
        bank = (
            _bank()
            .add("PATCH", "/desconto", _accepted())
            .add(
                "PATCH",
                "/data-desconto",
                httpx.Response(
                    422, json={"status": "UNPROCESSABLE_ENTITY", "message": "Data inválida"}
                ),
            )
        )
        tiers = [DiscountTier(amount=Decimal("10"), limit_date=date(2026, 2, 1))]

        with pytest.raises(PartialInstructionError) as exc_info:
            _adapter(bank).change_discount(NOSSO_NUMERO, tiers)

        error = exc_info.value
        assert len(bank.calls("PATCH", f"/{NOSSO_NUMERO}/desconto")) == 1
        assert error.failed_command == InstructionName.CHANGE_DISCOUNT_DATES.value
        assert [result.command for result in error.applied] == [InstructionName.CHANGE_DISCOUNT]
        assert error.applied[0].transaction_id == "c4a6d1f0"
        assert isinstance(error.cause, ProviderAPIError)
        assert error.code == "UNPROCESSABLE_ENTITY"
        assert error.category is ErrorCategory.VALIDATION

    def test_change_discount_first_failure_is_plain_error(self) -> None:
        """Se /desconto falha, nada foi aplicado e /data-desconto não é chamado."""
        bank = _bank().add(
            "PATCH",
            "/desconto",
            httpx.Response(400, json={"status": "BAD_REQUEST", "message": "Valor inválido"}),
        )
        tiers = [DiscountTier(amount=Decimal("10"), limit_date=date(2026, 2, 1))]

        with pytest.raises(ProviderAPIError):
            _adapter(bank).change_discount(NOSSO_NUMERO, tiers)

        assert bank.calls("PATCH", "/data-desconto") == []

    def test_change_interest_sends_value_only(self) -> None:
        """Juros envia só valorOuPercentual."""
        bank = _bank().add("PATCH", "/juros", _accepted())

        _adapter(bank).change_interest(
            NOSSO_NUMERO,
            ChargePolicy(
                charge_type=ChargeType.PERCENTAGE, value=Decimal("0.033"), start_date=date(2026, 3, 2)
            ),
        )

        assert _body(bank.calls("PATCH", "/juros")[0]) == {"valorOuPercentual": Decimal("0.033")}

    def test_change_interest_requires_value(self) -> None:
        """Juros isento não é comando válido no Sicredi."""
        bank = _bank()
        with pytest.raises(RequestValidationError, match="interest_value"):
            _adapter(bank).change_interest(NOSSO_NUMERO, ChargePolicy(charge_type=ChargeType.NONE))
        assert bank.requests == []

    def test_write_off_and_due_date(self) -> None:
        """Baixa sem corpo de negócio e alteração de vencimento."""
        bank = _bank().add("PATCH", "/baixa", _accepted()).add("PATCH", "/data-vencimento", _accepted())
        adapter = _adapter(bank)

        adapter.write_off_boleto(NOSSO_NUMERO)
        adapter.change_due_date(NOSSO_NUMERO, date(2026, 4, 1))

        assert _body(bank.calls("PATCH", "/baixa")[0]) == {}
        assert _body(bank.calls("PATCH", "/data-vencimento")[0]) == {"dataVencimento": "2026-04-01"}

    def test_unexpected_success_status_is_error(self) -> None:
        """Sicredi confirma comandos com 202; 200 não é sucesso."""
        bank = _bank().add("PATCH", "/seu-numero", httpx.Response(200, json={}))

        with pytest.raises(UndecodedProviderError) as exc_info:
            _adapter(bank).change_their_number(NOSSO_NUMERO, "PED-2")
        assert exc_info.value.status_code == 200

    def test_provider_rejection(self) -> None:
        """Envelope status/message do Sicredi vira ProviderAPIError."""
        bank = _bank().add(
            "PATCH",
            "/baixa",
            httpx.Response(400, json={"status": "BAD_REQUEST", "message": "Título já baixado"}),
        )

        with pytest.raises(ProviderAPIError) as exc_info:
            _adapter(bank).write_off_boleto(NOSSO_NUMERO)

        assert exc_info.value.code == "BAD_REQUEST"
        assert exc_info.value.category is ErrorCategory.VALIDATION
