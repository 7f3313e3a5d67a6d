"""Endpoints da API Cobrança Bancária v2 do Sicoob."""

from __future__ import annotations

from app.infra.http.endpoint import BodyEncoding, Endpoint, ResponseKind

BOLETOS_PATH = "/cobranca-bancaria/v2/boletos"

CREATE_BOLETO = Endpoint(
    name="sicoob.create_boleto",
    method="POST",
    path=BOLETOS_PATH,
    success_statuses=frozenset({200, 201}),
    encoding=BodyEncoding.JSON,
)

QUERY_BOLETO = Endpoint(
    name="sicoob.query_boleto",
    method="GET",
    path=BOLETOS_PATH,
    success_statuses=frozenset({200}),
    idempotent=True,
)

LIST_BOLETOS = Endpoint(
    name="sicoob.list_boletos",
    method="GET",
    path=BOLETOS_PATH,
    success_statuses=frozenset({200, 204}),
    idempotent=True,
)

PRINT_SECOND_COPY = Endpoint(
    name="sicoob.second_copy_pdf",
    method="GET",
    path=BOLETOS_PATH + "/{nosso_numero}/segunda-via",
    success_statuses=frozenset({200}),
    response=ResponseKind.BINARY,
    idempotent=True,
    accept="application/pdf, application/json",
)

# PIX fica sob a mesma base da API, com o mesmo token
PIX_PATH = "/pix/api/v2"
