"""Endpoints da API Cobrança Boleto v1 do Sicredi (relativos à base "api")."""

from __future__ import annotations

from app.infra.http.endpoint import BodyEncoding, Endpoint, ResponseKind

CREATE_BOLETO = Endpoint(
    name="sicredi.create_boleto",
    method="POST",
    path="/boletos",
    success_statuses=frozenset({200, 201, 202}),
    encoding=BodyEncoding.JSON,
)

QUERY_BOLETO = Endpoint(
    name="sicredi.query_boleto",
    method="GET",
    path="/boletos",
    success_statuses=frozenset({200}),
    idempotent=True,
)

LIST_SETTLED_BY_DAY = Endpoint(
    name="sicredi.list_settled_by_day",
    method="GET",
    path="/boletos/liquidados/dia",
    success_statuses=frozenset({200}),
    idempotent=True,
)

PRINT_PDF = Endpoint(
    name="sicredi.print_pdf",
    method="GET",
    path="/boletos/pdf",
    success_statuses=frozenset({200}),
    response=ResponseKind.BINARY,
    idempotent=True,
    accept="application/pdf",
)

# Formato do parâmetro "dia" da consulta de liquidados
SETTLED_DAY_FORMAT = "%d/%m/%Y"
