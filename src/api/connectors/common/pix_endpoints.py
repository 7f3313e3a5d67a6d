"""Endpoints PIX (padrão BACEN) relativos à base "pix" do adaptador."""

from __future__ import annotations

from app.infra.http.endpoint import BodyEncoding, Endpoint, ResponseKind

CREATE_PIX_CHARGE = Endpoint(
    name="pix.create_charge",
    method="POST",
    path="/cob",
    success_statuses=frozenset({200, 201}),
    encoding=BodyEncoding.JSON,
    base="pix",
)

CREATE_PIX_CHARGE_WITH_TXID = Endpoint(
    name="pix.create_charge_txid",
    method="PUT",
    path="/cob/{txid}",
    success_statuses=frozenset({200, 201}),
    encoding=BodyEncoding.JSON,
    base="pix",
)

QUERY_PIX_CHARGE = Endpoint(
    name="pix.query_charge",
    method="GET",
    path="/cob/{txid}",
    success_statuses=frozenset({200}),
    idempotent=True,
    base="pix",
)

REGISTER_PIX_WEBHOOK = Endpoint(
    name="pix.register_webhook",
    method="PUT",
    path="/webhook/{chave}",
    success_statuses=frozenset({200, 201, 204}),
    encoding=BodyEncoding.JSON,
    response=ResponseKind.EMPTY,
    base="pix",
)
