"""Modelos de domínio de cobrança PIX imediata (padrão BACEN /cob)."""

from __future__ import annotations

import re
from datetime import datetime  # noqa: TC003 - usado em runtime pelo schema do Pydantic
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

_NON_DIGITS = re.compile(r"\D")

DEFAULT_EXPIRATION_SECONDS = 3600


class PixDebtor(BaseModel):
    """Devedor da cobrança (CPF ou CNPJ + nome)."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    document: str = Field(..., pattern=r"^(\d{11}|\d{14})$")
    name: str = Field(..., min_length=1, max_length=200)

    @field_validator("document", mode="before")
    @classmethod
    def _strip_digits(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _NON_DIGITS.sub("", value)
        return value

    @property
    def is_company(self) -> bool:
        return len(self.document) == 14


class PixInfo(BaseModel):
    """Par nome/valor exibido ao pagador."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(..., min_length=1, max_length=50)
    value: str = Field(..., min_length=1, max_length=200)


class PixChargeRequest(BaseModel):
    """Dados para criar uma cobrança PIX imediata.

    Sem txid o provedor gera o identificador (POST /cob); com txid a
    cobrança é criada de forma idempotente em PUT /cob/{txid}.
    """

    model_config = ConfigDict(extra="forbid")

    key: str = Field(..., min_length=1, max_length=77, description="Chave PIX do recebedor.")
    amount: Decimal = Field(..., gt=0, max_digits=15, decimal_places=2)
    expiration_seconds: int = Field(DEFAULT_EXPIRATION_SECONDS, gt=0)
    txid: str | None = Field(None, pattern=r"^[a-zA-Z0-9]{26,35}$")
    debtor: PixDebtor | None = None
    payer_request: str | None = Field(None, max_length=140)
    additional_info: list[PixInfo] = Field(default_factory=list, max_length=50)


class PixCharge(BaseModel):
    """Cobrança PIX normalizada a partir da resposta do provedor."""

    model_config = ConfigDict(extra="ignore")

    txid: str
    status: str | None = None
    location: str | None = None
    pix_copia_e_cola: str | None = None
    amount: Decimal | None = None
    key: str | None = None
    created_at: datetime | None = None
    expiration_seconds: int | None = None
    revision: int | None = None


__all__ = [
    "DEFAULT_EXPIRATION_SECONDS",
    "PixCharge",
    "PixChargeRequest",
    "PixDebtor",
    "PixInfo",
]
