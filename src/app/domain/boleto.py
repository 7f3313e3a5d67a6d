"""Modelos de domínio de boleto.

Contratos independentes de provedor: o payload builder de cada banco
traduz BoletoRequest para o formato de fio, e o normalizer traduz a
resposta de volta para Boleto.
"""

from __future__ import annotations

import re
from datetime import date  # noqa: TC003 - usado em runtime pelo schema do Pydantic
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.domain.enums import ChargeType, DiscountType, DocumentSpecies, PersonType

MAX_DISCOUNT_TIERS = 3
MAX_MESSAGES = 4
MAX_MESSAGE_LENGTH = 80

_NON_DIGITS = re.compile(r"\D")

# Situações em que o boleto ainda pode ser pago
OPEN_STATUSES = frozenset(
    {
        "PENDENTE",
        "EM_ABERTO",
        "ABERTO",
        "EM_CARTEIRA",
        "A_VENCER",
        "VENCIDO",
        "REGISTRADO",
    }
)


def normalize_status(status: str | None) -> str:
    """Normaliza situação do provedor: "Em Aberto" -> "EM_ABERTO"."""
    if not status:
        return ""
    return "_".join(status.strip().upper().replace("-", " ").split())


def _only_digits(value: Any) -> Any:
    if isinstance(value, str):
        return _NON_DIGITS.sub("", value)
    return value


class Payer(BaseModel):
    """Pagador (ou beneficiário final) do boleto."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    person_type: PersonType
    document: str = Field(..., description="CPF (11) ou CNPJ (14), apenas dígitos.")
    name: str = Field(..., min_length=1, max_length=100)
    address: str | None = Field(None, max_length=100)
    address_number: str | None = Field(None, max_length=10)
    complement: str | None = Field(None, max_length=40)
    neighborhood: str | None = Field(None, max_length=60)
    city: str | None = Field(None, max_length=60)
    state: str | None = Field(None, pattern=r"^[A-Z]{2}$")
    zip_code: str | None = Field(None, pattern=r"^\d{8}$")
    email: str | None = Field(None, pattern=r"^[^@]+@[^@]+\.[^@]+$")
    phone: str | None = Field(None, pattern=r"^\d{10,11}$")

    @field_validator("document", "zip_code", "phone", mode="before")
    @classmethod
    def _strip_digits(cls, value: Any) -> Any:
        return _only_digits(value)

    @model_validator(mode="after")
    def _check_document(self) -> Payer:
        expected = 11 if self.person_type is PersonType.FISICA else 14
        if len(self.document) != expected or not self.document.isdigit():
            raise ValueError(
                f"Documento de {self.person_type.value} deve ter {expected} dígitos"
            )
        return self


class DiscountTier(BaseModel):
    """Faixa de desconto até uma data limite."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    discount_type: DiscountType = DiscountType.FIXED_AMOUNT
    amount: Decimal = Field(..., gt=0, max_digits=15, decimal_places=2)
    limit_date: date


class ChargePolicy(BaseModel):
    """Política de juros ou multa após o vencimento."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    charge_type: ChargeType
    value: Decimal | None = Field(None, ge=0, max_digits=15, decimal_places=5)
    start_date: date | None = None

    @model_validator(mode="after")
    def _check_value(self) -> ChargePolicy:
        if self.charge_type is ChargeType.NONE:
            if self.value:
                raise ValueError("Política ISENTO não aceita valor")
        elif not self.value:
            raise ValueError(f"Política {self.charge_type.value} exige valor > 0")
        if self.charge_type is ChargeType.FIXED_AMOUNT and self.value is not None:
            exponent = self.value.as_tuple().exponent
            if isinstance(exponent, int) and exponent < -2:
                raise ValueError("Valor fixo deve ter no máximo 2 casas decimais")
        return self

    @property
    def is_exempt(self) -> bool:
        return self.charge_type is ChargeType.NONE


class BoletoRequest(BaseModel):
    """Dados para registrar um boleto (tradicional ou híbrido com PIX)."""

    model_config = ConfigDict(extra="forbid")

    seu_numero: str = Field(..., min_length=1, max_length=18)
    nosso_numero: str | None = Field(None, pattern=r"^\d{1,20}$")
    amount: Decimal = Field(..., gt=0, max_digits=15, decimal_places=2)
    due_date: date
    issue_date: date | None = None
    species: DocumentSpecies = DocumentSpecies.DUPLICATA_MERCANTIL
    payer: Payer
    final_beneficiary: Payer | None = None
    discounts: list[DiscountTier] = Field(default_factory=list, max_length=MAX_DISCOUNT_TIERS)
    interest: ChargePolicy | None = None
    fine: ChargePolicy | None = None
    messages: list[str] = Field(default_factory=list, max_length=MAX_MESSAGES)
    hybrid_pix: bool = False
    pix_validity_days: int | None = Field(None, ge=0, le=60)
    protest_days: int | None = Field(None, ge=1, le=99)

    @field_validator("messages")
    @classmethod
    def _check_messages(cls, value: list[str]) -> list[str]:
        for message in value:
            if len(message) > MAX_MESSAGE_LENGTH:
                raise ValueError(f"Mensagem excede {MAX_MESSAGE_LENGTH} caracteres")
        return value

    @model_validator(mode="after")
    def _check_dates(self) -> BoletoRequest:
        if self.issue_date and self.issue_date > self.due_date:
            raise ValueError("Data de emissão posterior ao vencimento")
        for position, tier in enumerate(self.discounts, start=1):
            if tier.limit_date > self.due_date:
                raise ValueError(f"Data limite do desconto {position} posterior ao vencimento")
        if len({tier.discount_type for tier in self.discounts}) > 1:
            raise ValueError("Todas as faixas de desconto devem usar o mesmo tipo")
        if self.pix_validity_days is not None and not self.hybrid_pix:
            raise ValueError("pix_validity_days só se aplica a boleto híbrido")
        return self

    @property
    def discount_type(self) -> DiscountType | None:
        return self.discounts[0].discount_type if self.discounts else None


class Boleto(BaseModel):
    """Boleto normalizado a partir da resposta do provedor."""

    model_config = ConfigDict(extra="ignore")

    nosso_numero: str
    seu_numero: str | None = None
    linha_digitavel: str | None = None
    codigo_barras: str | None = None
    amount: Decimal | None = None
    issue_date: date | None = None
    due_date: date | None = None
    status: str | None = None
    txid: str | None = None
    pix_copia_e_cola: str | None = None
    payer_name: str | None = None
    payer_document: str | None = None
    discounts: list[DiscountTier] = Field(default_factory=list)
    paid_amount: Decimal | None = None
    paid_date: date | None = None

    @property
    def normalized_status(self) -> str:
        return normalize_status(self.status)

    @property
    def is_open(self) -> bool:
        return self.normalized_status in OPEN_STATUSES


class BoletoListFilter(BaseModel):
    """Filtro de listagem: intervalo de datas e/ou situação."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    start_date: date | None = None
    end_date: date | None = None
    status: str | None = None

    @model_validator(mode="after")
    def _check_range(self) -> BoletoListFilter:
        if (self.start_date is None) != (self.end_date is None):
            raise ValueError("start_date e end_date devem ser informados juntos")
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date posterior a end_date")
        if self.start_date is None and not self.status:
            raise ValueError("Informe intervalo de datas e/ou situação")
        return self

    @property
    def has_range(self) -> bool:
        return self.start_date is not None


__all__ = [
    "OPEN_STATUSES",
    "Boleto",
    "BoletoListFilter",
    "BoletoRequest",
    "ChargePolicy",
    "DiscountTier",
    "Payer",
    "normalize_status",
]
