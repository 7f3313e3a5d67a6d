"""Comandos de instrução sobre boletos registrados.

Um comando é um nome (InstructionName) + corpo chave/valor. Cada comando
tem um conjunto fechado de campos canônicos; campos desconhecidos são
rejeitados na construção, antes de qualquer serialização. A tradução do
nome canônico para o campo de fio de cada banco fica no catálogo YAML do
provedor (config/providers/).
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from app.domain.enums import ChargeType, DiscountType, InstructionName
from app.domain.money import to_decimal

_DISCOUNT_AMOUNTS = ("discount_amount_1", "discount_amount_2", "discount_amount_3")
_DISCOUNT_DATES = ("discount_date_1", "discount_date_2", "discount_date_3")

COMMAND_FIELDS: dict[InstructionName, frozenset[str]] = {
    InstructionName.WRITE_OFF: frozenset(),
    InstructionName.CHANGE_DUE_DATE: frozenset({"due_date"}),
    InstructionName.CHANGE_DISCOUNT: frozenset(
        {"discount_type", *_DISCOUNT_AMOUNTS, *_DISCOUNT_DATES}
    ),
    InstructionName.CHANGE_DISCOUNT_DATES: frozenset(_DISCOUNT_DATES),
    InstructionName.CHANGE_INTEREST: frozenset(
        {"interest_type", "interest_value", "interest_date"}
    ),
    InstructionName.CHANGE_THEIR_NUMBER: frozenset({"seu_numero"}),
}

# Tipo esperado de cada campo canônico
FIELD_TYPES: dict[str, type] = {
    "due_date": date,
    "discount_type": DiscountType,
    **dict.fromkeys(_DISCOUNT_AMOUNTS, Decimal),
    **dict.fromkeys(_DISCOUNT_DATES, date),
    "interest_type": ChargeType,
    "interest_value": Decimal,
    "interest_date": date,
    "seu_numero": str,
}


def _coerce(field: str, value: Any) -> Any:
    expected = FIELD_TYPES[field]
    if expected is date:
        if isinstance(value, date):
            return value
        return date.fromisoformat(str(value))
    if expected is Decimal:
        number = to_decimal(value)
        if number < 0:
            raise ValueError(f"{field} não pode ser negativo")
        return number
    if issubclass(expected, Enum):
        return expected(value)
    text = str(value).strip()
    if not text:
        raise ValueError(f"{field} não pode ser vazio")
    return text


class InstructionCommand(BaseModel):
    """Comando de instrução endereçado por nosso número."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: InstructionName
    nosso_numero: str = Field(..., min_length=1, max_length=20)
    body: dict[str, Any] = Field(default_factory=dict)

    @field_validator("nosso_numero")
    @classmethod
    def _strip(cls, value: str) -> str:
        return value.strip()

    @field_validator("body")
    @classmethod
    def _check_body(cls, value: dict[str, Any], info: ValidationInfo) -> dict[str, Any]:
        name = info.data.get("name")
        if name is None:
            return value
        unknown = sorted(set(value) - COMMAND_FIELDS[name])
        if unknown:
            raise ValueError(
                f"Campos não suportados por {name.value}: {', '.join(unknown)}"
            )
        return {field: _coerce(field, item) for field, item in value.items()}


class InstructionResult(BaseModel):
    """Resultado de um comando aceito pelo provedor."""

    model_config = ConfigDict(extra="ignore")

    command: InstructionName
    nosso_numero: str
    http_status: int
    transaction_id: str | None = None
    status: str | None = None
    registered_at: str | None = None


__all__ = [
    "COMMAND_FIELDS",
    "FIELD_TYPES",
    "InstructionCommand",
    "InstructionResult",
]
