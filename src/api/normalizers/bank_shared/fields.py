"""Conversão tolerante de campos das respostas bancárias."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any


def text_or_none(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_date(value: Any) -> date | None:
    """Aceita "YYYY-MM-DD", "YYYY-MM-DDTHH:MM:SS..." e "DD/MM/YYYY"."""
    text = text_or_none(value)
    if text is None:
        return None
    if "/" in text:
        return datetime.strptime(text[:10], "%d/%m/%Y").date()
    return date.fromisoformat(text[:10])


def parse_int(value: Any) -> int | None:
    text = text_or_none(value)
    if text is None:
        return None
    return int(text)


def first_present(payload: dict[str, Any], *keys: str) -> Any:
    """Primeiro valor não vazio entre as chaves (nomes variam por versão da API)."""
    for key in keys:
        value = payload.get(key)
        if value not in (None, ""):
            return value
    return None


def nested_object(payload: dict[str, Any], key: str) -> dict[str, Any]:
    """Sub-objeto opcional; ausente vira {}.

    Raises:
        ValueError: Se o campo existe e não é objeto JSON
    """
    value = payload.get(key)
    if value in (None, ""):
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"campo {key} não é objeto: {type(value).__name__}")
    return value
