"""Serialização de corpos de requisição.

JSON é gerado com Decimal como literal numérico na escala do próprio
Decimal (150.00 continua 150.00), o que json.dumps não faz. Respostas são
lidas com parse_float=Decimal para preservar centavos.
"""

from __future__ import annotations

import json
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from urllib.parse import urlencode


def _encode(value: Any) -> str:
    if isinstance(value, dict):
        items = (
            f"{json.dumps(str(key), ensure_ascii=False)}:{_encode(item)}"
            for key, item in value.items()
        )
        return "{" + ",".join(items) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_encode(item) for item in value) + "]"
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise TypeError(f"Decimal não finito: {value}")
        return f"{value:f}"
    if isinstance(value, Enum):
        return _encode(value.value)
    if isinstance(value, (date, datetime)):
        return json.dumps(value.isoformat())
    if value is None or isinstance(value, (str, int, float, bool)):
        return json.dumps(value, ensure_ascii=False)
    raise TypeError(f"Tipo não serializável: {type(value).__name__}")


def encode_json(payload: Any) -> bytes:
    """Serializa payload para JSON UTF-8 compacto.

    Raises:
        TypeError: Se houver valor não serializável.
    """
    return _encode(payload).encode("utf-8")


def encode_form(payload: dict[str, Any]) -> bytes:
    """Serializa payload como application/x-www-form-urlencoded."""
    return urlencode({key: str(value) for key, value in payload.items()}).encode("ascii")


def decode_json(content: bytes) -> Any:
    """Decodifica JSON preservando números decimais como Decimal.

    Raises:
        ValueError: Se o conteúdo não for JSON válido.
    """
    return json.loads(content.decode("utf-8"), parse_float=Decimal)
