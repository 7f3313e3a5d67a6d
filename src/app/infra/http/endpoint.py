"""Definição declarativa de endpoints de provedor.

Cada operação de alto nível é uma tupla fixa (método, path, codificação do
corpo, status de sucesso, idempotência). O executor não conhece regras de
negócio; só executa Endpoint + parâmetros.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any
from urllib.parse import quote


class BodyEncoding(str, Enum):
    NONE = "none"
    JSON = "json"
    FORM = "form"


class ResponseKind(str, Enum):
    JSON = "json"
    EMPTY = "empty"
    BINARY = "binary"


@dataclass(frozen=True, slots=True)
class Endpoint:
    """Uma operação HTTP de um provedor.

    Attributes:
        name: Nome lógico (logs)
        method: Verbo HTTP
        path: Template relativo à base (ex: "/boletos/{nosso_numero}/{command}")
        success_statuses: Status considerados sucesso
        encoding: Codificação do corpo
        response: Forma esperada do corpo de sucesso
        idempotent: Se True, admite retry em falhas transitórias
        base: Chave da URL base no adaptador ("api" ou "pix")
        accept: Valor do header Accept
    """

    name: str
    method: str
    path: str
    success_statuses: frozenset[int]
    encoding: BodyEncoding = BodyEncoding.NONE
    response: ResponseKind = ResponseKind.JSON
    idempotent: bool = False
    base: str = "api"
    accept: str = "application/json"

    def render_path(self, params: dict[str, Any] | None = None) -> str:
        """Preenche o template com valores escapados para uso em path."""
        if not params:
            return self.path
        safe = {key: quote(str(value), safe="") for key, value in params.items()}
        return self.path.format(**safe)
