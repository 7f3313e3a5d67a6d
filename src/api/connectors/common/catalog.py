"""Loader do catálogo YAML de cada provedor.

Carrega config/providers/{provider}.yaml: códigos de enumeração e a tabela
de comandos de instrução. Adicionar um comando a um provedor é uma
mudança de configuração, sem código novo.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from app.domain.enums import InstructionName
from app.infra.http.endpoint import BodyEncoding, Endpoint, ResponseKind
from app.infra.http.errors import RequestValidationError

# Diretório dos catálogos (src/config/providers/)
_CATALOG_DIR = Path(__file__).resolve().parents[3] / "config" / "providers"


@dataclass(frozen=True, slots=True)
class InstructionSpec:
    """Um comando de instrução no catálogo do provedor.

    Attributes:
        name: Comando canônico
        path: Segmento após /boletos/{nosso_numero}/
        method: Verbo HTTP
        success_statuses: Status de sucesso
        fields: Campo canônico -> campo de fio
        ignored: Campos canônicos aceitos mas não enviados
        required: Campos canônicos obrigatórios
    """

    name: InstructionName
    path: str
    method: str
    success_statuses: frozenset[int]
    fields: dict[str, str] = field(default_factory=dict)
    ignored: frozenset[str] = frozenset()
    required: frozenset[str] = frozenset()

    @property
    def accepted_fields(self) -> frozenset[str]:
        return frozenset(self.fields) | self.ignored

    def endpoint(self, path_prefix: str) -> Endpoint:
        return Endpoint(
            name=f"instruction.{self.name.value}",
            method=self.method,
            path=f"{path_prefix}/boletos/{{nosso_numero}}/{self.path}",
            success_statuses=self.success_statuses,
            encoding=BodyEncoding.JSON,
            response=ResponseKind.JSON,
        )


@dataclass(frozen=True, slots=True)
class ProviderCatalog:
    """Catálogo de um provedor (códigos + instruções)."""

    provider: str
    version: str
    path_prefix: str
    codes: dict[str, dict[str, Any]]
    instructions: dict[InstructionName, InstructionSpec]

    def code(self, kind: str, member: Enum | str) -> Any:
        """Traduz membro de enumeração canônica para o código do provedor.

        Raises:
            RequestValidationError: Valor sem mapeamento neste provedor
        """
        value = member.value if isinstance(member, Enum) else member
        mapping = self.codes.get(kind, {})
        if value not in mapping:
            raise RequestValidationError(
                f"{kind}={value} não suportado por {self.provider}",
                provider_name=self.provider,
            )
        return mapping[value]

    def decode(self, kind: str, code: Any) -> str | None:
        """Operação inversa de code(); None se desconhecido."""
        for canonical, wire in self.codes.get(kind, {}).items():
            if wire == code or str(wire) == str(code):
                return canonical
        return None

    def instruction(self, name: InstructionName) -> InstructionSpec:
        """Raises: RequestValidationError se o provedor não tem o comando."""
        spec = self.instructions.get(name)
        if spec is None:
            raise RequestValidationError(
                f"Instrução {name.value} não suportada por {self.provider}",
                provider_name=self.provider,
            )
        return spec

    def supports(self, name: InstructionName) -> bool:
        return name in self.instructions


@functools.lru_cache(maxsize=8)
def load_provider_catalog(provider: str) -> ProviderCatalog:
    """Carrega catálogo do provedor de YAML (com cache).

    Args:
        provider: Nome do provedor (ex: "sicoob", "SICREDI")

    Raises:
        FileNotFoundError: Se arquivo YAML não existe
        ValueError: Se YAML tem schema inválido
    """
    yaml_path = _CATALOG_DIR / f"{provider.lower()}.yaml"
    if not yaml_path.exists():
        raise FileNotFoundError(f"Catálogo não encontrado: {yaml_path}")

    with yaml_path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    return _parse_catalog(data, provider.upper())


def _parse_catalog(data: Any, provider: str) -> ProviderCatalog:
    if not isinstance(data, dict):
        raise ValueError(f"Catálogo de {provider} deve ser dict")

    codes = data.get("codes") or {}
    if not isinstance(codes, dict) or not all(isinstance(v, dict) for v in codes.values()):
        raise ValueError(f"codes de {provider} deve ser dict de dicts")

    instructions: dict[InstructionName, InstructionSpec] = {}
    for raw_name, raw in (data.get("instructions") or {}).items():
        instructions[InstructionName(raw_name)] = _parse_instruction(raw_name, raw, provider)

    return ProviderCatalog(
        provider=str(data.get("provider", provider)),
        version=str(data.get("version", "1")),
        path_prefix=str(data.get("path_prefix") or "").rstrip("/"),
        codes={kind: dict(mapping) for kind, mapping in codes.items()},
        instructions=instructions,
    )


def _parse_instruction(name: str, raw: Any, provider: str) -> InstructionSpec:
    if not isinstance(raw, dict) or not raw.get("path"):
        raise ValueError(f"Instrução {name} de {provider} sem path")
    success = raw.get("success") or [200]
    fields = raw.get("fields") or {}
    if not isinstance(fields, dict):
        raise ValueError(f"fields da instrução {name} de {provider} deve ser dict")
    return InstructionSpec(
        name=InstructionName(name),
        path=str(raw["path"]).strip("/"),
        method=str(raw.get("method", "PATCH")).upper(),
        success_statuses=frozenset(int(status) for status in success),
        fields={str(k): str(v) for k, v in fields.items()},
        ignored=frozenset(str(item) for item in raw.get("ignored") or ()),
        required=frozenset(str(item) for item in raw.get("required") or ()),
    )
