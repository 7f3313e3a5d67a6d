"""Taxonomia de erros da camada de adaptadores bancários.

Todo erro carrega o nome do provedor e pode ser normalizado para
ProviderError. A categoria permite ao chamador mapear status HTTP ou
política de retry sem inspecionar o texto do banco.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from app.domain.instructions import InstructionResult

# Corpo bruto anexado ao erro é truncado (respostas HTML de gateway)
MAX_RAW_BODY_CHARS = 2000


class ErrorCategory(str, Enum):
    """Categoria distinguível de falha."""

    AUTHENTICATION = "authentication"
    VALIDATION = "validation"
    PROVIDER = "provider"
    TRANSPORT = "transport"
    SERIALIZATION = "serialization"


@dataclass(frozen=True)
class ProviderError:
    """Erro normalizado, independente do envelope de cada banco."""

    code: str
    message: str
    detail: str | None
    http_status: int | None
    provider_name: str


def truncate_body(body: str) -> str:
    if len(body) <= MAX_RAW_BODY_CHARS:
        return body
    return body[:MAX_RAW_BODY_CHARS] + "..."


class BankProviderError(Exception):
    """Base de todos os erros do adaptador."""

    category: ErrorCategory = ErrorCategory.PROVIDER

    def __init__(
        self,
        message: str,
        *,
        provider_name: str,
        status_code: int | None = None,
        is_retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.provider_name = provider_name
        self.status_code = status_code
        self.is_retryable = is_retryable

    @property
    def code(self) -> str:
        return self.category.value

    @property
    def detail(self) -> str | None:
        return None

    def to_provider_error(self) -> ProviderError:
        return ProviderError(
            code=self.code,
            message=self.message,
            detail=self.detail,
            http_status=self.status_code,
            provider_name=self.provider_name,
        )


class AuthenticationError(BankProviderError):
    """Endpoint de token respondeu com status diferente de 200."""

    category = ErrorCategory.AUTHENTICATION

    def __init__(
        self,
        message: str,
        *,
        provider_name: str,
        status_code: int | None,
        body: str,
    ) -> None:
        super().__init__(message, provider_name=provider_name, status_code=status_code)
        self.body = truncate_body(body)

    @property
    def detail(self) -> str | None:
        return self.body or None


class TransportError(BankProviderError):
    """Falha de rede/timeout antes de qualquer status HTTP."""

    category = ErrorCategory.TRANSPORT

    def __init__(self, message: str, *, provider_name: str, is_retryable: bool = True) -> None:
        super().__init__(message, provider_name=provider_name, is_retryable=is_retryable)


class RequestCancelledError(TransportError):
    """Deadline do chamador expirou ou a chamada foi cancelada."""

    def __init__(self, message: str, *, provider_name: str) -> None:
        super().__init__(message, provider_name=provider_name, is_retryable=False)


class ProviderAPIError(BankProviderError):
    """Status fora do conjunto de sucesso, com envelope de erro decodificado."""

    def __init__(self, error: ProviderError) -> None:
        super().__init__(
            error.message,
            provider_name=error.provider_name,
            status_code=error.http_status,
            is_retryable=error.http_status == 429
            or (error.http_status is not None and error.http_status >= 500),
        )
        self.error = error

    @property
    def category(self) -> ErrorCategory:  # type: ignore[override]
        if self.status_code in (400, 422):
            return ErrorCategory.VALIDATION
        if self.status_code in (401, 403):
            return ErrorCategory.AUTHENTICATION
        return ErrorCategory.PROVIDER

    @property
    def code(self) -> str:
        return self.error.code

    @property
    def detail(self) -> str | None:
        return self.error.detail

    def to_provider_error(self) -> ProviderError:
        return self.error


class UndecodedProviderError(BankProviderError):
    """Status fora do conjunto de sucesso e corpo sem envelope reconhecível."""

    def __init__(self, *, provider_name: str, status_code: int, body: str) -> None:
        super().__init__(
            f"Resposta inesperada do provedor (status {status_code})",
            provider_name=provider_name,
            status_code=status_code,
            is_retryable=status_code == 429 or status_code >= 500,
        )
        self.body = truncate_body(body)

    @property
    def code(self) -> str:
        return str(self.status_code)

    @property
    def detail(self) -> str | None:
        return self.body or None


class SerializationError(BankProviderError):
    """Falha local de codificação da requisição ou decodificação da resposta."""

    category = ErrorCategory.SERIALIZATION


class RequestValidationError(BankProviderError):
    """Requisição rejeitada na fronteira do adaptador, sem chamada de rede."""

    category = ErrorCategory.VALIDATION


class PartialInstructionError(BankProviderError):
    """Operação de várias instruções falhou depois de aplicar parte delas.

    O boleto fica parcialmente alterado no provedor; `applied` lista os
    resultados já aceitos e `cause` é o erro do comando que falhou.
    """

    def __init__(
        self,
        cause: BankProviderError,
        *,
        failed_command: str,
        applied: Sequence[InstructionResult],
    ) -> None:
        super().__init__(
            f"{failed_command} falhou após {len(applied)} instrução(ões) aplicada(s): "
            f"{cause.message}",
            provider_name=cause.provider_name,
            status_code=cause.status_code,
        )
        self.cause = cause
        self.failed_command = failed_command
        self.applied = list(applied)

    @property
    def category(self) -> ErrorCategory:  # type: ignore[override]
        return self.cause.category

    @property
    def code(self) -> str:
        return self.cause.code

    @property
    def detail(self) -> str | None:
        return self.cause.detail
