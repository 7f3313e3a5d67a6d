"""correlation_id das operações bancárias.

Cada operação de alto nível (emitir boleto, consultar cobrança PIX, ...)
roda sob um correlation_id que aparece em todos os logs emitidos pelo
adaptador, TokenManager e executor. ContextVar mantém o valor isolado por
thread chamadora.
"""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def get_correlation_id() -> str:
    """Retorna o correlation_id atual ou string vazia."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None = None) -> Token[str]:
    """Define o correlation_id (gera UUID4 se None).

    Returns:
        Token para reset_correlation_id().
    """
    return _correlation_id.set(correlation_id or uuid.uuid4().hex)


def reset_correlation_id(token: Token[str]) -> None:
    _correlation_id.reset(token)


@contextmanager
def correlation_scope(correlation_id: str | None = None) -> Iterator[str]:
    """Executa o bloco sob um correlation_id, restaurando o anterior ao sair.

    Se já existir um correlation_id e nenhum for informado, reaproveita o atual
    (chamadas aninhadas ficam no mesmo rastro).
    """
    value = correlation_id or get_correlation_id() or uuid.uuid4().hex
    token = _correlation_id.set(value)
    try:
        yield value
    finally:
        _correlation_id.reset(token)
