"""Observabilidade: correlation_id injetado nos logs dos adaptadores.

Uso:
    from app.observability import correlation_scope

    with correlation_scope():
        adapter.create_boleto(request)
"""

from app.observability.correlation import (
    correlation_scope,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)

__all__ = [
    "correlation_scope",
    "get_correlation_id",
    "reset_correlation_id",
    "set_correlation_id",
]
