"""Ordenação de listagens de boletos.

Boletos em aberto primeiro; dentro de cada grupo, vencimento crescente.
Sem vencimento vai para o fim do grupo; empate mantém a ordem do provedor.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from app.domain.boleto import Boleto


def _sort_key(boleto: Boleto) -> tuple[int, date]:
    return (0 if boleto.is_open else 1, boleto.due_date or date.max)


def sort_boletos(boletos: Iterable[Boleto]) -> list[Boleto]:
    """Retorna nova lista ordenada (sorted é estável)."""
    return sorted(boletos, key=_sort_key)
