"""Contexto de chamada: deadline e cancelamento explícito.

Equivalente síncrono de um contexto cancelável. O deadline limita o
timeout de cada requisição HTTP e a espera pelo lock de token; o
cancelamento é observado antes de cada operação de IO.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field


@dataclass
class RequestContext:
    """Deadline (relógio monotônico) e sinal de cancelamento de uma chamada.

    Uso:
        ctx = RequestContext.with_timeout(5)
        adapter.query_boleto("123", ctx=ctx)

        # de outra thread
        ctx.cancel()
    """

    deadline: float | None = None
    _cancelled: threading.Event = field(default_factory=threading.Event, repr=False)

    @classmethod
    def with_timeout(cls, seconds: float) -> RequestContext:
        return cls(deadline=time.monotonic() + seconds)

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def remaining(self) -> float | None:
        """Segundos até o deadline (None = sem deadline)."""
        if self.deadline is None:
            return None
        return self.deadline - time.monotonic()

    @property
    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0

    def effective_timeout(self, default_seconds: float) -> float:
        """Menor valor entre o timeout configurado e o tempo restante."""
        remaining = self.remaining()
        if remaining is None:
            return default_seconds
        return max(min(default_seconds, remaining), 0.0)

    def wait(self, seconds: float) -> bool:
        """Dorme até `seconds` ou até o cancelamento. Retorna True se cancelado."""
        remaining = self.remaining()
        if remaining is not None:
            seconds = min(seconds, max(remaining, 0.0))
        return self._cancelled.wait(seconds)
