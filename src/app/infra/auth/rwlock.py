"""Lock leitores/escritor com timeout.

Vários leitores simultâneos; um escritor exclusivo. Escritores em espera
bloqueiam novos leitores, de modo que uma renovação de token não fica
esperando indefinidamente atrás de um fluxo contínuo de leituras.
"""

from __future__ import annotations

import threading
import time
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


class LockTimeoutError(Exception):
    """Lock não obtido dentro do timeout."""


class ReadWriteLock:
    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def _wait_for(self, predicate: Callable[[], bool], timeout: float | None) -> None:
        deadline = None if timeout is None else time.monotonic() + timeout
        while not predicate():
            remaining = None if deadline is None else deadline - time.monotonic()
            if remaining is not None and remaining <= 0:
                raise LockTimeoutError("timeout aguardando lock")
            self._cond.wait(remaining)

    @contextmanager
    def read(self, timeout: float | None = None) -> Iterator[None]:
        with self._cond:
            self._wait_for(lambda: not self._writer and self._writers_waiting == 0, timeout)
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self, timeout: float | None = None) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                self._wait_for(lambda: not self._writer and self._readers == 0, timeout)
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()
