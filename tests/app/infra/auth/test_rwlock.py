"""Testes do ReadWriteLock."""

from __future__ import annotations

import threading

import pytest

from app.infra.auth import LockTimeoutError, ReadWriteLock


class TestReadWriteLock:
    """Leitores compartilham; escritor é exclusivo."""

    def test_multiple_readers(self) -> None:
        """Dois leitores entram ao mesmo tempo."""
        lock = ReadWriteLock()
        with lock.read(timeout=0.1), lock.read(timeout=0.1):
            pass

    def test_writer_blocks_reader_until_timeout(self) -> None:
        """Leitor não entra enquanto há escritor."""
        lock = ReadWriteLock()
        with lock.write(), pytest.raises(LockTimeoutError), lock.read(timeout=0.05):
            pass

    def test_reader_blocks_writer_until_timeout(self) -> None:
        """Escritor espera leitores saírem."""
        lock = ReadWriteLock()
        with lock.read(), pytest.raises(LockTimeoutError), lock.write(timeout=0.05):
            pass

    def test_writer_released_wakes_reader(self) -> None:
        """Leitor bloqueado entra quando o escritor libera."""
        lock = ReadWriteLock()
        entered = threading.Event()

        def _reader() -> None:
            with lock.read(timeout=2):
                entered.set()

        with lock.write():
            thread = threading.Thread(target=_reader)
            thread.start()
            assert not entered.wait(0.05)
        thread.join(timeout=2)
        assert entered.is_set()
