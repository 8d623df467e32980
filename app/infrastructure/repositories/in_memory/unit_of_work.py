"""
============================================================
TARJETA CRC - infrastructure/repositories/in_memory/unit_of_work.py
============================================================
Class: InMemoryUnitOfWork

Responsibilities:
  - Emular la atomicidad de PostgresUnitOfWork sobre repos en memoria:
    snapshot al entrar, restore si el bloque lanza.

Collaborators:
  - Repos in-memory con snapshot() / restore()

Constraints / Notes:
  - Solo la transacción más externa toma snapshot (anidadas se aplanan).
  - Pensado para tests: no aísla requests concurrentes entre sí.
============================================================
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator, Protocol, Sequence


class Snapshottable(Protocol):
    def snapshot(self): ...

    def restore(self, state) -> None: ...


class InMemoryUnitOfWork:
    def __init__(self, repositories: Sequence[Snapshottable]) -> None:
        self._repositories = list(repositories)
        self._local = threading.local()

    @contextmanager
    def transaction(self) -> Iterator[None]:
        depth = getattr(self._local, "depth", 0)
        if depth:
            self._local.depth = depth + 1
            try:
                yield
            finally:
                self._local.depth = depth
            return

        snapshots = [repo.snapshot() for repo in self._repositories]
        self._local.depth = 1
        try:
            yield
        except Exception:
            for repo, state in zip(self._repositories, snapshots):
                repo.restore(state)
            raise
        finally:
            self._local.depth = 0
