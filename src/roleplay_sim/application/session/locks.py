"""Locks por sessão para serializar turnos concorrentes.

Um `asyncio.Lock` por session_id, nunca um lock global: sessões distintas
processam turnos em paralelo. Locks de sessões ociosas são coletados
(WeakValueDictionary) assim que nenhum turno os referencia.
"""

from __future__ import annotations

import asyncio
import weakref
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


class SessionLocks:
    """Registro de locks assíncronos indexado por session_id."""

    def __init__(self) -> None:
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def lock_for(self, session_id: str) -> asyncio.Lock:
        lock = self._locks.get(session_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[session_id] = lock
        return lock

    @asynccontextmanager
    async def hold(self, session_id: str) -> AsyncIterator[None]:
        """Mantém o lock da sessão durante o bloco."""
        lock = self.lock_for(session_id)
        async with lock:
            yield

    def is_locked(self, session_id: str) -> bool:
        lock = self._locks.get(session_id)
        return lock is not None and lock.locked()

    def __len__(self) -> int:
        return len(self._locks)
