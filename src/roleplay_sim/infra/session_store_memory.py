"""Implementação de SessionStore em memória com TTL e limite de capacidade.

Eviction é housekeeping oportunista executado em todo acesso:
1. Remove sessões ociosas além do TTL (por updated_at)
2. Se ainda acima da capacidade, remove as menos recentemente atualizadas
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from roleplay_sim.config.settings import (
    DEFAULT_SESSION_MAX_SESSIONS,
    DEFAULT_SESSION_TTL_SECONDS,
)
from roleplay_sim.infra.session_contract import SessionStore
from roleplay_sim.observability.logging import get_logger
from roleplay_sim.observability.middleware import short_session_id

if TYPE_CHECKING:
    from roleplay_sim.application.session import SimSession

logger: logging.Logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class InMemorySessionStore(SessionStore):
    """Armazenamento em memória, seguro para acesso concorrente.

    ⚠️ Não persiste entre restarts nem entre instâncias.
    Sessões são copiadas na entrada e na saída: nenhum chamador segura
    referência ao objeto armazenado.
    """

    def __init__(
        self,
        ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS,
        max_sessions: int = DEFAULT_SESSION_MAX_SESSIONS,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if max_sessions <= 0:
            raise ValueError("max_sessions deve ser > 0")
        self._ttl = timedelta(seconds=ttl_seconds)
        self._max_sessions = max_sessions
        self._clock = clock
        self._sessions: dict[str, SimSession] = {}
        self._lock = threading.RLock()

    def save(self, session: SimSession) -> None:
        with self._lock:
            self._sessions[session.session_id] = session.model_copy(deep=True)
            self._sweep()
        logger.debug(
            "Session saved (in-memory)",
            extra={"session_id": short_session_id(session.session_id)},
        )

    def load(self, session_id: str) -> SimSession | None:
        with self._lock:
            self._sweep()
            session = self._sessions.get(session_id)
            if session is None:
                logger.debug(
                    "Session not found (in-memory)",
                    extra={"session_id": short_session_id(session_id)},
                )
                return None
            return session.model_copy(deep=True)

    def delete(self, session_id: str) -> bool:
        with self._lock:
            removed = self._sessions.pop(session_id, None) is not None
        if removed:
            logger.debug(
                "Session deleted (in-memory)",
                extra={"session_id": short_session_id(session_id)},
            )
        return removed

    def exists(self, session_id: str) -> bool:
        with self._lock:
            self._sweep()
            return session_id in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def session_ids(self) -> list[str]:
        """IDs atualmente retidos (sem disparar sweep)."""
        with self._lock:
            return list(self._sessions)

    def _sweep(self) -> None:
        """Aplica TTL e capacidade. Chamado com o lock adquirido."""
        cutoff = self._clock() - self._ttl
        expired = [sid for sid, s in self._sessions.items() if s.updated_at < cutoff]
        for sid in expired:
            del self._sessions[sid]

        overflow = len(self._sessions) - self._max_sessions
        evicted: list[str] = []
        if overflow > 0:
            by_age = sorted(self._sessions.items(), key=lambda item: item[1].updated_at)
            evicted = [sid for sid, _ in by_age[:overflow]]
            for sid in evicted:
                del self._sessions[sid]

        if expired or evicted:
            logger.info(
                "sessions_evicted",
                extra={
                    "expired_count": len(expired),
                    "capacity_evicted_count": len(evicted),
                    "remaining": len(self._sessions),
                },
            )
