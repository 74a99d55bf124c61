"""Implementação de SessionStore usando Redis (múltiplas instâncias)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from roleplay_sim.config.settings import DEFAULT_SESSION_TTL_SECONDS
from roleplay_sim.infra.session_contract import SessionStore, SessionStoreError
from roleplay_sim.observability.logging import get_logger
from roleplay_sim.observability.middleware import short_session_id

if TYPE_CHECKING:
    from roleplay_sim.application.session import SimSession

logger: logging.Logger = get_logger(__name__)

KEY_PREFIX = "roleplay_sim:session:"


class RedisSessionStore(SessionStore):
    """Armazenamento em Redis com TTL nativo (SETEX).

    O TTL é renovado a cada save; capacidade é responsabilidade da
    política de memória do próprio Redis.
    """

    def __init__(self, redis_client: Any, ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS) -> None:
        self._redis = redis_client
        self._ttl_seconds = ttl_seconds

    @staticmethod
    def _key(session_id: str) -> str:
        return f"{KEY_PREFIX}{session_id}"

    def save(self, session: SimSession) -> None:
        payload = session.model_dump_json()

        try:
            self._redis.setex(self._key(session.session_id), self._ttl_seconds, payload)
            logger.debug(
                "Session saved (Redis)",
                extra={
                    "session_id": short_session_id(session.session_id),
                    "ttl_seconds": self._ttl_seconds,
                },
            )
        except Exception as e:
            logger.error(
                "Failed to save session to Redis",
                extra={"session_id": short_session_id(session.session_id), "error": str(e)},
            )
            raise SessionStoreError(f"Redis save failed: {e}") from e

    def load(self, session_id: str) -> SimSession | None:
        from roleplay_sim.application.session import SimSession

        try:
            payload = self._redis.get(self._key(session_id))
        except Exception as e:
            logger.error(
                "Failed to load session from Redis",
                extra={"session_id": short_session_id(session_id), "error": str(e)},
            )
            raise SessionStoreError(f"Redis load failed: {e}") from e

        if not payload:
            logger.debug(
                "Session not found (Redis)", extra={"session_id": short_session_id(session_id)}
            )
            return None

        if isinstance(payload, bytes):
            payload = payload.decode("utf-8")

        try:
            return SimSession.model_validate_json(payload)
        except ValueError as e:
            # Sessão corrompida não deve ser recriada silenciosamente
            logger.error(
                "Corrupted session payload (Redis)",
                extra={"session_id": short_session_id(session_id), "error": type(e).__name__},
            )
            raise SessionStoreError("Redis payload inválido") from e

    def delete(self, session_id: str) -> bool:
        try:
            deleted = self._redis.delete(self._key(session_id))
        except Exception as e:  # pragma: no cover - log best effort
            logger.error(
                "Failed to delete session from Redis",
                extra={"session_id": short_session_id(session_id), "error": str(e)},
            )
            return False
        if deleted:
            logger.debug(
                "Session deleted (Redis)", extra={"session_id": short_session_id(session_id)}
            )
        return bool(deleted)

    def exists(self, session_id: str) -> bool:
        try:
            return bool(self._redis.exists(self._key(session_id)))
        except Exception as e:  # pragma: no cover - log best effort
            logger.error(
                "Failed to check session existence in Redis",
                extra={"session_id": short_session_id(session_id), "error": str(e)},
            )
            return False
