"""Factory de SessionStore conforme backend configurado."""

from __future__ import annotations

import logging
from typing import Any

from roleplay_sim.config.settings import Settings
from roleplay_sim.infra.session_contract import SessionStore
from roleplay_sim.infra.session_store_memory import InMemorySessionStore
from roleplay_sim.infra.session_store_redis import RedisSessionStore
from roleplay_sim.observability.logging import get_logger

logger: logging.Logger = get_logger(__name__)


def _create_redis_client(redis_url: str) -> Any:
    """Cria cliente Redis a partir da URL."""
    import redis

    return redis.from_url(redis_url, decode_responses=True)


def create_session_store(settings: Settings, client: Any | None = None) -> SessionStore:
    """Cria o SessionStore do backend configurado.

    Args:
        settings: Settings da aplicação
        client: cliente Redis já construído (opcional; útil em testes)

    Raises:
        ValueError: backend inválido ou Redis sem URL
    """
    backend = settings.session_store_backend.lower()

    if backend == "memory":
        logger.info(
            "session_store_created",
            extra={
                "backend": backend,
                "ttl_seconds": settings.session_ttl_seconds,
                "max_sessions": settings.session_max_sessions,
            },
        )
        return InMemorySessionStore(
            ttl_seconds=settings.session_ttl_seconds,
            max_sessions=settings.session_max_sessions,
        )

    if backend == "redis":
        if client is None:
            if not settings.redis_url:
                raise ValueError("SESSION_STORE_BACKEND=redis requer REDIS_URL configurado")
            client = _create_redis_client(settings.redis_url)
        logger.info(
            "session_store_created",
            extra={"backend": backend, "ttl_seconds": settings.session_ttl_seconds},
        )
        return RedisSessionStore(client, ttl_seconds=settings.session_ttl_seconds)

    raise ValueError(f"SESSION_STORE_BACKEND '{backend}' inválido")
