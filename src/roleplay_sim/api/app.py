"""Fábrica da aplicação FastAPI.

Uso: `uvicorn roleplay_sim.api.app:create_app --factory`
"""

from __future__ import annotations

import random
from typing import Any

from fastapi import FastAPI

from roleplay_sim.ai.openai_client import OpenAIGenerationClient
from roleplay_sim.api.routes import router
from roleplay_sim.application.coaching import CoachingService
from roleplay_sim.application.session.locks import SessionLocks
from roleplay_sim.application.session.manager import SessionManager
from roleplay_sim.application.turn_orchestrator import TurnOrchestrator
from roleplay_sim.config.settings import Settings, get_settings
from roleplay_sim.infra.session_contract import SessionStore
from roleplay_sim.infra.session_store import create_session_store
from roleplay_sim.observability.logging import configure_logging, get_logger
from roleplay_sim.observability.middleware import CorrelationIdMiddleware

logger = get_logger(__name__)


def create_app(
    settings: Settings | None = None,
    generator: Any | None = None,
    session_store: SessionStore | None = None,
    rng: random.Random | None = None,
) -> FastAPI:
    """Cria a aplicação FastAPI.

    Args:
        settings: Settings (default: ambiente)
        generator: colaborador com `generate` e `coach` (default: OpenAI)
        session_store: store já construído (default: conforme settings)
        rng: RNG compartilhado por perfis e stall-breaker (testes determinísticos)
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.service_name)

    validation_errors: list[str] = []
    validation_errors.extend(settings.validate_session_store_config())
    validation_errors.extend(settings.validate_generation_config())

    if validation_errors:
        error_msg = "; ".join(validation_errors)
        raise ValueError(f"Configuração inválida: {error_msg}")

    app = FastAPI(title=settings.service_name, version=settings.version)
    app.add_middleware(CorrelationIdMiddleware)
    app.include_router(router)

    rng = rng or random.Random()
    generator = generator or OpenAIGenerationClient.from_settings(settings)
    session_manager = SessionManager(session_store or create_session_store(settings), rng=rng)

    app.state.settings = settings
    app.state.session_manager = session_manager
    app.state.orchestrator = TurnOrchestrator(
        session_manager, generator, settings, rng=rng, locks=SessionLocks()
    )
    app.state.coaching_service = CoachingService(session_manager, generator)

    logger.info(
        "app_created",
        extra={
            "environment": settings.environment,
            "session_store_backend": settings.session_store_backend,
            "model": settings.openai_model,
        },
    )
    return app
