"""Coaching: dica para o rep a partir do estágio, flags e transcript."""

from __future__ import annotations

import logging

from roleplay_sim.ai.contracts.generation import CoachGenerator, GenerationServiceError
from roleplay_sim.application.errors import GenerationFailedError
from roleplay_sim.application.session.manager import SessionManager
from roleplay_sim.domain.enums import INITIAL_STAGE
from roleplay_sim.domain.models import SimFlags
from roleplay_sim.observability.logging import get_logger
from roleplay_sim.observability.middleware import short_session_id
from roleplay_sim.observability.timing import timed

logger: logging.Logger = get_logger(__name__)


class CoachingService:
    """Canal lateral sem estado: lê a sessão, nunca a cria nem a altera."""

    def __init__(self, session_manager: SessionManager, coach: CoachGenerator) -> None:
        self._sessions = session_manager
        self._coach = coach

    async def get_hint(self, session_id: str) -> str:
        """Retorna dica de coaching em texto livre.

        Raises:
            GenerationFailedError: serviço de geração indisponível
        """
        session = self._sessions.peek(session_id)
        if session is None:
            stage, flags, transcript = INITIAL_STAGE, SimFlags(), ""
        else:
            stage, flags, transcript = session.state.sim_stage, session.flags, session.transcript()

        sid = short_session_id(session_id)
        try:
            with timed("coaching", session_id=sid):
                hint = await self._coach.coach(stage, flags, transcript)
        except GenerationServiceError as e:
            logger.warning("coaching_failed", extra={"session_id": sid})
            raise GenerationFailedError("coach_service_error") from e

        logger.info("hint_generated", extra={"session_id": sid, "sim_stage": stage.value})
        return hint
