"""Orquestrador de turno: fala do rep -> resposta do homeowner.

Fluxo por turno (sob o lock da sessão):
1. Valida a fala do rep (antes de qualquer mutação)
2. Garante a sessão (config aplicado só no primeiro contato)
3. Classifica o close type
4. Registra a fala do rep (retry idêntico completa o turno pendente)
5. Chama o serviço de geração com timeout
6. Normaliza intent, aplica stall-breaker, clamp de afeto e FSM
7. Aplica estado/flags via patches e a fala do cliente na mesma sessão
   carregada no passo 2 e persiste uma vez

Falha de geração aborta o turno sem tocar estágio, flags ou afeto.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from roleplay_sim.ai.contracts.generation import (
    CustomerGenerator,
    GenerationContext,
    GenerationOutputError,
    GenerationResult,
    GenerationServiceError,
)
from roleplay_sim.ai.parser import parse_generation_output
from roleplay_sim.application.errors import GenerationFailedError, InvalidRepLineError
from roleplay_sim.application.session.locks import SessionLocks
from roleplay_sim.application.session.manager import SessionManager
from roleplay_sim.application.session.models import SimSession
from roleplay_sim.config.settings import Settings
from roleplay_sim.domain.affect import clamp_proposed_state
from roleplay_sim.domain.close_type import classify_close_type
from roleplay_sim.domain.enums import CloseType, CustomerIntent, SimStage, TurnRole, coerce_intent
from roleplay_sim.domain.models import (
    FlagsPatch,
    SimFlags,
    SimInternalState,
    StatePatch,
    TrainingConfig,
)
from roleplay_sim.domain.stall_breaker import apply_stall_breaker
from roleplay_sim.domain.state_machine import advance_stage
from roleplay_sim.observability.logging import get_logger, log_override
from roleplay_sim.observability.middleware import bind_session_id, short_session_id
from roleplay_sim.observability.timing import timed

logger: logging.Logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class TurnResult:
    """Resultado de um turno completo."""

    reply: str
    customer_intent: CustomerIntent
    sim_stage: SimStage
    flags: SimFlags
    internal: SimInternalState
    stall_breaker_fired: bool
    close_type: CloseType
    turn_count: int


def _last_objection(proposed: Mapping[str, Any]) -> str | None:
    raw = proposed.get("lastObjection", proposed.get("last_objection"))
    if isinstance(raw, str) and raw.strip():
        return raw.strip()
    return None


class TurnOrchestrator:
    """Coordena um turno do rep sobre o SessionManager e o serviço de geração."""

    def __init__(
        self,
        session_manager: SessionManager,
        generator: CustomerGenerator,
        settings: Settings,
        *,
        rng: random.Random | None = None,
        locks: SessionLocks | None = None,
    ) -> None:
        self._sessions = session_manager
        self._generator = generator
        self._timeout = settings.generation_timeout_seconds
        self._max_rep_line_chars = settings.max_rep_line_chars
        self._rng = rng or random.Random()
        self._locks = locks or SessionLocks()

    async def process_turn(
        self,
        session_id: str,
        rep_line: str | None,
        training_config: TrainingConfig | None = None,
    ) -> TurnResult:
        """Processa um turno.

        Raises:
            InvalidRepLineError: fala vazia ou acima do limite (nada é mutado)
            GenerationFailedError: serviço falhou, estourou timeout ou saída malformada
        """
        line = (rep_line or "").strip()
        if not line:
            raise InvalidRepLineError("pitch obrigatório")
        if len(line) > self._max_rep_line_chars:
            raise InvalidRepLineError(f"pitch acima de {self._max_rep_line_chars} caracteres")

        with bind_session_id(session_id):
            async with self._locks.hold(session_id):
                return await self._run_turn(session_id, line, training_config or TrainingConfig())

    async def reset(self, session_id: str) -> SimSession:
        """Reinicia a sessão sob o mesmo lock dos turnos.

        Um turno em andamento na mesma sessão termina antes do reset.
        """
        with bind_session_id(session_id):
            async with self._locks.hold(session_id):
                return self._sessions.reset(session_id)

    async def _run_turn(
        self, session_id: str, line: str, training_config: TrainingConfig
    ) -> TurnResult:
        sid = short_session_id(session_id)
        session = self._sessions.ensure(session_id, training_config)
        close_type = classify_close_type(line)

        pending = session.pending_rep_turn
        if pending is not None and pending.message == line:
            # Retry após falha: completa o turno pendente em vez de duplicar
            prior_turns = session.conversation_history[:-1]
            logger.info("pending_rep_turn_resumed", extra={"session_id": sid})
        else:
            prior_turns = list(session.conversation_history)
            self._sessions.append_turn(session, TurnRole.REP, line)
            self._sessions.commit(session)

        context = GenerationContext(
            customer_profile=session.customer_profile,
            state=session.state,
            flags=session.flags,
            transcript=prior_turns,
            rep_line=line,
        )
        result = await self._generate(sid, context)

        intent, coerced = coerce_intent(result.customer_intent)
        if coerced:
            log_override(
                logger,
                "intent_coerced",
                "intent_validation",
                "unknown_intent_label",
                session_id=sid,
                raw_intent=str(result.customer_intent)[:40],
                coerced_to=intent.value,
            )

        stage = session.state.sim_stage
        flags = session.flags.model_copy()
        outcome = apply_stall_breaker(
            stage=stage,
            flags=flags,
            close_type=close_type,
            difficulty=session.state.training_config.difficulty,
            intent=intent,
            reply=result.customer_reply,
            rng=self._rng,
        )
        if outcome.fired:
            log_override(
                logger,
                "stall_breaker_fired",
                "stall_breaker",
                "objection_loop_saturated",
                session_id=sid,
                objection_turns=flags.objection_turns,
                close_type=close_type.value,
                forced_intent=outcome.intent.value,
                difficulty=session.state.training_config.difficulty.value,
            )

        affect = clamp_proposed_state(result.proposed_state)
        next_stage = advance_stage(stage, flags, outcome.intent)
        if next_stage != stage:
            logger.info(
                "stage_advanced",
                extra={
                    "session_id": sid,
                    "from_stage": stage.value,
                    "to_stage": next_stage.value,
                    "intent": outcome.intent.value,
                },
            )

        state_changes: dict[str, Any] = {"sim_stage": next_stage, **affect.model_dump()}
        if outcome.intent == CustomerIntent.NEW_OBJECTION:
            objection = _last_objection(result.proposed_state)
            if objection is not None:
                state_changes["last_objection"] = objection

        # Mesma instância carregada no passo 2; nada é relido do store
        self._sessions.apply_state(session, StatePatch(**state_changes))
        final_flags = self._sessions.apply_flags(session, FlagsPatch.from_flags(flags))
        self._sessions.append_turn(session, TurnRole.CUSTOMER, outcome.reply)
        self._sessions.commit(session)
        final_state = session.state

        logger.info(
            "turn_completed",
            extra={
                "session_id": sid,
                "sim_stage": final_state.sim_stage.value,
                "customer_intent": outcome.intent.value,
                "close_type": close_type.value,
                "turn_count": final_state.turn_count,
                "stall_breaker_fired": outcome.fired,
            },
        )
        return TurnResult(
            reply=outcome.reply,
            customer_intent=outcome.intent,
            sim_stage=final_state.sim_stage,
            flags=final_flags,
            internal=final_state,
            stall_breaker_fired=outcome.fired,
            close_type=close_type,
            turn_count=final_state.turn_count,
        )

    async def _generate(self, sid: str, context: GenerationContext) -> GenerationResult:
        try:
            with timed("generation", session_id=sid):
                raw = await asyncio.wait_for(
                    self._generator.generate(context), timeout=self._timeout
                )
            return parse_generation_output(raw)
        except TimeoutError as e:
            raise self._failed(sid, "timeout") from e
        except GenerationServiceError as e:
            raise self._failed(sid, "service_error") from e
        except GenerationOutputError as e:
            raise self._failed(sid, e.reason) from e

    @staticmethod
    def _failed(sid: str, reason: str) -> GenerationFailedError:
        logger.warning("generation_failed", extra={"session_id": sid, "reason": reason})
        return GenerationFailedError(reason)
