"""SessionManager: ciclo de vida e mutações de sessão sobre um SessionStore.

Centraliza as operações da sessão (get/create, init, merge de estado e
flags, append de turnos, reset). Toda leitura devolve uma cópia isolada;
mutações por id são persistidas imediatamente; as que recebem a sessão
já carregada só persistem em `commit`.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from datetime import UTC, datetime

from roleplay_sim.application.session.models import SimSession
from roleplay_sim.domain.customer_profile import CustomerProfile, generate_customer_profile
from roleplay_sim.domain.enums import TurnRole
from roleplay_sim.domain.models import (
    ConversationTurn,
    FlagsPatch,
    SimFlags,
    SimInternalState,
    StatePatch,
    TrainingConfig,
)
from roleplay_sim.infra.session_contract import SessionStore
from roleplay_sim.observability.logging import get_logger
from roleplay_sim.observability.middleware import short_session_id


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class SessionManager:
    """Gerencia o ciclo de vida de SimSession sobre o store configurado."""

    def __init__(
        self,
        session_store: SessionStore,
        *,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] = _utcnow,
        profile_factory: Callable[[random.Random], CustomerProfile] = generate_customer_profile,
        logger: logging.Logger | None = None,
    ) -> None:
        self._sessions = session_store
        self._rng = rng or random.Random()
        self._clock = clock
        self._profile_factory = profile_factory
        self._logger = logger or get_logger(__name__)

    # ------------------------------------------------------------------
    # Ciclo de vida
    # ------------------------------------------------------------------

    def get(self, session_id: str) -> SimSession:
        """Retorna a sessão existente ou cria uma nova; renova `updated_at`."""
        session = self._sessions.load(session_id)
        if session is None:
            return self.init(session_id, self._profile_factory(self._rng), TrainingConfig())
        return self._touch(session)

    def peek(self, session_id: str) -> SimSession | None:
        """Leitura sem criação e sem renovar `updated_at`."""
        return self._sessions.load(session_id)

    def ensure(self, session_id: str, training_config: TrainingConfig) -> SimSession:
        """Cria a sessão no primeiro contato com o config informado.

        Em sessões existentes o config recebido é ignorado (imutável após init).
        """
        session = self._sessions.load(session_id)
        if session is None:
            return self.init(session_id, self._profile_factory(self._rng), training_config)
        return self._touch(session)

    def init(
        self,
        session_id: str,
        profile: CustomerProfile,
        training_config: TrainingConfig,
    ) -> SimSession:
        """(Re)cria a sessão do zero: flags padrão, histórico vazio."""
        now = self._clock()
        session = SimSession(
            session_id=session_id,
            customer_profile=profile,
            state=SimInternalState(training_config=training_config),
            flags=SimFlags(),
            conversation_history=[],
            created_at=now,
            updated_at=now,
        )
        self._sessions.save(session)
        self._logger.info(
            "session_created",
            extra={
                "session_id": short_session_id(session_id),
                "difficulty": training_config.difficulty.value,
                "customer_type": training_config.customer_type,
            },
        )
        return session

    def reset(self, session_id: str) -> SimSession:
        """Substitui a sessão por uma nova e vazia (rep recomeça)."""
        self._sessions.delete(session_id)
        self._logger.info("session_reset", extra={"session_id": short_session_id(session_id)})
        return self.init(session_id, self._profile_factory(self._rng), TrainingConfig())

    # ------------------------------------------------------------------
    # Mutações
    # ------------------------------------------------------------------

    def merge_state(self, session_id: str, patch: StatePatch) -> SimInternalState:
        """Merge raso em `state`; não toca flags nem histórico."""
        session = self.get(session_id)
        state = self.apply_state(session, patch)
        self._persist(session)
        return state

    def merge_flags(self, session_id: str, patch: FlagsPatch) -> SimFlags:
        """Merge raso em `flags`."""
        session = self.get(session_id)
        flags = self.apply_flags(session, patch)
        self._persist(session)
        return flags

    def push_turn(self, session_id: str, role: TurnRole, message: str) -> ConversationTurn:
        """Append no histórico; `turn_count` só incrementa em turnos do cliente."""
        session = self.get(session_id)
        turn = self.append_turn(session, role, message)
        self._persist(session)
        return turn

    # ------------------------------------------------------------------
    # Mutações sobre uma sessão já carregada
    #
    # Usadas pelo orquestrador: o turno inteiro muta a mesma instância e
    # persiste com `commit`, sem recarregar do store entre os passos.
    # ------------------------------------------------------------------

    @staticmethod
    def apply_state(session: SimSession, patch: StatePatch) -> SimInternalState:
        session.state = session.state.model_copy(update=patch.changes())
        return session.state

    @staticmethod
    def apply_flags(session: SimSession, patch: FlagsPatch) -> SimFlags:
        session.flags = session.flags.model_copy(update=patch.changes())
        return session.flags

    def append_turn(self, session: SimSession, role: TurnRole, message: str) -> ConversationTurn:
        turn = ConversationTurn(
            role=role,
            message=message,
            timestamp=int(self._clock().timestamp() * 1000),
        )
        session.conversation_history.append(turn)
        if role == TurnRole.CUSTOMER:
            session.state = session.state.model_copy(
                update={"turn_count": session.state.turn_count + 1}
            )
        return turn

    def commit(self, session: SimSession) -> None:
        """Persiste a sessão inteira (renova `updated_at`)."""
        self._persist(session)

    # ------------------------------------------------------------------
    # Internos
    # ------------------------------------------------------------------

    def _touch(self, session: SimSession) -> SimSession:
        self._persist(session)
        return session

    def _persist(self, session: SimSession) -> None:
        session.updated_at = self._clock()
        self._sessions.save(session)
