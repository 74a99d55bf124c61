"""Models de sessão: SimSession.

SimSession é a unidade de isolamento da simulação.
- Uma sessão = um session_id opaco
- Histórico append-only, reenviado em ordem ao serviço de geração
- Serializável para o backend Redis
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field

from roleplay_sim.domain.customer_profile import CustomerProfile
from roleplay_sim.domain.enums import TurnRole
from roleplay_sim.domain.models import ConversationTurn, SimFlags, SimInternalState


class SimSession(BaseModel):
    """Estado completo de uma sessão de treino."""

    session_id: str
    customer_profile: CustomerProfile
    state: SimInternalState = Field(default_factory=SimInternalState)
    flags: SimFlags = Field(default_factory=SimFlags)
    conversation_history: list[ConversationTurn] = Field(default_factory=list)

    # _meta: usado apenas para eviction
    created_at: datetime = Field(default_factory=lambda: datetime.now(tz=UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(tz=UTC))

    @property
    def pending_rep_turn(self) -> ConversationTurn | None:
        """Última fala do rep ainda sem resposta do cliente (ou None)."""
        if self.conversation_history and self.conversation_history[-1].role == TurnRole.REP:
            return self.conversation_history[-1]
        return None

    def transcript(self) -> str:
        """Transcript textual na ordem de inserção."""
        return "\n".join(
            f"{'Rep' if turn.role == TurnRole.REP else 'Customer'}: {turn.message}"
            for turn in self.conversation_history
        )
