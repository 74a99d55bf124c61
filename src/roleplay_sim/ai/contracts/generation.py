"""Contrato Pydantic para o serviço de geração (homeowner simulado)."""

from __future__ import annotations

from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field, field_validator

from roleplay_sim.domain.customer_profile import CustomerProfile
from roleplay_sim.domain.enums import SimStage, TurnRole
from roleplay_sim.domain.models import ConversationTurn, SimFlags, SimInternalState


class GenerationServiceError(Exception):
    """Serviço de geração indisponível, com erro ou em timeout."""


class GenerationOutputError(ValueError):
    """Saída do serviço de geração não respeita o contrato."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Saída de geração inválida: {reason}")
        self.reason = reason


class GenerationContext(BaseModel):
    """Input do serviço de geração para um turno."""

    customer_profile: CustomerProfile
    """Perfil do homeowner (somente leitura)."""

    state: SimInternalState
    """Estado interno atual (antes do turno)."""

    flags: SimFlags
    """Flags de micro-compromisso atuais."""

    transcript: list[ConversationTurn] = Field(default_factory=list)
    """Turnos anteriores, em ordem de inserção, sem a fala atual."""

    rep_line: str = Field(..., min_length=1)
    """Fala mais recente do rep."""

    def transcript_text(self) -> str:
        return "\n".join(
            f"{'Rep' if turn.role == TurnRole.REP else 'Customer'}: {turn.message}"
            for turn in self.transcript
        )


class GenerationResult(BaseModel):
    """Output do serviço de geração (valores ainda não confiáveis)."""

    model_config = ConfigDict(extra="ignore")

    customer_reply: str = Field(..., min_length=1)
    """Fala do homeowner."""

    customer_intent: Any = Field(...)
    """Rótulo bruto; validado contra o conjunto fechado pelo orquestrador."""

    proposed_state: dict[str, Any]
    """Escalares de afeto propostos (clampados antes do merge)."""

    @field_validator("customer_reply", mode="before")
    @classmethod
    def _strip_reply(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value


class CustomerGenerator(Protocol):
    """Colaborador que produz a resposta bruta do homeowner."""

    async def generate(self, context: GenerationContext) -> str: ...


class CoachGenerator(Protocol):
    """Colaborador que produz dicas de coaching em texto livre."""

    async def coach(self, stage: SimStage, flags: SimFlags, transcript: str) -> str: ...
