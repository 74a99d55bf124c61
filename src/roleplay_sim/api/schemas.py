"""Schemas HTTP (request/response) da superfície de simulação."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from roleplay_sim.application.turn_orchestrator import TurnResult
from roleplay_sim.domain.models import TrainingConfig


def camelize(data: dict[str, Any]) -> dict[str, Any]:
    """Converte chaves snake_case em camelCase (recursivo em dicts)."""
    return {
        to_camel(key): camelize(value) if isinstance(value, dict) else value
        for key, value in data.items()
    }


class SessionRequest(BaseModel):
    """Body opcional com o session_id (alternativa ao header)."""

    model_config = ConfigDict(populate_by_name=True)

    session_id: str | None = Field(
        default=None, validation_alias=AliasChoices("session_id", "sessionId")
    )


class SimulateRequest(SessionRequest):
    """Body de POST /api/simulate."""

    # Opcional no schema: ausência vira 400 pitch_required, não 422
    pitch: str | None = None
    product: str | None = None
    customer_type: str | None = Field(
        default=None, validation_alias=AliasChoices("customerType", "customer_type")
    )
    objection: str | None = None
    difficulty: str | None = None

    def training_config(self) -> TrainingConfig:
        """Config do treino; só tem efeito na criação da sessão."""
        return TrainingConfig(
            difficulty=self.difficulty,
            customer_type=self.customer_type,
            forced_objection=self.objection or None,
            product=self.product or None,
        )


class SimulateResponse(BaseModel):
    """Resposta de POST /api/simulate (chaves camelCase).

    `internal` carrega só os cinco escalares de afeto.
    """

    model_config = ConfigDict(populate_by_name=True)

    reply: str
    customer_intent: str
    sim_stage: str = Field(serialization_alias="simStage")
    flags: dict[str, Any]
    internal: dict[str, Any]

    @classmethod
    def from_turn(cls, result: TurnResult) -> SimulateResponse:
        return cls(
            reply=result.reply,
            customer_intent=result.customer_intent.value,
            sim_stage=result.sim_stage.value,
            flags=camelize(result.flags.model_dump(mode="json")),
            internal=camelize(result.internal.affect().model_dump(mode="json")),
        )


class HintResponse(BaseModel):
    hint: str


class ResetResponse(BaseModel):
    ok: bool = True
