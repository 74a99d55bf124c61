"""Modelos de domínio (estado interno, flags, turnos e patches tipados)."""

from __future__ import annotations

import time
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from roleplay_sim.domain.enums import INITIAL_STAGE, Difficulty, SimStage, TurnRole

AFFECT_FIELDS: tuple[str, ...] = (
    "trust",
    "objection_resistance",
    "clarity_level",
    "urgency_to_decide",
    "confusion_level",
)

# Escalar contínuo sempre em [0, 1]
UnitFloat = Annotated[float, Field(ge=0.0, le=1.0)]


class TrainingConfig(BaseModel):
    """Knobs do treino definidos na inicialização (imutáveis)."""

    model_config = ConfigDict(frozen=True)

    difficulty: Difficulty = Difficulty.NORMAL
    customer_type: str = "mixed"
    forced_objection: str | None = None
    product: str | None = None

    @field_validator("difficulty", mode="before")
    @classmethod
    def _fallback_difficulty(cls, value: object) -> object:
        # Ausente -> normal; desconhecido -> nightmare (fallback mais duro)
        if value is None or (isinstance(value, str) and not value.strip()):
            return Difficulty.NORMAL
        if isinstance(value, str):
            try:
                return Difficulty(value.strip().lower())
            except ValueError:
                return Difficulty.NIGHTMARE
        return value

    @field_validator("customer_type", mode="before")
    @classmethod
    def _default_customer_type(cls, value: object) -> object:
        if value is None or (isinstance(value, str) and not value.strip()):
            return "mixed"
        return value


class AffectState(BaseModel):
    """Os cinco escalares contínuos de afeto do cliente."""

    trust: UnitFloat
    objection_resistance: UnitFloat
    clarity_level: UnitFloat
    urgency_to_decide: UnitFloat
    confusion_level: UnitFloat


class SimInternalState(BaseModel):
    """Registro mutável do estado da simulação."""

    sim_stage: SimStage = INITIAL_STAGE
    turn_count: int = Field(default=0, ge=0)

    trust: float = Field(default=0.25, ge=0.0, le=1.0)
    objection_resistance: float = Field(default=0.0, ge=0.0, le=1.0)
    clarity_level: float = Field(default=0.5, ge=0.0, le=1.0)
    urgency_to_decide: float = Field(default=0.1, ge=0.0, le=1.0)
    confusion_level: float = Field(default=0.3, ge=0.0, le=1.0)

    last_objection: str | None = None
    training_config: TrainingConfig = Field(default_factory=TrainingConfig)

    def affect(self) -> AffectState:
        """Snapshot dos escalares de afeto."""
        return AffectState(**{name: getattr(self, name) for name in AFFECT_FIELDS})


class SimFlags(BaseModel):
    """Contadores/booleanos discretos de micro-compromissos."""

    objection_turns: int = Field(default=0, ge=0)
    asked_for_meter_check: bool = False
    meter_permission_soft_yes: bool = False
    at_meter: bool = False
    appointment_soft_yes: bool = False
    appointment_time_proposed: bool = False
    appointment_confirmed: bool = False


class ConversationTurn(BaseModel):
    """Turno registrado no histórico (imutável após escrito)."""

    model_config = ConfigDict(frozen=True)

    role: TurnRole
    message: str
    timestamp: int = Field(default_factory=lambda: int(time.time() * 1000))


class StatePatch(BaseModel):
    """Patch explícito para `SimInternalState`.

    Apenas campos definidos são aplicados; campos desconhecidos são rejeitados.
    `turn_count` e `training_config` não são patcháveis.
    """

    model_config = ConfigDict(extra="forbid")

    sim_stage: SimStage | None = None
    trust: float | None = Field(default=None, ge=0.0, le=1.0)
    objection_resistance: float | None = Field(default=None, ge=0.0, le=1.0)
    clarity_level: float | None = Field(default=None, ge=0.0, le=1.0)
    urgency_to_decide: float | None = Field(default=None, ge=0.0, le=1.0)
    confusion_level: float | None = Field(default=None, ge=0.0, le=1.0)
    last_objection: str | None = None

    @classmethod
    def from_affect(cls, affect: AffectState) -> StatePatch:
        return cls(**affect.model_dump())

    def changes(self) -> dict[str, object]:
        return self.model_dump(exclude_unset=True)


class FlagsPatch(BaseModel):
    """Patch explícito para `SimFlags`."""

    model_config = ConfigDict(extra="forbid")

    objection_turns: int | None = Field(default=None, ge=0)
    asked_for_meter_check: bool | None = None
    meter_permission_soft_yes: bool | None = None
    at_meter: bool | None = None
    appointment_soft_yes: bool | None = None
    appointment_time_proposed: bool | None = None
    appointment_confirmed: bool | None = None

    @classmethod
    def from_flags(cls, flags: SimFlags) -> FlagsPatch:
        return cls(**flags.model_dump())

    def changes(self) -> dict[str, object]:
        return self.model_dump(exclude_unset=True)
