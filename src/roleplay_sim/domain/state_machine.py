"""Máquina de estágios da simulação: transição pura e determinística.

- TRANSITIONS[stage] = regra com destino por intenção e destino padrão
- Efeitos sobre flags acontecem na mesma chamada (Mealy: transição + saída)
- APPT_CONFIRMED é o único terminal (self-loop); INTRO o único inicial
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from roleplay_sim.domain.enums import CustomerIntent, SimStage
from roleplay_sim.domain.models import SimFlags
from roleplay_sim.observability.logging import get_logger

logger: logging.Logger = get_logger(__name__)

FlagEffect = Callable[[SimFlags], None]


class UnknownStageError(RuntimeError):
    """Estágio fora do conjunto enumerado (falha interna de consistência)."""

    pass


def _no_effect(flags: SimFlags) -> None:
    return None


def _meter_soft_yes(flags: SimFlags) -> None:
    flags.meter_permission_soft_yes = True
    flags.asked_for_meter_check = True


def _count_objection(flags: SimFlags) -> None:
    flags.objection_turns += 1


def _at_meter(flags: SimFlags) -> None:
    flags.at_meter = True


def _appointment_soft_yes(flags: SimFlags) -> None:
    flags.appointment_soft_yes = True


def _appointment_confirmed(flags: SimFlags) -> None:
    flags.appointment_confirmed = True


def _appointment_time_proposed(flags: SimFlags) -> None:
    flags.appointment_time_proposed = True


@dataclass(frozen=True, slots=True)
class StageRule:
    """Regra de transição de um estágio.

    `on_intent` tem precedência; sem correspondência aplica `default`.
    """

    default: tuple[SimStage, FlagEffect]
    on_intent: dict[CustomerIntent, tuple[SimStage, FlagEffect]] = field(default_factory=dict)

    def resolve(self, intent: CustomerIntent) -> tuple[SimStage, FlagEffect]:
        return self.on_intent.get(intent, self.default)


TRANSITIONS: dict[SimStage, StageRule] = {
    SimStage.INTRO: StageRule(default=(SimStage.EXPLAIN_PROGRAM, _no_effect)),
    SimStage.EXPLAIN_PROGRAM: StageRule(
        default=(SimStage.EXPLAIN_PROGRAM, _no_effect),
        on_intent={CustomerIntent.NEW_OBJECTION: (SimStage.OBJECTION_LOOP, _no_effect)},
    ),
    SimStage.OBJECTION_LOOP: StageRule(
        default=(SimStage.OBJECTION_LOOP, _count_objection),
        on_intent={CustomerIntent.SOFT_YES_METER: (SimStage.METER_SOFT_CLOSE, _meter_soft_yes)},
    ),
    SimStage.METER_SOFT_CLOSE: StageRule(default=(SimStage.AT_METER, _no_effect)),
    SimStage.AT_METER: StageRule(default=(SimStage.QUALIFICATION_RESULT, _at_meter)),
    SimStage.QUALIFICATION_RESULT: StageRule(
        default=(SimStage.QUALIFICATION_RESULT, _no_effect),
        on_intent={
            CustomerIntent.SOFT_YES_APPT: (SimStage.APPT_SOFT_CLOSE, _appointment_soft_yes)
        },
    ),
    SimStage.APPT_SOFT_CLOSE: StageRule(default=(SimStage.APPT_SCHEDULING, _no_effect)),
    SimStage.APPT_SCHEDULING: StageRule(
        default=(SimStage.APPT_SCHEDULING, _no_effect),
        on_intent={
            CustomerIntent.TIME_CONFIRMED: (SimStage.APPT_CONFIRMED, _appointment_confirmed),
            CustomerIntent.TIME_NEGOTIATION: (
                SimStage.APPT_SCHEDULING,
                _appointment_time_proposed,
            ),
        },
    ),
    SimStage.APPT_CONFIRMED: StageRule(default=(SimStage.APPT_CONFIRMED, _no_effect)),
}


def advance_stage(stage: SimStage | str, flags: SimFlags, intent: CustomerIntent) -> SimStage:
    """Calcula o próximo estágio e aplica efeitos em `flags` (mutado in-place).

    Raises:
        UnknownStageError: se `stage` não pertence ao conjunto enumerado
    """
    try:
        current = SimStage(stage)
        rule = TRANSITIONS[current]
    except (ValueError, KeyError) as exc:
        logger.error("unknown_stage", extra={"stage": str(stage)})
        raise UnknownStageError(f"Estágio desconhecido: {stage!r}") from exc

    next_stage, effect = rule.resolve(intent)
    effect(flags)

    logger.debug(
        "stage_transition",
        extra={
            "from_stage": current.value,
            "intent": intent.value,
            "to_stage": next_stage.value,
            "objection_turns": flags.objection_turns,
        },
    )
    return next_stage
