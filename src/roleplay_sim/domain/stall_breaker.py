"""Stall-breaker: limita o ciclo de objeções independente da qualidade da geração.

Dispara quando o estágio é OBJECTION_LOOP, o rep tenta fechar (close type
diferente de none) e já houve pelo menos 2 turnos de objeção. Nesse caso
a intenção e a resposta do serviço de geração são descartadas e
substituídas por um desfecho forçado, ponderado pela dificuldade.
"""

from __future__ import annotations

import random
from dataclasses import dataclass

from roleplay_sim.domain.enums import CloseType, CustomerIntent, Difficulty, SimStage
from roleplay_sim.domain.models import SimFlags

SATURATION_OBJECTION_TURNS: int = 2

# Probabilidade de SOFT_YES_METER por dificuldade; demais -> CLARIFYING_QUESTION
SOFT_YES_PROBABILITY: dict[Difficulty, float] = {
    Difficulty.EASY: 1.0,
    Difficulty.NORMAL: 0.8,
    Difficulty.TOUGH: 0.6,
    Difficulty.NIGHTMARE: 0.25,
}
FALLBACK_SOFT_YES_PROBABILITY: float = SOFT_YES_PROBABILITY[Difficulty.NIGHTMARE]

FORCED_REPLIES: dict[CustomerIntent, str] = {
    CustomerIntent.SOFT_YES_METER: (
        "Alright... if it's truly just a quick look and I'm not signing anything, "
        "we can check it real quick."
    ),
    CustomerIntent.CLARIFYING_QUESTION: (
        "Okay, before we go further, what exactly are you needing from me, "
        "and is there any cost or contract today?"
    ),
}


@dataclass(frozen=True, slots=True)
class StallBreakerOutcome:
    """Decisão do stall-breaker para um turno."""

    fired: bool
    intent: CustomerIntent
    reply: str


def should_force_exit(stage: SimStage, flags: SimFlags, close_type: CloseType) -> bool:
    """True se o loop de objeções está saturado e o rep tenta fechar."""
    return (
        stage == SimStage.OBJECTION_LOOP
        and close_type != CloseType.NONE
        and flags.objection_turns >= SATURATION_OBJECTION_TURNS
    )


def choose_forced_intent(
    difficulty: Difficulty | str | None, rng: random.Random
) -> CustomerIntent:
    """Escolhe o desfecho forçado com peso por dificuldade.

    Dificuldade desconhecida usa o peso de nightmare.
    """
    try:
        probability = SOFT_YES_PROBABILITY[Difficulty(difficulty)]
    except ValueError:
        probability = FALLBACK_SOFT_YES_PROBABILITY

    if probability >= 1.0 or rng.random() < probability:
        return CustomerIntent.SOFT_YES_METER
    return CustomerIntent.CLARIFYING_QUESTION


def apply_stall_breaker(
    *,
    stage: SimStage,
    flags: SimFlags,
    close_type: CloseType,
    difficulty: Difficulty | str | None,
    intent: CustomerIntent,
    reply: str,
    rng: random.Random,
) -> StallBreakerOutcome:
    """Aplica o stall-breaker; sem disparo mantém intenção/resposta recebidas."""
    if not should_force_exit(stage, flags, close_type):
        return StallBreakerOutcome(fired=False, intent=intent, reply=reply)

    forced = choose_forced_intent(difficulty, rng)
    return StallBreakerOutcome(fired=True, intent=forced, reply=FORCED_REPLIES[forced])
