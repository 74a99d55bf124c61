"""Enums de domínio: estágios da simulação, intenções do cliente, dificuldade."""

from __future__ import annotations

from enum import StrEnum


class SimStage(StrEnum):
    """Estágios canônicos da negociação simulada."""

    # === Entrada ===
    INTRO = "INTRO"
    """Rep fazendo a abertura; estado inicial único."""

    EXPLAIN_PROGRAM = "EXPLAIN_PROGRAM"
    """Rep explicando o programa."""

    # === Objeções ===
    OBJECTION_LOOP = "OBJECTION_LOOP"
    """Cliente levantando objeções; limitado pelo stall-breaker."""

    # === Medidor ===
    METER_SOFT_CLOSE = "METER_SOFT_CLOSE"
    AT_METER = "AT_METER"
    QUALIFICATION_RESULT = "QUALIFICATION_RESULT"

    # === Agendamento ===
    APPT_SOFT_CLOSE = "APPT_SOFT_CLOSE"
    APPT_SCHEDULING = "APPT_SCHEDULING"

    # === Terminal ===
    APPT_CONFIRMED = "APPT_CONFIRMED"
    """Visita confirmada; estado terminal único (self-loop)."""


INITIAL_STAGE: SimStage = SimStage.INTRO
TERMINAL_STAGES: frozenset[SimStage] = frozenset({SimStage.APPT_CONFIRMED})


class CustomerIntent(StrEnum):
    """Rótulo de intenção do cliente emitido pelo serviço de geração."""

    NEW_OBJECTION = "NEW_OBJECTION"
    CLARIFYING_QUESTION = "CLARIFYING_QUESTION"
    SOFT_YES_METER = "SOFT_YES_METER"
    SOFT_YES_APPT = "SOFT_YES_APPT"
    TIME_NEGOTIATION = "TIME_NEGOTIATION"
    TIME_CONFIRMED = "TIME_CONFIRMED"


DEFAULT_INTENT: CustomerIntent = CustomerIntent.NEW_OBJECTION


def coerce_intent(value: object) -> tuple[CustomerIntent, bool]:
    """Valida rótulo contra o conjunto fechado.

    Retorna (intent, coerced). Valores desconhecidos viram NEW_OBJECTION.
    """
    if isinstance(value, str):
        try:
            return CustomerIntent(value.strip()), False
        except ValueError:
            pass
    return DEFAULT_INTENT, True


class Difficulty(StrEnum):
    """Nível de dificuldade do treino."""

    EASY = "easy"
    NORMAL = "normal"
    TOUGH = "tough"
    NIGHTMARE = "nightmare"


class TurnRole(StrEnum):
    """Autor de um turno da conversa."""

    REP = "rep"
    CUSTOMER = "customer"


class CloseType(StrEnum):
    """Classificação da tentativa de fechamento na fala do rep."""

    SCALE = "scale"
    BINARY = "binary"
    NEXT_STEP = "next_step"
    PERMISSION = "permission"
    NONE = "none"
