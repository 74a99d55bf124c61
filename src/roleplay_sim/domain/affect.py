"""Clamp dos escalares de afeto propostos pelo serviço de geração.

Nenhum valor proposto é confiável: coerção para número, default 0.5 se
inválido, depois clamp em [0.0, 1.0].
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from roleplay_sim.domain.models import AFFECT_FIELDS, AffectState

NEUTRAL_AFFECT: float = 0.5

# Chaves camelCase emitidas pelo serviço de geração -> campos internos
PROPOSED_KEYS: dict[str, str] = {
    "trust": "trust",
    "objectionResistance": "objection_resistance",
    "clarityLevel": "clarity_level",
    "urgencyToDecide": "urgency_to_decide",
    "confusionLevel": "confusion_level",
}


def clamp_unit(value: Any) -> float:
    """Coerção + clamp para [0, 1].

    Exemplos:
        >>> clamp_unit(5)
        1.0
        >>> clamp_unit("abc")
        0.5
        >>> clamp_unit(-2)
        0.0
    """
    if value is None or isinstance(value, bool):
        return NEUTRAL_AFFECT
    try:
        number = float(value)
    except (TypeError, ValueError):
        return NEUTRAL_AFFECT
    if math.isnan(number):
        return NEUTRAL_AFFECT
    return max(0.0, min(1.0, number))


def clamp_proposed_state(proposed: Mapping[str, Any] | None) -> AffectState:
    """Converte o estado proposto (não confiável) em AffectState válido.

    Aceita chaves camelCase (contrato do serviço) ou snake_case; chaves
    ausentes valem 0.5.
    """
    source: Mapping[str, Any] = proposed if isinstance(proposed, Mapping) else {}
    values: dict[str, float] = {}
    for external, internal in PROPOSED_KEYS.items():
        raw = source.get(external, source.get(internal))
        values[internal] = clamp_unit(raw)
    return AffectState(**{name: values[name] for name in AFFECT_FIELDS})
