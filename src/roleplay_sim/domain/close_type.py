"""Classificador determinístico de tentativa de fechamento na fala do rep.

Detecta se o rep está tentando concluir o ciclo de objeções, independente
do julgamento do serviço de geração. Prioridade fixa:
scale > binary > next_step > permission > none.
"""

from __future__ import annotations

import re
from re import Pattern

from roleplay_sim.domain.enums import CloseType

# Compilar patterns uma vez (determinismo + performance)
_SCALE: tuple[Pattern[str], ...] = (
    re.compile(r"\b1\s*(?:-|–|to)\s*10\b"),
    re.compile(r"\bout of 10\b"),
    re.compile(r"\brate\b"),
)
_BINARY_JOINER: Pattern[str] = re.compile(r"\bor\b")
_BINARY_CHOICE: tuple[Pattern[str], ...] = (
    re.compile(r"\bdo you want\b"),
    re.compile(r"\bwould you rather\b"),
    re.compile(r"\beither\b"),
    re.compile(r"\bwhich\b"),
)
_NEXT_STEP: tuple[Pattern[str], ...] = tuple(
    re.compile(rf"\b{word}\b")
    for word in ("meter", "bill", "appointment", "schedule", "what time", "tomorrow", "today")
)
_PERMISSION: tuple[Pattern[str], ...] = tuple(
    re.compile(rf"\b{phrase}\b")
    for phrase in ("can i", "can we", "mind if", "real quick", "30 seconds", "15 seconds")
)


def _any(patterns: tuple[Pattern[str], ...], text: str) -> bool:
    return any(p.search(text) for p in patterns)


def classify_close_type(rep_line: str | None) -> CloseType:
    """Classifica a fala do rep em um tipo de fechamento.

    Exemplos:
        >>> classify_close_type("On a scale of 1 to 10, where are you?")
        <CloseType.SCALE: 'scale'>

        >>> classify_close_type("Would you rather I check the meter or grab your last bill?")
        <CloseType.BINARY: 'binary'>
    """
    text = (rep_line or "").lower()
    if not text.strip():
        return CloseType.NONE

    if _any(_SCALE, text):
        return CloseType.SCALE
    if _BINARY_JOINER.search(text) and _any(_BINARY_CHOICE, text):
        return CloseType.BINARY
    if _any(_NEXT_STEP, text):
        return CloseType.NEXT_STEP
    if _any(_PERMISSION, text):
        return CloseType.PERMISSION
    return CloseType.NONE
