"""Parsing da saída bruta do serviço de geração.

Falhas estruturais (texto não-JSON, campo obrigatório ausente) levantam
GenerationOutputError; anomalias locais (intent desconhecida, números
fora da faixa) passam adiante para normalização no orquestrador.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from pydantic import ValidationError

from roleplay_sim.ai.contracts.generation import GenerationOutputError, GenerationResult
from roleplay_sim.observability.logging import get_logger

logger: logging.Logger = get_logger(__name__)

# Alguns modelos embrulham o JSON em bloco de código markdown
_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)


def _strip_code_fence(text: str) -> str:
    match = _CODE_FENCE.match(text)
    return match.group(1) if match else text


def _lift_legacy_state(data: dict[str, Any]) -> dict[str, Any]:
    """Aceita `internal_reasoning.updated_state` como local de `proposed_state`."""
    if "proposed_state" in data:
        return data
    reasoning = data.get("internal_reasoning")
    if isinstance(reasoning, dict) and "updated_state" in reasoning:
        return {**data, "proposed_state": reasoning["updated_state"]}
    return data


def parse_generation_output(raw_text: str | None) -> GenerationResult:
    """Converte o texto bruto em GenerationResult.

    Raises:
        GenerationOutputError: texto vazio, JSON inválido, não-objeto ou
            campos obrigatórios ausentes/inválidos
    """
    text = _strip_code_fence((raw_text or "").strip())
    if not text:
        raise GenerationOutputError("empty_output")

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise GenerationOutputError("invalid_json") from e

    if not isinstance(data, dict):
        raise GenerationOutputError("not_an_object")

    try:
        return GenerationResult.model_validate(_lift_legacy_state(data))
    except ValidationError as e:
        fields = sorted({str(err["loc"][0]) for err in e.errors() if err.get("loc")})
        logger.debug("generation_output_invalid", extra={"fields": fields})
        raise GenerationOutputError(f"schema_mismatch:{','.join(fields)}") from e
