"""Contratos Pydantic do serviço de geração."""

from roleplay_sim.ai.contracts.generation import (
    CoachGenerator,
    CustomerGenerator,
    GenerationContext,
    GenerationOutputError,
    GenerationResult,
    GenerationServiceError,
)

__all__ = [
    "CoachGenerator",
    "CustomerGenerator",
    "GenerationContext",
    "GenerationOutputError",
    "GenerationResult",
    "GenerationServiceError",
]
