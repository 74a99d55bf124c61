"""Taxonomia de erros da orquestração de turnos."""

from __future__ import annotations


class SimulationError(Exception):
    """Erro base da simulação."""

    code: str = "simulation_error"


class InvalidRepLineError(SimulationError):
    """Fala do rep vazia ou acima do limite; rejeitada antes de qualquer mutação."""

    code = "pitch_required"


class MissingSessionIdError(SimulationError):
    """Requisição sem session_id quando o fallback compartilhado está desabilitado."""

    code = "missing_session_id"


class GenerationFailedError(SimulationError):
    """Turno abortado: serviço de geração falhou ou retornou saída malformada.

    Nenhuma mutação de estágio/flags/afeto é aplicada; a fala do rep já
    registrada permanece como turno pendente.
    """

    code = "generation_failed"

    def __init__(self, reason: str) -> None:
        super().__init__(f"Falha na geração: {reason}")
        self.reason = reason
