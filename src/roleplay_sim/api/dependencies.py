"""Dependências injetadas nas rotas."""

from __future__ import annotations

from fastapi import Request

from roleplay_sim.application.coaching import CoachingService
from roleplay_sim.application.turn_orchestrator import TurnOrchestrator
from roleplay_sim.config.settings import Settings


def get_settings(request: Request) -> Settings:
    """Retorna settings da aplicação."""

    return request.app.state.settings


def get_orchestrator(request: Request) -> TurnOrchestrator:
    """Retorna o orquestrador de turnos."""

    return request.app.state.orchestrator


def get_coaching_service(request: Request) -> CoachingService:
    return request.app.state.coaching_service
