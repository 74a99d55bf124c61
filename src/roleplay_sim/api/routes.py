"""Rotas HTTP da simulação (camada externa fina sobre o orquestrador)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, status

from roleplay_sim.api.dependencies import (
    get_coaching_service,
    get_orchestrator,
    get_settings,
)
from roleplay_sim.api.schemas import (
    HintResponse,
    ResetResponse,
    SessionRequest,
    SimulateRequest,
    SimulateResponse,
)
from roleplay_sim.application.coaching import CoachingService
from roleplay_sim.application.errors import (
    GenerationFailedError,
    InvalidRepLineError,
    MissingSessionIdError,
)
from roleplay_sim.application.session.helpers import normalize_session_id
from roleplay_sim.application.turn_orchestrator import TurnOrchestrator
from roleplay_sim.config.settings import Settings
from roleplay_sim.domain.state_machine import UnknownStageError
from roleplay_sim.infra.session_contract import SessionStoreError
from roleplay_sim.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


def _resolve_session_id(request: Request, body: SessionRequest | None, settings: Settings) -> str:
    """Body tem precedência sobre o header configurado."""
    raw = body.session_id if body is not None else None
    if not raw:
        raw = request.headers.get(settings.session_id_header)
    try:
        return normalize_session_id(raw, settings)
    except MissingSessionIdError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.code) from e


def _internal_error(exc: Exception, operation: str) -> HTTPException:
    logger.error(f"{operation}_internal_error", extra={"error_type": type(exc).__name__})
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="internal_error"
    )


@router.get("/health")
def health(settings: Settings = Depends(get_settings)) -> dict[str, str]:
    """Healthcheck simples."""
    return {"status": "ok", "service": settings.service_name, "version": settings.version}


@router.post("/api/simulate", response_model=SimulateResponse)
async def simulate(
    request: Request,
    body: SimulateRequest,
    settings: Settings = Depends(get_settings),
    orchestrator: TurnOrchestrator = Depends(get_orchestrator),
) -> SimulateResponse:
    """Processa um turno do rep e devolve a resposta do homeowner."""
    if not (body.pitch or "").strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=InvalidRepLineError.code
        )
    session_id = _resolve_session_id(request, body, settings)

    try:
        result = await orchestrator.process_turn(session_id, body.pitch, body.training_config())
    except InvalidRepLineError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.code) from e
    except GenerationFailedError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.code) from e
    except (SessionStoreError, UnknownStageError) as e:
        raise _internal_error(e, "simulate") from e

    return SimulateResponse.from_turn(result)


@router.post("/api/hint", response_model=HintResponse)
async def hint(
    request: Request,
    body: SessionRequest | None = None,
    settings: Settings = Depends(get_settings),
    coaching: CoachingService = Depends(get_coaching_service),
) -> HintResponse:
    """Dica de coaching para o próximo passo do rep."""
    session_id = _resolve_session_id(request, body, settings)

    try:
        text = await coaching.get_hint(session_id)
    except GenerationFailedError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.code) from e
    except SessionStoreError as e:
        raise _internal_error(e, "hint") from e

    return HintResponse(hint=text)


@router.post("/api/reset-sim", response_model=ResetResponse)
async def reset_sim(
    request: Request,
    body: SessionRequest | None = None,
    settings: Settings = Depends(get_settings),
    orchestrator: TurnOrchestrator = Depends(get_orchestrator),
) -> ResetResponse:
    """Descarta a sessão do chamador e começa uma nova."""
    session_id = _resolve_session_id(request, body, settings)

    try:
        await orchestrator.reset(session_id)
    except SessionStoreError as e:
        raise _internal_error(e, "reset") from e

    return ResetResponse(ok=True)
