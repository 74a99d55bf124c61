"""Helpers puros para identificação de sessão."""

from __future__ import annotations

from roleplay_sim.application.errors import MissingSessionIdError
from roleplay_sim.config.settings import Settings


def normalize_session_id(raw: str | None, settings: Settings) -> str:
    """Normaliza o session_id recebido do colaborador.

    Ids vazios só caem no id compartilhado quando ALLOW_DEFAULT_SESSION_ID
    está habilitado; caso contrário a requisição é rejeitada.

    Raises:
        MissingSessionIdError: id ausente e fallback desabilitado
    """
    session_id = (raw or "").strip()
    if session_id:
        return session_id
    if settings.allow_default_session_id:
        return settings.default_session_id
    raise MissingSessionIdError("session_id obrigatório")
