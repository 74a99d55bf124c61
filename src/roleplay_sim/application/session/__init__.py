"""Package `session`: ciclo de vida e persistência de sessão.

Exports principais:
- SimSession: modelo completo da sessão (de session/models.py)
- SessionLocks: locks assíncronos por sessão (de session/locks.py)
- SessionManager: gerenciador de sessão (de session/manager.py)
"""

from __future__ import annotations

from roleplay_sim.application.session.locks import SessionLocks
from roleplay_sim.application.session.models import SimSession

__all__ = ["SimSession", "SessionLocks", "SessionManager", "normalize_session_id"]


def __getattr__(name: str):
    """Lazy import do manager (evita import circular com infra)."""
    if name == "SessionManager":
        from roleplay_sim.application.session.manager import SessionManager

        return SessionManager
    if name == "normalize_session_id":
        from roleplay_sim.application.session.helpers import normalize_session_id

        return normalize_session_id
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
