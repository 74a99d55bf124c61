"""Configurações centralizadas do roleplay_sim.

Este módulo exporta:
- Settings: classe de configuração via variáveis de ambiente
- get_settings: função cacheada para obter instância única

Uso típico:
    from roleplay_sim.config import get_settings
"""

from roleplay_sim.config.settings import (
    DEFAULT_SESSION_MAX_SESSIONS,
    DEFAULT_SESSION_TTL_SECONDS,
    Settings,
    get_settings,
)

__all__ = [
    "Settings",
    "get_settings",
    "DEFAULT_SESSION_TTL_SECONDS",
    "DEFAULT_SESSION_MAX_SESSIONS",
]
