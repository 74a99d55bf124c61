"""Contrato de persistência de sessão (SessionStore).

Separado para manter SRP e permitir reuso entre implementações.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from roleplay_sim.application.session import SimSession


class SessionStoreError(Exception):
    """Erro ao persistir ou recuperar sessão."""

    pass


class SessionStore(ABC):
    """Contrato abstrato para armazenamento de SimSession.

    Responsabilidades:
    - Persistir sessão por session_id
    - Expirar sessões ociosas além do TTL
    - Garantir isolamento entre sessões (nunca compartilhar objetos mutáveis)
    """

    @abstractmethod
    def save(self, session: SimSession) -> None:
        """Persiste a sessão.

        Raises:
            SessionStoreError: Em caso de falha de persistência
        """
        ...

    @abstractmethod
    def load(self, session_id: str) -> SimSession | None:
        """Carrega sessão por ID; None se inexistente ou expirada."""
        ...

    @abstractmethod
    def delete(self, session_id: str) -> bool:
        """Remove sessão; True se removida, False se não existia."""
        ...

    @abstractmethod
    def exists(self, session_id: str) -> bool:
        """Verifica se sessão existe e não expirou."""
        ...
