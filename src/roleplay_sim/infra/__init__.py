"""Camada de infraestrutura: backends de persistência de sessão.

- Session: InMemorySessionStore, RedisSessionStore, create_session_store

Uso típico:
    from roleplay_sim.infra import create_session_store

Infraestrutura não decide regra de negócio; logs estruturados sem falas.
"""

from roleplay_sim.infra.session_contract import SessionStore, SessionStoreError
from roleplay_sim.infra.session_store import create_session_store
from roleplay_sim.infra.session_store_memory import InMemorySessionStore
from roleplay_sim.infra.session_store_redis import RedisSessionStore

__all__ = [
    "SessionStore",
    "SessionStoreError",
    "InMemorySessionStore",
    "RedisSessionStore",
    "create_session_store",
]
