from __future__ import annotations

import json
import random
from collections import deque
from typing import Any

import pytest
from fastapi.testclient import TestClient

from roleplay_sim.ai.contracts.generation import GenerationContext
from roleplay_sim.api.app import create_app
from roleplay_sim.application.session.manager import SessionManager
from roleplay_sim.config.settings import Settings, get_settings
from roleplay_sim.infra.session_store_memory import InMemorySessionStore


def homeowner_json(
    reply: str = "I don't know, I'm pretty busy right now.",
    intent: Any = "NEW_OBJECTION",
    **state: Any,
) -> str:
    """Saída bruta no formato do serviço de geração."""
    proposed = {
        "trust": 0.3,
        "objectionResistance": 0.6,
        "clarityLevel": 0.5,
        "urgencyToDecide": 0.1,
        "confusionLevel": 0.3,
    }
    proposed.update(state)
    return json.dumps(
        {"customer_reply": reply, "customer_intent": intent, "proposed_state": proposed}
    )


class ScriptedGenerator:
    """Colaborador de geração roteirizado: devolve (ou levanta) itens em ordem."""

    def __init__(self, *items: Any) -> None:
        self.items: deque[Any] = deque(items)
        self.contexts: list[GenerationContext] = []
        self.coach_calls: list[tuple[Any, Any, str]] = []
        self.hint = "Acknowledge the concern, then ask for a quick look at the meter."

    def push(self, *items: Any) -> None:
        self.items.extend(items)

    async def generate(self, context: GenerationContext) -> str:
        self.contexts.append(context)
        item = self.items.popleft() if self.items else homeowner_json()
        if isinstance(item, BaseException):
            raise item
        return item

    async def coach(self, stage: Any, flags: Any, transcript: str) -> str:
        self.coach_calls.append((stage, flags, transcript))
        if isinstance(self.hint, BaseException):
            raise self.hint
        return self.hint


@pytest.fixture()
def settings() -> Settings:
    return Settings(environment="test", generation_timeout_seconds=2.0)


@pytest.fixture()
def generator() -> ScriptedGenerator:
    return ScriptedGenerator()


@pytest.fixture()
def store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture()
def session_manager(store: InMemorySessionStore) -> SessionManager:
    return SessionManager(store, rng=random.Random(7))


@pytest.fixture()
def client(settings: Settings, generator: ScriptedGenerator):
    get_settings.cache_clear()
    app = create_app(settings, generator=generator, rng=random.Random(0))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def homeowner_reply():
    return homeowner_json
