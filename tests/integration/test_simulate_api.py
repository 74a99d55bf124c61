"""Fluxo HTTP completo: simulate, hint e reset-sim."""

from __future__ import annotations

import random

import pytest
from fastapi.testclient import TestClient

from roleplay_sim.ai.contracts.generation import GenerationServiceError
from roleplay_sim.api.app import create_app
from roleplay_sim.config.settings import Settings
from roleplay_sim.domain.enums import CustomerIntent
from roleplay_sim.domain.stall_breaker import FORCED_REPLIES

HEADERS = {"X-Session-ID": "rep-42"}


def test_simulate_returns_camel_case_payload(client, generator, homeowner_reply):
    generator.push(homeowner_reply("Who are you with?", "CLARIFYING_QUESTION"))

    response = client.post(
        "/api/simulate",
        json={"pitch": "Hi there!", "difficulty": "easy", "customerType": "skeptic"},
        headers=HEADERS,
    )

    assert response.status_code == 200
    payload = response.json()
    assert set(payload) == {"reply", "customer_intent", "simStage", "flags", "internal"}
    assert payload["reply"] == "Who are you with?"
    assert payload["customer_intent"] == "CLARIFYING_QUESTION"
    assert payload["simStage"] == "EXPLAIN_PROGRAM"
    assert payload["flags"]["objectionTurns"] == 0
    assert set(payload["internal"]) == {
        "trust",
        "objectionResistance",
        "clarityLevel",
        "urgencyToDecide",
        "confusionLevel",
    }
    assert payload["internal"]["trust"] == 0.3

    config = client.app.state.session_manager.peek("rep-42").state.training_config
    assert config.difficulty.value == "easy"
    assert config.customer_type == "skeptic"


def test_session_id_in_body(client):
    response = client.post("/api/simulate", json={"pitch": "Hi", "session_id": "body-session"})
    assert response.status_code == 200
    assert client.app.state.session_manager.peek("body-session") is not None


def test_missing_pitch(client):
    response = client.post("/api/simulate", json={"pitch": "   "}, headers=HEADERS)
    assert response.status_code == 400
    assert response.json()["detail"] == "pitch_required"


def test_missing_session_id(client):
    response = client.post("/api/simulate", json={"pitch": "Hi"})
    assert response.status_code == 400
    assert response.json()["detail"] == "missing_session_id"


def test_shared_default_session_when_enabled(generator):
    settings = Settings(allow_default_session_id=True)
    app = create_app(settings, generator=generator, rng=random.Random(0))
    with TestClient(app) as test_client:
        response = test_client.post("/api/simulate", json={"pitch": "Hi"})
    assert response.status_code == 200
    assert app.state.session_manager.peek("default") is not None


def test_generation_failure_is_502_and_retry_completes(client, generator, homeowner_reply):
    generator.push(GenerationServiceError("down"), homeowner_reply("Yes?"))

    failed = client.post("/api/simulate", json={"pitch": "Hello"}, headers=HEADERS)
    assert failed.status_code == 502
    assert failed.json()["detail"] == "generation_failed"

    retried = client.post("/api/simulate", json={"pitch": "Hello"}, headers=HEADERS)
    assert retried.status_code == 200

    session = client.app.state.session_manager.peek("rep-42")
    assert session.state.turn_count == 1
    assert len(session.conversation_history) == 2


def test_malformed_generation_is_502(client, generator):
    generator.push("not json")
    response = client.post("/api/simulate", json={"pitch": "Hello"}, headers=HEADERS)
    assert response.status_code == 502


def test_sessions_are_isolated(client, generator, homeowner_reply):
    generator.push(homeowner_reply("A", "CLARIFYING_QUESTION"))
    client.post("/api/simulate", json={"pitch": "Hi"}, headers={"X-Session-ID": "a"})

    response = client.post("/api/simulate", json={"pitch": "Hi"}, headers={"X-Session-ID": "b"})
    assert response.status_code == 200

    manager = client.app.state.session_manager
    assert len(manager.peek("a").conversation_history) == 2
    assert len(manager.peek("b").conversation_history) == 2


def test_stall_breaker_through_http(client, generator, homeowner_reply):
    generator.push(
        homeowner_reply("Who?", "CLARIFYING_QUESTION"),
        homeowner_reply("Too expensive.", "NEW_OBJECTION"),
        homeowner_reply("Still no.", "NEW_OBJECTION"),
        homeowner_reply("No means no.", "NEW_OBJECTION"),
        homeowner_reply("Nope.", "NEW_OBJECTION"),
    )
    body = {"difficulty": "easy"}
    for pitch in ("Hi", "Let me explain", "It saves money", "Really it does"):
        client.post("/api/simulate", json={**body, "pitch": pitch}, headers=HEADERS)

    response = client.post(
        "/api/simulate",
        json={**body, "pitch": "Would you rather check the meter now or later?"},
        headers=HEADERS,
    )

    payload = response.json()
    assert payload["customer_intent"] == "SOFT_YES_METER"
    assert payload["reply"] == FORCED_REPLIES[CustomerIntent.SOFT_YES_METER]
    assert payload["simStage"] == "METER_SOFT_CLOSE"
    assert payload["flags"]["meterPermissionSoftYes"] is True


def test_hint(client, generator):
    client.post("/api/simulate", json={"pitch": "Hi"}, headers=HEADERS)
    response = client.post("/api/hint", headers=HEADERS)
    assert response.status_code == 200
    assert response.json() == {"hint": generator.hint}


def test_hint_failure_is_502(client, generator):
    generator.hint = GenerationServiceError("down")
    response = client.post("/api/hint", json={"session_id": "rep-42"})
    assert response.status_code == 502


def test_reset_sim(client):
    client.post("/api/simulate", json={"pitch": "Hi"}, headers=HEADERS)

    response = client.post("/api/reset-sim", headers=HEADERS)

    assert response.status_code == 200
    assert response.json() == {"ok": True}
    session = client.app.state.session_manager.peek("rep-42")
    assert session.conversation_history == []
    assert session.state.sim_stage.value == "INTRO"


@pytest.mark.parametrize("path", ["/api/hint", "/api/reset-sim"])
def test_side_channels_require_session_id(client, path):
    assert client.post(path).status_code == 400
