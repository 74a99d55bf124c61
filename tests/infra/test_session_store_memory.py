"""Testes para SessionStore em memória (TTL, capacidade, isolamento)."""

from __future__ import annotations

import random
import threading
from datetime import UTC, datetime, timedelta

import pytest

from roleplay_sim.application.session import SimSession
from roleplay_sim.domain.customer_profile import generate_customer_profile
from roleplay_sim.domain.enums import TurnRole
from roleplay_sim.domain.models import ConversationTurn
from roleplay_sim.infra.session_store_memory import InMemorySessionStore


class FakeClock:
    def __init__(self) -> None:
        self.now = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> None:
        self.now += timedelta(**delta)


def _session(session_id: str, updated_at: datetime) -> SimSession:
    return SimSession(
        session_id=session_id,
        customer_profile=generate_customer_profile(random.Random(0)),
        created_at=updated_at,
        updated_at=updated_at,
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


class TestSaveLoad:
    def test_roundtrip(self, clock):
        store = InMemorySessionStore(clock=clock)
        store.save(_session("s-1", clock()))
        loaded = store.load("s-1")
        assert loaded is not None
        assert loaded.session_id == "s-1"

    def test_load_missing_returns_none(self):
        assert InMemorySessionStore().load("nope") is None

    def test_delete(self, clock):
        store = InMemorySessionStore(clock=clock)
        store.save(_session("s-1", clock()))
        assert store.delete("s-1") is True
        assert store.delete("s-1") is False
        assert not store.exists("s-1")

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            InMemorySessionStore(max_sessions=0)


class TestIsolation:
    def test_mutating_loaded_copy_does_not_leak(self, clock):
        store = InMemorySessionStore(clock=clock)
        store.save(_session("s-1", clock()))

        loaded = store.load("s-1")
        loaded.flags.objection_turns = 5
        loaded.conversation_history.append(
            ConversationTurn(role=TurnRole.REP, message="Hi", timestamp=1)
        )

        fresh = store.load("s-1")
        assert fresh.flags.objection_turns == 0
        assert fresh.conversation_history == []

    def test_mutating_saved_object_does_not_leak(self, clock):
        store = InMemorySessionStore(clock=clock)
        session = _session("s-1", clock())
        store.save(session)
        session.flags.at_meter = True
        assert store.load("s-1").flags.at_meter is False


class TestTTL:
    def test_idle_session_expires(self, clock):
        store = InMemorySessionStore(ttl_seconds=60, clock=clock)
        store.save(_session("s-1", clock()))
        clock.advance(seconds=61)
        assert store.load("s-1") is None
        assert len(store) == 0

    def test_session_within_ttl_survives(self, clock):
        store = InMemorySessionStore(ttl_seconds=60, clock=clock)
        store.save(_session("s-1", clock()))
        clock.advance(seconds=59)
        assert store.exists("s-1")

    def test_default_ttl_is_six_hours(self, clock):
        store = InMemorySessionStore(clock=clock)
        store.save(_session("s-1", clock()))
        clock.advance(hours=5, minutes=59)
        assert store.exists("s-1")
        clock.advance(minutes=2)
        assert not store.exists("s-1")

    def test_resave_refreshes_idle_window(self, clock):
        store = InMemorySessionStore(ttl_seconds=60, clock=clock)
        store.save(_session("s-1", clock()))
        clock.advance(seconds=50)
        store.save(_session("s-1", clock()))
        clock.advance(seconds=50)
        assert store.exists("s-1")


class TestCapacity:
    def test_evicts_least_recently_updated(self, clock):
        store = InMemorySessionStore(max_sessions=2, clock=clock)
        store.save(_session("a", clock.now - timedelta(seconds=30)))
        store.save(_session("b", clock.now - timedelta(seconds=20)))
        store.save(_session("c", clock.now - timedelta(seconds=10)))

        assert sorted(store.session_ids()) == ["b", "c"]

    def test_recently_touched_session_survives(self, clock):
        store = InMemorySessionStore(max_sessions=2, clock=clock)
        store.save(_session("a", clock.now - timedelta(seconds=30)))
        store.save(_session("b", clock.now - timedelta(seconds=20)))
        store.save(_session("a", clock.now))
        store.save(_session("c", clock.now - timedelta(seconds=10)))

        assert sorted(store.session_ids()) == ["a", "c"]

    def test_default_capacity_is_500(self, clock):
        store = InMemorySessionStore(clock=clock)
        for i in range(505):
            store.save(_session(f"s-{i}", clock.now + timedelta(milliseconds=i)))
        assert len(store) == 500
        assert not store.exists("s-0")
        assert store.exists("s-504")


def test_concurrent_saves_are_safe(clock):
    store = InMemorySessionStore(max_sessions=50, clock=clock)

    def worker(offset: int) -> None:
        for i in range(25):
            store.save(_session(f"w{offset}-{i}", clock.now))

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(store) == 50
