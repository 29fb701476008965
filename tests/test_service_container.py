"""
Tests for GameSession wiring and session isolation.
"""

import random

import pytest

from infrastructure import service_container
from infrastructure.service_container import GameSession, RepositoryContainer, build_overseer
from services.overseer_service import OverseerService
from tests.conftest import FakeClock


class TestGameSession:
    """Per-game wiring of stores and services."""

    def test_services_share_stores(self, session):
        """Every service works against the session's own repositories."""
        repos = session.repos
        assert session.ledger.player_repo is repos.player
        assert session.ambush.bet_repo is repos.bet
        assert session.tribunal.bet_repo is repos.bet
        assert session.squad_ride.parlay_repo is repos.parlay
        assert session.mystery_box.item_repo is repos.item
        assert session.trading_floor.trade_repo is repos.trade
        assert session.activity_monitor.activity_repo is repos.activity

    def test_ledger_knows_gulag(self, session):
        """The ledger can expire bans through the session's Gulag."""
        assert session.ledger.gulag_service is session.gulag

    def test_clock_is_shared(self, session, clock):
        """Timestamps come from the injected clock."""
        session.ledger.open_account("alice", "Alice")
        session.ledger.open_account("bob", "Bob")
        clock.advance(42)
        bet = session.ambush.place_bet("alice", "bob", "x", "social", 150, 10)
        assert bet.created_at == clock.now

    def test_sessions_are_isolated(self):
        """Two sessions never see each other's state."""
        first = GameSession(clock=FakeClock(), overseer=OverseerService(None))
        second = GameSession(clock=FakeClock(), overseer=OverseerService(None))
        first.ledger.open_account("alice", "Alice")
        first.repos.item.decrement_supply("the_original_trophy")

        assert not second.repos.player.exists("alice")
        assert second.repos.item.get_item("the_original_trophy").remaining_supply == 1

    def test_prepopulated_repositories(self):
        """Callers can hand in their own repositories."""
        repos = RepositoryContainer()
        session = GameSession(repos=repos, overseer=OverseerService(None), rng=random.Random(1))
        assert session.repos is repos


class TestBuildOverseer:
    """Overseer construction from configuration."""

    def test_disabled_by_default(self, monkeypatch):
        """Without AI enabled the Overseer has no backend."""
        monkeypatch.setattr(service_container, "AI_FEATURES_ENABLED", False)
        assert build_overseer().ai_service is None

    def test_enabled_without_key(self, monkeypatch):
        """Enabling AI without a key still falls back."""
        monkeypatch.setattr(service_container, "AI_FEATURES_ENABLED", True)
        monkeypatch.setattr(service_container, "AI_API_KEY", None)
        assert build_overseer().ai_service is None

    def test_enabled_with_key(self, monkeypatch):
        """With a key the Overseer is backed by LiteLLM."""
        monkeypatch.setattr(service_container, "AI_FEATURES_ENABLED", True)
        monkeypatch.setattr(service_container, "AI_API_KEY", "sk-test")
        monkeypatch.setattr(service_container, "AI_MODEL", "gemini/gemini-2.5-flash")

        overseer = build_overseer()

        assert overseer.ai_service.api_key == "sk-test"
        assert overseer.ai_service.model == "gemini/gemini-2.5-flash"


@pytest.mark.asyncio
async def test_overseer_unavailable_without_ai(session):
    """A session built with AI off reports the Overseer as unavailable."""
    result = await session.overseer.generate_prop_line([])
    assert not result.success
