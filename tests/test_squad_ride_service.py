"""
Tests for Squad Ride co-op parlays.
"""

import pytest

from domain.models.bet import BetStatus
from domain.models.item import PassiveBonus
from domain.models.squad_ride import ParlayLeg
from services.errors import AlreadyJoined, AlreadyResolved, OutOfRange, WindowClosed
from tests.conftest import equip_bonus

TWO_COIN_FLIPS = [ParlayLeg("Home team covers", 100), ParlayLeg("Over 47.5", 100)]


@pytest.fixture
def parlay(session, players):
    """A +300 two-leg parlay created by dave."""
    return session.squad_ride.create_parlay("dave", TWO_COIN_FLIPS)


class TestCreate:
    """Pricing and validating a new parlay."""

    def test_total_odds_combined(self, parlay):
        """Two +100 legs price at +300."""
        assert parlay.total_odds == 300
        assert parlay.rider_ids == []

    def test_too_few_legs(self, session, players):
        """A single leg is not a parlay."""
        with pytest.raises(OutOfRange):
            session.squad_ride.create_parlay("dave", TWO_COIN_FLIPS[:1])

    def test_odds_band_enforced(self, session, players):
        """Combined odds must sit inside the configured band."""
        with pytest.raises(OutOfRange):
            session.squad_ride.create_parlay("dave", [ParlayLeg("a", -200), ParlayLeg("b", -200)])
        with pytest.raises(OutOfRange):
            session.squad_ride.create_parlay("dave", [ParlayLeg("a", 500), ParlayLeg("b", 500)])

    def test_band_override(self, session, players):
        """Callers can widen the band for a single parlay."""
        parlay = session.squad_ride.create_parlay(
            "dave", [ParlayLeg("a", 500), ParlayLeg("b", 500)], max_odds=5000
        )
        assert parlay.total_odds == 3500


class TestRide:
    """Joining a parlay."""

    def test_multiplier_grows_per_rider(self, session, parlay):
        """Each rider's multiplier counts the riders already aboard."""
        pid = parlay.parlay_id
        multipliers = [session.squad_ride.ride(p, pid, 100).multiplier for p in ("alice", "bob", "carol")]
        assert multipliers == [1.0, 1.1, 1.2]
        assert session.ledger.balance("bob") == 400

    def test_duplicate_ride_rejected(self, session, parlay):
        """A player rides a parlay once."""
        session.squad_ride.ride("alice", parlay.parlay_id, 100)
        with pytest.raises(AlreadyJoined):
            session.squad_ride.ride("alice", parlay.parlay_id, 50)

    def test_resolved_parlay_closed(self, session, parlay):
        """No riding after resolution."""
        session.squad_ride.resolve(parlay.parlay_id, [True, True])
        with pytest.raises(WindowClosed):
            session.squad_ride.ride("alice", parlay.parlay_id, 100)

    def test_progress(self, session, parlay):
        """Progress reports riders and total stake."""
        session.squad_ride.ride("alice", parlay.parlay_id, 100)
        session.squad_ride.ride("bob", parlay.parlay_id, 50)
        progress = session.squad_ride.progress(parlay.parlay_id)
        assert (progress.riders, progress.total_staked, progress.legs_total) == (2, 150, 2)


class TestResolve:
    """Settling a parlay from per-leg results."""

    def test_all_legs_hit(self, session, parlay):
        """Every rider is paid floor(payout * multiplier)."""
        pid = parlay.parlay_id
        bets = [session.squad_ride.ride(p, pid, 100) for p in ("alice", "bob", "carol")]

        payouts = session.squad_ride.resolve(pid, [True, True])

        assert [payouts[bet.bet_id] for bet in bets] == [400, 440, 480]
        assert session.ledger.balance("carol") == 400 + 480
        assert all(bet.status == BetStatus.WON for bet in bets)
        assert session.squad_ride.open_parlays() == []

    def test_squad_ride_bonus_applies_after_rider_multiplier(self, session, parlay):
        """Item bonuses scale the already boosted rider payout."""
        pid = parlay.parlay_id
        equip_bonus(session, "alice", "mic", PassiveBonus(1.03, "squad_ride"))
        equip_bonus(session, "carol", "phone", PassiveBonus(1.05, "ambush"))
        bets = [session.squad_ride.ride(p, pid, 100) for p in ("alice", "bob", "carol")]

        payouts = session.squad_ride.resolve(pid, [True, True])

        # 400 * 1.03 = 412; bob and carol keep their rider payouts
        assert [payouts[bet.bet_id] for bet in bets] == [412, 440, 480]
        assert session.ledger.balance("alice") == 400 + 412

    def test_one_leg_misses(self, session, parlay):
        """A single failed leg busts the whole parlay."""
        bet = session.squad_ride.ride("alice", parlay.parlay_id, 100)

        payouts = session.squad_ride.resolve(parlay.parlay_id, [True, False])

        assert payouts == {}
        assert bet.status == BetStatus.LOST
        assert session.ledger.balance("alice") == 400
        assert session.ledger.weekly_stats("alice").grit_lost == 100
        assert parlay.succeeded is False

    def test_result_count_must_match(self, session, parlay):
        """One result per leg is required."""
        with pytest.raises(ValueError):
            session.squad_ride.resolve(parlay.parlay_id, [True])

    def test_double_resolution_rejected(self, session, parlay):
        """A parlay resolves once."""
        session.squad_ride.resolve(parlay.parlay_id, [False, False])
        with pytest.raises(AlreadyResolved):
            session.squad_ride.resolve(parlay.parlay_id, [True, True])
