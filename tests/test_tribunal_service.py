"""
Tests for the Tribunal: superlative voting and wagering.
"""

import pytest

from domain.models.bet import BetStatus
from domain.models.item import PassiveBonus
from domain.models.tribunal import Nominee, NomineeSuggestion, SuperlativeSuggestion
from services.errors import AlreadyResolved, NotFound, WindowClosed
from tests.conftest import DAY, T0, equip_bonus


@pytest.fixture
def superlative(session, players):
    """'Most Delusional Take' with bob (+150) and carol (+200) nominated."""
    return session.tribunal.create_superlative(
        "Most Delusional Take",
        [
            Nominee("bob", session.tribunal.nominee_odds(0)),
            Nominee("carol", session.tribunal.nominee_odds(1)),
        ],
        voting_closes_at=T0 + DAY,
    )


class TestOdds:
    """Nominee odds by listing position."""

    def test_base_odds_then_default(self, session):
        """Positions past the base list get the default odds."""
        odds = [session.tribunal.nominee_odds(i) for i in range(6)]
        assert odds == [150, 200, 250, 300, 400, 400]


class TestVoting:
    """Casting votes before the cutoff."""

    def test_vote_and_tally(self, session, superlative):
        """Votes are tallied per nominee in listing order."""
        sid = superlative.superlative_id
        session.tribunal.vote(sid, "alice", "bob")
        session.tribunal.vote(sid, "dave", "bob")
        session.tribunal.vote(sid, "bob", "carol")
        assert session.tribunal.tally(sid) == {"bob": 2, "carol": 1}

    def test_changing_a_vote(self, session, superlative):
        """A second vote by the same voter replaces the first."""
        sid = superlative.superlative_id
        session.tribunal.vote(sid, "alice", "bob")
        session.tribunal.vote(sid, "alice", "carol")
        assert session.tribunal.tally(sid) == {"bob": 0, "carol": 1}

    def test_vote_at_close_accepted(self, session, superlative):
        """The closing second itself still accepts votes."""
        session.tribunal.vote(superlative.superlative_id, "alice", "bob", now=T0 + DAY)

    def test_late_vote_rejected(self, session, superlative):
        """Votes after the cutoff raise WindowClosed."""
        with pytest.raises(WindowClosed):
            session.tribunal.vote(superlative.superlative_id, "alice", "bob", now=T0 + DAY + 1)

    def test_vote_for_non_nominee(self, session, superlative):
        """Only nominees can receive votes."""
        with pytest.raises(NotFound):
            session.tribunal.vote(superlative.superlative_id, "alice", "dave")


class TestWinner:
    """Picking the winner from the tally."""

    def test_tie_goes_to_first_listed(self, session, superlative):
        """Equal counts resolve to the earlier nominee."""
        sid = superlative.superlative_id
        session.tribunal.vote(sid, "alice", "carol")
        session.tribunal.vote(sid, "dave", "bob")
        assert session.tribunal.winner(sid) == "bob"

    def test_no_votes_no_winner(self, session, superlative):
        """Nobody wins an empty ballot."""
        assert session.tribunal.winner(superlative.superlative_id) is None


class TestResolution:
    """Settling wagers on the winner."""

    def test_pays_winning_wagers(self, session, superlative):
        """Wagers on the winner pay at the nominee's odds; others lose."""
        sid = superlative.superlative_id
        winning = session.tribunal.place_bet("alice", sid, "bob", 100)
        losing = session.tribunal.place_bet("dave", sid, "carol", 100)
        session.tribunal.vote(sid, "alice", "bob")

        result = session.tribunal.resolve(sid)

        assert result.winner_id == "bob"
        assert result.payouts == {winning.bet_id: 250}
        assert session.ledger.balance("alice") == 650
        assert session.ledger.balance("dave") == 400
        assert winning.status == BetStatus.WON
        assert losing.status == BetStatus.LOST

    def test_tribunal_bonus_boosts_winnings(self, session, superlative):
        """An equipped Tribunal bonus scales the winning wager."""
        sid = superlative.superlative_id
        equip_bonus(session, "alice", "energy", PassiveBonus(1.08, "tribunal"))
        equip_bonus(session, "carol", "mic", PassiveBonus(1.03, "squad_ride"))
        alice_bet = session.tribunal.place_bet("alice", sid, "bob", 100)
        carol_bet = session.tribunal.place_bet("carol", sid, "bob", 100)
        session.tribunal.vote(sid, "dave", "bob")

        result = session.tribunal.resolve(sid)

        assert result.payouts == {alice_bet.bet_id: 270, carol_bet.bet_id: 250}
        assert session.ledger.balance("alice") == 400 + 270
        assert session.ledger.balance("carol") == 400 + 250

    def test_no_votes_refunds_wagers(self, session, superlative):
        """Without votes every wager is voided and refunded."""
        sid = superlative.superlative_id
        bet = session.tribunal.place_bet("alice", sid, "bob", 100)

        result = session.tribunal.resolve(sid)

        assert result.voided
        assert bet.status == BetStatus.VOIDED
        assert session.ledger.balance("alice") == 500

    def test_double_resolution_rejected(self, session, superlative):
        """A superlative resolves once."""
        sid = superlative.superlative_id
        session.tribunal.resolve(sid)
        with pytest.raises(AlreadyResolved):
            session.tribunal.resolve(sid)
        with pytest.raises(AlreadyResolved):
            session.tribunal.place_bet("alice", sid, "bob", 10)

    def test_resolved_superlative_leaves_open_list(self, session, superlative):
        """open_superlatives lists only unresolved awards."""
        assert session.tribunal.open_superlatives() == [superlative]
        session.tribunal.resolve(superlative.superlative_id)
        assert session.tribunal.open_superlatives() == []


class TestSuggestions:
    """Opening superlatives from AI suggestions."""

    def test_matches_names_and_skips_unknowns(self, session, players):
        """Names match case-insensitively; unknown and repeated names are dropped."""
        suggestion = SuperlativeSuggestion(
            title="Biggest L of the Week",
            description="Ouch",
            nominees=(
                NomineeSuggestion("BOB", "lost the group chat vote"),
                NomineeSuggestion("Nobody", "not a player"),
                NomineeSuggestion("bob", "duplicate"),
                NomineeSuggestion("Carol", ""),
            ),
        )

        opened = session.tribunal.open_from_suggestions([suggestion], voting_closes_at=T0 + DAY)

        assert len(opened) == 1
        nominees = opened[0].nominees
        assert [n.player_id for n in nominees] == ["bob", "carol"]
        assert [n.odds for n in nominees] == [150, 200]
        assert nominees[0].evidence == ["lost the group chat vote"]
        assert nominees[1].evidence == []

    def test_suggestion_without_known_nominees_skipped(self, session, players):
        """A suggestion nobody in the league matches opens nothing."""
        suggestion = SuperlativeSuggestion("Ghost Award", "", (NomineeSuggestion("Casper"),))
        assert session.tribunal.open_from_suggestions([suggestion], T0 + DAY) == []
