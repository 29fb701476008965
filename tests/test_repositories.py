"""
Tests for the in-memory repositories.
"""

import pytest

from domain.models.bet import AmbushCategory, AmbushDetails, Bet, BetKind, BetStatus, SingleDetails
from domain.models.item import UNLIMITED_SUPPLY
from repositories.bet_repository import BetRepository
from repositories.item_repository import SEED_ITEMS, ItemRepository
from repositories.trade_repository import TradeRepository
from services.errors import NotFound


def ambush_bet(repo, bettor, target, stake):
    bet = Bet(
        bet_id=repo.next_id(),
        kind=BetKind.AMBUSH,
        bettor_id=bettor,
        stake=stake,
        odds=150,
        details=AmbushDetails(target, AmbushCategory.SOCIAL, "x"),
        created_at=0,
    )
    return repo.add(bet)


class TestBetRepository:
    """Lookups over bets of every kind."""

    def test_ids_are_sequential(self):
        """Ids carry the repository prefix and a running counter."""
        repo = BetRepository()
        assert [repo.next_id(), repo.next_id()] == ["bet_1", "bet_2"]

    def test_open_for_target(self):
        """Only open Ambush bets against the target are returned."""
        repo = BetRepository()
        open_bet = ambush_bet(repo, "alice", "dave", 100)
        settled = ambush_bet(repo, "bob", "dave", 50)
        settled.status = BetStatus.LOST
        ambush_bet(repo, "carol", "bob", 25)
        repo.add(Bet("bet_x", BetKind.SINGLE, "alice", 10, 100, SingleDetails("prop", "x", "y"), 0))

        assert repo.get_open_for_target("dave") == [open_bet]
        assert len(repo.get_for_target("dave")) == 2
        assert len(repo.get_by_bettor("alice")) == 2
        assert len(repo.get_by_bettor("alice", BetKind.AMBUSH)) == 1

    def test_missing_bet(self):
        """Unknown ids raise NotFound."""
        with pytest.raises(NotFound):
            BetRepository().get_by_id("bet_1")


class TestItemRepository:
    """Catalog and supply tracking."""

    def test_seed_catalog_is_copied(self):
        """Depleting one repository leaves the seed data alone."""
        repo = ItemRepository()
        repo.decrement_supply("the_original_trophy")
        seed = next(item for item in SEED_ITEMS if item.item_id == "the_original_trophy")
        assert seed.remaining_supply == 1
        assert repo.get_item("the_original_trophy").remaining_supply == 0

    def test_seeded_bonuses_cover_every_bet_kind(self):
        """Each bet kind has at least one catalog item boosting it."""
        bonus_types = {item.passive_bonus.bet_type for item in SEED_ITEMS if item.passive_bonus}
        assert {kind.value for kind in BetKind} <= bonus_types

    def test_out_of_stock_rejected(self):
        """Supply never goes below zero."""
        repo = ItemRepository()
        repo.decrement_supply("the_original_trophy")
        with pytest.raises(ValueError):
            repo.decrement_supply("the_original_trophy")

    def test_unlimited_items(self):
        """Unlimited items never deplete."""
        repo = ItemRepository()
        assert repo.decrement_supply("stale_nachos") == UNLIMITED_SUPPLY
        assert repo.get_item("stale_nachos").in_stock

    def test_unknown_box(self):
        """Unknown boxes raise NotFound."""
        with pytest.raises(NotFound):
            ItemRepository().get_box("gold_box")


class TestTradeRepository:
    """Offer lookups."""

    def test_missing_offer(self):
        """Unknown offers raise NotFound."""
        with pytest.raises(NotFound):
            TradeRepository().get_by_id("offer_1")
