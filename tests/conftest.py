"""
Pytest fixtures for tests.

Every test gets its own GameSession with in-memory stores, a fake clock and
a seeded random source, so tests never share state.
"""

import random

import pytest

from domain.models.item import LoreItem, Rarity
from infrastructure.service_container import GameSession
from services.overseer_service import OverseerService

# Fixed epoch used as "now" throughout the suite
T0 = 1_700_000_000
HOUR = 3600
DAY = 86400


class FakeClock:
    """Controllable time source in epoch seconds."""

    def __init__(self, start: int = T0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def session(clock):
    """A session with AI disabled so the Overseer always falls back."""
    return GameSession(clock=clock, rng=random.Random(7), overseer=OverseerService(None))


@pytest.fixture
def players(session):
    """
    Open four accounts with the default starting balance.

    Returns the ids in a fixed order: alice, bob, carol, dave.
    """
    ids = ["alice", "bob", "carol", "dave"]
    for player_id in ids:
        session.ledger.open_account(player_id, player_id.capitalize())
    return ids


def give_item(session, player_id, instance_id, bonus=None, character_id=None):
    """Hand a player an unequipped item copy carrying ``bonus``."""
    item = LoreItem(
        item_id=f"item_{instance_id}",
        name=f"Item {instance_id}",
        rarity=Rarity.RARE,
        passive_bonus=bonus,
        character_id=character_id,
        instance_id=instance_id,
    )
    session.ledger.get_account(player_id).owned_items.append(item)
    return item


def equip_bonus(session, player_id, instance_id, bonus):
    """Give a player an item with ``bonus`` and equip it."""
    give_item(session, player_id, instance_id, bonus)
    session.inventory.equip(player_id, instance_id)
