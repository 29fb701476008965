"""
Mystery Box reward issuance.

A box draw picks a rarity with one weighted roll, then an in-stock item of
that rarity from the box's allow-list. Finite supplies deplete with each
draw and never go negative.
"""

import copy
import logging
import math
import random

from domain.models.item import LoreItem, MysteryBox, Rarity, RarityTier
from repositories.item_repository import DEFAULT_RARITY_TABLE, ItemRepository
from repositories.player_repository import PlayerRepository
from services.errors import NotFound, OutOfRange
from services.ledger_service import LedgerService

logger = logging.getLogger("grit_core.services.mystery_box")

QUICK_SELL_VALUES = {
    Rarity.COMMON: 5,
    Rarity.UNCOMMON: 15,
    Rarity.RARE: 40,
    Rarity.EPIC: 100,
    Rarity.LEGENDARY: 300,
    Rarity.MYTHIC: 1000,
}


def validate_rarity_table(table: list[RarityTier]) -> None:
    """
    Raises:
        OutOfRange: If any rate is negative or the rates do not sum to 100.
    """
    if any(tier.drop_rate < 0 for tier in table):
        raise OutOfRange("Drop rates cannot be negative.")
    total = sum(tier.drop_rate for tier in table)
    if not math.isclose(total, 100.0, abs_tol=1e-9):
        raise OutOfRange(f"Drop rates must sum to 100, got {total}.")


class MysteryBoxService:
    """Opens boxes, issues item copies and buys items back."""

    def __init__(
        self,
        item_repo: ItemRepository,
        player_repo: PlayerRepository,
        ledger: LedgerService,
        rng: random.Random | None = None,
        rarity_table: list[RarityTier] | None = None,
    ):
        self.item_repo = item_repo
        self.player_repo = player_repo
        self.ledger = ledger
        self.rng = rng or random.Random()
        self.rarity_table = rarity_table if rarity_table is not None else DEFAULT_RARITY_TABLE
        validate_rarity_table(self.rarity_table)

    def table_for(self, box: MysteryBox) -> list[RarityTier]:
        table = box.rarity_override if box.rarity_override is not None else self.rarity_table
        validate_rarity_table(table)
        return table

    def roll_rarity(self, table: list[RarityTier]) -> Rarity:
        """Walk the cumulative drop rates against a single roll in [0, 100)."""
        roll = self.rng.random() * 100
        cumulative = 0.0
        selected = None
        for tier in table:
            if tier.drop_rate <= 0:
                continue
            cumulative += tier.drop_rate
            selected = tier.rarity
            if roll < cumulative:
                return tier.rarity
        # Float round-off at the top of the range lands on the last live tier
        return selected

    def draw(self, box_id: str) -> LoreItem | None:
        """
        Draw one item copy from a box.

        Falls back to any in-stock item in the box when none of the rolled
        rarity is left.

        Returns:
            A fresh, unequipped copy, or None if the box is sold out.
        """
        box = self.item_repo.get_box(box_id)
        rarity = self.roll_rarity(self.table_for(box))
        pool = [item for item in self.item_repo.get_items(box.item_pool) if item.in_stock]

        candidates = [item for item in pool if item.rarity == rarity]
        if not candidates:
            candidates = pool
        if not candidates:
            logger.info(f"Box {box_id} is sold out")
            return None

        chosen = self.rng.choice(candidates)
        self.item_repo.decrement_supply(chosen.item_id)

        issued = copy.deepcopy(chosen)
        issued.is_equipped = False
        issued.instance_id = self.item_repo.next_id()
        return issued

    def open_box(self, player_id: str, box_id: str) -> LoreItem:
        """
        Buy and open a box, adding the item to the player's collection.

        Raises:
            InsufficientFunds: If the player cannot afford the box.
            NotFound: If the box is sold out (nothing is charged).
        """
        box = self.item_repo.get_box(box_id)
        with self.player_repo.atomic_transaction(self.item_repo):
            self.ledger.debit(player_id, box.cost)
            item = self.draw(box_id)
            if item is None:
                raise NotFound(f"{box.name} is sold out.")
            self.player_repo.get_by_id(player_id).owned_items.append(item)

        logger.info(f"{player_id} opened {box.name}: {item.name} ({item.rarity.value})")
        return item

    def quick_sell(self, player_id: str, instance_id: str) -> int:
        """Sell an owned item back to the house for a fixed rarity price."""
        account = self.player_repo.get_by_id(player_id)
        item = account.find_item(instance_id)
        if item is None:
            raise NotFound(f"{account.name} does not own item {instance_id}.")
        value = QUICK_SELL_VALUES.get(item.rarity, QUICK_SELL_VALUES[Rarity.COMMON])
        with self.player_repo.atomic_transaction():
            account.owned_items.remove(item)
            self.ledger.credit(player_id, value)
        return value
