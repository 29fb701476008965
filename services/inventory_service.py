"""
Inventory and equipment for lore items.
"""

import logging

from config import EQUIP_CAPACITY
from repositories.player_repository import PlayerRepository
from services.errors import CapacityExceeded, InvalidTarget, NotFound

logger = logging.getLogger("grit_core.services.inventory")


class InventoryService:
    """Equips owned item copies and computes their payout bonuses."""

    def __init__(self, player_repo: PlayerRepository, capacity: int | None = None):
        self.player_repo = player_repo
        self.capacity = capacity if capacity is not None else EQUIP_CAPACITY

    def equip(self, player_id: str, instance_id: str) -> None:
        """
        Equip an owned item.

        Raises:
            NotFound: If the player does not own the item.
            InvalidTarget: If the item is restricted to another player.
            CapacityExceeded: If the equip slots are full.
        """
        account = self.player_repo.get_by_id(player_id)
        item = account.find_item(instance_id)
        if item is None:
            raise NotFound(f"{account.name} does not own item {instance_id}.")
        if item.is_equipped:
            return
        if item.character_id is not None and item.character_id != player_id:
            raise InvalidTarget(f"{item.name} can only be equipped by {item.character_id}.")
        if len(account.equipped_items()) >= self.capacity:
            raise CapacityExceeded(f"Only {self.capacity} items can be equipped at once.")
        item.is_equipped = True
        logger.debug(f"{player_id} equipped {item.name}")

    def unequip(self, player_id: str, instance_id: str) -> None:
        account = self.player_repo.get_by_id(player_id)
        item = account.find_item(instance_id)
        if item is None:
            raise NotFound(f"{account.name} does not own item {instance_id}.")
        item.is_equipped = False

    def payout_multiplier(self, player_id: str, bet_type: str) -> float:
        """
        Combined payout multiplier of equipped items for a bet category.

        Bonuses stack multiplicatively. Returns 1.0 with nothing applicable.
        """
        multiplier = 1.0
        for item in self.player_repo.get_by_id(player_id).equipped_items():
            bonus = item.passive_bonus
            if bonus is not None and bonus.applies_to(bet_type):
                multiplier *= bonus.payout_multiplier
        return multiplier

    def boosted_payout(self, player_id: str, bet_type: str, amount: int) -> int:
        """``amount`` scaled by the player's equipped bonuses for ``bet_type``, floored."""
        multiplier = self.payout_multiplier(player_id, bet_type)
        if multiplier == 1.0:
            return amount
        return int(round(amount * multiplier, 6))
