"""
Lore item and Mystery Box domain models.
"""

from dataclasses import dataclass, field
from enum import Enum

UNLIMITED_SUPPLY = -1


class Rarity(str, Enum):
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"
    MYTHIC = "mythic"


@dataclass(frozen=True)
class RarityTier:
    rarity: Rarity
    drop_rate: float  # Percentage; a table's rates sum to 100


@dataclass(frozen=True)
class PassiveBonus:
    """
    Payout multiplier granted while an item is equipped.

    ``bet_type`` restricts the bonus to one bet category (e.g. "single");
    None applies it everywhere.
    """

    payout_multiplier: float
    bet_type: str | None = None
    description: str = ""

    def applies_to(self, bet_type: str) -> bool:
        return self.bet_type is None or self.bet_type == bet_type


@dataclass
class LoreItem:
    """
    A collectible item.

    Catalog entries carry ``remaining_supply`` (UNLIMITED_SUPPLY for
    unlimited). Owned copies carry an ``instance_id`` and equip state.
    """

    item_id: str
    name: str
    rarity: Rarity
    description: str = ""
    remaining_supply: int = UNLIMITED_SUPPLY
    passive_bonus: PassiveBonus | None = None
    character_id: str | None = None  # Only this player may equip it
    instance_id: str | None = None
    is_equipped: bool = False

    @property
    def is_unlimited(self) -> bool:
        return self.remaining_supply == UNLIMITED_SUPPLY

    @property
    def in_stock(self) -> bool:
        return self.is_unlimited or self.remaining_supply > 0


@dataclass
class MysteryBox:
    """A purchasable box drawing from an allow-list of catalog items."""

    box_id: str
    name: str
    cost: int
    item_pool: list[str] = field(default_factory=list)
    rarity_override: list[RarityTier] | None = None
