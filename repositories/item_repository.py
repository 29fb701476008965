"""
Repository for the lore item catalog and Mystery Box definitions.
"""

import copy

from domain.models.item import (
    UNLIMITED_SUPPLY,
    LoreItem,
    MysteryBox,
    PassiveBonus,
    Rarity,
    RarityTier,
)
from repositories.base_repository import BaseRepository
from repositories.interfaces import IItemRepository
from services.errors import NotFound

# Default drop table (percent); every table must sum to 100
DEFAULT_RARITY_TABLE = [
    RarityTier(Rarity.COMMON, 50.0),
    RarityTier(Rarity.UNCOMMON, 30.0),
    RarityTier(Rarity.RARE, 12.0),
    RarityTier(Rarity.EPIC, 5.0),
    RarityTier(Rarity.LEGENDARY, 2.5),
    RarityTier(Rarity.MYTHIC, 0.5),
]

# Premium tier: no commons or uncommons
EVIDENCE_LOCKER_TABLE = [
    RarityTier(Rarity.COMMON, 0.0),
    RarityTier(Rarity.UNCOMMON, 0.0),
    RarityTier(Rarity.RARE, 40.0),
    RarityTier(Rarity.EPIC, 35.0),
    RarityTier(Rarity.LEGENDARY, 20.0),
    RarityTier(Rarity.MYTHIC, 5.0),
]

SEED_ITEMS = [
    LoreItem("stale_nachos", "Stale Nachos", Rarity.COMMON, "Left out since the early game."),
    LoreItem("foam_finger", "Foam Finger", Rarity.COMMON, "Slightly chewed."),
    LoreItem("bar_napkin_picks", "Bar Napkin Picks", Rarity.COMMON, "Illegible, somehow still wrong."),
    LoreItem("cracked_remote", "Cracked Remote", Rarity.UNCOMMON, "Thrown during a blown lead."),
    LoreItem(
        "lucky_socks",
        "Lucky Socks",
        Rarity.UNCOMMON,
        "Unwashed since the last parlay hit.",
        passive_bonus=PassiveBonus(1.02, "single", "+2% on single bets"),
    ),
    LoreItem("group_chat_receipts", "Group Chat Receipts", Rarity.UNCOMMON, "Screenshots of every bad take."),
    LoreItem(
        "burner_phone",
        "Burner Phone",
        Rarity.RARE,
        "For calls the commish should not hear.",
        remaining_supply=10,
        passive_bonus=PassiveBonus(1.05, "ambush", "+5% on ambush bets"),
    ),
    LoreItem("signed_jersey", "Signed Jersey", Rarity.RARE, "Signature may be forged.", remaining_supply=10),
    LoreItem(
        "sharp_notebook",
        "Sharp's Notebook",
        Rarity.EPIC,
        "Line movement scribbled in the margins.",
        remaining_supply=5,
        passive_bonus=PassiveBonus(1.10, "single", "+10% on single bets"),
    ),
    LoreItem("championship_ring_replica", "Championship Ring (Replica)", Rarity.EPIC, "Green finger included.", remaining_supply=5),
    LoreItem(
        "acapella_mic",
        "Acapella Microphone",
        Rarity.EPIC,
        "Harmonizes everything, even a four-leg parlay.",
        remaining_supply=8,
        passive_bonus=PassiveBonus(1.03, "squad_ride", "+3% on Squad Rides"),
    ),
    LoreItem(
        "golden_whistle",
        "Golden Whistle",
        Rarity.LEGENDARY,
        "The refs answer to you now.",
        remaining_supply=2,
        passive_bonus=PassiveBonus(1.15, None, "+15% on every payout"),
    ),
    LoreItem("commish_gavel", "The Commish's Gavel", Rarity.LEGENDARY, "Rules are suggestions.", remaining_supply=2),
    LoreItem(
        "main_character_energy",
        "Main Character Energy",
        Rarity.LEGENDARY,
        "Nominated for everything, humble about none of it.",
        remaining_supply=3,
        passive_bonus=PassiveBonus(1.08, "tribunal", "+8% on Tribunal bets"),
    ),
    LoreItem(
        "founders_lanyard",
        "Founder's Lanyard",
        Rarity.MYTHIC,
        "Only works for the league founder.",
        remaining_supply=1,
        passive_bonus=PassiveBonus(1.25, None, "+25% on every payout"),
        character_id="founder",
    ),
    LoreItem("the_original_trophy", "The Original Trophy", Rarity.MYTHIC, "Nobody remembers who won it.", remaining_supply=1),
]

SEED_BOXES = [
    MysteryBox(
        "brown_paper_bag",
        "Brown Paper Bag",
        cost=50,
        item_pool=[
            "stale_nachos",
            "foam_finger",
            "bar_napkin_picks",
            "cracked_remote",
            "lucky_socks",
            "group_chat_receipts",
            "burner_phone",
            "signed_jersey",
            "sharp_notebook",
            "golden_whistle",
            "the_original_trophy",
        ],
    ),
    MysteryBox(
        "evidence_locker",
        "Evidence Locker",
        cost=200,
        item_pool=[
            "burner_phone",
            "signed_jersey",
            "sharp_notebook",
            "championship_ring_replica",
            "acapella_mic",
            "golden_whistle",
            "commish_gavel",
            "main_character_energy",
            "founders_lanyard",
            "the_original_trophy",
        ],
        rarity_override=EVIDENCE_LOCKER_TABLE,
    ),
]


class ItemRepository(BaseRepository, IItemRepository):
    """
    Catalog of lore items (with remaining supply) and Mystery Boxes.

    Each repository gets its own copy of the seed catalog, so supply
    depletes per game session.
    """

    id_prefix = "copy"

    def __init__(self, items: list[LoreItem] | None = None, boxes: list[MysteryBox] | None = None):
        super().__init__()
        self._boxes: dict[str, MysteryBox] = {}
        for item in copy.deepcopy(SEED_ITEMS if items is None else items):
            self.add_item(item)
        for box in copy.deepcopy(SEED_BOXES if boxes is None else boxes):
            self.add_box(box)

    def add_item(self, item: LoreItem) -> LoreItem:
        self._records[item.item_id] = item
        return item

    def get_item(self, item_id: str) -> LoreItem:
        item = self._records.get(item_id)
        if item is None:
            raise NotFound(f"Item {item_id} not found.")
        return item

    def get_items(self, item_ids: list[str]) -> list[LoreItem]:
        """Catalog entries for the given ids, skipping unknown ids."""
        return [self._records[item_id] for item_id in item_ids if item_id in self._records]

    def get_all_items(self) -> list[LoreItem]:
        return list(self._records.values())

    def add_box(self, box: MysteryBox) -> MysteryBox:
        self._boxes[box.box_id] = box
        return box

    def get_box(self, box_id: str) -> MysteryBox:
        box = self._boxes.get(box_id)
        if box is None:
            raise NotFound(f"Mystery box {box_id} not found.")
        return box

    def get_all_boxes(self) -> list[MysteryBox]:
        return list(self._boxes.values())

    def decrement_supply(self, item_id: str) -> int:
        """
        Take one unit of a finite-supply item.

        Returns:
            The remaining supply (UNLIMITED_SUPPLY for unlimited items).
        """
        item = self.get_item(item_id)
        if item.is_unlimited:
            return UNLIMITED_SUPPLY
        if item.remaining_supply <= 0:
            raise ValueError(f"Item {item_id} is out of stock.")
        item.remaining_supply -= 1
        return item.remaining_supply
