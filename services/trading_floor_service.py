"""
The Trading Floor: peer listings of lore items with a house tax.

Listed items are held by the offer until it is sold, cancelled or expires.
The buyer pays price + floor(price * tax); the tax goes to the house.
"""

import logging
import math
import time
from typing import Callable

from config import (
    TRADING_LISTING_SECONDS,
    TRADING_MAX_PRICE,
    TRADING_MIN_PRICE,
    TRADING_TAX_RATE,
)
from domain.models.trade import OfferStatus, PurchaseReceipt, TradeOffer
from repositories.player_repository import PlayerRepository
from repositories.trade_repository import TradeRepository
from services import error_codes
from services.errors import (
    AlreadyResolved,
    InsufficientFunds,
    InvalidTarget,
    NotFound,
    OutOfRange,
    WindowClosed,
)
from services.ledger_service import LedgerService
from services.result import Result

logger = logging.getLogger("grit_core.services.trading_floor")


class TradingFloorService:
    """
    Lists, sells, cancels and expires item offers.

    ``purchase`` debits the buyer and marks the offer sold but leaves the
    seller credit and item hand-over to the caller. ``buy`` does all of it
    in one transaction and is what game code should normally call.
    """

    def __init__(
        self,
        trade_repo: TradeRepository,
        player_repo: PlayerRepository,
        ledger: LedgerService,
        tax_rate: float | None = None,
        min_price: int | None = None,
        max_price: int | None = None,
        listing_seconds: int | None = None,
        clock: Callable[[], float] | None = None,
    ):
        self.trade_repo = trade_repo
        self.player_repo = player_repo
        self.ledger = ledger
        rate = tax_rate if tax_rate is not None else TRADING_TAX_RATE
        self.tax_rate = max(0.0, min(0.5, rate))
        self.min_price = min_price if min_price is not None else TRADING_MIN_PRICE
        self.max_price = max_price if max_price is not None else TRADING_MAX_PRICE
        self.listing_seconds = listing_seconds if listing_seconds is not None else TRADING_LISTING_SECONDS
        self.clock = clock or time.time

    def _now(self, now: int | None) -> int:
        return int(self.clock()) if now is None else now

    def tax_for(self, price: int) -> int:
        return math.floor(price * self.tax_rate)

    def is_expired(self, offer: TradeOffer, now: int) -> bool:
        return now - offer.listed_at > self.listing_seconds

    def list_item(self, seller_id: str, instance_id: str, price: int, now: int | None = None) -> TradeOffer:
        """
        Put an owned item up for sale.

        The item leaves the seller's inventory (unequipped) and is held by
        the offer.

        Raises:
            OutOfRange: If the price is outside the allowed band.
            NotFound: If the seller does not own the item.
        """
        if not self.min_price <= price <= self.max_price:
            raise OutOfRange(f"Price must be between {self.min_price} and {self.max_price} Grit.")
        account = self.player_repo.get_by_id(seller_id)
        item = account.find_item(instance_id)
        if item is None:
            raise NotFound(f"{account.name} does not own item {instance_id}.")

        account.owned_items.remove(item)
        item.is_equipped = False
        offer = TradeOffer(
            offer_id=self.trade_repo.next_id(),
            seller_id=seller_id,
            item=item,
            price=price,
            listed_at=self._now(now),
        )
        self.trade_repo.add(offer)
        logger.info(f"{account.name} listed {item.name} for {price} Grit ({offer.offer_id})")
        return offer

    def purchase(self, offer_id: str, buyer_id: str, now: int | None = None) -> PurchaseReceipt:
        """
        Charge the buyer and close the offer.

        Does not credit the seller or move the item; use ``buy`` for that.

        Raises:
            NotFound: Unknown offer.
            AlreadyResolved: The offer is sold, cancelled or expired.
            WindowClosed: The listing ran past its duration.
            InvalidTarget: The buyer is the seller.
            InsufficientFunds: Balance below price + tax. Nothing is debited.
        """
        offer = self.trade_repo.get_by_id(offer_id)
        now = self._now(now)
        if not offer.is_active:
            raise AlreadyResolved(f"Offer {offer_id} is {offer.status.value}.")
        if self.is_expired(offer, now):
            raise WindowClosed(f"Offer {offer_id} has expired.")
        if buyer_id == offer.seller_id:
            raise InvalidTarget("You cannot buy your own listing.")

        tax = self.tax_for(offer.price)
        total = offer.price + tax
        balance = self.ledger.balance(buyer_id)
        if balance < total:
            raise InsufficientFunds(f"Purchase costs {total} Grit but the balance is {balance}.")

        self.ledger.debit(buyer_id, total)
        self.ledger.collect_house_revenue(tax, "trading tax")
        offer.status = OfferStatus.SOLD
        offer.buyer_id = buyer_id
        offer.closed_at = now
        return PurchaseReceipt(
            offer_id=offer_id,
            buyer_id=buyer_id,
            seller_id=offer.seller_id,
            price=offer.price,
            tax=tax,
            seller_proceeds=offer.price,
        )

    def buy(self, offer_id: str, buyer_id: str, now: int | None = None) -> PurchaseReceipt:
        """Purchase, credit the seller and hand over the item atomically."""
        with self.player_repo.atomic_transaction(self.trade_repo):
            receipt = self.purchase(offer_id, buyer_id, now)
            self.ledger.credit(receipt.seller_id, receipt.seller_proceeds)
            offer = self.trade_repo.get_by_id(offer_id)
            self.player_repo.get_by_id(buyer_id).owned_items.append(offer.item)

        logger.info(
            f"{buyer_id} bought {offer.item.name} from {receipt.seller_id} "
            f"for {receipt.price} Grit (+{receipt.tax} tax)"
        )
        return receipt

    def cancel_listing(self, offer_id: str, seller_id: str, now: int | None = None) -> Result[TradeOffer]:
        """Withdraw an active listing and return the item to its seller."""
        try:
            offer = self.trade_repo.get_by_id(offer_id)
        except NotFound as exc:
            return Result.from_error(exc)
        if offer.seller_id != seller_id:
            return Result.fail("Only the seller can cancel a listing.", code=error_codes.PERMISSION_DENIED)
        if not offer.is_active:
            return Result.fail(f"Offer {offer_id} is {offer.status.value}.", code=error_codes.ALREADY_RESOLVED)

        offer.status = OfferStatus.CANCELLED
        offer.closed_at = self._now(now)
        self.player_repo.get_by_id(seller_id).owned_items.append(offer.item)
        return Result.ok(offer)

    def prune_expired(self, now: int | None = None) -> list[TradeOffer]:
        """Expire stale listings and return their items to the sellers."""
        now = self._now(now)
        expired = []
        for offer in self.trade_repo.get_active():
            if not self.is_expired(offer, now):
                continue
            offer.status = OfferStatus.EXPIRED
            offer.closed_at = now
            self.player_repo.get_by_id(offer.seller_id).owned_items.append(offer.item)
            expired.append(offer)
        if expired:
            logger.info(f"Pruned {len(expired)} expired listings")
        return expired

    def active_offers(self, now: int | None = None) -> list[TradeOffer]:
        now = self._now(now)
        return [offer for offer in self.trade_repo.get_active() if not self.is_expired(offer, now)]

    def listings_for(self, player_id: str) -> list[TradeOffer]:
        return self.trade_repo.get_by_seller(player_id)
