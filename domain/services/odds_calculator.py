"""
Odds and payout calculator.

Pure functions over American odds. Payouts include the returned stake and
are floored to whole Grit.
"""

import math

from services.errors import OutOfRange


def validate_odds(odds: int) -> int:
    """
    Reject odds of exactly 0, which have no defined payout.

    Returns:
        The odds unchanged.

    Raises:
        OutOfRange: If odds is 0.
    """
    if odds == 0:
        raise OutOfRange("Odds of 0 are not valid American odds.")
    return odds


def payout(stake: int, odds: int) -> int:
    """
    Total payout (stake plus profit) for a winning bet.

    Examples:
        payout(100, 150) == 250
        payout(100, -110) == 190
    """
    validate_odds(odds)
    if odds > 0:
        return int(stake + (stake * odds) // 100)
    return int(stake + (stake * 100) // abs(odds))


def profit(stake: int, odds: int) -> int:
    """Winnings excluding the returned stake."""
    return payout(stake, odds) - stake


def american_to_decimal(odds: int) -> float:
    validate_odds(odds)
    if odds > 0:
        return 1 + odds / 100
    return 1 + 100 / abs(odds)


def decimal_to_american(decimal_odds: float) -> int:
    """
    Convert a decimal multiplier back to American odds.

    Multipliers of 2.0 or more map to positive odds, anything below to
    negative odds. Float noise is rounded off before flooring.
    """
    if decimal_odds <= 1:
        raise OutOfRange(f"Decimal odds must exceed 1.0, got {decimal_odds}.")
    if decimal_odds >= 2.0:
        return math.floor(round((decimal_odds - 1) * 100, 6))
    return math.floor(round(-100 / (decimal_odds - 1), 6))


def combine_parlay_odds(odds_list: list[int]) -> int:
    """
    Combine parlay legs into one American price.

    Each leg is converted to a decimal multiplier, the multipliers are
    multiplied together, and the product is converted back. The product is
    taken over the sorted multipliers, so the result is independent of leg
    order.
    """
    if not odds_list:
        raise OutOfRange("A parlay needs at least one leg.")
    multipliers = sorted(american_to_decimal(odds) for odds in odds_list)
    return decimal_to_american(math.prod(multipliers))


def implied_probability(odds: int) -> float:
    """Break-even probability (0-1) implied by the odds. Display only."""
    validate_odds(odds)
    if odds > 0:
        return 100 / (odds + 100)
    return abs(odds) / (abs(odds) + 100)


def clamp_american_odds(odds: int, low: int, high: int) -> int:
    """
    Clamp odds into [low, high].

    Values that land strictly between -100 and +100 are not valid American
    odds and snap to +100.
    """
    clamped = max(low, min(high, int(odds)))
    if -100 < clamped < 100:
        return 100
    return clamped
