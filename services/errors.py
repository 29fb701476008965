"""
Exception hierarchy for ledger and bet lifecycle failures.

Every exception derives from ValueError so existing callers that treat
bad input as ValueError keep working, and each carries one of the codes
in services.error_codes for programmatic handling.
"""

from services import error_codes


class GritError(ValueError):
    """Base class for settlement-core failures."""

    code = error_codes.VALIDATION_ERROR

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        if code is not None:
            self.code = code


class InsufficientFunds(GritError):
    """Stake or price exceeds the available balance."""

    code = error_codes.INSUFFICIENT_FUNDS


class InvalidTarget(GritError):
    """A player tried to bet on, buy from, or bail out themselves."""

    code = error_codes.INVALID_TARGET


class AlreadyResolved(GritError):
    """Second resolution of a bet, superlative, parlay, or offer."""

    code = error_codes.ALREADY_RESOLVED


class NotFound(GritError):
    code = error_codes.NOT_FOUND


class PrecedentMissing(GritError):
    """Ghosting check requested before a baseline was established."""

    code = error_codes.PRECEDENT_MISSING


class OutOfRange(GritError):
    """Odds or price outside the configured band."""

    code = error_codes.OUT_OF_RANGE


class WindowClosed(GritError):
    code = error_codes.WINDOW_CLOSED


class NoActiveBets(GritError):
    code = error_codes.NO_ACTIVE_BETS


class AlreadyJoined(GritError):
    code = error_codes.ALREADY_JOINED


class PlayerLockedOut(GritError):
    """Player is in the Gulag or serving a ban."""

    code = error_codes.LOCKED_OUT


class CapacityExceeded(GritError):
    code = error_codes.CAPACITY_EXCEEDED
