"""
Standard error codes for the settlement core.

These error codes allow callers to programmatically handle
specific error conditions without parsing error message text.

Usage:
    from services.error_codes import NOT_FOUND, INSUFFICIENT_FUNDS
    from services.result import Result

    if offer is None:
        return Result.fail("Offer not found", code=NOT_FOUND)

    if balance < amount:
        return Result.fail("Insufficient funds", code=INSUFFICIENT_FUNDS)
"""

# General errors
NOT_FOUND = "not_found"
VALIDATION_ERROR = "validation_error"
PERMISSION_DENIED = "permission_denied"

# Economy/betting errors
INSUFFICIENT_FUNDS = "insufficient_funds"
INVALID_TARGET = "invalid_target"
ALREADY_RESOLVED = "already_resolved"
OUT_OF_RANGE = "out_of_range"
WINDOW_CLOSED = "window_closed"
NO_ACTIVE_BETS = "no_active_bets"
ALREADY_JOINED = "already_joined"

# Activity monitor errors
PRECEDENT_MISSING = "precedent_missing"

# Gulag errors
LOCKED_OUT = "locked_out"
NOT_IN_GULAG = "not_in_gulag"

# Inventory errors
CAPACITY_EXCEEDED = "capacity_exceeded"

# AI collaborator errors
AI_UNAVAILABLE = "ai_unavailable"
AI_PARSE_ERROR = "ai_parse_error"
