"""
Application services layer.

Services orchestrate business operations using repositories and domain services.
Import concrete services from their modules; this package only re-exports the
shared error types.
"""

# Result type for consistent error handling
from services.result import Result

from services.errors import (
    AlreadyJoined,
    AlreadyResolved,
    CapacityExceeded,
    GritError,
    InsufficientFunds,
    InvalidTarget,
    NoActiveBets,
    NotFound,
    OutOfRange,
    PlayerLockedOut,
    PrecedentMissing,
    WindowClosed,
)

__all__ = [
    # Result type
    "Result",
    # Errors
    "GritError",
    "InsufficientFunds",
    "InvalidTarget",
    "AlreadyResolved",
    "NotFound",
    "PrecedentMissing",
    "OutOfRange",
    "WindowClosed",
    "NoActiveBets",
    "AlreadyJoined",
    "PlayerLockedOut",
    "CapacityExceeded",
]
