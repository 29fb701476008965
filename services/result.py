"""
Result type for call sites that prefer a non-raising API.

The settlement core raises GritError subclasses for local validation
failures. Result is reserved for failures that are expected and
recoverable: AI collaborator replies (which may be missing or malformed)
and listing cancellation.

Usage:
    return Result.ok(prop_line)
    return Result.fail("Model returned no content", code=AI_UNAVAILABLE)
    return parsed.map(lambda p: RedemptionSuggestion(*p))

    try:
        offer = trade_repo.get_by_id(offer_id)
    except NotFound as exc:
        return Result.from_error(exc)

    line = result.or_fallback(FALLBACK_PROP_LINE, logger, "Prop line")
"""

import logging
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Outcome of an operation that may fail without raising.

    Attributes:
        success: True when ``value`` is meaningful
        value: Payload on success, None otherwise
        error: Human-readable failure reason
        error_code: One of services.error_codes, when known
    """

    success: bool
    value: T | None = None
    error: str | None = None
    error_code: str | None = None

    @classmethod
    def ok(cls, value: T | None = None) -> "Result[T]":
        return cls(success=True, value=value)

    @classmethod
    def fail(cls, error: str, code: str | None = None) -> "Result[T]":
        return cls(success=False, error=error, error_code=code)

    @classmethod
    def from_error(cls, exc: Exception) -> "Result[T]":
        """Failure carrying the exception's message and its ``code`` attribute, if any."""
        return cls(success=False, error=str(exc), error_code=getattr(exc, "code", None))

    def __bool__(self) -> bool:
        return self.success

    def or_fallback(self, fallback: T, log: logging.Logger, what: str) -> T:
        """
        The value, or ``fallback`` after logging why it was needed.

        Used where an AI reply is optional and a fixed fallback stands in.
        """
        if self.success:
            return self.value  # type: ignore
        log.warning(f"{what} unavailable ({self.error_code}: {self.error}), using fallback")
        return fallback

    def map(self, fn: Callable[[T], U]) -> "Result[U]":
        """Transform a successful value with ``fn``; failures pass through untouched."""
        if not self.success:
            return self  # type: ignore
        return Result.ok(fn(self.value))  # type: ignore
