"""
Activity baseline monitor.

Detects "ghosting": a target going quiet during the betting window to
dodge an Ambush bet about their chat behavior.
"""

import logging
import time
from typing import Callable, Iterable

from config import AMBUSH_GHOSTING_THRESHOLD
from domain.models.activity import ActivityBaseline, ActivityCheck, ChatMessage
from repositories.activity_repository import ActivityRepository
from services.errors import PrecedentMissing

logger = logging.getLogger("grit_core.services.activity")


def count_messages(
    messages: Iterable[ChatMessage], sender_id: str, window_start: int, window_end: int
) -> int:
    """Count messages by sender with window_start <= timestamp <= window_end."""
    return sum(
        1
        for msg in messages
        if msg.sender_id == sender_id and window_start <= msg.timestamp <= window_end
    )


class ActivityMonitorService:
    """
    Compares a target's message volume against a surveillance baseline.

    The chat store is read-only here; callers pass in the message slice.
    """

    def __init__(
        self,
        activity_repo: ActivityRepository,
        threshold: float | None = None,
        clock: Callable[[], float] | None = None,
    ):
        self.activity_repo = activity_repo
        self.threshold = threshold if threshold is not None else AMBUSH_GHOSTING_THRESHOLD
        self.clock = clock or time.time

    def establish_baseline(
        self,
        target_id: str,
        messages: Iterable[ChatMessage],
        window_start: int,
        window_end: int,
    ) -> ActivityBaseline:
        """Record the target's message count for the window, replacing any earlier baseline."""
        if window_end < window_start:
            raise ValueError("Window end must not precede window start.")
        baseline = ActivityBaseline(
            target_id=target_id,
            message_count=count_messages(messages, target_id, window_start, window_end),
            window_start=window_start,
            window_end=window_end,
            established_at=int(self.clock()),
        )
        self.activity_repo.set_baseline(baseline)
        logger.debug(f"Baseline for {target_id}: {baseline.message_count} messages")
        return baseline

    def check_for_ghosting(
        self,
        target_id: str,
        messages: Iterable[ChatMessage],
        window_start: int,
        window_end: int,
        now: int | None = None,
    ) -> ActivityCheck:
        """
        Compare the target's activity in a new window against the baseline.

        Ghosting is flagged only when the drop is strictly greater than the
        threshold; a drop of exactly 70% is not ghosting.

        Raises:
            PrecedentMissing: If no baseline exists for the target.
        """
        baseline = self.activity_repo.get_baseline(target_id)
        if baseline is None:
            raise PrecedentMissing(f"No activity baseline established for {target_id}.")

        current = count_messages(messages, target_id, window_start, window_end)
        if baseline.message_count > 0:
            drop = (baseline.message_count - current) * 100 / baseline.message_count
        else:
            drop = 0.0

        check = ActivityCheck(
            target_id=target_id,
            baseline_count=baseline.message_count,
            current_count=current,
            drop_percentage=drop,
            is_ghosting=drop > self.threshold,
            checked_at=int(self.clock()) if now is None else now,
        )
        if check.is_ghosting:
            logger.info(f"Ghosting detected for {target_id}: {check.as_evidence()}")
        return check

    def get_baseline(self, target_id: str) -> ActivityBaseline | None:
        return self.activity_repo.get_baseline(target_id)

    def has_baseline(self, target_id: str) -> bool:
        return self.activity_repo.get_baseline(target_id) is not None

    def clear_baseline(self, target_id: str) -> bool:
        """Drop the target's baseline. Returns False if there was none."""
        return self.activity_repo.delete_baseline(target_id)

    def clear_all(self) -> None:
        """Drop every baseline, e.g. at the start of a new weekly cycle."""
        self.activity_repo.clear()
