"""
Chat activity models read by the ghosting monitor.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ChatMessage:
    """One message from the external chat store."""

    sender_id: str
    timestamp: int
    text: str = ""
    sender_name: str = ""

    @property
    def display_name(self) -> str:
        return self.sender_name or self.sender_id


@dataclass(frozen=True)
class ActivityBaseline:
    """A target's message volume during the surveillance window."""

    target_id: str
    message_count: int
    window_start: int
    window_end: int
    established_at: int


@dataclass(frozen=True)
class ActivityCheck:
    """Audit record of one ghosting comparison."""

    target_id: str
    baseline_count: int
    current_count: int
    drop_percentage: float
    is_ghosting: bool
    checked_at: int

    def as_evidence(self) -> str:
        return (
            f"Activity dropped {self.drop_percentage:.1f}% "
            f"({self.baseline_count} -> {self.current_count} messages)"
        )
