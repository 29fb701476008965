"""
Tribunal (superlative award) domain models.
"""

from dataclasses import dataclass, field


@dataclass
class Nominee:
    player_id: str
    odds: int
    evidence: list[str] = field(default_factory=list)  # Quotes backing the nomination


@dataclass
class Superlative:
    """
    An award category the group votes and wagers on.

    Nominees keep their listing order; that order breaks vote ties.
    """

    superlative_id: str
    title: str
    nominees: list[Nominee]
    voting_closes_at: int
    created_at: int
    description: str = ""
    votes: dict[str, str] = field(default_factory=dict)  # voter_id -> nominee_id
    bet_ids: list[str] = field(default_factory=list)
    resolved: bool = False
    winner_id: str | None = None
    resolved_at: int | None = None

    def nominee(self, player_id: str) -> Nominee | None:
        for nominee in self.nominees:
            if nominee.player_id == player_id:
                return nominee
        return None

    def is_voting_open(self, now: int) -> bool:
        """Votes are accepted up to and including the closing timestamp."""
        return not self.resolved and now <= self.voting_closes_at


@dataclass(frozen=True)
class NomineeSuggestion:
    player_name: str
    evidence: str = ""


@dataclass(frozen=True)
class SuperlativeSuggestion:
    """A superlative proposed by the AI collaborator, before odds are assigned."""

    title: str
    description: str
    nominees: tuple[NomineeSuggestion, ...]
