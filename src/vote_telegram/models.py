from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum


class VoteChoice(StrEnum):
    RED = "vote_red"
    YELLOW = "vote_yellow"
    BLUE = "vote_blue"
    ENVELOPE = "vote_envelope"


CHOICE_GLYPHS: dict[str, str] = {
    VoteChoice.RED: "❤️",
    VoteChoice.YELLOW: "💛",
    VoteChoice.BLUE: "💙",
    VoteChoice.ENVELOPE: "💌",
}


@dataclass(frozen=True, slots=True)
class Voter:
    user_id: int
    username: str | None
    full_name: str

    @classmethod
    def from_names(cls, user_id: int, username: str | None, first_name: str, last_name: str | None = None) -> Voter:
        full_name = f"{first_name} {last_name or ''}".strip()
        return cls(user_id=user_id, username=username or None, full_name=full_name)


@dataclass(slots=True)
class VotingSession:
    id: str
    title: str
    created_at: datetime
    votes: dict[str, list[Voter]] = field(default_factory=dict)

    def voter_count(self) -> int:
        return sum(len(voters) for voters in self.votes.values())
