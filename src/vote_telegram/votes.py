from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import UTC, datetime, timedelta
from threading import RLock
from typing import Callable

from .models import Voter, VotingSession
from .rendering import render_session_text

logger = logging.getLogger(__name__)


class SessionNotFoundError(KeyError):
    """Raised when a vote references a session the store does not hold."""


@dataclass(frozen=True, slots=True)
class VoteOutcome:
    text: str
    previous_text: str

    @property
    def changed(self) -> bool:
        return self.text != self.previous_text


def _utcnow() -> datetime:
    return datetime.now(UTC)


class VoteStore:
    """In-memory voting sessions keyed by inline query id.

    Every read-modify-write runs under a single store-wide lock, so the
    expiry sweep and vote registration never interleave on the same map.
    """

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._sessions: dict[str, VotingSession] = {}
        self._clock = clock
        self._lock = RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._sessions

    def create_session(self, session_id: str, title: str) -> VotingSession:
        session = VotingSession(id=session_id, title=title, created_at=self._clock())
        with self._lock:
            if session_id in self._sessions:
                logger.warning("Overwriting existing voting session %s", session_id)
            self._sessions[session_id] = session
        return session

    def get(self, session_id: str) -> VotingSession | None:
        """Return a snapshot of the session; changes to it do not reach the store."""
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            return replace(session, votes={label: list(voters) for label, voters in session.votes.items()})

    def render(self, session_id: str) -> str:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                raise SessionNotFoundError(session_id)
            return render_session_text(session)

    def register_vote(self, session_id: str, choice: str, voter: Voter) -> VoteOutcome:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                raise SessionNotFoundError(session_id)
            previous_text = render_session_text(session)

            current = session.votes.get(choice, [])
            for index, existing in enumerate(current):
                # Same choice again keeps the voter's slot; only the display form is refreshed.
                if existing.user_id == voter.user_id:
                    current[index] = voter
                    return VoteOutcome(text=render_session_text(session), previous_text=previous_text)

            for label in list(session.votes):
                remaining = [existing for existing in session.votes[label] if existing.user_id != voter.user_id]
                if remaining:
                    session.votes[label] = remaining
                else:
                    del session.votes[label]

            session.votes.setdefault(choice, []).append(voter)
            return VoteOutcome(text=render_session_text(session), previous_text=previous_text)

    def expire_older_than(self, retention: timedelta, now: datetime | None = None) -> int:
        cutoff = (now or self._clock()) - retention
        with self._lock:
            expired = [session for session in self._sessions.values() if session.created_at < cutoff]
            for session in expired:
                del self._sessions[session.id]
                logger.info("Removed old voting session %s: %s", session.id, session.title)
        return len(expired)
