from __future__ import annotations

from dataclasses import dataclass

from .models import VoteChoice

PAYLOAD_SEPARATOR = "|"


@dataclass(frozen=True, slots=True)
class VotePayload:
    choice: VoteChoice
    session_id: str


@dataclass(frozen=True, slots=True)
class MalformedPayload:
    raw: str | None
    reason: str


def encode_vote_payload(choice: VoteChoice, session_id: str) -> str:
    return f"{choice.value}{PAYLOAD_SEPARATOR}{session_id}"


def parse_vote_payload(data: str | None) -> VotePayload | MalformedPayload:
    if not data:
        return MalformedPayload(raw=data, reason="empty callback data")
    label, sep, session_id = data.partition(PAYLOAD_SEPARATOR)
    if not sep:
        return MalformedPayload(raw=data, reason="missing separator")
    try:
        choice = VoteChoice(label)
    except ValueError:
        return MalformedPayload(raw=data, reason=f"unknown choice label: {label}")
    if not session_id:
        return MalformedPayload(raw=data, reason="missing session id")
    return VotePayload(choice=choice, session_id=session_id)
