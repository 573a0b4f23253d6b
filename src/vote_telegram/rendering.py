from __future__ import annotations

import re

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

from .callbacks import encode_vote_payload
from .models import CHOICE_GLYPHS, Voter, VoteChoice, VotingSession

_MARKDOWN_SPECIAL = re.compile(r"([_*`\[])")


def _escape_markdown(value: str) -> str:
    return _MARKDOWN_SPECIAL.sub(r"\\\1", value)


def voter_mention(voter: Voter) -> str:
    if voter.username:
        return f"@{_escape_markdown(voter.username)}"
    return f"[{_escape_markdown(voter.full_name)}](tg://user?id={voter.user_id})"


def render_session_text(session: VotingSession) -> str:
    """Render the message body: title, blank line, one line per non-empty choice."""
    lines = [f"{_escape_markdown(session.title)}\n\n"]
    for label, voters in session.votes.items():
        if not voters:
            continue
        glyph = CHOICE_GLYPHS.get(label, label)
        mentions = ", ".join(voter_mention(voter) for voter in voters)
        lines.append(f"{glyph}: {mentions}\n")
    return "".join(lines)


def build_vote_keyboard(session_id: str) -> InlineKeyboardMarkup:
    row = [
        InlineKeyboardButton(
            text=CHOICE_GLYPHS[choice],
            callback_data=encode_vote_payload(choice, session_id),
        )
        for choice in VoteChoice
    ]
    return InlineKeyboardMarkup(inline_keyboard=[row])
