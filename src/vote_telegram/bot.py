from __future__ import annotations

import logging

from aiogram import Bot, Dispatcher, Router
from aiogram.enums import ParseMode
from aiogram.exceptions import TelegramBadRequest
from aiogram.types import CallbackQuery, InlineQuery, InlineQueryResultArticle, InputTextMessageContent

from .callbacks import MalformedPayload, parse_vote_payload
from .models import Voter
from .rendering import build_vote_keyboard
from .votes import SessionNotFoundError, VoteStore

logger = logging.getLogger(__name__)

CREATE_VOTE_TITLE = "Create a vote:"
VOTE_COUNTED_TEXT = "Your vote has been counted!"


def _voter_from_callback(callback: CallbackQuery) -> Voter:
    user = callback.from_user
    return Voter.from_names(
        user_id=int(user.id),
        username=user.username,
        first_name=user.first_name,
        last_name=user.last_name,
    )


def build_dispatcher(bot: Bot, store: VoteStore) -> Dispatcher:
    dispatcher = Dispatcher()
    router = Router()

    @router.inline_query()
    async def inline_query_handler(inline_query: InlineQuery) -> None:
        query_text = inline_query.query
        if not query_text.strip():
            logger.error("Query text is empty, ignoring inline query %s", inline_query.id)
            return
        logger.info("Handling inline query %s: %r", inline_query.id, query_text)

        article = InlineQueryResultArticle(
            id=inline_query.id,
            title=f"{CREATE_VOTE_TITLE}\n{query_text}",
            description=query_text,
            input_message_content=InputTextMessageContent(message_text=query_text),
            reply_markup=build_vote_keyboard(inline_query.id),
        )
        store.create_session(inline_query.id, query_text)
        await bot.answer_inline_query(
            inline_query_id=inline_query.id,
            results=[article],
            is_personal=True,
            cache_time=0,
        )

    @router.callback_query()
    async def vote_callback_handler(callback: CallbackQuery) -> None:
        parsed = parse_vote_payload(callback.data)
        if isinstance(parsed, MalformedPayload):
            logger.error("Malformed callback data %r: %s", parsed.raw, parsed.reason)
            return

        message = callback.message
        if callback.inline_message_id is None and message is None:
            logger.error(
                "Callback %s has neither inline_message_id nor message, cannot process vote",
                callback.id,
            )
            return

        voter = _voter_from_callback(callback)
        logger.info("Handling vote %s from %s in session %s", parsed.choice, voter.full_name, parsed.session_id)
        try:
            outcome = store.register_vote(parsed.session_id, parsed.choice, voter)
        except SessionNotFoundError:
            logger.error("No voting data found for session %s", parsed.session_id)
            return

        keyboard = build_vote_keyboard(parsed.session_id)
        current_text = getattr(message, "text", None) if callback.inline_message_id is None else None
        if not outcome.changed or current_text == outcome.text:
            logger.info("Vote text for session %s is unchanged, skipping edit", parsed.session_id)
        else:
            try:
                if callback.inline_message_id is not None:
                    await bot.edit_message_text(
                        text=outcome.text,
                        inline_message_id=callback.inline_message_id,
                        reply_markup=keyboard,
                        parse_mode=ParseMode.MARKDOWN,
                    )
                else:
                    await bot.edit_message_text(
                        text=outcome.text,
                        chat_id=message.chat.id,
                        message_id=message.message_id,
                        reply_markup=keyboard,
                        parse_mode=ParseMode.MARKDOWN,
                    )
            except TelegramBadRequest as exc:
                logger.warning("Failed to edit vote message for session %s: %s", parsed.session_id, exc)

        await bot.answer_callback_query(callback_query_id=callback.id, text=VOTE_COUNTED_TEXT, show_alert=False)

    dispatcher.include_router(router)
    return dispatcher
