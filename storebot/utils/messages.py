"""Helpers for editing Telegram messages."""

from __future__ import annotations

from typing import Any

from aiogram.exceptions import TelegramBadRequest


async def safe_edit_message_text(bot, *args: Any, **kwargs: Any) -> bool:
    """Edit a message suppressing the "message is not modified" error.

    Returns False when the message could not be edited at all (too old,
    deleted, or not a text message) so the caller can send a new one.
    """
    try:
        await bot.edit_message_text(*args, **kwargs)
    except TelegramBadRequest as e:
        if 'message is not modified' in str(e):
            return True
        return False
    return True


async def edit_or_answer(call, text: str, reply_markup=None) -> None:
    edited = await safe_edit_message_text(
        call.bot,
        text,
        chat_id=call.message.chat.id,
        message_id=call.message.message_id,
        reply_markup=reply_markup,
    )
    if not edited:
        await call.message.answer(text, reply_markup=reply_markup)
