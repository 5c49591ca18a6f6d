from __future__ import annotations

import asyncio
from typing import Iterable

from aiogram import Bot
from aiogram.exceptions import TelegramAPIError, TelegramBadRequest, TelegramForbiddenError
from aiogram.types import InlineKeyboardMarkup

from storebot.logger_mesh import logger


class Notifier:
    """Outbound Telegram messages that never raise.

    A failed send is logged and reported as ``False``; fan-out keeps going
    for the remaining recipients.
    """

    def __init__(self, bot: Bot):
        self.bot = bot

    async def send_message(self, chat_id: int, text: str,
                           reply_markup: InlineKeyboardMarkup | None = None) -> bool:
        try:
            await self.bot.send_message(chat_id, text, reply_markup=reply_markup)
        except TelegramForbiddenError:
            logger.warning("Cannot message %s: bot blocked or conversation not started", chat_id)
            return False
        except TelegramBadRequest as e:
            logger.error("Bad request while messaging %s: %s", chat_id, e)
            return False
        except TelegramAPIError as e:
            logger.exception("Telegram API error while messaging %s: %s", chat_id, e)
            return False
        return True

    async def send_photo(self, chat_id: int, photo: str, caption: str,
                         reply_markup: InlineKeyboardMarkup | None = None) -> bool:
        try:
            await self.bot.send_photo(chat_id, photo, caption=caption, reply_markup=reply_markup)
        except TelegramForbiddenError:
            logger.warning("Cannot send photo to %s: bot blocked or conversation not started", chat_id)
            return False
        except TelegramBadRequest as e:
            # bad file id: fall back to the caption alone
            logger.error("Photo to %s rejected: %s", chat_id, e)
            return await self.send_message(chat_id, caption, reply_markup=reply_markup)
        except TelegramAPIError as e:
            logger.exception("Telegram API error while sending photo to %s: %s", chat_id, e)
            return False
        return True

    async def fan_out(self, chat_ids: Iterable[int], text: str,
                      reply_markup: InlineKeyboardMarkup | None = None,
                      photo: str | None = None, delay: float = 0) -> int:
        delivered = 0
        for chat_id in chat_ids:
            if photo:
                ok = await self.send_photo(chat_id, photo, text, reply_markup=reply_markup)
            else:
                ok = await self.send_message(chat_id, text, reply_markup=reply_markup)
            if ok:
                delivered += 1
            if delay:
                await asyncio.sleep(delay)
        return delivered
