import time
from typing import Any, Awaitable, Callable

from aiogram import BaseMiddleware, Bot
from aiogram.exceptions import TelegramAPIError
from aiogram.types import CallbackQuery, Message, TelegramObject

from storebot.keyboards import subscription_markup
from storebot.localization import t, user_language
from storebot.logger_mesh import logger
from storebot.misc import TgConfig

Handler = Callable[[TelegramObject, dict[str, Any]], Awaitable[Any]]


async def _reply(event: TelegramObject, text: str, reply_markup=None, alert: bool = False) -> None:
    if isinstance(event, CallbackQuery):
        if alert or reply_markup is None:
            await event.answer(text, show_alert=alert)
            return
        await event.answer()
        await event.message.answer(text, reply_markup=reply_markup)
    elif isinstance(event, Message):
        await event.answer(text, reply_markup=reply_markup)


class ThrottlingMiddleware(BaseMiddleware):
    """Drop updates from users exceeding RATE_LIMIT_MAX_CALLS per window."""

    async def __call__(self, handler: Handler, event: TelegramObject, data: dict[str, Any]) -> Any:
        user = data.get('event_from_user')
        if user is None:
            return await handler(event, data)
        now = time.monotonic()
        record = TgConfig.RATE_LIMIT.setdefault(user.id, {
            'window_start': now,
            'count': 0,
            'last_notice': 0.0,
        })
        if now - record['window_start'] > TgConfig.RATE_LIMIT_WINDOW:
            record['window_start'] = now
            record['count'] = 0
        record['count'] += 1
        if record['count'] > TgConfig.RATE_LIMIT_MAX_CALLS:
            if now - record['last_notice'] > 1.0:
                users = data.get('users')
                lang = user_language(users.get(user.id)) if users else TgConfig.DEFAULT_LANGUAGE
                await _reply(event, t(lang, 'rate_limited'))
                record['last_notice'] = now
            return None
        return await handler(event, data)


class SubscriptionMiddleware(BaseMiddleware):
    """Ask non-admin users to join the required channels before anything else."""

    def __init__(self, channels, admin_ids):
        self.channels = tuple(channels)
        self.admin_ids = frozenset(admin_ids)

    async def _missing_channels(self, bot: Bot, user_id: int) -> list[str]:
        missing = []
        for channel in self.channels:
            try:
                member = await bot.get_chat_member(f'@{channel}', user_id)
            except TelegramAPIError as e:
                # bot is not an admin of the channel or the channel is gone
                logger.error("Subscription check for @%s failed: %s", channel, e)
                continue
            if member.status in ('left', 'kicked'):
                missing.append(channel)
        return missing

    async def __call__(self, handler: Handler, event: TelegramObject, data: dict[str, Any]) -> Any:
        user = data.get('event_from_user')
        if not self.channels or user is None or user.id in self.admin_ids:
            return await handler(event, data)
        missing = await self._missing_channels(data['bot'], user.id)
        if not missing:
            return await handler(event, data)

        users = data.get('users')
        lang = user_language(users.get(user.id)) if users else TgConfig.DEFAULT_LANGUAGE
        channels = ', '.join(f'@{channel}' for channel in missing)
        if isinstance(event, CallbackQuery) and event.data == 'check_subscription':
            await _reply(event, t(lang, 'subscription_still_missing', channels=channels), alert=True)
            return None
        await _reply(event, t(lang, 'subscription_required', channels=channels),
                     reply_markup=subscription_markup(missing, lang))
        return None


class ProfileRefreshMiddleware(BaseMiddleware):
    """Keep the cached Telegram profile of known users current."""

    async def __call__(self, handler: Handler, event: TelegramObject, data: dict[str, Any]) -> Any:
        user = data.get('event_from_user')
        users = data.get('users')
        if user is not None and users is not None and users.exists(user.id):
            users.upsert_profile(
                user.id,
                username=user.username,
                first_name=user.first_name,
                last_name=user.last_name,
                language_code=user.language_code,
            )
        return await handler(event, data)
