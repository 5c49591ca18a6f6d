from aiogram.filters import Filter
from aiogram.types import CallbackQuery, Message

from storebot.database import UserStore
from storebot.localization import t, user_language
from storebot.logger_mesh import logger
from storebot.services.errors import ShopError
from storebot.services.session import SessionStore


class ActiveFlow(Filter):
    """Match non-command messages from users whose session holds one of ``flow_types``."""

    def __init__(self, *flow_types):
        self.flow_types = flow_types

    async def __call__(self, message: Message, sessions: SessionStore) -> bool:
        if message.from_user is None:
            return False
        # commands such as /cancel go to their own handlers
        if message.text and message.text.startswith('/'):
            return False
        return isinstance(sessions.get(message.from_user.id), self.flow_types)


def get_lang(users: UserStore, user_id: int) -> str:
    return user_language(users.get(user_id))


async def answer_error(event, err: ShopError, lang: str, reply_markup=None) -> None:
    """Show a service error to whoever triggered it."""
    text = t(lang, err.key, **err.params)
    logger.info("%s for %s: %s", type(err).__name__, event.from_user.id, err)
    if isinstance(event, CallbackQuery):
        if reply_markup is None:
            await event.answer(text, show_alert=True)
            return
        await event.answer()
        await event.message.answer(text, reply_markup=reply_markup)
        return
    await event.answer(text, reply_markup=reply_markup)
