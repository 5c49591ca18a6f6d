from aiogram.exceptions import TelegramBadRequest, TelegramForbiddenError
from aiogram.methods import SendMessage, SendPhoto

from storebot.utils import format_sum
from storebot.utils.notifications import Notifier

BLOCKED = 7
BAD_PHOTO = 'broken-file-id'


class FakeBot:

    def __init__(self):
        self.sent = []
        self.photos = []

    async def send_message(self, chat_id, text, reply_markup=None):
        if chat_id == BLOCKED:
            raise TelegramForbiddenError(
                method=SendMessage(chat_id=chat_id, text=text),
                message='Forbidden: bot was blocked by the user',
            )
        self.sent.append((chat_id, text))

    async def send_photo(self, chat_id, photo, caption=None, reply_markup=None):
        if photo == BAD_PHOTO:
            raise TelegramBadRequest(
                method=SendPhoto(chat_id=chat_id, photo=photo),
                message='Bad Request: wrong file identifier',
            )
        self.photos.append((chat_id, photo, caption))


async def test_fan_out_skips_blocked_chats():
    bot = FakeBot()
    notifier = Notifier(bot)

    delivered = await notifier.fan_out([1, BLOCKED, 2], 'hello')

    assert delivered == 2
    assert bot.sent == [(1, 'hello'), (2, 'hello')]


async def test_blocked_chat_reports_failure():
    notifier = Notifier(FakeBot())
    assert await notifier.send_message(BLOCKED, 'hello') is False


async def test_bad_photo_falls_back_to_text():
    bot = FakeBot()
    notifier = Notifier(bot)

    assert await notifier.send_photo(1, BAD_PHOTO, 'receipt')
    assert bot.photos == []
    assert bot.sent == [(1, 'receipt')]


def test_format_sum():
    assert format_sum(0) == '0'
    assert format_sum(14000) == '14 000'
    assert format_sum(1385000) == '1 385 000'
