from types import SimpleNamespace

import pytest
from aiogram import Dispatcher
from aiogram.exceptions import TelegramBadRequest
from aiogram.methods import GetChatMember
from aiogram.types import CallbackQuery, User

from storebot import middlewares
from storebot.handlers import register_all_handlers
from storebot.handlers.other import ActiveFlow
from storebot.localization import t
from storebot.middlewares import ProfileRefreshMiddleware, SubscriptionMiddleware, ThrottlingMiddleware
from storebot.misc import TgConfig
from storebot.services.session import BroadcastFlow, PurchaseFlow

from .conftest import ADMIN, ADMINS, USER


class RecordingHandler:

    def __init__(self):
        self.events = []

    async def __call__(self, event, data):
        self.events.append(event)
        return 'handled'


class ChannelBot:
    """Answers get_chat_member from a channel -> status table."""

    def __init__(self, statuses):
        self.statuses = statuses

    async def get_chat_member(self, chat_id, user_id):
        status = self.statuses[chat_id]
        if status is None:
            raise TelegramBadRequest(
                method=GetChatMember(chat_id=chat_id, user_id=user_id),
                message='Bad Request: chat not found',
            )
        return SimpleNamespace(status=status)


@pytest.fixture(autouse=True)
def replies(monkeypatch):
    sent = []

    async def record(event, text, reply_markup=None, alert=False):
        sent.append((text, reply_markup, alert))

    monkeypatch.setattr(middlewares, '_reply', record)
    TgConfig.RATE_LIMIT.clear()
    yield sent
    TgConfig.RATE_LIMIT.clear()


def _tg_user(user_id=USER, **profile):
    return SimpleNamespace(id=user_id, username=profile.get('username'), first_name=profile.get('first_name'),
                           last_name=None, language_code=profile.get('language_code'))


async def test_throttling_drops_calls_over_the_window_limit(users, replies):
    middleware = ThrottlingMiddleware()
    handler = RecordingHandler()
    data = {'event_from_user': _tg_user(), 'users': users}

    results = [await middleware(handler, object(), data) for _ in range(TgConfig.RATE_LIMIT_MAX_CALLS + 3)]

    assert len(handler.events) == TgConfig.RATE_LIMIT_MAX_CALLS
    assert results[-1] is None
    assert replies == [(t('uz', 'rate_limited'), None, False)]


async def test_throttling_window_resets(users):
    middleware = ThrottlingMiddleware()
    handler = RecordingHandler()
    data = {'event_from_user': _tg_user(), 'users': users}
    for _ in range(TgConfig.RATE_LIMIT_MAX_CALLS + 1):
        await middleware(handler, object(), data)

    TgConfig.RATE_LIMIT[USER]['window_start'] -= TgConfig.RATE_LIMIT_WINDOW + 1

    assert await middleware(handler, object(), data) == 'handled'


async def test_throttling_is_per_user(users):
    middleware = ThrottlingMiddleware()
    handler = RecordingHandler()
    for _ in range(TgConfig.RATE_LIMIT_MAX_CALLS + 1):
        await middleware(handler, object(), {'event_from_user': _tg_user(), 'users': users})

    assert await middleware(handler, object(), {'event_from_user': _tg_user(ADMIN)}) == 'handled'
    assert await middleware(handler, object(), {}) == 'handled'


async def test_subscribed_user_passes():
    middleware = SubscriptionMiddleware(['news'], ADMINS)
    handler = RecordingHandler()
    data = {'event_from_user': _tg_user(), 'bot': ChannelBot({'@news': 'member'})}

    assert await middleware(handler, object(), data) == 'handled'


async def test_unsubscribed_user_is_asked_to_join(users, replies):
    middleware = SubscriptionMiddleware(['news', 'deals'], ADMINS)
    handler = RecordingHandler()
    data = {
        'event_from_user': _tg_user(),
        'users': users,
        'bot': ChannelBot({'@news': 'left', '@deals': 'administrator'}),
    }

    assert await middleware(handler, object(), data) is None

    assert handler.events == []
    ((text, markup, alert),) = replies
    assert text == t('uz', 'subscription_required', channels='@news')
    assert markup is not None
    assert not alert


async def test_admins_skip_the_subscription_gate():
    middleware = SubscriptionMiddleware(['news'], ADMINS)
    data = {'event_from_user': _tg_user(ADMIN), 'bot': ChannelBot({'@news': 'kicked'})}

    assert await middleware(RecordingHandler(), object(), data) == 'handled'


async def test_unreachable_channel_is_not_enforced():
    middleware = SubscriptionMiddleware(['gone'], ADMINS)
    data = {'event_from_user': _tg_user(), 'bot': ChannelBot({'@gone': None})}

    assert await middleware(RecordingHandler(), object(), data) == 'handled'


async def test_subscription_recheck_answers_with_an_alert(users, replies):
    middleware = SubscriptionMiddleware(['news'], ADMINS)
    event = CallbackQuery(
        id='1',
        from_user=User(id=USER, is_bot=False, first_name='Test'),
        chat_instance='chat',
        data='check_subscription',
    )
    data = {'event_from_user': event.from_user, 'users': users, 'bot': ChannelBot({'@news': 'left'})}

    assert await middleware(RecordingHandler(), event, data) is None

    assert replies == [(t('uz', 'subscription_still_missing', channels='@news'), None, True)]


async def test_profile_refresh_updates_known_users_only(users):
    users.upsert_profile(USER, username='old_name', first_name='Test')
    middleware = ProfileRefreshMiddleware()
    handler = RecordingHandler()

    await middleware(handler, object(), {
        'event_from_user': _tg_user(username='new_name', language_code='en'), 'users': users,
    })
    await middleware(handler, object(), {'event_from_user': _tg_user(ADMIN, username='boss'), 'users': users})

    account = users.get(USER)
    assert account.username == 'new_name'
    assert account.first_name == 'Test'
    assert account.language_code == 'en'
    assert not users.exists(ADMIN)
    assert len(handler.events) == 2


def _text(user_id, text):
    return SimpleNamespace(from_user=SimpleNamespace(id=user_id), text=text)


async def test_active_flow_matches_the_running_flow(sessions):
    sessions.start(ADMIN, BroadcastFlow())

    assert await ActiveFlow(BroadcastFlow)(_text(ADMIN, 'Aksiya!'), sessions)
    assert not await ActiveFlow(PurchaseFlow)(_text(ADMIN, 'Aksiya!'), sessions)
    assert not await ActiveFlow(BroadcastFlow)(_text(USER, 'Aksiya!'), sessions)


async def test_commands_bypass_an_active_flow(sessions):
    sessions.start(ADMIN, BroadcastFlow())

    assert not await ActiveFlow(BroadcastFlow)(_text(ADMIN, '/cancel'), sessions)
    assert not await ActiveFlow(BroadcastFlow)(SimpleNamespace(from_user=None, text='hi'), sessions)


def test_admin_router_sees_text_before_user_fallback():
    dp = Dispatcher()
    register_all_handlers(dp)

    assert [router.name for router in dp.sub_routers] == ['admin', 'user']
