from types import SimpleNamespace

from storebot.handlers.admin.orders import show_pending
from storebot.handlers.user.main import cancel_order_handler
from storebot.keyboards import order_review_markup
from storebot.keyboards.callbacks import CancelCallback
from storebot.localization import t

from .conftest import ADMIN, OTHER_USER, USER, FakeNotifier


class EditBot:

    def __init__(self):
        self.edits = []

    async def edit_message_text(self, text, **kwargs):
        self.edits.append(text)


class StubCall:
    """Just enough of a CallbackQuery for handlers that edit, answer and reply."""

    def __init__(self, user_id):
        self.from_user = SimpleNamespace(id=user_id)
        self.bot = EditBot()
        self.message = SimpleNamespace(chat=SimpleNamespace(id=user_id), message_id=7, answer=self._reply)
        self.answers = []
        self.replies = []

    async def answer(self, text=None, show_alert=False):
        self.answers.append((text, show_alert))

    async def _reply(self, text, reply_markup=None):
        self.replies.append(text)


class SkippingNotifier(FakeNotifier):
    """Fails any message mentioning ``blocked``."""

    def __init__(self, blocked):
        super().__init__()
        self.blocked = blocked

    async def send_message(self, chat_id, text, reply_markup=None):
        if self.blocked in text:
            return False
        return await super().send_message(chat_id, text, reply_markup=reply_markup)


async def _order(purchases, user_id, delivery):
    purchases.select_item(user_id, 'diamonds', '100+80')
    return await purchases.submit_delivery_id(user_id, delivery)


async def test_pending_list_goes_to_the_admin_chat(funded, purchases, ledger, notifier):
    funded(14000)
    funded(14000, user_id=OTHER_USER)
    first = await _order(purchases, USER, '123456789')
    second = await _order(purchases, OTHER_USER, '987654321')
    notifier.messages.clear()
    call = StubCall(ADMIN)

    await show_pending(call, 'uz', ledger, notifier)

    assert call.bot.edits == [t('uz', 'pending_summary', orders=2, topups=0)]
    sent = {markup.inline_keyboard[0][0].callback_data: chat_id for chat_id, _, markup in notifier.messages}
    assert sent == {
        order_review_markup('diamonds', order.id, 'uz').inline_keyboard[0][0].callback_data: ADMIN
        for order in (first, second)
    }


async def test_undeliverable_pending_entry_does_not_hide_the_rest(funded, purchases, ledger):
    funded(14000)
    funded(14000, user_id=OTHER_USER)
    first = await _order(purchases, USER, '123456789')
    second = await _order(purchases, OTHER_USER, '987654321')
    notifier = SkippingNotifier(first.id)

    await show_pending(StubCall(ADMIN), 'uz', ledger, notifier)

    ((chat_id, text, _),) = notifier.messages
    assert chat_id == ADMIN
    assert second.id in text


async def test_empty_pending_list(ledger, notifier):
    call = StubCall(ADMIN)

    await show_pending(call, 'uz', ledger, notifier)

    assert call.bot.edits == [t('uz', 'no_pending')]
    assert notifier.messages == []


async def test_cancelling_a_resolved_order_names_its_status(funded, users, purchases, confirmations):
    funded(14000)
    order = await _order(purchases, USER, '123456789')
    await confirmations.confirm_order(order.id, ADMIN)
    call = StubCall(USER)

    await cancel_order_handler(call, CancelCallback(family='diamonds', id=order.id), users, confirmations)

    assert call.answers == [(t('uz', 'already_resolved', status=t('uz', 'status_completed')), True)]
    assert call.bot.edits == []


async def test_owner_cancels_pending_order(funded, users, purchases, confirmations, ledger):
    funded(14000)
    order = await _order(purchases, USER, '123456789')
    call = StubCall(USER)

    await cancel_order_handler(call, CancelCallback(family='diamonds', id=order.id), users, confirmations)

    assert not ledger.get_order(order.id).is_pending
    assert call.bot.edits == [t('uz', 'order_cancelled_self', order_id=order.id, refund='')]
    assert call.answers == [(None, False)]
