"""Order and top-up review buttons on the admin side."""

import html

from aiogram import Router
from aiogram.exceptions import TelegramBadRequest
from aiogram.types import CallbackQuery

from storebot.database import OrderLedger, UserStore
from storebot.handlers.other import answer_error, get_lang
from storebot.keyboards import admin_back, order_review_markup, topup_review_markup
from storebot.keyboards.callbacks import ConfirmCallback, RejectCallback
from storebot.localization import t
from storebot.logger_mesh import logger
from storebot.misc import TgConfig
from storebot.services.confirmation import ConfirmationService
from storebot.services.errors import AlreadyResolved, InsufficientFundsAtConfirmation, ShopError
from storebot.utils import edit_or_answer, format_sum
from storebot.utils.notifications import Notifier


async def _close_review(call: CallbackQuery, status_line: str) -> None:
    """Append the outcome to the reviewed message and drop its buttons."""
    message = call.message
    text = f'{message.html_text}\n\n{status_line}' if message.html_text else status_line
    try:
        if message.photo:
            await message.edit_caption(caption=text, reply_markup=None)
        else:
            await message.edit_text(text, reply_markup=None)
    except TelegramBadRequest as e:
        logger.warning("Cannot update review message %s: %s", message.message_id, e)


async def _review(call: CallbackQuery, action: str, family: str, entity_id: str,
                  users: UserStore, confirmations: ConfirmationService) -> None:
    admin_id = call.from_user.id
    lang = get_lang(users, admin_id)
    try:
        await confirmations.dispatch(action, family, entity_id, admin_id)
    except InsufficientFundsAtConfirmation as e:
        await call.answer(t(lang, e.key, balance=format_sum(e.balance), price=format_sum(e.price),
                            shortfall=format_sum(e.shortfall)), show_alert=True)
        return
    except AlreadyResolved as e:
        await call.answer(t(lang, e.key, status=t(lang, f'status_{e.status}')), show_alert=True)
        await _close_review(call, t(lang, 'review_closed', status=t(lang, f'status_{e.status}')))
        return
    except ShopError as e:
        await answer_error(call, e, lang)
        return
    key = 'review_confirmed' if action == 'confirm' else 'review_rejected'
    await _close_review(call, t(lang, key, admin=call.from_user.full_name))
    await call.answer(t(lang, key, admin=call.from_user.full_name))


async def confirm_callback_handler(call: CallbackQuery, callback_data: ConfirmCallback,
                                   users: UserStore, confirmations: ConfirmationService):
    await _review(call, 'confirm', callback_data.family, callback_data.id, users, confirmations)


async def reject_callback_handler(call: CallbackQuery, callback_data: RejectCallback,
                                  users: UserStore, confirmations: ConfirmationService):
    await _review(call, 'reject', callback_data.family, callback_data.id, users, confirmations)


async def show_pending(call: CallbackQuery, lang: str, ledger: OrderLedger, notifier: Notifier) -> None:
    """List pending entries one message each; a failed entry does not hide the rest."""
    chat_id = call.message.chat.id
    orders = ledger.pending_orders(TgConfig.PENDING_LIST_LIMIT)
    requests = ledger.pending_topups(TgConfig.PENDING_LIST_LIMIT)
    if not orders and not requests:
        await edit_or_answer(call, t(lang, 'no_pending'), admin_back(lang))
        return
    await edit_or_answer(call, t(lang, 'pending_summary', orders=len(orders), topups=len(requests)),
                         admin_back(lang))
    for order in orders:
        await notifier.send_message(
            chat_id,
            t(lang, 'pending_order', order_id=order.id, user_id=order.user_id, item=order.item_label,
              delivery_id=html.escape(order.delivery_id), price=format_sum(order.price), created_at=order.created_at),
            reply_markup=order_review_markup(order.family, order.id, lang),
        )
    for request in requests:
        await notifier.send_message(
            chat_id,
            t(lang, 'pending_topup', request_id=request.id, user_id=request.user_id,
              amount=format_sum(request.amount), card=request.card.upper(), created_at=request.created_at),
            reply_markup=topup_review_markup(request.id, lang),
        )


def register_order_handlers(router: Router) -> None:
    router.callback_query.register(confirm_callback_handler, ConfirmCallback.filter())
    router.callback_query.register(reject_callback_handler, RejectCallback.filter())
