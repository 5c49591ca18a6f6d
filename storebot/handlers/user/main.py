import html

from aiogram import F, Router
from aiogram.filters import Command, CommandObject, CommandStart
from aiogram.types import CallbackQuery, Message

from storebot.database import OrderLedger, UserStore
from storebot.handlers.other import ActiveFlow, answer_error, get_lang
from storebot.keyboards import (
    back,
    cancel_order_markup,
    family_group_menu,
    family_items,
    insufficient_funds_markup,
    main_menu,
    topup_cards,
    topup_paid,
)
from storebot.keyboards.callbacks import BuyCallback, CancelCallback, MenuCallback, TopUpCardCallback
from storebot.keyboards.inline import FAMILY_GROUPS
from storebot.localization import t
from storebot.logger_mesh import logger
from storebot.misc import EnvKeys, TgConfig
from storebot.services.admin import AdminService
from storebot.services.catalog import Catalog, DeliveryKind
from storebot.services.confirmation import ConfirmationService
from storebot.services.errors import AlreadyResolved, InsufficientFunds, ShopError
from storebot.services.promo import PromoService
from storebot.services.purchase import PurchaseService
from storebot.services.session import PromoRedeemFlow, PurchaseFlow, SessionStore, TopUpFlow, TopUpStep
from storebot.services.topup import TopUpService
from storebot.utils import edit_or_answer, format_sum

DELIVERY_PROMPTS = {
    DeliveryKind.NUMERIC_UID: 'ask_uid',
    DeliveryKind.USERNAME: 'ask_username',
    DeliveryKind.NICKNAME: 'ask_nickname',
}


def _main_menu_text(users: UserStore, user_id: int, lang: str) -> str:
    account = users.get(user_id)
    return t(lang, 'main_menu', name=html.escape(account.first_name or account.display_name),
             balance=format_sum(account.balance))


def _insufficient_text(lang: str, err: InsufficientFunds) -> str:
    return t(lang, err.key, balance=format_sum(err.balance), price=format_sum(err.price),
             shortfall=format_sum(err.shortfall))


async def start(message: Message, users: UserStore, sessions: SessionStore, admin: AdminService):
    user = message.from_user
    users.upsert_profile(
        user.id,
        username=user.username,
        first_name=user.first_name,
        last_name=user.last_name,
        language_code=user.language_code,
    )
    sessions.clear(user.id)
    lang = get_lang(users, user.id)
    await message.answer(_main_menu_text(users, user.id, lang),
                         reply_markup=main_menu(lang, admin.is_admin(user.id)))


async def cancel_flow(message: Message, users: UserStore, sessions: SessionStore, admin: AdminService):
    user_id = message.from_user.id
    lang = get_lang(users, user_id)
    key = 'flow_cancelled' if sessions.clear(user_id) else 'nothing_to_cancel'
    await message.answer(t(lang, key), reply_markup=main_menu(lang, admin.is_admin(user_id)))


async def promo_command(message: Message, command: CommandObject, users: UserStore, promos: PromoService):
    user_id = message.from_user.id
    lang = get_lang(users, user_id)
    if not command.args:
        promos.start_redeem(user_id)
        await message.answer(t(lang, 'ask_promo_code'), reply_markup=back(lang))
        return
    await _redeem(message, command.args, users, promos, lang)


async def _redeem(message: Message, code: str, users: UserStore, promos: PromoService, lang: str):
    try:
        amount = promos.redeem(code, message.from_user.id)
    except ShopError as e:
        await answer_error(message, e, lang, reply_markup=back(lang))
        return
    balance = users.get(message.from_user.id).balance
    await message.answer(t(lang, 'promo_redeemed', amount=format_sum(amount), balance=format_sum(balance)),
                         reply_markup=back(lang))


async def menu_callback_handler(call: CallbackQuery, callback_data: MenuCallback, users: UserStore,
                                sessions: SessionStore, catalog: Catalog, ledger: OrderLedger,
                                topups: TopUpService, promos: PromoService, admin: AdminService):
    user_id = call.from_user.id
    lang = get_lang(users, user_id)
    section = callback_data.section

    if section == 'main':
        sessions.clear(user_id)
        await edit_or_answer(call, _main_menu_text(users, user_id, lang), main_menu(lang, admin.is_admin(user_id)))
    elif section == 'account':
        account = users.get(user_id)
        lines = [
            t(lang, 'order_line', order_id=order.id, item=order.item_label,
              price=format_sum(order.price), status=t(lang, f'status_{order.status}'))
            for order in ledger.user_orders(user_id, TgConfig.RECENT_ORDERS_LIMIT)
        ]
        await edit_or_answer(call, t(
            lang, 'account_info', user_id=user_id, balance=format_sum(account.balance),
            join_date=account.join_date or '-',
            orders='\n'.join(lines) or t(lang, 'no_orders'),
        ), back(lang))
    elif section in catalog.families:
        await edit_or_answer(call, t(lang, 'choose_item', title=catalog.family(section).title),
                             family_items(catalog, section, lang))
    elif section in FAMILY_GROUPS:
        await edit_or_answer(call, t(lang, f'menu_{section}'), family_group_menu(catalog, section, lang))
    elif section == 'topup':
        if not topups.cards:
            await call.answer(t(lang, 'topup_unavailable'), show_alert=True)
            return
        topups.start(user_id)
        await edit_or_answer(call, t(lang, 'ask_topup_amount', min=format_sum(TgConfig.MIN_TOPUP),
                                     max=format_sum(TgConfig.MAX_TOPUP)), back(lang))
    elif section == 'promo':
        promos.start_redeem(user_id)
        await edit_or_answer(call, t(lang, 'ask_promo_code'), back(lang))
    elif section == 'help':
        await edit_or_answer(call, t(lang, 'help_text', support=EnvKeys.SUPPORT_USERNAME), back(lang))
    else:
        logger.warning("Unknown menu section %r from %s", section, user_id)
    await call.answer()


async def buy_callback_handler(call: CallbackQuery, callback_data: BuyCallback, users: UserStore,
                               catalog: Catalog, purchases: PurchaseService):
    user_id = call.from_user.id
    lang = get_lang(users, user_id)
    try:
        flow = purchases.select_item(user_id, callback_data.family, callback_data.item_key)
    except InsufficientFunds as e:
        await call.answer()
        await edit_or_answer(call, _insufficient_text(lang, e), insufficient_funds_markup(lang))
        return
    except ShopError as e:
        await answer_error(call, e, lang)
        return
    prompt = DELIVERY_PROMPTS[catalog.family(flow.family).delivery_kind]
    await edit_or_answer(call, t(lang, 'item_selected', item=flow.item_label, price=format_sum(flow.price),
                                 prompt=t(lang, prompt)), back(lang, flow.family))
    await call.answer()


async def delivery_id_handler(message: Message, users: UserStore, purchases: PurchaseService):
    user_id = message.from_user.id
    lang = get_lang(users, user_id)
    try:
        order = await purchases.submit_delivery_id(user_id, message.text)
    except InsufficientFunds as e:
        await message.answer(_insufficient_text(lang, e), reply_markup=insufficient_funds_markup(lang))
        return
    except ShopError as e:
        await answer_error(message, e, lang)
        return
    await message.answer(
        t(lang, 'order_created', order_id=order.id, item=order.item_label,
          delivery_id=html.escape(order.delivery_id), price=format_sum(order.price)),
        reply_markup=cancel_order_markup(order.family, order.id, lang),
    )


async def cancel_order_handler(call: CallbackQuery, callback_data: CancelCallback, users: UserStore,
                               confirmations: ConfirmationService):
    user_id = call.from_user.id
    lang = get_lang(users, user_id)
    try:
        order = await confirmations.dispatch('cancel', callback_data.family, callback_data.id, user_id)
    except AlreadyResolved as e:
        await call.answer(t(lang, e.key, status=t(lang, f'status_{e.status}')), show_alert=True)
        return
    except ShopError as e:
        await answer_error(call, e, lang)
        return
    refund = t(lang, 'refund_line', price=format_sum(order.price)) if order.debits_at_create else ''
    await edit_or_answer(call, t(lang, 'order_cancelled_self', order_id=order.id, refund=refund), back(lang))
    await call.answer()


async def topup_amount_handler(message: Message, users: UserStore, sessions: SessionStore,
                               topups: TopUpService):
    user_id = message.from_user.id
    lang = get_lang(users, user_id)
    flow = sessions.get_as(user_id, TopUpFlow)
    if flow.step is not TopUpStep.AMOUNT:
        key = 'topup_choose_card' if flow.step is TopUpStep.CARD else 'topup_send_receipt'
        await message.answer(t(lang, key))
        return
    try:
        amount = topups.submit_amount(user_id, message.text)
    except ShopError as e:
        await answer_error(message, e, lang)
        return
    await message.answer(t(lang, 'topup_choose_card_for', amount=format_sum(amount)),
                         reply_markup=topup_cards(topups.cards, lang))


async def topup_card_handler(call: CallbackQuery, callback_data: TopUpCardCallback, users: UserStore,
                             sessions: SessionStore, topups: TopUpService):
    user_id = call.from_user.id
    lang = get_lang(users, user_id)
    try:
        number, owner = topups.choose_card(user_id, callback_data.card)
    except ShopError as e:
        await answer_error(call, e, lang)
        return
    flow = sessions.get_as(user_id, TopUpFlow)
    await edit_or_answer(call, t(lang, 'topup_payment_details', card=callback_data.card.upper(),
                                 number=number, owner=owner or '-', amount=format_sum(flow.amount)),
                         topup_paid(lang))
    await call.answer()


async def topup_paid_handler(call: CallbackQuery, users: UserStore, topups: TopUpService):
    user_id = call.from_user.id
    lang = get_lang(users, user_id)
    try:
        request = await topups.submit_payment(user_id)
    except ShopError as e:
        await answer_error(call, e, lang)
        return
    await edit_or_answer(call, t(lang, 'topup_submitted', request_id=request.id,
                                 amount=format_sum(request.amount)), back(lang))
    await call.answer()


async def receipt_photo_handler(message: Message, users: UserStore, topups: TopUpService):
    user_id = message.from_user.id
    lang = get_lang(users, user_id)
    try:
        request = await topups.submit_payment(user_id, receipt_file_id=message.photo[-1].file_id)
    except ShopError as e:
        await answer_error(message, e, lang)
        return
    await message.answer(t(lang, 'topup_submitted', request_id=request.id, amount=format_sum(request.amount)),
                         reply_markup=back(lang))


async def promo_code_handler(message: Message, users: UserStore, promos: PromoService):
    lang = get_lang(users, message.from_user.id)
    await _redeem(message, message.text, users, promos, lang)


async def subscription_checked(call: CallbackQuery, users: UserStore, admin: AdminService):
    user_id = call.from_user.id
    lang = get_lang(users, user_id)
    await call.answer(t(lang, 'subscription_ok'))
    await edit_or_answer(call, _main_menu_text(users, user_id, lang), main_menu(lang, admin.is_admin(user_id)))


async def fallback_text(message: Message, users: UserStore, admin: AdminService):
    user_id = message.from_user.id
    lang = get_lang(users, user_id)
    await message.answer(t(lang, 'use_menu'), reply_markup=main_menu(lang, admin.is_admin(user_id)))


def _topup_awaiting_payment(message: Message, sessions: SessionStore) -> bool:
    flow = sessions.get_as(message.from_user.id, TopUpFlow)
    return flow is not None and flow.step is TopUpStep.AWAIT_PAYMENT


def register_user_handlers(router: Router) -> None:
    router.message.register(start, CommandStart())
    router.message.register(cancel_flow, Command('cancel'))
    router.message.register(promo_command, Command('promo'))

    router.callback_query.register(menu_callback_handler, MenuCallback.filter())
    router.callback_query.register(buy_callback_handler, BuyCallback.filter())
    router.callback_query.register(cancel_order_handler, CancelCallback.filter())
    router.callback_query.register(topup_card_handler, TopUpCardCallback.filter())
    router.callback_query.register(topup_paid_handler, F.data == 'topup_paid')
    router.callback_query.register(subscription_checked, F.data == 'check_subscription')

    router.message.register(receipt_photo_handler, F.photo, _topup_awaiting_payment)
    router.message.register(delivery_id_handler, F.text, ActiveFlow(PurchaseFlow))
    router.message.register(topup_amount_handler, F.text, ActiveFlow(TopUpFlow))
    router.message.register(promo_code_handler, F.text, ActiveFlow(PromoRedeemFlow))
    router.message.register(fallback_text, F.text)
