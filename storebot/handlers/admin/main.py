import html

from aiogram import F, Router
from aiogram.filters import Command
from aiogram.types import CallbackQuery, Message

from storebot.database import OrderLedger, UserAccount, UserStore
from storebot.handlers.admin.orders import show_pending
from storebot.handlers.other import ActiveFlow, answer_error, get_lang
from storebot.keyboards import admin_back, admin_panel, admin_price_families, admin_price_items, user_actions
from storebot.keyboards.callbacks import (
    AdminCallback,
    AdminPriceCallback,
    AdminPriceFamilyCallback,
    UserActionCallback,
)
from storebot.localization import t
from storebot.services.admin import AdminService
from storebot.services.catalog import Catalog
from storebot.services.errors import AuthorizationError, ShopError
from storebot.services.promo import PromoService
from storebot.services.session import (
    AdminFieldEditFlow,
    BroadcastFlow,
    FindUserFlow,
    PromoCreationFlow,
    PromoCreationStep,
    SessionStore,
    UserMessageFlow,
)
from storebot.utils import edit_or_answer, format_sum
from storebot.utils.notifications import Notifier


def _user_card(lang: str, account: UserAccount) -> str:
    return t(
        lang, 'admin_user_card',
        user_id=account.id,
        name=html.escape(account.display_name),
        balance=format_sum(account.balance),
        join_date=account.join_date or '-',
        last_seen=account.last_seen or '-',
    )


def _stats_text(lang: str, stats: dict) -> str:
    top = '\n'.join(
        t(lang, 'admin_top_user', place=place, user_id=account.id, name=html.escape(account.display_name),
          balance=format_sum(account.balance))
        for place, account in enumerate(stats['top_users'], start=1)
    )
    orders = stats['orders']
    return t(
        lang, 'admin_stats',
        users=stats['users'],
        top=top or t(lang, 'no_data'),
        pending=orders['pending'],
        completed=orders['completed'],
        rejected=orders['rejected'],
        cancelled=orders['cancelled'],
        revenue=format_sum(stats['revenue']),
        topped_up=format_sum(stats['topped_up']),
        pending_topups=stats['pending_topups'],
    )


async def admin_command(message: Message, users: UserStore, admin: AdminService):
    user_id = message.from_user.id
    lang = get_lang(users, user_id)
    if not admin.is_admin(user_id):
        await answer_error(message, AuthorizationError(), lang)
        return
    await message.answer(t(lang, 'admin_panel', users=users.count()), reply_markup=admin_panel(lang))


async def admin_callback_handler(call: CallbackQuery, callback_data: AdminCallback, users: UserStore,
                                 sessions: SessionStore, admin: AdminService, promos: PromoService,
                                 catalog: Catalog, ledger: OrderLedger, notifier: Notifier):
    user_id = call.from_user.id
    lang = get_lang(users, user_id)
    action = callback_data.action
    try:
        admin.require_admin(user_id)
        if action == 'panel':
            sessions.clear(user_id)
            await edit_or_answer(call, t(lang, 'admin_panel', users=users.count()), admin_panel(lang))
        elif action == 'stats':
            await edit_or_answer(call, _stats_text(lang, admin.stats(user_id)), admin_back(lang))
        elif action == 'pending':
            await show_pending(call, lang, ledger, notifier)
        elif action == 'broadcast':
            admin.start_broadcast(user_id)
            await edit_or_answer(call, t(lang, 'ask_broadcast'), admin_back(lang))
        elif action == 'find':
            admin.start_find_user(user_id)
            await edit_or_answer(call, t(lang, 'ask_find_user'), admin_back(lang))
        elif action == 'prices':
            await edit_or_answer(call, t(lang, 'admin_choose_family'), admin_price_families(catalog, lang))
        elif action == 'promo_create':
            promos.start_creation(user_id)
            await edit_or_answer(call, t(lang, 'ask_promo_amount'), admin_back(lang))
        elif action == 'promo_list':
            lines = [
                t(lang, 'promo_line', code=promo.code, amount=format_sum(promo.amount),
                  uses_left=promo.uses_left, total=promo.total_uses,
                  expires=promo.expires_at or t(lang, 'never'))
                for promo in promos.list_active(user_id)
            ]
            await edit_or_answer(call, '\n'.join(lines) or t(lang, 'no_promos'), admin_back(lang))
        elif action == 'promo_clear':
            removed = promos.clear_all(user_id)
            await edit_or_answer(call, t(lang, 'promos_cleared', count=removed), admin_back(lang))
    except ShopError as e:
        await answer_error(call, e, lang)
        return
    await call.answer()


async def price_family_handler(call: CallbackQuery, callback_data: AdminPriceFamilyCallback,
                               users: UserStore, admin: AdminService, catalog: Catalog):
    user_id = call.from_user.id
    lang = get_lang(users, user_id)
    try:
        admin.require_admin(user_id)
        markup = admin_price_items(catalog, callback_data.family, lang)
    except ShopError as e:
        await answer_error(call, e, lang)
        return
    await edit_or_answer(call, t(lang, 'admin_choose_item', title=catalog.family(callback_data.family).title),
                         markup)
    await call.answer()


async def price_item_handler(call: CallbackQuery, callback_data: AdminPriceCallback,
                             users: UserStore, admin: AdminService, catalog: Catalog):
    user_id = call.from_user.id
    lang = get_lang(users, user_id)
    try:
        admin.start_price_edit(user_id, callback_data.family, callback_data.item_key)
    except ShopError as e:
        await answer_error(call, e, lang)
        return
    await edit_or_answer(call, t(
        lang, 'ask_new_price',
        item=catalog.label(callback_data.family, callback_data.item_key),
        price=format_sum(catalog.price(callback_data.family, callback_data.item_key)),
    ), admin_back(lang))
    await call.answer()


async def user_action_handler(call: CallbackQuery, callback_data: UserActionCallback,
                              users: UserStore, admin: AdminService):
    user_id = call.from_user.id
    lang = get_lang(users, user_id)
    target_id = callback_data.user_id
    try:
        if callback_data.action == 'message':
            admin.start_message_user(user_id, target_id)
            prompt = t(lang, 'ask_user_message', user_id=target_id)
        else:
            admin.start_balance_edit(user_id, target_id, 1 if callback_data.action == 'add' else -1)
            prompt = t(lang, f'ask_balance_{callback_data.action}', user_id=target_id)
    except ShopError as e:
        await answer_error(call, e, lang)
        return
    await call.message.answer(prompt, reply_markup=admin_back(lang))
    await call.answer()


async def broadcast_text_handler(message: Message, users: UserStore, admin: AdminService):
    user_id = message.from_user.id
    lang = get_lang(users, user_id)
    try:
        await message.answer(t(lang, 'broadcast_started', count=users.count()))
        delivered, failed = await admin.broadcast(user_id, message.html_text)
    except ShopError as e:
        await answer_error(message, e, lang)
        return
    await message.answer(t(lang, 'broadcast_done', delivered=delivered, failed=failed),
                         reply_markup=admin_back(lang))


async def find_user_text_handler(message: Message, users: UserStore, admin: AdminService):
    user_id = message.from_user.id
    lang = get_lang(users, user_id)
    try:
        account = admin.find_user(user_id, message.text)
    except ShopError as e:
        await answer_error(message, e, lang)
        return
    await message.answer(_user_card(lang, account), reply_markup=user_actions(account.id, lang))


async def user_message_text_handler(message: Message, users: UserStore, admin: AdminService):
    user_id = message.from_user.id
    lang = get_lang(users, user_id)
    try:
        sent = await admin.message_user(user_id, t(lang, 'admin_message_to_user', text=message.html_text))
    except ShopError as e:
        await answer_error(message, e, lang)
        return
    await message.answer(t(lang, 'user_message_sent' if sent else 'user_message_failed'),
                         reply_markup=admin_back(lang))


async def field_value_text_handler(message: Message, users: UserStore, admin: AdminService,
                                   catalog: Catalog):
    user_id = message.from_user.id
    lang = get_lang(users, user_id)
    try:
        flow, value = admin.submit_field_value(user_id, message.text)
    except ShopError as e:
        await answer_error(message, e, lang)
        return
    if flow.field == 'price':
        text = t(lang, 'price_updated', item=catalog.label(flow.family, flow.item_key), price=format_sum(value))
        markup = admin_back(lang)
    else:
        text = t(lang, 'balance_updated', user_id=flow.target_id, balance=format_sum(value))
        markup = user_actions(flow.target_id, lang)
    await message.answer(text, reply_markup=markup)


async def promo_creation_text_handler(message: Message, users: UserStore, sessions: SessionStore,
                                      promos: PromoService):
    user_id = message.from_user.id
    lang = get_lang(users, user_id)
    try:
        promo = promos.submit_creation_step(user_id, message.text)
    except ShopError as e:
        await answer_error(message, e, lang)
        return
    if promo is None:
        flow = sessions.get_as(user_id, PromoCreationFlow)
        key = 'ask_promo_uses' if flow.step is PromoCreationStep.USES else 'ask_promo_days'
        await message.answer(t(lang, key))
        return
    await message.answer(t(
        lang, 'promo_created', code=promo.code, amount=format_sum(promo.amount),
        uses=promo.total_uses, expires=promo.expires_at or t(lang, 'never'),
    ), reply_markup=admin_back(lang))


def register_admin_handlers(router: Router) -> None:
    router.message.register(admin_command, Command('admin'))

    router.callback_query.register(admin_callback_handler, AdminCallback.filter())
    router.callback_query.register(price_family_handler, AdminPriceFamilyCallback.filter())
    router.callback_query.register(price_item_handler, AdminPriceCallback.filter())
    router.callback_query.register(user_action_handler, UserActionCallback.filter())

    router.message.register(broadcast_text_handler, F.text, ActiveFlow(BroadcastFlow))
    router.message.register(find_user_text_handler, F.text, ActiveFlow(FindUserFlow))
    router.message.register(user_message_text_handler, F.text, ActiveFlow(UserMessageFlow))
    router.message.register(field_value_text_handler, F.text, ActiveFlow(AdminFieldEditFlow))
    router.message.register(promo_creation_text_handler, F.text, ActiveFlow(PromoCreationFlow))
