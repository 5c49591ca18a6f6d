from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

from storebot.keyboards.callbacks import (
    TOPUP_FAMILY,
    AdminCallback,
    AdminPriceCallback,
    AdminPriceFamilyCallback,
    BuyCallback,
    CancelCallback,
    ConfirmCallback,
    MenuCallback,
    RejectCallback,
    TopUpCardCallback,
    UserActionCallback,
)
from storebot.localization import t

# sections grouping several product families under one menu
FAMILY_GROUPS = {
    'pubg': ('uc', 'pp'),
    'telegram': ('premium', 'stars'),
    'garden_menu': ('garden', 'gst'),
}
FAMILY_PARENT = {family: group for group, families in FAMILY_GROUPS.items() for family in families}


def _button(text: str, callback_data) -> InlineKeyboardButton:
    if not isinstance(callback_data, str):
        callback_data = callback_data.pack()
    return InlineKeyboardButton(text=text, callback_data=callback_data)


def _menu(section: str) -> str:
    return MenuCallback(section=section).pack()


def main_menu(lang: str, is_admin: bool = False) -> InlineKeyboardMarkup:
    inline_keyboard = [
        [_button(t(lang, 'btn_account'), _menu('account'))],
        [_button(t(lang, 'btn_freefire'), _menu('diamonds'))],
        [_button(t(lang, 'btn_pubg'), _menu('pubg'))],
        [_button(t(lang, 'btn_telegram'), _menu('telegram'))],
        [
            _button(t(lang, 'btn_garden'), _menu('garden_menu')),
            _button(t(lang, 'btn_robux'), _menu('robux')),
        ],
        [
            _button(t(lang, 'btn_topup'), _menu('topup')),
            _button(t(lang, 'btn_promo'), _menu('promo')),
        ],
        [_button(t(lang, 'btn_help'), _menu('help'))],
    ]
    if is_admin:
        inline_keyboard.append([_button(t(lang, 'btn_admin_panel'), AdminCallback(action='panel'))])
    return InlineKeyboardMarkup(inline_keyboard=inline_keyboard)


def back(lang: str, section: str = 'main') -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[[_button(t(lang, 'btn_back'), _menu(section))]])


def family_group_menu(catalog, group: str, lang: str) -> InlineKeyboardMarkup:
    inline_keyboard = [
        [_button(catalog.family(family).title, _menu(family))] for family in FAMILY_GROUPS[group]
    ]
    inline_keyboard.append([_button(t(lang, 'btn_back'), _menu('main'))])
    return InlineKeyboardMarkup(inline_keyboard=inline_keyboard)


def family_items(catalog, family: str, lang: str) -> InlineKeyboardMarkup:
    buttons = [
        _button(f'{catalog.label(family, item_key)} - {price:,} so\'m'.replace(',', ' '),
                BuyCallback(family=family, item_key=item_key))
        for item_key, price in catalog.items(family).items()
    ]
    inline_keyboard = [buttons[i:i + 2] for i in range(0, len(buttons), 2)]
    inline_keyboard.append([_button(t(lang, 'btn_back'), _menu(FAMILY_PARENT.get(family, 'main')))])
    return InlineKeyboardMarkup(inline_keyboard=inline_keyboard)


def insufficient_funds_markup(lang: str) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[
        [_button(t(lang, 'btn_topup'), _menu('topup'))],
        [_button(t(lang, 'btn_back'), _menu('main'))],
    ])


def order_review_markup(family: str, order_id: str, lang: str) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[[
        _button(t(lang, 'btn_confirm'), ConfirmCallback(family=family, id=order_id)),
        _button(t(lang, 'btn_reject'), RejectCallback(family=family, id=order_id)),
    ]])


def topup_review_markup(request_id: str, lang: str) -> InlineKeyboardMarkup:
    return order_review_markup(TOPUP_FAMILY, request_id, lang)


def cancel_order_markup(family: str, order_id: str, lang: str) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[
        [_button(t(lang, 'btn_cancel_order'), CancelCallback(family=family, id=order_id))],
        [_button(t(lang, 'btn_main_menu'), _menu('main'))],
    ])


def topup_cards(cards: dict, lang: str) -> InlineKeyboardMarkup:
    inline_keyboard = [
        [_button(f'💳 {card.upper()}', TopUpCardCallback(card=card))] for card in cards
    ]
    inline_keyboard.append([_button(t(lang, 'btn_back'), _menu('main'))])
    return InlineKeyboardMarkup(inline_keyboard=inline_keyboard)


def topup_paid(lang: str) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[
        [_button(t(lang, 'btn_paid'), 'topup_paid')],
        [_button(t(lang, 'btn_back'), _menu('main'))],
    ])


def subscription_markup(channels, lang: str) -> InlineKeyboardMarkup:
    inline_keyboard = [
        [InlineKeyboardButton(text=f'📢 @{channel}', url=f'https://t.me/{channel}')] for channel in channels
    ]
    inline_keyboard.append([_button(t(lang, 'btn_check_subscription'), 'check_subscription')])
    return InlineKeyboardMarkup(inline_keyboard=inline_keyboard)


def admin_panel(lang: str) -> InlineKeyboardMarkup:
    def admin(action: str) -> str:
        return AdminCallback(action=action).pack()

    return InlineKeyboardMarkup(inline_keyboard=[
        [_button(t(lang, 'btn_admin_stats'), admin('stats'))],
        [_button(t(lang, 'btn_admin_pending'), admin('pending'))],
        [_button(t(lang, 'btn_admin_broadcast'), admin('broadcast'))],
        [_button(t(lang, 'btn_admin_find_user'), admin('find'))],
        [_button(t(lang, 'btn_admin_prices'), admin('prices'))],
        [
            _button(t(lang, 'btn_admin_promo_create'), admin('promo_create')),
            _button(t(lang, 'btn_admin_promo_list'), admin('promo_list')),
        ],
        [_button(t(lang, 'btn_admin_promo_clear'), admin('promo_clear'))],
        [_button(t(lang, 'btn_main_menu'), _menu('main'))],
    ])


def admin_back(lang: str) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[
        [_button(t(lang, 'btn_back'), AdminCallback(action='panel'))],
    ])


def admin_price_families(catalog, lang: str) -> InlineKeyboardMarkup:
    inline_keyboard = [
        [_button(family.title, AdminPriceFamilyCallback(family=key))]
        for key, family in catalog.families.items()
    ]
    inline_keyboard.append([_button(t(lang, 'btn_back'), AdminCallback(action='panel'))])
    return InlineKeyboardMarkup(inline_keyboard=inline_keyboard)


def admin_price_items(catalog, family: str, lang: str) -> InlineKeyboardMarkup:
    inline_keyboard = [
        [_button(f'{catalog.label(family, item_key)} - {price:,}'.replace(',', ' '),
                 AdminPriceCallback(family=family, item_key=item_key))]
        for item_key, price in catalog.items(family).items()
    ]
    inline_keyboard.append([_button(t(lang, 'btn_back'), AdminCallback(action='prices'))])
    return InlineKeyboardMarkup(inline_keyboard=inline_keyboard)


def user_actions(user_id: int, lang: str) -> InlineKeyboardMarkup:
    def action(name: str) -> str:
        return UserActionCallback(action=name, user_id=user_id).pack()

    return InlineKeyboardMarkup(inline_keyboard=[
        [_button(t(lang, 'btn_user_message'), action('message'))],
        [
            _button(t(lang, 'btn_user_add_balance'), action('add')),
            _button(t(lang, 'btn_user_sub_balance'), action('sub')),
        ],
        [_button(t(lang, 'btn_back'), AdminCallback(action='panel'))],
    ])