"""Typed callback payloads, decoded once by aiogram before a handler runs."""

from aiogram.filters.callback_data import CallbackData


class ConfirmCallback(CallbackData, prefix='confirm'):
    family: str
    id: str


class RejectCallback(CallbackData, prefix='reject'):
    family: str
    id: str


class CancelCallback(CallbackData, prefix='cancel'):
    family: str
    id: str


class BuyCallback(CallbackData, prefix='buy'):
    family: str
    item_key: str


class MenuCallback(CallbackData, prefix='menu'):
    section: str


class TopUpCardCallback(CallbackData, prefix='topup_card'):
    card: str


class AdminCallback(CallbackData, prefix='admin'):
    action: str


class AdminPriceFamilyCallback(CallbackData, prefix='admin_pricef'):
    family: str


class AdminPriceCallback(CallbackData, prefix='admin_price'):
    family: str
    item_key: str


class UserActionCallback(CallbackData, prefix='user_act'):
    action: str
    user_id: int


# top-up requests travel through the review callbacks under this family name
TOPUP_FAMILY = 'topup'
