"""Error taxonomy shared by the services and the Telegram handlers.

Every error carries a localisation ``key`` and the keyword arguments needed
to render it, so handlers can answer with ``t(lang, err.key, **err.params)``
without knowing which service raised it.
"""

from __future__ import annotations


class ShopError(Exception):
    key = 'error_generic'

    def __init__(self, message: str = '', **params):
        super().__init__(message or self.key)
        self.params = params


class ValidationError(ShopError):
    key = 'error_validation'

    def __init__(self, key: str | None = None, message: str = '', **params):
        super().__init__(message, **params)
        if key:
            self.key = key


class InsufficientFunds(ShopError):
    key = 'insufficient_funds'

    def __init__(self, balance: int, price: int):
        super().__init__(
            f'balance {balance} < price {price}',
            balance=balance,
            price=price,
            shortfall=price - balance,
        )
        self.balance = balance
        self.price = price

    @property
    def shortfall(self) -> int:
        return self.price - self.balance


class InsufficientFundsAtConfirmation(InsufficientFunds):
    key = 'insufficient_funds_at_confirmation'


class NotFoundError(ShopError):
    key = 'error_not_found'


class UnknownItem(NotFoundError):
    key = 'unknown_item'


class OrderNotFound(NotFoundError):
    key = 'order_not_found'


class PromoNotFound(NotFoundError):
    key = 'promo_not_found'


class UserNotFound(NotFoundError):
    key = 'user_not_found'


class AlreadyResolved(ShopError):
    key = 'already_resolved'

    def __init__(self, status: str):
        super().__init__(f'already {status}', status=status)
        self.status = status


class AuthorizationError(ShopError):
    key = 'permission_denied'


class PromoAlreadyUsed(ShopError):
    key = 'promo_already_used'


class PromoExhausted(ShopError):
    key = 'promo_exhausted'


class PersistenceError(ShopError):
    key = 'error_generic'


class NotificationDeliveryError(ShopError):
    key = 'error_generic'
