from abc import ABC
from typing import Final


class TgConfig(ABC):
    RATE_LIMIT: Final = {}
    RATE_LIMIT_WINDOW: Final = 3.0
    RATE_LIMIT_MAX_CALLS: Final = 12

    USERS_FLUSH_INTERVAL: Final = 60
    BROADCAST_DELAY: Final = 0.05

    MIN_TOPUP: Final = 1000
    MAX_TOPUP: Final = 50_000_000

    PROMO_CODE_LENGTH: Final = 8
    PROMO_MAX_USES: Final = 100_000
    PROMO_MAX_DAYS: Final = 365

    ORDER_ID_LENGTH: Final = 10
    PENDING_LIST_LIMIT: Final = 20
    RECENT_ORDERS_LIMIT: Final = 5
    TOP_USERS_LIMIT: Final = 5

    DEFAULT_LANGUAGE: Final = 'uz'
