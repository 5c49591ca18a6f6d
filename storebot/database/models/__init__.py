from .main import (
    Database,
    DebitTiming,
    Order,
    OrderStatus,
    PriceOverride,
    PromoCode,
    PromoRedemption,
    TopUpRequest,
    register_models,
    timestamp,
)

__all__ = [
    'Database',
    'DebitTiming',
    'Order',
    'OrderStatus',
    'PriceOverride',
    'PromoCode',
    'PromoRedemption',
    'TopUpRequest',
    'register_models',
    'timestamp',
]
