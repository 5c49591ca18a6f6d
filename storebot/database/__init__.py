from .main import Database
from .users import UserAccount, UserStore
from .ledger import OrderLedger
from .promo import PromoRepository

__all__ = [
    'Database',
    'UserAccount',
    'UserStore',
    'OrderLedger',
    'PromoRepository',
]
