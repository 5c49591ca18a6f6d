import datetime
from enum import Enum

from sqlalchemy import (
    Column,
    Integer,
    String,
    BigInteger,
    ForeignKey,
    VARCHAR,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from storebot.database.main import Database


def timestamp() -> str:
    return datetime.datetime.now().strftime('%Y-%m-%d %H:%M:%S')


class OrderStatus(str, Enum):
    PENDING = 'pending'
    COMPLETED = 'completed'
    REJECTED = 'rejected'
    CANCELLED = 'cancelled'


class DebitTiming(str, Enum):
    AT_CREATE = 'at_create'
    AT_CONFIRM = 'at_confirm'


class Order(Database.BASE):
    __tablename__ = 'orders'
    id = Column(String(32), primary_key=True, unique=True)
    user_id = Column(BigInteger, nullable=False, index=True)
    family = Column(String(16), nullable=False)
    item_key = Column(String(64), nullable=False)
    item_label = Column(String(128), nullable=False)
    delivery_id = Column(String(128), nullable=False)
    price = Column(BigInteger, nullable=False)
    debit_timing = Column(String(16), nullable=False, default=DebitTiming.AT_CONFIRM.value)
    status = Column(String(16), nullable=False, default=OrderStatus.PENDING.value, index=True)
    created_at = Column(VARCHAR, nullable=False)
    resolved_at = Column(VARCHAR, nullable=True)
    resolved_by = Column(BigInteger, nullable=True)
    note = Column(String(255), nullable=True)

    def __init__(self, id: str, user_id: int, family: str, item_key: str, item_label: str,
                 delivery_id: str, price: int, debit_timing: str = DebitTiming.AT_CONFIRM.value,
                 created_at: str | None = None):
        self.id = id
        self.user_id = user_id
        self.family = family
        self.item_key = item_key
        self.item_label = item_label
        self.delivery_id = delivery_id
        self.price = price
        self.debit_timing = debit_timing
        self.status = OrderStatus.PENDING.value
        self.created_at = created_at or timestamp()

    @property
    def is_pending(self) -> bool:
        return self.status == OrderStatus.PENDING.value

    @property
    def debits_at_create(self) -> bool:
        return self.debit_timing == DebitTiming.AT_CREATE.value

    def __repr__(self):
        return '<Order %r %s>' % (self.id, self.status)


class TopUpRequest(Database.BASE):
    __tablename__ = 'topups'
    id = Column(String(32), primary_key=True, unique=True)
    user_id = Column(BigInteger, nullable=False, index=True)
    amount = Column(BigInteger, nullable=False)
    card = Column(String(16), nullable=False)
    receipt_file_id = Column(String(255), nullable=True)
    status = Column(String(16), nullable=False, default=OrderStatus.PENDING.value, index=True)
    created_at = Column(VARCHAR, nullable=False)
    resolved_at = Column(VARCHAR, nullable=True)
    resolved_by = Column(BigInteger, nullable=True)

    def __init__(self, id: str, user_id: int, amount: int, card: str,
                 receipt_file_id: str | None = None, created_at: str | None = None):
        self.id = id
        self.user_id = user_id
        self.amount = amount
        self.card = card
        self.receipt_file_id = receipt_file_id
        self.status = OrderStatus.PENDING.value
        self.created_at = created_at or timestamp()

    @property
    def is_pending(self) -> bool:
        return self.status == OrderStatus.PENDING.value


class PromoCode(Database.BASE):
    __tablename__ = 'promo_codes'
    code = Column(String(32), primary_key=True, unique=True)
    amount = Column(BigInteger, nullable=False)
    uses_left = Column(Integer, nullable=False)
    total_uses = Column(Integer, nullable=False)
    expires_at = Column(VARCHAR, nullable=True)
    created_at = Column(VARCHAR, nullable=False)
    created_by = Column(BigInteger, nullable=True)
    redemptions = relationship('PromoRedemption', back_populates='promo',
                               cascade='all, delete-orphan')

    def __init__(self, code: str, amount: int, total_uses: int, expires_at: str | None = None,
                 created_by: int | None = None, created_at: str | None = None):
        self.code = code
        self.amount = amount
        self.total_uses = total_uses
        self.uses_left = total_uses
        self.expires_at = expires_at
        self.created_by = created_by
        self.created_at = created_at or timestamp()

    def is_expired(self, now: datetime.datetime | None = None) -> bool:
        if not self.expires_at:
            return False
        now = now or datetime.datetime.now()
        return datetime.datetime.strptime(self.expires_at, '%Y-%m-%d %H:%M:%S') < now

    @property
    def exhausted(self) -> bool:
        return self.uses_left <= 0


class PromoRedemption(Database.BASE):
    __tablename__ = 'promo_redemptions'
    __table_args__ = (
        UniqueConstraint('code', 'user_id', name='uq_promo_redemption_user'),
    )
    id = Column(Integer, primary_key=True)
    code = Column(String(32), ForeignKey('promo_codes.code', ondelete='CASCADE'), nullable=False)
    user_id = Column(BigInteger, nullable=False)
    redeemed_at = Column(VARCHAR, nullable=False)
    promo = relationship('PromoCode', back_populates='redemptions')

    def __init__(self, code: str, user_id: int, redeemed_at: str | None = None):
        self.code = code
        self.user_id = user_id
        self.redeemed_at = redeemed_at or timestamp()


class PriceOverride(Database.BASE):
    __tablename__ = 'price_overrides'
    __table_args__ = (
        UniqueConstraint('family', 'item_key', name='uq_price_override_item'),
    )
    id = Column(Integer, primary_key=True)
    family = Column(String(16), nullable=False)
    item_key = Column(String(64), nullable=False)
    price = Column(BigInteger, nullable=False)
    updated_at = Column(VARCHAR, nullable=False)
    updated_by = Column(BigInteger, nullable=True)

    def __init__(self, family: str, item_key: str, price: int, updated_by: int | None = None):
        self.family = family
        self.item_key = item_key
        self.price = price
        self.updated_by = updated_by
        self.updated_at = timestamp()


def register_models(database: Database) -> None:
    database.create_all()
