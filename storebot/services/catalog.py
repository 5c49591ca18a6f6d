"""Product families, their price tables and delivery-id rules."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from storebot.constants.catalog import FAMILY_TABLES
from storebot.database.main import Database
from storebot.database.models import DebitTiming, PriceOverride, timestamp
from storebot.services.errors import UnknownItem, ValidationError

NUMERIC_UID_RE = re.compile(r'^[0-9]{5,20}$')
USERNAME_RE = re.compile(r'^[A-Za-z0-9_]{3,32}$')
NICKNAME_MAX_LENGTH = 64


class DeliveryKind(str, Enum):
    NUMERIC_UID = 'numeric_uid'
    USERNAME = 'username'
    NICKNAME = 'nickname'


@dataclass(frozen=True)
class ProductFamily:
    key: str
    title: str
    label_format: str
    delivery_kind: DeliveryKind
    debit_timing: DebitTiming = DebitTiming.AT_CONFIRM

    def label(self, item_key: str) -> str:
        return self.label_format.format(item_key)


FAMILIES: tuple[ProductFamily, ...] = (
    ProductFamily('diamonds', '💎 Free Fire Diamonds', '{} 💎', DeliveryKind.NUMERIC_UID),
    ProductFamily('uc', '🎮 PUBG UC', '{} UC', DeliveryKind.NUMERIC_UID),
    ProductFamily('pp', '🎮 PUBG PP', '{} PP', DeliveryKind.NUMERIC_UID),
    ProductFamily('premium', '👑 Telegram Premium', 'Telegram Premium {}m', DeliveryKind.USERNAME),
    ProductFamily('stars', '⭐ Telegram Stars', '{} ⭐', DeliveryKind.USERNAME),
    ProductFamily('garden', '🌱 Grow a Garden', '🌱 {}', DeliveryKind.NICKNAME),
    ProductFamily('gst', '🌱 Grow a Garden GST', 'GST {}', DeliveryKind.NICKNAME),
    ProductFamily('robux', '🟥 Robux', '{} Robux', DeliveryKind.NICKNAME),
)


def validate_delivery_id(kind: DeliveryKind, text: str) -> str:
    """Return the normalised delivery id or raise ``ValidationError``."""
    value = (text or '').strip()
    if kind is DeliveryKind.NUMERIC_UID:
        if not NUMERIC_UID_RE.match(value):
            raise ValidationError('invalid_uid')
        return value
    if kind is DeliveryKind.USERNAME:
        username = value[1:] if value.startswith('@') else value
        if not USERNAME_RE.match(username):
            raise ValidationError('invalid_username')
        return f'@{username}'
    if not 2 <= len(value) <= NICKNAME_MAX_LENGTH:
        raise ValidationError('invalid_nickname')
    return value


class Catalog:
    """Static price tables with admin overrides stored in the database on top."""

    def __init__(self, database: Database, create_time_families=(),
                 families: tuple[ProductFamily, ...] = FAMILIES,
                 tables: dict[str, dict[str, int]] | None = None):
        self.database = database
        self.tables = {key: dict(table) for key, table in (tables or FAMILY_TABLES).items()}
        create_time = set(create_time_families)
        self.families: dict[str, ProductFamily] = {}
        for family in families:
            if family.key in create_time:
                family = ProductFamily(family.key, family.title, family.label_format,
                                       family.delivery_kind, DebitTiming.AT_CREATE)
            self.families[family.key] = family

    def load_overrides(self) -> int:
        rows = self.database.session.query(PriceOverride).all()
        applied = 0
        for row in rows:
            table = self.tables.get(row.family)
            if table is not None and row.item_key in table:
                table[row.item_key] = row.price
                applied += 1
        return applied

    def family(self, key: str) -> ProductFamily:
        family = self.families.get(key)
        if family is None:
            raise UnknownItem(family=key)
        return family

    def items(self, family_key: str) -> dict[str, int]:
        self.family(family_key)
        return dict(self.tables.get(family_key, {}))

    def price(self, family_key: str, item_key: str) -> int:
        table = self.items(family_key)
        if item_key not in table:
            raise UnknownItem(family=family_key, item=item_key)
        return table[item_key]

    def label(self, family_key: str, item_key: str) -> str:
        return self.family(family_key).label(item_key)

    def set_price(self, family_key: str, item_key: str, price: int, updated_by: int | None = None) -> None:
        self.price(family_key, item_key)
        if price <= 0:
            raise ValidationError('invalid_price')
        session = self.database.session
        row = session.query(PriceOverride).filter(
            PriceOverride.family == family_key, PriceOverride.item_key == item_key
        ).first()
        if row is None:
            session.add(PriceOverride(family=family_key, item_key=item_key,
                                      price=price, updated_by=updated_by))
        else:
            row.price = price
            row.updated_by = updated_by
            row.updated_at = timestamp()
        session.commit()
        self.tables[family_key][item_key] = price

    def validate_delivery_id(self, family_key: str, text: str) -> str:
        return validate_delivery_id(self.family(family_key).delivery_kind, text)
