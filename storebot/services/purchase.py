from __future__ import annotations

import html
from typing import Iterable

from sqlalchemy.exc import SQLAlchemyError

from storebot.database import OrderLedger, UserStore
from storebot.database.models import DebitTiming, Order
from storebot.keyboards.inline import order_review_markup
from storebot.localization import t
from storebot.logger_mesh import logger
from storebot.misc import TgConfig
from storebot.services.catalog import Catalog
from storebot.services.errors import InsufficientFunds, PersistenceError, ValidationError
from storebot.services.session import PurchaseFlow, SessionStore
from storebot.utils import format_sum
from storebot.utils.notifications import Notifier


class PurchaseService:
    """Item selection, delivery-id capture and order creation for every family."""

    def __init__(self, users: UserStore, sessions: SessionStore, catalog: Catalog,
                 ledger: OrderLedger, notifier: Notifier, admin_ids: Iterable[int]):
        self.users = users
        self.sessions = sessions
        self.catalog = catalog
        self.ledger = ledger
        self.notifier = notifier
        self.admin_ids = tuple(admin_ids)

    def select_item(self, user_id: int, family_key: str, item_key: str) -> PurchaseFlow:
        price = self.catalog.price(family_key, item_key)
        balance = self.users.get(user_id).balance
        if balance < price:
            self.sessions.clear(user_id)
            raise InsufficientFunds(balance, price)
        flow = PurchaseFlow(
            family=family_key,
            item_key=item_key,
            item_label=self.catalog.label(family_key, item_key),
            price=price,
        )
        self.sessions.start(user_id, flow)
        return flow

    async def submit_delivery_id(self, user_id: int, text: str) -> Order:
        flow = self.sessions.get_as(user_id, PurchaseFlow)
        if flow is None:
            raise ValidationError('no_active_flow')
        delivery_id = self.catalog.validate_delivery_id(flow.family, text)
        timing = self.catalog.family(flow.family).debit_timing

        if timing is DebitTiming.AT_CREATE:
            balance = self.users.get(user_id).balance
            if balance < flow.price:
                self.sessions.clear(user_id)
                raise InsufficientFunds(balance, flow.price)
            self.users.adjust_balance(user_id, -flow.price)

        try:
            order = self.ledger.create_order(
                user_id=user_id,
                family=flow.family,
                item_key=flow.item_key,
                item_label=flow.item_label,
                delivery_id=delivery_id,
                price=flow.price,
                debit_timing=timing.value,
            )
        except SQLAlchemyError as e:
            self.ledger.database.session.rollback()
            if timing is DebitTiming.AT_CREATE:
                self.users.adjust_balance(user_id, flow.price)
            logger.error("Order for user %s could not be stored: %s", user_id, e)
            raise PersistenceError(str(e)) from e
        self.sessions.clear(user_id)

        logger.info("Order %s created: user=%s family=%s item=%s price=%s timing=%s",
                    order.id, user_id, order.family, order.item_key, order.price, order.debit_timing)
        await self._notify_admins(order)
        return order

    async def _notify_admins(self, order: Order) -> int:
        lang = TgConfig.DEFAULT_LANGUAGE
        account = self.users.get(order.user_id)
        text = t(
            lang, 'admin_new_order',
            order_id=order.id,
            user=html.escape(account.display_name),
            user_id=order.user_id,
            family=self.catalog.family(order.family).title,
            item=order.item_label,
            delivery_id=html.escape(order.delivery_id),
            price=format_sum(order.price),
            balance=format_sum(account.balance),
            timing=t(lang, f'timing_{order.debit_timing}'),
        )
        delivered = await self.notifier.fan_out(
            self.admin_ids, text, reply_markup=order_review_markup(order.family, order.id, lang)
        )
        if not delivered:
            logger.warning("Order %s reached no admin", order.id)
        return delivered
