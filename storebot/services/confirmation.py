"""Admin confirmation protocol for orders and top-up requests.

Each transition takes a per-entity lock, checks the status, writes the ledger
with a conditional update and adjusts the balance without suspending in
between. The affected user is notified afterwards; a failed notification
never undoes the transition.
"""

from __future__ import annotations

import asyncio
import contextlib
import html
from collections import Counter
from typing import Iterable

from storebot.database import OrderLedger, UserStore
from storebot.database.models import Order, OrderStatus, TopUpRequest
from storebot.keyboards.callbacks import TOPUP_FAMILY
from storebot.localization import t, user_language
from storebot.logger_mesh import logger
from storebot.misc import TgConfig
from storebot.services.errors import (
    AlreadyResolved,
    AuthorizationError,
    InsufficientFundsAtConfirmation,
    OrderNotFound,
    ValidationError,
)
from storebot.utils import format_sum
from storebot.utils.notifications import Notifier


class ConfirmationService:

    def __init__(self, users: UserStore, ledger: OrderLedger, notifier: Notifier,
                 admin_ids: Iterable[int]):
        self.users = users
        self.ledger = ledger
        self.notifier = notifier
        self.admin_ids = frozenset(admin_ids)
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: Counter[str] = Counter()
        self._actions = {
            ('confirm', 'order'): self.confirm_order,
            ('reject', 'order'): self.reject_order,
            ('cancel', 'order'): self.cancel_order,
            ('confirm', TOPUP_FAMILY): self.confirm_topup,
            ('reject', TOPUP_FAMILY): self.reject_topup,
        }

    def is_admin(self, user_id: int) -> bool:
        return user_id in self.admin_ids

    def _require_admin(self, user_id: int) -> None:
        if not self.is_admin(user_id):
            logger.warning("User %s tried an admin action without permission", user_id)
            raise AuthorizationError()

    @contextlib.asynccontextmanager
    async def _locked(self, key: str):
        """Serialise transitions of one entity.

        The lock stays registered while any tap holds or waits for it, so a
        late tap queues behind the others instead of getting a fresh lock.
        """
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        self._lock_users[key] += 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[key] -= 1
            if not self._lock_users[key]:
                del self._lock_users[key]
                self._locks.pop(key, None)

    async def dispatch(self, action: str, family: str, entity_id: str, actor_id: int):
        """Route a decoded review callback to its transition."""
        kind = TOPUP_FAMILY if family == TOPUP_FAMILY else 'order'
        handler = self._actions.get((action, kind))
        if handler is None:
            raise ValidationError('unknown_action')
        if kind == 'order':
            order = self.ledger.get_order(entity_id)
            if order is None or order.family != family:
                raise OrderNotFound(order_id=entity_id)
        return await handler(entity_id, actor_id)

    def _pending_order(self, order_id: str) -> Order:
        order = self.ledger.get_order(order_id)
        if order is None:
            raise OrderNotFound(order_id=order_id)
        if not order.is_pending:
            raise AlreadyResolved(order.status)
        return order

    def _pending_topup(self, request_id: str) -> TopUpRequest:
        request = self.ledger.get_topup(request_id)
        if request is None:
            raise OrderNotFound(order_id=request_id)
        if not request.is_pending:
            raise AlreadyResolved(request.status)
        return request

    # orders

    async def confirm_order(self, order_id: str, admin_id: int) -> Order:
        self._require_admin(admin_id)
        async with self._locked(order_id):
            order = self._pending_order(order_id)
            if not order.debits_at_create:
                balance = self.users.get(order.user_id).balance
                if balance < order.price:
                    logger.info("Order %s held: user %s has %s of %s",
                                order_id, order.user_id, balance, order.price)
                    raise InsufficientFundsAtConfirmation(balance, order.price)
            if not self.ledger.resolve_order(order_id, OrderStatus.COMPLETED, admin_id):
                raise AlreadyResolved(self.ledger.get_order(order_id).status)
            if not order.debits_at_create:
                self.users.adjust_balance(order.user_id, -order.price)

        logger.info("Order %s confirmed by %s", order_id, admin_id)
        lang = user_language(self.users.get(order.user_id))
        await self.notifier.send_message(order.user_id, t(
            lang, 'order_confirmed_user',
            order_id=order.id, item=order.item_label,
            delivery_id=html.escape(order.delivery_id), price=format_sum(order.price),
            balance=format_sum(self.users.get(order.user_id).balance),
        ))
        return order

    async def reject_order(self, order_id: str, admin_id: int, reason: str | None = None) -> Order:
        self._require_admin(admin_id)
        order = await self._close_order(order_id, OrderStatus.REJECTED, admin_id, reason)
        lang = user_language(self.users.get(order.user_id))
        await self.notifier.send_message(order.user_id, t(
            lang, 'order_rejected_user',
            order_id=order.id, item=order.item_label,
            reason=reason or t(lang, 'default_reject_reason'),
            refund=self._refund_line(lang, order),
        ))
        return order

    async def cancel_order(self, order_id: str, actor_id: int, reason: str | None = None) -> Order:
        order = self.ledger.get_order(order_id)
        if order is None:
            raise OrderNotFound(order_id=order_id)
        by_owner = order.user_id == actor_id
        if not by_owner:
            self._require_admin(actor_id)
        order = await self._close_order(order_id, OrderStatus.CANCELLED, actor_id, reason)

        if by_owner:
            await self.notifier.fan_out(self.admin_ids, t(
                TgConfig.DEFAULT_LANGUAGE, 'admin_order_cancelled',
                order_id=order.id, user_id=order.user_id,
            ))
        else:
            lang = user_language(self.users.get(order.user_id))
            await self.notifier.send_message(order.user_id, t(
                lang, 'order_cancelled_user',
                order_id=order.id, item=order.item_label,
                reason=reason or t(lang, 'default_reject_reason'),
                refund=self._refund_line(lang, order),
            ))
        return order

    async def _close_order(self, order_id: str, status: OrderStatus, actor_id: int,
                           reason: str | None) -> Order:
        async with self._locked(order_id):
            order = self._pending_order(order_id)
            if not self.ledger.resolve_order(order_id, status, actor_id, note=reason):
                raise AlreadyResolved(self.ledger.get_order(order_id).status)
            if order.debits_at_create:
                self.users.adjust_balance(order.user_id, order.price)
        logger.info("Order %s %s by %s", order_id, status.value, actor_id)
        return order

    @staticmethod
    def _refund_line(lang: str, order: Order) -> str:
        if order.debits_at_create:
            return t(lang, 'refund_line', price=format_sum(order.price))
        return ''

    # top-ups

    async def confirm_topup(self, request_id: str, admin_id: int) -> TopUpRequest:
        self._require_admin(admin_id)
        async with self._locked(request_id):
            request = self._pending_topup(request_id)
            if not self.ledger.resolve_topup(request_id, OrderStatus.COMPLETED, admin_id):
                raise AlreadyResolved(self.ledger.get_topup(request_id).status)
            balance = self.users.adjust_balance(request.user_id, request.amount)

        logger.info("Top-up %s of %s confirmed by %s", request_id, request.amount, admin_id)
        lang = user_language(self.users.get(request.user_id))
        await self.notifier.send_message(request.user_id, t(
            lang, 'topup_confirmed_user',
            amount=format_sum(request.amount), balance=format_sum(balance),
        ))
        return request

    async def reject_topup(self, request_id: str, admin_id: int) -> TopUpRequest:
        self._require_admin(admin_id)
        async with self._locked(request_id):
            request = self._pending_topup(request_id)
            if not self.ledger.resolve_topup(request_id, OrderStatus.REJECTED, admin_id):
                raise AlreadyResolved(self.ledger.get_topup(request_id).status)

        logger.info("Top-up %s rejected by %s", request_id, admin_id)
        lang = user_language(self.users.get(request.user_id))
        await self.notifier.send_message(request.user_id, t(
            lang, 'topup_rejected_user', amount=format_sum(request.amount),
        ))
        return request
