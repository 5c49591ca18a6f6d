"""Order ledger: every purchase attempt and top-up request with its resolution."""

from __future__ import annotations

import uuid

from sqlalchemy import func

from storebot.database.main import Database
from storebot.database.models import Order, OrderStatus, TopUpRequest, timestamp
from storebot.misc import TgConfig


class OrderLedger:

    def __init__(self, database: Database):
        self.database = database

    @staticmethod
    def _new_id() -> str:
        return uuid.uuid4().hex[:TgConfig.ORDER_ID_LENGTH].upper()

    def _unique_id(self, model) -> str:
        session = self.database.session
        while True:
            candidate = self._new_id()
            if session.get(model, candidate) is None:
                return candidate

    # orders

    def create_order(self, user_id: int, family: str, item_key: str, item_label: str,
                     delivery_id: str, price: int, debit_timing: str) -> Order:
        session = self.database.session
        order = Order(
            id=self._unique_id(Order),
            user_id=user_id,
            family=family,
            item_key=item_key,
            item_label=item_label,
            delivery_id=delivery_id,
            price=price,
            debit_timing=debit_timing,
        )
        session.add(order)
        session.commit()
        return order

    def get_order(self, order_id: str) -> Order | None:
        return self.database.session.get(Order, order_id)

    def resolve_order(self, order_id: str, status: OrderStatus, resolved_by: int,
                      note: str | None = None) -> bool:
        """Move a pending order to ``status``; False when it was no longer pending."""
        session = self.database.session
        updated = session.query(Order).filter(
            Order.id == order_id, Order.status == OrderStatus.PENDING.value
        ).update(
            values={
                Order.status: status.value,
                Order.resolved_at: timestamp(),
                Order.resolved_by: resolved_by,
                Order.note: note,
            },
            synchronize_session=False,
        )
        session.commit()
        return updated == 1

    def pending_orders(self, limit: int) -> list[Order]:
        return (
            self.database.session.query(Order)
            .filter(Order.status == OrderStatus.PENDING.value)
            .order_by(Order.created_at)
            .limit(limit)
            .all()
        )

    def user_orders(self, user_id: int, limit: int) -> list[Order]:
        return (
            self.database.session.query(Order)
            .filter(Order.user_id == user_id)
            .order_by(Order.created_at.desc())
            .limit(limit)
            .all()
        )

    # top-ups

    def create_topup(self, user_id: int, amount: int, card: str,
                     receipt_file_id: str | None = None) -> TopUpRequest:
        session = self.database.session
        request = TopUpRequest(
            id=self._unique_id(TopUpRequest),
            user_id=user_id,
            amount=amount,
            card=card,
            receipt_file_id=receipt_file_id,
        )
        session.add(request)
        session.commit()
        return request

    def get_topup(self, request_id: str) -> TopUpRequest | None:
        return self.database.session.get(TopUpRequest, request_id)

    def resolve_topup(self, request_id: str, status: OrderStatus, resolved_by: int) -> bool:
        session = self.database.session
        updated = session.query(TopUpRequest).filter(
            TopUpRequest.id == request_id, TopUpRequest.status == OrderStatus.PENDING.value
        ).update(
            values={
                TopUpRequest.status: status.value,
                TopUpRequest.resolved_at: timestamp(),
                TopUpRequest.resolved_by: resolved_by,
            },
            synchronize_session=False,
        )
        session.commit()
        return updated == 1

    def pending_topups(self, limit: int) -> list[TopUpRequest]:
        return (
            self.database.session.query(TopUpRequest)
            .filter(TopUpRequest.status == OrderStatus.PENDING.value)
            .order_by(TopUpRequest.created_at)
            .limit(limit)
            .all()
        )

    # statistics

    def stats(self) -> dict:
        session = self.database.session
        counts = {status.value: 0 for status in OrderStatus}
        for status, count in session.query(Order.status, func.count(Order.id)).group_by(Order.status):
            counts[status] = count
        revenue = session.query(func.coalesce(func.sum(Order.price), 0)).filter(
            Order.status == OrderStatus.COMPLETED.value
        ).scalar()
        topped_up = session.query(func.coalesce(func.sum(TopUpRequest.amount), 0)).filter(
            TopUpRequest.status == OrderStatus.COMPLETED.value
        ).scalar()
        pending_topups = session.query(func.count(TopUpRequest.id)).filter(
            TopUpRequest.status == OrderStatus.PENDING.value
        ).scalar()
        return {
            'orders': counts,
            'revenue': int(revenue or 0),
            'topped_up': int(topped_up or 0),
            'pending_topups': int(pending_topups or 0),
        }
