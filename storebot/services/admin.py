"""Admin panel operations that are not part of order review."""

from __future__ import annotations

from typing import Iterable

from storebot.database import OrderLedger, UserAccount, UserStore
from storebot.logger_mesh import logger
from storebot.misc import TgConfig
from storebot.services.catalog import Catalog
from storebot.services.errors import AuthorizationError, UserNotFound, ValidationError
from storebot.services.session import (
    AdminFieldEditFlow,
    BroadcastFlow,
    FindUserFlow,
    SessionStore,
    UserMessageFlow,
)
from storebot.services.topup import parse_amount
from storebot.utils.notifications import Notifier


class AdminService:

    def __init__(self, users: UserStore, sessions: SessionStore, ledger: OrderLedger,
                 catalog: Catalog, notifier: Notifier, admin_ids: Iterable[int]):
        self.users = users
        self.sessions = sessions
        self.ledger = ledger
        self.catalog = catalog
        self.notifier = notifier
        self.admin_ids = frozenset(admin_ids)

    def is_admin(self, user_id: int) -> bool:
        return user_id in self.admin_ids

    def require_admin(self, user_id: int) -> None:
        if not self.is_admin(user_id):
            logger.warning("User %s tried to open the admin panel", user_id)
            raise AuthorizationError()

    def stats(self, admin_id: int) -> dict:
        self.require_admin(admin_id)
        stats = self.ledger.stats()
        stats['users'] = self.users.count()
        stats['top_users'] = self.users.top_balances(TgConfig.TOP_USERS_LIMIT)
        return stats

    # broadcast

    def start_broadcast(self, admin_id: int) -> BroadcastFlow:
        self.require_admin(admin_id)
        return self.sessions.start(admin_id, BroadcastFlow())

    async def broadcast(self, admin_id: int, text: str) -> tuple[int, int]:
        self.require_admin(admin_id)
        self.sessions.clear(admin_id)
        recipients = self.users.all_ids()
        delivered = await self.notifier.fan_out(recipients, text, delay=TgConfig.BROADCAST_DELAY)
        failed = len(recipients) - delivered
        logger.info("Broadcast by %s: %s delivered, %s failed", admin_id, delivered, failed)
        return delivered, failed

    # users

    def start_find_user(self, admin_id: int) -> FindUserFlow:
        self.require_admin(admin_id)
        return self.sessions.start(admin_id, FindUserFlow())

    def find_user(self, admin_id: int, query: str) -> UserAccount:
        self.require_admin(admin_id)
        account = self.users.find(query)
        if account is None:
            raise UserNotFound(query=query)
        self.sessions.clear(admin_id)
        return account

    def get_user(self, admin_id: int, user_id: int) -> UserAccount:
        self.require_admin(admin_id)
        if not self.users.exists(user_id):
            raise UserNotFound(query=user_id)
        return self.users.get(user_id)

    def start_message_user(self, admin_id: int, target_id: int) -> UserMessageFlow:
        self.get_user(admin_id, target_id)
        return self.sessions.start(admin_id, UserMessageFlow(target_id=target_id))

    async def message_user(self, admin_id: int, text: str) -> bool:
        self.require_admin(admin_id)
        flow = self.sessions.get_as(admin_id, UserMessageFlow)
        if flow is None:
            raise ValidationError('no_active_flow')
        self.sessions.clear(admin_id)
        return await self.notifier.send_message(flow.target_id, text)

    def start_balance_edit(self, admin_id: int, target_id: int, sign: int) -> AdminFieldEditFlow:
        self.get_user(admin_id, target_id)
        return self.sessions.start(
            admin_id, AdminFieldEditFlow(field='balance', target_id=target_id, sign=1 if sign >= 0 else -1)
        )

    def start_price_edit(self, admin_id: int, family: str, item_key: str) -> AdminFieldEditFlow:
        self.require_admin(admin_id)
        self.catalog.price(family, item_key)
        return self.sessions.start(admin_id, AdminFieldEditFlow(field='price', family=family, item_key=item_key))

    def submit_field_value(self, admin_id: int, text: str) -> tuple[AdminFieldEditFlow, int]:
        """Apply the pending price or balance edit; returns the flow and the new value."""
        self.require_admin(admin_id)
        flow = self.sessions.get_as(admin_id, AdminFieldEditFlow)
        if flow is None:
            raise ValidationError('no_active_flow')
        value = parse_amount(text)
        if value <= 0:
            raise ValidationError('invalid_amount')

        if flow.field == 'price':
            self.catalog.set_price(flow.family, flow.item_key, value, updated_by=admin_id)
            logger.info("Admin %s set price %s/%s to %s", admin_id, flow.family, flow.item_key, value)
            result = value
        else:
            result = self.users.adjust_balance(flow.target_id, flow.sign * value)
            logger.info("Admin %s changed balance of %s by %s, now %s",
                        admin_id, flow.target_id, flow.sign * value, result)
        self.sessions.clear(admin_id)
        return flow, result
