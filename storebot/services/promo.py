from __future__ import annotations

import secrets
import string
from typing import Iterable

from storebot.database import PromoRepository, UserStore
from storebot.database.models import PromoCode
from storebot.logger_mesh import logger
from storebot.misc import TgConfig
from storebot.services.errors import (
    AuthorizationError,
    PromoAlreadyUsed,
    PromoExhausted,
    PromoNotFound,
    ValidationError,
)
from storebot.services.session import PromoCreationFlow, PromoCreationStep, PromoRedeemFlow, SessionStore
from storebot.services.topup import parse_amount

CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_code(length: int = TgConfig.PROMO_CODE_LENGTH) -> str:
    return ''.join(secrets.choice(CODE_ALPHABET) for _ in range(length))


class PromoService:

    def __init__(self, users: UserStore, sessions: SessionStore, repository: PromoRepository,
                 admin_ids: Iterable[int]):
        self.users = users
        self.sessions = sessions
        self.repository = repository
        self.admin_ids = frozenset(admin_ids)

    def _require_admin(self, user_id: int) -> None:
        if user_id not in self.admin_ids:
            raise AuthorizationError()

    # redemption

    def start_redeem(self, user_id: int) -> PromoRedeemFlow:
        return self.sessions.start(user_id, PromoRedeemFlow())

    def redeem(self, code: str, user_id: int) -> int:
        """Credit the promo amount to ``user_id`` and return it."""
        code = (code or '').strip().upper()
        self.sessions.clear(user_id)
        promo = self.repository.get(code) if code else None
        if promo is None:
            raise PromoNotFound(code=code)
        if self.repository.was_redeemed_by(code, user_id):
            raise PromoAlreadyUsed(code=code)
        if promo.exhausted or promo.is_expired():
            raise PromoExhausted(code=code)
        amount = promo.amount
        if not self.repository.redeem(code, user_id):
            raise PromoExhausted(code=code)
        balance = self.users.adjust_balance(user_id, amount)
        logger.info("Promo %s redeemed by %s: +%s, balance %s", code, user_id, amount, balance)
        return amount

    # creation wizard

    def start_creation(self, admin_id: int) -> PromoCreationFlow:
        self._require_admin(admin_id)
        return self.sessions.start(admin_id, PromoCreationFlow())

    def submit_creation_step(self, admin_id: int, text: str) -> PromoCode | None:
        """Advance the wizard; returns the created code after the last step."""
        self._require_admin(admin_id)
        flow = self.sessions.get_as(admin_id, PromoCreationFlow)
        if flow is None:
            raise ValidationError('no_active_flow')
        value = parse_amount(text)

        if flow.step is PromoCreationStep.AMOUNT:
            if value <= 0:
                raise ValidationError('invalid_amount')
            flow.amount = value
            flow.step = PromoCreationStep.USES
            return None
        if flow.step is PromoCreationStep.USES:
            if not 1 <= value <= TgConfig.PROMO_MAX_USES:
                raise ValidationError('promo_invalid_uses', max=TgConfig.PROMO_MAX_USES)
            flow.uses = value
            flow.step = PromoCreationStep.DAYS
            return None

        if value > TgConfig.PROMO_MAX_DAYS:
            raise ValidationError('promo_invalid_days', max=TgConfig.PROMO_MAX_DAYS)
        code = generate_code()
        while self.repository.exists(code):
            code = generate_code()
        promo = self.repository.create(code, flow.amount, flow.uses, value, created_by=admin_id)
        self.sessions.clear(admin_id)
        logger.info("Promo %s created by %s: amount=%s uses=%s days=%s",
                    code, admin_id, flow.amount, flow.uses, value)
        return promo

    def list_active(self, admin_id: int) -> list[PromoCode]:
        self._require_admin(admin_id)
        return self.repository.list_active()

    def clear_all(self, admin_id: int) -> int:
        self._require_admin(admin_id)
        removed = self.repository.clear_all()
        logger.info("Admin %s cleared %s promo codes", admin_id, removed)
        return removed
