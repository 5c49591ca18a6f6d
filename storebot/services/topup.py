from __future__ import annotations

import html
from typing import Iterable

from storebot.database import OrderLedger, UserStore
from storebot.database.models import TopUpRequest
from storebot.keyboards.inline import topup_review_markup
from storebot.localization import t
from storebot.logger_mesh import logger
from storebot.misc import TgConfig
from storebot.services.errors import ValidationError
from storebot.services.session import SessionStore, TopUpFlow, TopUpStep
from storebot.utils import format_sum
from storebot.utils.notifications import Notifier


def parse_amount(text: str) -> int:
    cleaned = (text or '').strip().replace(' ', '').replace(',', '')
    # ascii only: isdigit() also accepts superscripts that int() rejects
    if not (cleaned.isascii() and cleaned.isdigit()):
        raise ValidationError('invalid_amount')
    return int(cleaned)


class TopUpService:
    """Manual card top-ups: amount, card choice, payment claim, admin review."""

    def __init__(self, users: UserStore, sessions: SessionStore, ledger: OrderLedger,
                 notifier: Notifier, admin_ids: Iterable[int], cards: dict[str, str],
                 card_owner: str = ''):
        self.users = users
        self.sessions = sessions
        self.ledger = ledger
        self.notifier = notifier
        self.admin_ids = tuple(admin_ids)
        self.cards = dict(cards)
        self.card_owner = card_owner

    def start(self, user_id: int) -> TopUpFlow:
        return self.sessions.start(user_id, TopUpFlow())

    def _flow(self, user_id: int, step: TopUpStep) -> TopUpFlow:
        flow = self.sessions.get_as(user_id, TopUpFlow)
        if flow is None or flow.step is not step:
            raise ValidationError('no_active_flow')
        return flow

    def submit_amount(self, user_id: int, text: str) -> int:
        flow = self._flow(user_id, TopUpStep.AMOUNT)
        amount = parse_amount(text)
        if not TgConfig.MIN_TOPUP <= amount <= TgConfig.MAX_TOPUP:
            raise ValidationError(
                'topup_amount_out_of_range',
                min=format_sum(TgConfig.MIN_TOPUP),
                max=format_sum(TgConfig.MAX_TOPUP),
            )
        flow.amount = amount
        flow.step = TopUpStep.CARD
        return amount

    def choose_card(self, user_id: int, card_key: str) -> tuple[str, str]:
        flow = self._flow(user_id, TopUpStep.CARD)
        number = self.cards.get(card_key)
        if not number:
            raise ValidationError('unknown_card')
        flow.card = card_key
        flow.step = TopUpStep.AWAIT_PAYMENT
        return number, self.card_owner

    async def submit_payment(self, user_id: int, receipt_file_id: str | None = None) -> TopUpRequest:
        flow = self._flow(user_id, TopUpStep.AWAIT_PAYMENT)
        request = self.ledger.create_topup(user_id, flow.amount, flow.card, receipt_file_id)
        self.sessions.clear(user_id)
        logger.info("Top-up request %s: user=%s amount=%s card=%s receipt=%s",
                    request.id, user_id, request.amount, request.card, bool(receipt_file_id))

        lang = TgConfig.DEFAULT_LANGUAGE
        account = self.users.get(user_id)
        text = t(
            lang, 'admin_new_topup',
            request_id=request.id,
            user=html.escape(account.display_name),
            user_id=user_id,
            amount=format_sum(request.amount),
            card=request.card.upper(),
            balance=format_sum(account.balance),
        )
        delivered = await self.notifier.fan_out(
            self.admin_ids, text,
            reply_markup=topup_review_markup(request.id, lang),
            photo=receipt_file_id,
        )
        if not delivered:
            logger.warning("Top-up request %s reached no admin", request.id)
        return request
