"""Per-user conversation state.

Every user has a single slot holding at most one active flow. Starting a flow
replaces whatever was there; the slot lives in memory only and is empty after
a restart.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Type, TypeVar, Union


class PurchaseStep(str, Enum):
    AWAIT_DELIVERY_ID = 'await_delivery_id'


class TopUpStep(str, Enum):
    AMOUNT = 'amount'
    CARD = 'card'
    AWAIT_PAYMENT = 'await_payment'


class PromoCreationStep(str, Enum):
    AMOUNT = 'amount'
    USES = 'uses'
    DAYS = 'days'


@dataclass
class PurchaseFlow:
    family: str
    item_key: str
    item_label: str
    price: int
    step: PurchaseStep = PurchaseStep.AWAIT_DELIVERY_ID


@dataclass
class TopUpFlow:
    step: TopUpStep = TopUpStep.AMOUNT
    amount: int | None = None
    card: str | None = None


@dataclass
class PromoCreationFlow:
    step: PromoCreationStep = PromoCreationStep.AMOUNT
    amount: int | None = None
    uses: int | None = None


@dataclass
class PromoRedeemFlow:
    pass


@dataclass
class BroadcastFlow:
    pass


@dataclass
class AdminFieldEditFlow:
    field: str  # 'price' or 'balance'
    family: str | None = None
    item_key: str | None = None
    target_id: int | None = None
    sign: int = 1


@dataclass
class FindUserFlow:
    pass


@dataclass
class UserMessageFlow:
    target_id: int


Flow = Union[
    PurchaseFlow,
    TopUpFlow,
    PromoCreationFlow,
    PromoRedeemFlow,
    BroadcastFlow,
    AdminFieldEditFlow,
    FindUserFlow,
    UserMessageFlow,
]

F = TypeVar('F')


class SessionStore:

    def __init__(self):
        self._flows: dict[int, Flow] = {}

    def get(self, user_id: int) -> Optional[Flow]:
        return self._flows.get(user_id)

    def get_as(self, user_id: int, flow_type: Type[F]) -> Optional[F]:
        flow = self._flows.get(user_id)
        if isinstance(flow, flow_type):
            return flow
        return None

    def start(self, user_id: int, flow: Flow) -> Flow:
        self._flows[user_id] = flow
        return flow

    def clear(self, user_id: int) -> Optional[Flow]:
        return self._flows.pop(user_id, None)

    def active(self, user_id: int) -> bool:
        return user_id in self._flows
