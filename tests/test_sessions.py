import pytest

from storebot.services.errors import ValidationError
from storebot.services.session import (
    BroadcastFlow,
    PurchaseFlow,
    SessionStore,
    TopUpFlow,
    TopUpStep,
)

from .conftest import USER


def test_start_replaces_previous_flow():
    sessions = SessionStore()
    sessions.start(USER, PurchaseFlow(family='diamonds', item_key='100+80', item_label='100+80 💎', price=14000))
    sessions.start(USER, TopUpFlow())

    assert isinstance(sessions.get(USER), TopUpFlow)
    assert sessions.get_as(USER, PurchaseFlow) is None
    assert sessions.get_as(USER, TopUpFlow).step is TopUpStep.AMOUNT


def test_clear_returns_the_dropped_flow():
    sessions = SessionStore()
    flow = sessions.start(USER, BroadcastFlow())

    assert sessions.active(USER)
    assert sessions.clear(USER) is flow
    assert not sessions.active(USER)
    assert sessions.clear(USER) is None


async def test_topup_cancels_pending_purchase_flow(funded, purchases, topups, sessions):
    funded(20000)
    purchases.select_item(USER, 'diamonds', '100+80')

    topups.start(USER)

    with pytest.raises(ValidationError) as exc:
        await purchases.submit_delivery_id(USER, '123456789')
    assert exc.value.key == 'no_active_flow'
    assert isinstance(sessions.get(USER), TopUpFlow)


async def test_new_purchase_replaces_old_one(funded, purchases, ledger):
    funded(100000)
    purchases.select_item(USER, 'diamonds', '100+80')
    purchases.select_item(USER, 'uc', '60')

    order = await purchases.submit_delivery_id(USER, '5123456789')

    assert order.family == 'uc'
    assert len(ledger.pending_orders(10)) == 1
