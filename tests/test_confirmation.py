import asyncio

import pytest

from storebot.database.models import OrderStatus
from storebot.services.errors import (
    AlreadyResolved,
    AuthorizationError,
    InsufficientFundsAtConfirmation,
    OrderNotFound,
    ValidationError,
)

from .conftest import ADMIN, OTHER_USER, SECOND_ADMIN, USER


async def _place_order(purchases, family='diamonds', item='100+80', delivery='123456789'):
    purchases.select_item(USER, family, item)
    return await purchases.submit_delivery_id(USER, delivery)


async def test_double_confirm_debits_once(funded, users, purchases, confirmations, notifier):
    funded(14000)
    order = await _place_order(purchases)

    await confirmations.confirm_order(order.id, ADMIN)
    with pytest.raises(AlreadyResolved) as exc:
        await confirmations.confirm_order(order.id, SECOND_ADMIN)

    assert exc.value.status == OrderStatus.COMPLETED.value
    assert users.get(USER).balance == 0
    assert len(notifier.texts_for(USER)) == 1


async def test_concurrent_confirmations_resolve_exactly_once(funded, users, purchases, confirmations):
    funded(14000)
    order = await _place_order(purchases)

    results = await asyncio.gather(
        confirmations.confirm_order(order.id, ADMIN),
        confirmations.confirm_order(order.id, SECOND_ADMIN),
        return_exceptions=True,
    )

    assert sum(isinstance(result, AlreadyResolved) for result in results) == 1
    assert users.get(USER).balance == 0


async def test_confirm_and_reject_race(funded, users, purchases, confirmations, ledger):
    funded(14000)
    order = await _place_order(purchases)

    results = await asyncio.gather(
        confirmations.reject_order(order.id, ADMIN),
        confirmations.confirm_order(order.id, SECOND_ADMIN),
        return_exceptions=True,
    )

    assert sum(isinstance(result, AlreadyResolved) for result in results) == 1
    assert ledger.get_order(order.id).status == OrderStatus.REJECTED.value
    assert users.get(USER).balance == 14000


async def test_insufficient_funds_at_confirmation_keeps_order_pending(funded, users, purchases,
                                                                       confirmations, ledger):
    funded(20000)
    order = await _place_order(purchases)
    users.adjust_balance(USER, -10000)

    with pytest.raises(InsufficientFundsAtConfirmation) as exc:
        await confirmations.confirm_order(order.id, ADMIN)

    assert exc.value.shortfall == 4000
    assert ledger.get_order(order.id).is_pending
    assert users.get(USER).balance == 10000

    users.adjust_balance(USER, 4000)
    await confirmations.confirm_order(order.id, ADMIN)
    assert users.get(USER).balance == 0


async def test_reject_without_debit_leaves_balance(funded, users, purchases, confirmations, notifier):
    funded(20000)
    order = await _place_order(purchases)

    await confirmations.reject_order(order.id, ADMIN, reason='wrong server')

    assert order.status == OrderStatus.REJECTED.value
    assert order.note == 'wrong server'
    assert users.get(USER).balance == 20000
    (text,) = notifier.texts_for(USER)
    assert 'wrong server' in text


async def test_reject_refunds_create_time_debit(funded, users, create_time_purchases, confirmations):
    funded(200000)
    order = await _place_order(create_time_purchases, 'premium', '3', 'durov')
    assert users.get(USER).balance == 25000

    await confirmations.reject_order(order.id, ADMIN)

    assert users.get(USER).balance == 200000


async def test_confirm_create_time_order_does_not_debit_again(funded, users, create_time_purchases,
                                                              confirmations):
    funded(200000)
    order = await _place_order(create_time_purchases, 'stars', '50', '@durov')

    await confirmations.confirm_order(order.id, ADMIN)

    assert users.get(USER).balance == 200000 - 13000


async def test_owner_can_cancel_and_admins_are_told(funded, users, create_time_purchases,
                                                    confirmations, notifier):
    funded(200000)
    order = await _place_order(create_time_purchases, 'premium', '3', 'durov')
    notifier.messages.clear()

    await confirmations.cancel_order(order.id, USER)

    assert order.status == OrderStatus.CANCELLED.value
    assert users.get(USER).balance == 200000
    assert len(notifier.texts_for(ADMIN)) == 1
    assert len(notifier.texts_for(SECOND_ADMIN)) == 1


async def test_stranger_cannot_cancel(funded, purchases, confirmations, ledger):
    funded(20000)
    order = await _place_order(purchases)

    with pytest.raises(AuthorizationError):
        await confirmations.cancel_order(order.id, OTHER_USER)
    assert ledger.get_order(order.id).is_pending


async def test_cancel_after_confirmation_is_refused(funded, users, purchases, confirmations):
    funded(20000)
    order = await _place_order(purchases)
    await confirmations.confirm_order(order.id, ADMIN)

    with pytest.raises(AlreadyResolved):
        await confirmations.cancel_order(order.id, USER)
    assert users.get(USER).balance == 6000


async def test_non_admin_cannot_confirm(funded, users, purchases, confirmations, ledger):
    funded(20000)
    order = await _place_order(purchases)

    with pytest.raises(AuthorizationError):
        await confirmations.confirm_order(order.id, USER)

    assert ledger.get_order(order.id).is_pending
    assert users.get(USER).balance == 20000


async def test_user_notification_failure_keeps_the_transition(funded, users, purchases, confirmations,
                                                              notifier, ledger):
    funded(20000)
    order = await _place_order(purchases)
    notifier.failing.add(USER)

    await confirmations.confirm_order(order.id, ADMIN)

    assert ledger.get_order(order.id).status == OrderStatus.COMPLETED.value
    assert users.get(USER).balance == 6000


async def test_dispatch_routes_by_action_and_family(funded, users, purchases, confirmations):
    funded(20000)
    order = await _place_order(purchases)

    with pytest.raises(OrderNotFound):
        await confirmations.dispatch('confirm', 'uc', order.id, ADMIN)
    with pytest.raises(OrderNotFound):
        await confirmations.dispatch('confirm', 'diamonds', 'NOPE', ADMIN)
    with pytest.raises(ValidationError):
        await confirmations.dispatch('cancel', 'topup', order.id, ADMIN)

    await confirmations.dispatch('confirm', 'diamonds', order.id, ADMIN)
    assert users.get(USER).balance == 6000


async def test_lock_stays_registered_for_queued_taps(confirmations):
    release = asyncio.Event()
    registered = []

    async def tap(hold=None):
        async with confirmations._locked('A1B2C3D4E5'):
            registered.append('A1B2C3D4E5' in confirmations._locks)
            if hold is not None:
                await hold.wait()

    first = asyncio.create_task(tap(release))
    await asyncio.sleep(0)
    second = asyncio.create_task(tap())
    await asyncio.sleep(0)
    release.set()
    await asyncio.gather(first, second)

    assert registered == [True, True]
    assert confirmations._locks == {}
    assert not confirmations._lock_users


async def test_three_taps_resolve_once_and_leave_no_locks(funded, users, purchases, confirmations):
    funded(14000)
    order = await _place_order(purchases)

    results = await asyncio.gather(
        confirmations.confirm_order(order.id, ADMIN),
        confirmations.confirm_order(order.id, SECOND_ADMIN),
        confirmations.reject_order(order.id, ADMIN),
        return_exceptions=True,
    )

    assert sum(isinstance(result, AlreadyResolved) for result in results) == 2
    assert users.get(USER).balance == 0
    assert confirmations._locks == {}
