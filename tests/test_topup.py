import pytest

from storebot.database.models import OrderStatus
from storebot.services.errors import AlreadyResolved, AuthorizationError, ValidationError
from storebot.services.session import TopUpFlow, TopUpStep
from storebot.services.topup import parse_amount

from .conftest import ADMIN, ADMINS, CARDS, SECOND_ADMIN, USER


@pytest.mark.parametrize('text, expected', [('50000', 50000), ('50 000', 50000), ('1,000,000', 1000000)])
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


@pytest.mark.parametrize('text', ['', 'abc', '-500', '12.5', '5000²', '²', '５０００'])
def test_parse_amount_rejects_garbage(text):
    with pytest.raises(ValidationError) as exc:
        parse_amount(text)
    assert exc.value.key == 'invalid_amount'


def test_amount_out_of_range_keeps_the_step(funded, topups, sessions):
    funded(0)
    topups.start(USER)

    with pytest.raises(ValidationError) as exc:
        topups.submit_amount(USER, '10')

    assert exc.value.key == 'topup_amount_out_of_range'
    assert sessions.get_as(USER, TopUpFlow).step is TopUpStep.AMOUNT


def test_card_choice(funded, topups, sessions):
    funded(0)
    topups.start(USER)
    topups.submit_amount(USER, '50 000')

    with pytest.raises(ValidationError) as exc:
        topups.choose_card(USER, 'visa')
    assert exc.value.key == 'unknown_card'

    number, owner = topups.choose_card(USER, 'humo')
    assert number == CARDS['humo']
    assert owner == 'Card Owner'
    flow = sessions.get_as(USER, TopUpFlow)
    assert flow.step is TopUpStep.AWAIT_PAYMENT
    assert (flow.amount, flow.card) == (50000, 'humo')


async def test_payment_without_flow_is_refused(topups, ledger):
    with pytest.raises(ValidationError) as exc:
        await topups.submit_payment(USER)
    assert exc.value.key == 'no_active_flow'
    assert ledger.pending_topups(10) == []


async def _request(topups, amount='50000', receipt=None):
    topups.start(USER)
    topups.submit_amount(USER, amount)
    topups.choose_card(USER, 'uzcard')
    return await topups.submit_payment(USER, receipt)


async def test_payment_claim_reaches_every_admin(funded, topups, notifier, sessions):
    funded(0)

    request = await _request(topups)

    assert request.is_pending
    assert sessions.get(USER) is None
    for admin_id in ADMINS:
        (text,) = notifier.texts_for(admin_id)
        assert request.id in text
    _, _, markup = notifier.messages[0]
    callbacks = [button.callback_data for button in markup.inline_keyboard[0]]
    assert callbacks == [f'confirm:topup:{request.id}', f'reject:topup:{request.id}']


async def test_receipt_is_forwarded_as_photo(funded, topups, notifier):
    funded(0)

    request = await _request(topups, receipt='AgACAgIAAxkBAAIB')

    assert notifier.messages == []
    assert [chat_id for chat_id, *_ in notifier.photos] == list(ADMINS)
    assert request.receipt_file_id == 'AgACAgIAAxkBAAIB'


async def test_confirm_credits_once(funded, users, topups, confirmations, notifier):
    funded(1000)
    request = await _request(topups, '50000')

    await confirmations.dispatch('confirm', 'topup', request.id, ADMIN)
    with pytest.raises(AlreadyResolved):
        await confirmations.dispatch('confirm', 'topup', request.id, SECOND_ADMIN)

    assert users.get(USER).balance == 51000
    assert request.status == OrderStatus.COMPLETED.value
    assert len(notifier.texts_for(USER)) == 1


async def test_reject_leaves_balance(funded, users, topups, confirmations, ledger, notifier):
    funded(1000)
    request = await _request(topups, '50000')

    await confirmations.reject_topup(request.id, ADMIN)

    assert users.get(USER).balance == 1000
    assert ledger.get_topup(request.id).status == OrderStatus.REJECTED.value
    assert ledger.pending_topups(10) == []
    assert len(notifier.texts_for(USER)) == 1


async def test_only_admins_review_topups(funded, users, topups, confirmations, ledger):
    funded(0)
    request = await _request(topups)

    with pytest.raises(AuthorizationError):
        await confirmations.confirm_topup(request.id, USER)

    assert ledger.get_topup(request.id).is_pending
    assert users.get(USER).balance == 0


def test_superscript_amount_keeps_the_step(funded, topups, sessions):
    funded(0)
    topups.start(USER)

    with pytest.raises(ValidationError) as exc:
        topups.submit_amount(USER, '5000²')

    assert exc.value.key == 'invalid_amount'
    assert sessions.get_as(USER, TopUpFlow).step is TopUpStep.AMOUNT
