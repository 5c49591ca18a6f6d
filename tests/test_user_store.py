import json

import pytest

from storebot.database import UserStore
from storebot.services.errors import InsufficientFunds


def test_get_returns_default_without_persisting(users):
    account = users.get(5)

    assert account.balance == 0
    assert not users.exists(5)
    assert users.count() == 0


def test_upsert_keeps_known_fields_when_incoming_is_empty(users):
    users.upsert_profile(7, username='alice', first_name='Alice')
    users.upsert_profile(7, username='', first_name='Alicia', last_name=None)

    account = users.get(7)
    assert account.username == 'alice'
    assert account.first_name == 'Alicia'
    assert account.join_date is not None
    assert account.last_seen is not None


def test_balance_survives_reload(users):
    users.upsert_profile(7, username='alice')
    users.adjust_balance(7, 25000)
    users.adjust_balance(7, -5000)

    reloaded = UserStore(users.path)
    reloaded.load()
    assert reloaded.get(7).balance == 20000
    assert reloaded.get(7).username == 'alice'


def test_adjust_balance_refuses_to_go_negative(users):
    users.adjust_balance(7, 1000)

    with pytest.raises(InsufficientFunds) as exc:
        users.adjust_balance(7, -1500)

    assert exc.value.shortfall == 500
    assert users.get(7).balance == 1000


def test_failed_debit_does_not_create_account(users):
    with pytest.raises(InsufficientFunds):
        users.adjust_balance(8, -1)
    assert not users.exists(8)


def test_file_layout(users):
    users.adjust_balance(7, 300)

    with open(users.path, encoding='utf-8') as f:
        data = json.load(f)
    assert data['7']['balance'] == 300
    assert data['7']['id'] == 7


def test_merge_keeps_users_only_on_disk(users):
    users.adjust_balance(7, 100)
    with open(users.path, encoding='utf-8') as f:
        data = json.load(f)
    data['9'] = {'balance': 900, 'username': 'bob'}
    data['7']['balance'] = 1
    with open(users.path, 'w', encoding='utf-8') as f:
        json.dump(data, f)

    assert users.merge_and_flush()

    assert users.get(9).balance == 900
    # memory wins for users the bot knows
    assert users.get(7).balance == 100
    with open(users.path, encoding='utf-8') as f:
        assert set(json.load(f)) == {'7', '9'}


def test_invalid_file_starts_empty(tmp_path):
    path = tmp_path / 'users.json'
    path.write_text('{not json', encoding='utf-8')

    store = UserStore(str(path))
    store.load()

    assert store.count() == 0


def test_flush_failure_is_reported_not_raised(tmp_path):
    store = UserStore(str(tmp_path / 'missing' / 'users.json'))

    store.upsert_profile(7, username='alice')

    assert store.exists(7)
    assert store.flush() is False


def test_find_by_id_and_username(users):
    users.upsert_profile(7, username='Alice')
    users.upsert_profile(8, username='bob')

    assert users.find('7').id == 7
    assert users.find('@alice').id == 7
    assert users.find('BOB').id == 8
    assert users.find('@nobody') is None
    assert users.find('') is None


def test_top_balances(users):
    for user_id, balance in ((1, 10), (2, 30), (3, 20)):
        users.adjust_balance(user_id, balance)

    assert [account.id for account in users.top_balances(2)] == [2, 3]
