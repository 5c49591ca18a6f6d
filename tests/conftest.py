import pytest

from storebot.database import Database, OrderLedger, PromoRepository, UserStore
from storebot.database.models import register_models
from storebot.services.admin import AdminService
from storebot.services.catalog import Catalog
from storebot.services.confirmation import ConfirmationService
from storebot.services.promo import PromoService
from storebot.services.purchase import PurchaseService
from storebot.services.session import SessionStore
from storebot.services.topup import TopUpService

ADMIN = 1000
SECOND_ADMIN = 1001
ADMINS = (ADMIN, SECOND_ADMIN)
USER = 42
OTHER_USER = 43

CARDS = {'uzcard': '8600 1234 5678 9012', 'humo': '9860 1234 5678 9012'}


class FakeNotifier:
    """Records outbound messages; chats listed in ``failing`` never receive anything."""

    def __init__(self):
        self.messages = []
        self.photos = []
        self.failing = set()

    async def send_message(self, chat_id, text, reply_markup=None):
        if chat_id in self.failing:
            return False
        self.messages.append((chat_id, text, reply_markup))
        return True

    async def send_photo(self, chat_id, photo, caption, reply_markup=None):
        if chat_id in self.failing:
            return False
        self.photos.append((chat_id, photo, caption, reply_markup))
        return True

    async def fan_out(self, chat_ids, text, reply_markup=None, photo=None, delay=0):
        delivered = 0
        for chat_id in chat_ids:
            if photo:
                ok = await self.send_photo(chat_id, photo, text, reply_markup=reply_markup)
            else:
                ok = await self.send_message(chat_id, text, reply_markup=reply_markup)
            delivered += int(ok)
        return delivered

    def texts_for(self, chat_id):
        return [text for target, text, _ in self.messages if target == chat_id]


@pytest.fixture
def database():
    db = Database('sqlite://')
    register_models(db)
    yield db
    db.dispose()


@pytest.fixture
def users(tmp_path):
    store = UserStore(str(tmp_path / 'users.json'))
    store.load()
    return store


@pytest.fixture
def sessions():
    return SessionStore()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def ledger(database):
    return OrderLedger(database)


@pytest.fixture
def catalog(database):
    return Catalog(database)


@pytest.fixture
def purchases(users, sessions, catalog, ledger, notifier):
    return PurchaseService(users, sessions, catalog, ledger, notifier, ADMINS)


@pytest.fixture
def create_time_purchases(database, users, sessions, ledger, notifier):
    catalog = Catalog(database, create_time_families=('premium', 'stars'))
    return PurchaseService(users, sessions, catalog, ledger, notifier, ADMINS)


@pytest.fixture
def confirmations(users, ledger, notifier):
    return ConfirmationService(users, ledger, notifier, ADMINS)


@pytest.fixture
def topups(users, sessions, ledger, notifier):
    return TopUpService(users, sessions, ledger, notifier, ADMINS, CARDS, 'Card Owner')


@pytest.fixture
def promo_repository(database):
    return PromoRepository(database)


@pytest.fixture
def promos(users, sessions, promo_repository):
    return PromoService(users, sessions, promo_repository, ADMINS)


@pytest.fixture
def admin_service(users, sessions, ledger, catalog, notifier):
    return AdminService(users, sessions, ledger, catalog, notifier, ADMINS)


@pytest.fixture
def funded(users):
    """Give ``USER`` a starting balance."""
    def fund(amount, user_id=USER):
        users.upsert_profile(user_id, username=f'user{user_id}', first_name='Test')
        if amount:
            users.adjust_balance(user_id, amount)
        return users.get(user_id)
    return fund
