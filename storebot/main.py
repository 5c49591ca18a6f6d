import asyncio
import contextlib

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode

from storebot.database import Database, OrderLedger, PromoRepository, UserStore
from storebot.database.models import register_models
from storebot.handlers import register_all_handlers
from storebot.logger_mesh import logger
from storebot.middlewares import ProfileRefreshMiddleware, SubscriptionMiddleware, ThrottlingMiddleware
from storebot.misc import EnvKeys, TgConfig
from storebot.services.admin import AdminService
from storebot.services.catalog import Catalog
from storebot.services.confirmation import ConfirmationService
from storebot.services.promo import PromoService
from storebot.services.purchase import PurchaseService
from storebot.services.session import SessionStore
from storebot.services.topup import TopUpService
from storebot.utils.notifications import Notifier


def build_dispatcher(bot: Bot, database: Database, users: UserStore) -> Dispatcher:
    """Wire stores and services into the dispatcher's workflow data."""
    admin_ids = EnvKeys.ADMIN_IDS
    sessions = SessionStore()
    notifier = Notifier(bot)
    ledger = OrderLedger(database)
    catalog = Catalog(database, create_time_families=EnvKeys.CREATE_TIME_DEBIT_FAMILIES)

    dp = Dispatcher()
    dp['database'] = database
    dp['users'] = users
    dp['sessions'] = sessions
    dp['catalog'] = catalog
    dp['ledger'] = ledger
    dp['notifier'] = notifier
    dp['purchases'] = PurchaseService(users, sessions, catalog, ledger, notifier, admin_ids)
    dp['confirmations'] = ConfirmationService(users, ledger, notifier, admin_ids)
    dp['topups'] = TopUpService(users, sessions, ledger, notifier, admin_ids,
                                EnvKeys.payment_cards(), EnvKeys.CARD_OWNER)
    dp['promos'] = PromoService(users, sessions, PromoRepository(database), admin_ids)
    dp['admin'] = AdminService(users, sessions, ledger, catalog, notifier, admin_ids)

    for observer in (dp.message, dp.callback_query):
        observer.outer_middleware(ThrottlingMiddleware())
        observer.outer_middleware(SubscriptionMiddleware(EnvKeys.REQUIRED_CHANNELS, admin_ids))
        observer.outer_middleware(ProfileRefreshMiddleware())
    register_all_handlers(dp)
    return dp


async def __on_start_up(bot: Bot, database: Database, users: UserStore, catalog: Catalog) -> None:
    register_models(database)
    overrides = catalog.load_overrides()
    users.load()
    me = await bot.get_me()
    logger.info("Bot @%s started: %s users, %s price overrides, admins %s",
                me.username, users.count(), overrides, sorted(EnvKeys.ADMIN_IDS))


async def __on_shutdown(users: UserStore, database: Database) -> None:
    if users.flush():
        logger.info("Users flushed on shutdown")
    database.dispose()


async def _run() -> None:
    EnvKeys.require()
    bot = Bot(token=EnvKeys.TOKEN, default=DefaultBotProperties(parse_mode=ParseMode.HTML))
    database = Database(EnvKeys.DATABASE_URL)
    users = UserStore(EnvKeys.USERS_FILE)
    dp = build_dispatcher(bot, database, users)
    dp.startup.register(__on_start_up)
    dp.shutdown.register(__on_shutdown)

    flusher = asyncio.create_task(users.run_periodic_flush(TgConfig.USERS_FLUSH_INTERVAL))
    try:
        await bot.delete_webhook(drop_pending_updates=True)
        await dp.start_polling(bot)
    finally:
        flusher.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await flusher
        await bot.session.close()


def start_bot():
    asyncio.run(_run())
