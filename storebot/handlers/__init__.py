from aiogram import Dispatcher

from .admin import build_admin_router
from .user import build_user_router


def register_all_handlers(dp: Dispatcher) -> None:
    # admin flows must see text before the user fallback handler
    dp.include_router(build_admin_router())
    dp.include_router(build_user_router())
