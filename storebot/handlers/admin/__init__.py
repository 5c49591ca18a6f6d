from aiogram import Router

from .main import register_admin_handlers
from .orders import register_order_handlers


def build_admin_router() -> Router:
    router = Router(name='admin')
    register_order_handlers(router)
    register_admin_handlers(router)
    return router
