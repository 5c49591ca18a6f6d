from aiogram import Router

from .main import register_user_handlers


def build_user_router() -> Router:
    router = Router(name='user')
    register_user_handlers(router)
    return router
