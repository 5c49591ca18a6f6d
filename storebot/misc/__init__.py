from .config import TgConfig
from .env import EnvKeys

__all__ = ['TgConfig', 'EnvKeys']
