import os
from abc import ABC
from typing import Final

from dotenv import load_dotenv

load_dotenv()


def _parse_ids(*raw_values: str | None) -> frozenset[int]:
    ids: set[int] = set()
    for raw in raw_values:
        if not raw:
            continue
        for chunk in raw.replace(';', ',').split(','):
            chunk = chunk.strip()
            if not chunk:
                continue
            try:
                ids.add(int(chunk))
            except ValueError:
                continue
    return frozenset(ids)


def _parse_list(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return ()
    return tuple(part.strip().lstrip('@') for part in raw.split(',') if part.strip())


class EnvKeys(ABC):
    TOKEN: Final = os.environ.get('TOKEN') or os.environ.get('BOT_TOKEN')
    ADMIN_IDS: Final = _parse_ids(
        os.environ.get('ADMIN_IDS'),
        os.environ.get('ADMIN_ID1'),
        os.environ.get('ADMIN_ID2'),
    )

    UZCARD_NUMBER: Final = os.environ.get('UZCARD_NUMBER')
    HUMO_NUMBER: Final = os.environ.get('HUMO_NUMBER')
    CARD_OWNER: Final = os.environ.get('CARD_OWNER', '')

    USERS_FILE: Final = os.environ.get('USERS_FILE', 'users.json')
    DATABASE_URL: Final = os.environ.get('DATABASE_URL', 'sqlite:///orders.db')

    REQUIRED_CHANNELS: Final = _parse_list(os.environ.get('REQUIRED_CHANNELS'))
    CREATE_TIME_DEBIT_FAMILIES: Final = _parse_list(os.environ.get('CREATE_TIME_DEBIT_FAMILIES'))
    SUPPORT_USERNAME: Final = os.environ.get('SUPPORT_USERNAME', 'admin')

    PORT: Final = int(os.environ.get('PORT', '3000'))

    @classmethod
    def require(cls) -> None:
        """Abort startup when the bot cannot run safely."""
        missing = []
        if not cls.TOKEN:
            missing.append('TOKEN')
        if not cls.ADMIN_IDS:
            missing.append('ADMIN_IDS')
        if missing:
            raise RuntimeError(f"Missing required environment variables: {', '.join(missing)}")

    @classmethod
    def payment_cards(cls) -> dict[str, str]:
        cards = {}
        if cls.UZCARD_NUMBER:
            cards['uzcard'] = cls.UZCARD_NUMBER
        if cls.HUMO_NUMBER:
            cards['humo'] = cls.HUMO_NUMBER
        return cards
