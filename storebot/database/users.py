"""Durable ``users.json`` store: profile cache plus balance per Telegram user."""

from __future__ import annotations

import asyncio
import datetime
import json
import os
from dataclasses import asdict, dataclass, fields

from storebot.logger_mesh import logger
from storebot.services.errors import InsufficientFunds, PersistenceError

PROFILE_FIELDS = ('username', 'first_name', 'last_name', 'language_code')


def _now() -> str:
    return datetime.datetime.now().isoformat(timespec='seconds')


@dataclass
class UserAccount:
    id: int
    balance: int = 0
    username: str = ''
    first_name: str = ''
    last_name: str = ''
    language_code: str = ''
    join_date: str | None = None
    last_seen: str | None = None
    last_updated: str | None = None

    @classmethod
    def from_dict(cls, user_id: int, data: dict) -> 'UserAccount':
        known = {f.name for f in fields(cls)}
        values = {key: value for key, value in data.items() if key in known}
        values['id'] = int(user_id)
        try:
            values['balance'] = int(values.get('balance') or 0)
        except (TypeError, ValueError):
            values['balance'] = 0
        for key in PROFILE_FIELDS:
            values[key] = values.get(key) or ''
        return cls(**values)

    def to_dict(self) -> dict:
        return asdict(self)

    @property
    def display_name(self) -> str:
        if self.username:
            return f'@{self.username}'
        full_name = ' '.join(part for part in (self.first_name, self.last_name) if part)
        return full_name or str(self.id)


class UserStore:
    """In-memory user map mirrored to a single JSON object on disk.

    Memory is authoritative. Every mutation writes the whole file, and a
    periodic task re-reads the file and merges it with memory (memory wins per
    user id) so hand edits of users that the bot has not touched survive.
    """

    def __init__(self, path: str):
        self.path = path
        self._users: dict[int, UserAccount] = {}

    def load(self) -> None:
        self._users = {
            account.id: account for account in self._read_file().values()
        }
        logger.info("Loaded %s users from %s", len(self._users), self.path)

    def _read_file(self) -> dict[int, UserAccount]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, encoding='utf-8') as f:
                raw = json.load(f)
        except (OSError, ValueError) as e:
            logger.error("Cannot read users file %s: %s", self.path, e)
            return {}
        if not isinstance(raw, dict):
            logger.error("Users file %s does not hold a JSON object", self.path)
            return {}
        accounts: dict[int, UserAccount] = {}
        for key, data in raw.items():
            try:
                user_id = int(key)
            except (TypeError, ValueError):
                continue
            if isinstance(data, dict):
                accounts[user_id] = UserAccount.from_dict(user_id, data)
        return accounts

    def _write_file(self, accounts: dict[int, UserAccount]) -> bool:
        payload = {str(user_id): account.to_dict() for user_id, account in accounts.items()}
        tmp_path = f'{self.path}.tmp'
        try:
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(payload, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error("Users flush failed: %s", PersistenceError(str(e)))
            return False
        return True

    def flush(self) -> bool:
        return self._write_file(self._users)

    def merge_and_flush(self) -> bool:
        on_disk = self._read_file()
        merged = {**on_disk, **self._users}
        for user_id, account in on_disk.items():
            self._users.setdefault(user_id, account)
        return self._write_file(merged)

    async def run_periodic_flush(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            self.merge_and_flush()

    def exists(self, user_id: int) -> bool:
        return int(user_id) in self._users

    def get(self, user_id: int) -> UserAccount:
        account = self._users.get(int(user_id))
        if account is None:
            return UserAccount(id=int(user_id))
        return account

    def _ensure(self, user_id: int) -> UserAccount:
        user_id = int(user_id)
        account = self._users.get(user_id)
        if account is None:
            now = _now()
            account = UserAccount(id=user_id, join_date=now, last_updated=now)
            self._users[user_id] = account
        return account

    def upsert_profile(self, user_id: int, **profile) -> UserAccount:
        account = self._ensure(user_id)
        for key in PROFILE_FIELDS:
            value = profile.get(key)
            if value:
                setattr(account, key, str(value))
        now = _now()
        account.last_seen = now
        account.last_updated = now
        self.flush()
        return account

    def adjust_balance(self, user_id: int, delta: int) -> int:
        balance = self.get(user_id).balance
        new_balance = balance + int(delta)
        if new_balance < 0:
            raise InsufficientFunds(balance, -int(delta))
        account = self._ensure(user_id)
        account.balance = new_balance
        account.last_updated = _now()
        self.flush()
        return new_balance

    def count(self) -> int:
        return len(self._users)

    def all_ids(self) -> list[int]:
        return list(self._users)

    def top_balances(self, limit: int) -> list[UserAccount]:
        ranked = sorted(self._users.values(), key=lambda account: account.balance, reverse=True)
        return ranked[:limit]

    def find(self, query: str) -> UserAccount | None:
        query = (query or '').strip()
        if not query:
            return None
        if query.lstrip('-').isdigit():
            return self._users.get(int(query))
        username = query.lstrip('@').lower()
        for account in self._users.values():
            if account.username and account.username.lower() == username:
                return account
        return None
