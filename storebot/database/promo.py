from __future__ import annotations

import datetime

from storebot.database.main import Database
from storebot.database.models import PromoCode, PromoRedemption


class PromoRepository:
    """Promo codes and who redeemed them."""

    def __init__(self, database: Database):
        self.database = database

    def create(self, code: str, amount: int, uses: int, days: int,
               created_by: int | None = None) -> PromoCode:
        expires_at = None
        if days > 0:
            expires_at = (datetime.datetime.now() + datetime.timedelta(days=days)).strftime('%Y-%m-%d %H:%M:%S')
        session = self.database.session
        promo = PromoCode(code=code, amount=amount, total_uses=uses,
                          expires_at=expires_at, created_by=created_by)
        session.add(promo)
        session.commit()
        return promo

    def exists(self, code: str) -> bool:
        return self.get(code) is not None

    def get(self, code: str) -> PromoCode | None:
        return self.database.session.get(PromoCode, code.upper())

    def was_redeemed_by(self, code: str, user_id: int) -> bool:
        return self.database.session.query(PromoRedemption).filter(
            PromoRedemption.code == code.upper(), PromoRedemption.user_id == user_id
        ).first() is not None

    def redeem(self, code: str, user_id: int) -> bool:
        """Record the redemption and take one use; False when no use was left."""
        session = self.database.session
        code = code.upper()
        updated = session.query(PromoCode).filter(
            PromoCode.code == code, PromoCode.uses_left > 0
        ).update(values={PromoCode.uses_left: PromoCode.uses_left - 1},
                 synchronize_session=False)
        if updated != 1:
            session.rollback()
            return False
        session.add(PromoRedemption(code=code, user_id=user_id))
        session.commit()
        return True

    def list_active(self) -> list[PromoCode]:
        promos = self.database.session.query(PromoCode).filter(
            PromoCode.uses_left > 0
        ).order_by(PromoCode.created_at).all()
        return [promo for promo in promos if not promo.is_expired()]

    def clear_all(self) -> int:
        session = self.database.session
        promos = session.query(PromoCode).all()
        for promo in promos:
            session.delete(promo)
        session.commit()
        return len(promos)
