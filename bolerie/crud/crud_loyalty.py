# bolerie/crud/crud_loyalty.py

from typing import List

from sqlalchemy.orm import Session

from .base import CRUDBase
from ..models import Customer, LoyaltyLevel, LoyaltyRedemption, LoyaltyReward
from ..schemas import (
    LoyaltyLevelCreate, LoyaltyLevelUpdate, LoyaltyRewardCreate, LoyaltyRewardUpdate
)


class CRUDLoyaltyLevel(CRUDBase[LoyaltyLevel, LoyaltyLevelCreate, LoyaltyLevelUpdate]):
    soft_delete_field = None
    order_by = "minimum_points"

    def remove(self, db: Session, *, db_obj: LoyaltyLevel) -> LoyaltyLevel:
        # Clientes do nível ficam sem nível (o SQLite não aplica o ON DELETE SET NULL)
        db.query(Customer).filter(Customer.loyalty_level_id == db_obj.id).update(
            {Customer.loyalty_level_id: None}, synchronize_session="fetch"
        )
        return super().remove(db, db_obj=db_obj)


class CRUDLoyaltyReward(CRUDBase[LoyaltyReward, LoyaltyRewardCreate, LoyaltyRewardUpdate]):
    soft_delete_field = None
    order_by = "points_required"

    def get_active(self, db: Session, *, branch_id: int) -> List[LoyaltyReward]:
        return self._query(db, branch_id).filter(
            LoyaltyReward.is_active.is_(True)
        ).order_by(LoyaltyReward.points_required).all()


# --- Resgates: apenas inserção ---

def create_redemption(
    db: Session, *, branch_id: int, customer_id: int, reward: LoyaltyReward
) -> LoyaltyRedemption:
    """Registra o resgate. Não faz commit."""
    redemption = LoyaltyRedemption(
        branch_id=branch_id,
        customer_id=customer_id,
        reward_id=reward.id,
        reward_name=reward.name,
        points_redeemed=reward.points_required,
    )
    db.add(redemption)
    return redemption


def get_redemptions_by_customer(db: Session, *, branch_id: int, customer_id: int) -> List[LoyaltyRedemption]:
    return db.query(LoyaltyRedemption).filter(
        LoyaltyRedemption.branch_id == branch_id,
        LoyaltyRedemption.customer_id == customer_id,
    ).order_by(LoyaltyRedemption.redeemed_at.desc(), LoyaltyRedemption.id.desc()).all()


def get_redemptions(db: Session, *, branch_id: int) -> List[LoyaltyRedemption]:
    return db.query(LoyaltyRedemption).filter(
        LoyaltyRedemption.branch_id == branch_id
    ).order_by(LoyaltyRedemption.redeemed_at.desc(), LoyaltyRedemption.id.desc()).all()


level = CRUDLoyaltyLevel(LoyaltyLevel)
reward = CRUDLoyaltyReward(LoyaltyReward)
