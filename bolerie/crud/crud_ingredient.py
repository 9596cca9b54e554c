# bolerie/crud/crud_ingredient.py

from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from .base import CRUDBase
from ..models import Ingredient, IngredientMovement, MovementType
from ..schemas import IngredientCreate, IngredientUpdate


class CRUDIngredient(CRUDBase[Ingredient, IngredientCreate, IngredientUpdate]):
    order_by = "name"

    def get_for_update(self, db: Session, id: int, *, branch_id: int) -> Optional[Ingredient]:
        """Lock pessimista na linha do ingrediente."""
        return self._query(db, branch_id).filter(Ingredient.id == id).with_for_update().first()

    def get_low_stock(self, db: Session, *, branch_id: int) -> List[Ingredient]:
        return self._query(db, branch_id).filter(
            Ingredient.quantity <= Ingredient.min_quantity
        ).order_by(Ingredient.name).all()

    def get_history(self, db: Session, *, ingredient_id: int) -> List[IngredientMovement]:
        return db.query(IngredientMovement).filter(
            IngredientMovement.ingredient_id == ingredient_id
        ).order_by(IngredientMovement.date, IngredientMovement.id).all()

    def add_movement(
        self, db: Session, *, ingredient: Ingredient, type: MovementType, quantity: Decimal, reason: str
    ) -> IngredientMovement:
        """Acrescenta um lançamento ao histórico. Não faz commit."""
        movement = IngredientMovement(
            ingredient_id=ingredient.id,
            type=type,
            quantity=quantity,
            reason=reason,
        )
        db.add(movement)
        return movement


ingredient = CRUDIngredient(Ingredient)
