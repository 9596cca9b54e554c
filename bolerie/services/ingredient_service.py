# bolerie/services/ingredient_service.py

import logging
from decimal import Decimal
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import models, schemas, crud
from ..models import MovementType
from .result import ServiceResult

logger = logging.getLogger(__name__)


class LedgerError(RuntimeError):
    """Erro inesperado ao gravar um lançamento no estoque de ingredientes."""
    pass


class IngredientService:
    """
    Livro-razão do estoque de ingredientes: a quantidade só muda junto com
    um lançamento no histórico, na mesma transação.
    """

    def __init__(self, db: Session):
        self.db = db

    def create(self, *, branch_id: int, data: schemas.IngredientCreate) -> models.Ingredient:
        ingredient = models.Ingredient(branch_id=branch_id, **data.model_dump())
        try:
            self.db.add(ingredient)
            self.db.flush()
            if ingredient.quantity and Decimal(str(ingredient.quantity)) > 0:
                crud.ingredient.add_movement(
                    self.db,
                    ingredient=ingredient,
                    type=MovementType.ENTRADA,
                    quantity=Decimal(str(ingredient.quantity)),
                    reason="Entrada inicial",
                )
            self.db.commit()
            self.db.refresh(ingredient)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Erro ao cadastrar o ingrediente '{data.name}': {e}", exc_info=True)
            raise LedgerError(f"An unexpected error occurred while creating the ingredient: {e}")
        return ingredient

    def adjust_quantity(
        self, *, ingredient_id: int, branch_id: int, delta: Decimal, reason: str = ""
    ) -> ServiceResult[models.Ingredient]:
        delta = Decimal(str(delta))
        if delta == 0:
            return ServiceResult.invalid("Adjustment must be different from zero.")

        ingredient = crud.ingredient.get_for_update(self.db, ingredient_id, branch_id=branch_id)
        if not ingredient:
            return ServiceResult.not_found("Ingredient not found")

        current = Decimal(str(ingredient.quantity))
        new_quantity = current + delta
        if new_quantity < 0:
            logger.warning(
                f"Saída recusada para '{ingredient.name}': estoque {current}, ajuste {delta}."
            )
            # Libera o lock sem gravar nada
            self.db.rollback()
            return ServiceResult.constraint(
                f"Insufficient quantity for '{ingredient.name}'. Available: {current}, requested: {-delta}"
            )

        is_entry = delta > 0
        try:
            ingredient.quantity = new_quantity
            crud.ingredient.add_movement(
                self.db,
                ingredient=ingredient,
                type=MovementType.ENTRADA if is_entry else MovementType.SAIDA,
                quantity=abs(delta),
                reason=reason or ("Entrada manual" if is_entry else "Saída manual"),
            )
            self.db.commit()
            self.db.refresh(ingredient)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Erro ao ajustar o ingrediente {ingredient_id}: {e}", exc_info=True)
            raise LedgerError(f"An unexpected error occurred while adjusting the ingredient: {e}")

        logger.info(f"Ingrediente '{ingredient.name}' ajustado em {delta}: agora {ingredient.quantity}.")
        return ServiceResult.success(ingredient)

    def get_low_stock(self, *, branch_id: int) -> List[models.Ingredient]:
        return crud.ingredient.get_low_stock(self.db, branch_id=branch_id)

    def get_history(self, *, ingredient_id: int) -> List[models.IngredientMovement]:
        return crud.ingredient.get_history(self.db, ingredient_id=ingredient_id)
