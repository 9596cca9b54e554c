# bolerie/routers/ingredients.py

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from .. import models, schemas, auth, crud
from ..database import get_db
from ..services.ingredient_service import IngredientService
from .deps import not_found, unwrap

router = APIRouter(
    prefix="/branches/{branch_id}/ingredients",
    tags=["Ingredients"]
)


def get_ingredient_service(db: Session = Depends(get_db)) -> IngredientService:
    return IngredientService(db=db)


@router.get("/", response_model=List[schemas.Ingredient])
def read_ingredients(
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db)
):
    return crud.ingredient.get_multi(db, branch_id=branch.id, limit=None)


@router.get("/low-stock", response_model=List[schemas.Ingredient])
def read_low_stock_ingredients(
    branch: models.Branch = Depends(auth.get_accessible_branch),
    service: IngredientService = Depends(get_ingredient_service)
):
    """Ingredientes com quantidade menor ou igual à mínima."""
    return service.get_low_stock(branch_id=branch.id)


@router.post("/", response_model=schemas.Ingredient, status_code=status.HTTP_201_CREATED)
def create_ingredient(
    ingredient_in: schemas.IngredientCreate,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    service: IngredientService = Depends(get_ingredient_service)
):
    """
    Cadastra o ingrediente. A quantidade inicial entra no histórico como "Entrada inicial".
    """
    return service.create(branch_id=branch.id, data=ingredient_in)


@router.get("/{ingredient_id}", response_model=schemas.Ingredient)
def read_ingredient(
    ingredient_id: int,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db)
):
    db_ingredient = crud.ingredient.get(db, ingredient_id, branch_id=branch.id)
    if db_ingredient is None:
        raise not_found("Ingredient")
    return db_ingredient


@router.put("/{ingredient_id}", response_model=schemas.Ingredient)
def update_ingredient(
    ingredient_id: int,
    ingredient_in: schemas.IngredientUpdate,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db)
):
    db_ingredient = crud.ingredient.get(db, ingredient_id, branch_id=branch.id)
    if db_ingredient is None:
        raise not_found("Ingredient")
    return crud.ingredient.update(db, db_obj=db_ingredient, obj_in=ingredient_in)


@router.post("/{ingredient_id}/adjust", response_model=schemas.Ingredient)
def adjust_ingredient(
    ingredient_id: int,
    adjust_in: schemas.IngredientAdjust,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    service: IngredientService = Depends(get_ingredient_service)
):
    """
    Entrada (delta positivo) ou saída (delta negativo) de estoque.
    - **409**: a saída deixaria o estoque negativo. Nada é gravado.
    """
    return unwrap(service.adjust_quantity(
        ingredient_id=ingredient_id,
        branch_id=branch.id,
        delta=adjust_in.delta,
        reason=adjust_in.reason,
    ))


@router.get("/{ingredient_id}/history", response_model=List[schemas.IngredientMovement])
def read_ingredient_history(
    ingredient_id: int,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db),
    service: IngredientService = Depends(get_ingredient_service)
):
    if crud.ingredient.get(db, ingredient_id, branch_id=branch.id) is None:
        raise not_found("Ingredient")
    return service.get_history(ingredient_id=ingredient_id)


@router.delete("/{ingredient_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_ingredient(
    ingredient_id: int,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db)
):
    db_ingredient = crud.ingredient.get(db, ingredient_id, branch_id=branch.id)
    if db_ingredient is None:
        raise not_found("Ingredient")
    crud.ingredient.remove(db, db_obj=db_ingredient)
    return None
