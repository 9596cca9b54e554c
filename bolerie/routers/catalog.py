# bolerie/routers/catalog.py
# Categorias e tamanhos de produtos. Exclusão física.

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from .. import models, schemas, auth, crud
from ..database import get_db
from .deps import not_found

router = APIRouter(
    prefix="/branches/{branch_id}",
    tags=["Catalog"]
)


# --- Categorias ---

@router.get("/categories", response_model=List[schemas.Category])
def read_categories(
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db)
):
    return crud.category.get_multi(db, branch_id=branch.id, limit=None)


@router.post("/categories", response_model=schemas.Category, status_code=status.HTTP_201_CREATED)
def create_category(
    category_in: schemas.CategoryCreate,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db)
):
    return crud.category.create(db, obj_in=category_in, branch_id=branch.id)


@router.put("/categories/{category_id}", response_model=schemas.Category)
def update_category(
    category_id: int,
    category_in: schemas.CategoryUpdate,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db)
):
    db_category = crud.category.get(db, category_id, branch_id=branch.id)
    if db_category is None:
        raise not_found("Category")
    return crud.category.update(db, db_obj=db_category, obj_in=category_in)


@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: int,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db)
):
    db_category = crud.category.get(db, category_id, branch_id=branch.id)
    if db_category is None:
        raise not_found("Category")
    crud.category.remove(db, db_obj=db_category)
    return None


# --- Tamanhos ---

@router.get("/sizes", response_model=List[schemas.Size])
def read_sizes(
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db)
):
    return crud.size.get_multi(db, branch_id=branch.id, limit=None)


@router.post("/sizes", response_model=schemas.Size, status_code=status.HTTP_201_CREATED)
def create_size(
    size_in: schemas.SizeCreate,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db)
):
    return crud.size.create(db, obj_in=size_in, branch_id=branch.id)


@router.put("/sizes/{size_id}", response_model=schemas.Size)
def update_size(
    size_id: int,
    size_in: schemas.SizeUpdate,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db)
):
    db_size = crud.size.get(db, size_id, branch_id=branch.id)
    if db_size is None:
        raise not_found("Size")
    return crud.size.update(db, db_obj=db_size, obj_in=size_in)


@router.delete("/sizes/{size_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_size(
    size_id: int,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db)
):
    db_size = crud.size.get(db, size_id, branch_id=branch.id)
    if db_size is None:
        raise not_found("Size")
    crud.size.remove(db, db_obj=db_size)
    return None
