# bolerie/routers/products.py

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional

from .. import models, schemas, auth
from ..crud import crud_product
from ..database import get_db

router = APIRouter(
    prefix="/branches/{branch_id}/products",  # Todos os endpoints aqui pertencem a uma filial
    tags=["Products"]    # Agrupa os endpoints na documentação do Swagger
)


@router.get("/", response_model=List[schemas.Product])
def read_products(
    category: Optional[str] = None,
    skip: int = 0, limit: int = 100,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db)
):
    """Produtos ativos da filial, ordenados por nome. Filtro opcional por categoria."""
    if category is not None:
        return crud_product.get_products_by_category(db, branch.id, category)
    return crud_product.get_products(db, branch.id, skip=skip, limit=limit)


@router.post("/", response_model=schemas.Product, status_code=status.HTTP_201_CREATED)
def create_product_endpoint(
    product: schemas.ProductCreate,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db)
):
    return crud_product.create_product(db=db, product=product, branch_id=branch.id)


@router.get("/{product_id}", response_model=schemas.Product)
def read_product(
    product_id: int,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db)
):
    db_product = crud_product.get_product(db, product_id, branch.id)
    if db_product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return db_product


@router.put("/{product_id}", response_model=schemas.Product)
def update_product_endpoint(
    product_id: int,
    product_update: schemas.ProductUpdate,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db)
):
    db_product = crud_product.get_product(db, product_id, branch.id)
    if db_product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return crud_product.update_product(db=db, db_product=db_product, product_update=product_update)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product_endpoint(
    product_id: int,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db)
):
    db_product = crud_product.get_product(db, product_id, branch.id)
    if db_product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    crud_product.delete_product(db=db, db_product=db_product)
    return None
