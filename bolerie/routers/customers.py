# bolerie/routers/customers.py

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from .. import models, schemas, auth, crud
from ..database import get_db
from ..services.loyalty_service import LoyaltyService
from ..services.sale_service import SaleService
from .deps import not_found, unwrap

router = APIRouter(
    prefix="/branches/{branch_id}/customers",
    tags=["Customers"]
)


def get_loyalty_service(db: Session = Depends(get_db)) -> LoyaltyService:
    return LoyaltyService(db=db)


@router.get("/", response_model=List[schemas.Customer])
def read_customers(
    q: str | None = None,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db)
):
    """Lista os clientes. Com `q`, busca por nome, email ou telefone."""
    if q is not None:
        return crud.customer.search(db, branch_id=branch.id, query=q)
    return crud.customer.get_multi(db, branch_id=branch.id, limit=None)


@router.post("/", response_model=schemas.Customer, status_code=status.HTTP_201_CREATED)
def create_customer(
    customer_in: schemas.CustomerCreate,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db),
    loyalty: LoyaltyService = Depends(get_loyalty_service)
):
    db_customer = crud.customer.create(db, obj_in=customer_in, branch_id=branch.id)
    # Cliente novo já entra no nível correspondente aos pontos iniciais
    loyalty.recompute_tier(db_customer, db_customer.loyalty_points)
    db.commit()
    db.refresh(db_customer)
    return db_customer


@router.get("/{customer_id}", response_model=schemas.CustomerDetail)
def read_customer(
    customer_id: int,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db)
):
    """Dados do cliente com o histórico de pedidos (projetado das vendas)."""
    db_customer = crud.customer.get(db, customer_id, branch_id=branch.id)
    if db_customer is None:
        raise not_found("Customer")
    detail = schemas.CustomerDetail.model_validate(db_customer)
    detail.order_history = [
        schemas.CustomerOrder.model_validate(sale)
        for sale in SaleService(db).order_history(customer_id=customer_id, branch_id=branch.id)
    ]
    return detail


@router.put("/{customer_id}", response_model=schemas.Customer)
def update_customer(
    customer_id: int,
    customer_in: schemas.CustomerUpdate,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db)
):
    db_customer = crud.customer.get(db, customer_id, branch_id=branch.id)
    if db_customer is None:
        raise not_found("Customer")
    return crud.customer.update(db, db_obj=db_customer, obj_in=customer_in)


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_customer(
    customer_id: int,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db)
):
    db_customer = crud.customer.get(db, customer_id, branch_id=branch.id)
    if db_customer is None:
        raise not_found("Customer")
    crud.customer.remove(db, db_obj=db_customer)
    return None


@router.post("/{customer_id}/redeem", response_model=schemas.LoyaltyRedemption, status_code=status.HTTP_201_CREATED)
def redeem_reward(
    customer_id: int,
    redeem_in: schemas.RedeemRequest,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    loyalty: LoyaltyService = Depends(get_loyalty_service)
):
    """
    Troca pontos por uma recompensa.
    - **409**: pontos insuficientes ou recompensa inativa.
    """
    return unwrap(loyalty.redeem(customer_id=customer_id, reward_id=redeem_in.reward_id, branch_id=branch.id))


@router.get("/{customer_id}/redemptions", response_model=List[schemas.LoyaltyRedemption])
def read_customer_redemptions(
    customer_id: int,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    loyalty: LoyaltyService = Depends(get_loyalty_service)
):
    return loyalty.get_redemption_history(customer_id=customer_id, branch_id=branch.id)
