# bolerie/routers/branches.py

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from .. import models, schemas, auth, crud
from ..database import get_db
from ..models import UserRole
from ..services.loyalty_service import LoyaltyService

router = APIRouter(
    prefix="/branches",
    tags=["Branches"]
)


@router.get("/", response_model=List[schemas.Branch])
def read_branches(
    db: Session = Depends(get_db),
    current_user: models.User = Depends(auth.get_current_user)
):
    """Lista as filiais que o usuário atual pode acessar."""
    if current_user.role == UserRole.OWNER:
        return crud.branch.get_multi(db)
    return crud.branch.get_multi(db, ids=current_user.branch_ids)


@router.post("/", response_model=schemas.Branch, status_code=status.HTTP_201_CREATED)
def create_branch(
    branch_in: schemas.BranchCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(auth.require_admin_or_owner)
):
    """
    Cria uma filial e já semeia o programa de fidelidade padrão.
    - **Protegido**: admin ou dono.
    """
    branch = crud.branch.create(db, obj_in=branch_in)
    LoyaltyService(db).seed_defaults(branch.id)
    # Quem cria a filial passa a ter acesso a ela
    if current_user.role != UserRole.OWNER:
        crud.user.add_user_to_branch(db, db_obj=current_user, branch=branch)
    return branch


@router.get("/{branch_id}", response_model=schemas.Branch)
def read_branch(branch: models.Branch = Depends(auth.get_accessible_branch)):
    return branch


@router.get("/{branch_id}/users", response_model=List[schemas.User])
def read_branch_users(
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(auth.require_admin_or_owner)
):
    return crud.user.get_users_by_branch(db, branch_id=branch.id)


@router.put("/{branch_id}", response_model=schemas.Branch)
def update_branch(
    branch_in: schemas.BranchUpdate,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(auth.require_admin_or_owner)
):
    return crud.branch.update(db, db_obj=branch, obj_in=branch_in)


@router.delete("/{branch_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_branch(
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(auth.require_admin_or_owner)
):
    crud.branch.remove(db, db_obj=branch)
    return None
