# bolerie/routers/users.py

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from .. import models, schemas, auth, crud
from ..database import get_db
from ..models import UserRole
from .deps import not_found

router = APIRouter(
    prefix="/users",
    tags=["Users"]
)


@router.get("/me", response_model=schemas.User)
def read_current_user(current_user: models.User = Depends(auth.get_current_user)):
    return current_user


@router.get("/", response_model=List[schemas.User])
def read_users(
    db: Session = Depends(get_db),
    current_user: models.User = Depends(auth.require_admin_or_owner)
):
    return crud.user.get_multi(db)


@router.post("/", response_model=schemas.User, status_code=status.HTTP_201_CREATED)
def create_user(
    user_in: schemas.UserCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(auth.require_admin_or_owner)
):
    """
    Cria um usuário.
    - **Protegido**: admin ou dono. Apenas donos criam outros donos.
    """
    if user_in.role == UserRole.OWNER and current_user.role != UserRole.OWNER:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only owners can create owners")
    if crud.user.get_by_email(db, email=user_in.email):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")
    return crud.user.create(db, obj_in=user_in)


@router.put("/{user_id}", response_model=schemas.User)
def update_user(
    user_id: int,
    user_in: schemas.UserUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(auth.require_admin_or_owner)
):
    db_user = crud.user.get(db, user_id)
    if db_user is None:
        raise not_found("User")
    if user_in.role == UserRole.OWNER and current_user.role != UserRole.OWNER:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only owners can promote to owner")
    return crud.user.update(db, db_obj=db_user, obj_in=user_in)


@router.post("/{user_id}/branches/{branch_id}", response_model=schemas.User)
def add_user_to_branch(
    user_id: int,
    branch_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(auth.require_admin_or_owner)
):
    db_user = crud.user.get(db, user_id)
    if db_user is None:
        raise not_found("User")
    branch = crud.branch.get(db, branch_id)
    if branch is None:
        raise not_found("Branch")
    return crud.user.add_user_to_branch(db, db_obj=db_user, branch=branch)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(auth.require_admin_or_owner)
):
    db_user = crud.user.get(db, user_id)
    if db_user is None:
        raise not_found("User")
    if db_user.id == current_user.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Users cannot delete themselves")
    crud.user.remove(db, db_obj=db_user)
    return None
