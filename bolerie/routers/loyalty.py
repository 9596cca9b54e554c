# bolerie/routers/loyalty.py

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List

from .. import models, schemas, auth, crud
from ..database import get_db
from ..services.loyalty_service import LoyaltyService
from .deps import not_found, unwrap

router = APIRouter(
    prefix="/branches/{branch_id}/loyalty",
    tags=["Loyalty"]
)


def get_loyalty_service(db: Session = Depends(get_db)) -> LoyaltyService:
    return LoyaltyService(db=db)


def _duplicated_level(db: Session) -> HTTPException:
    db.rollback()
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail="A loyalty level with this minimum points already exists"
    )


# --- Níveis ---

@router.get("/levels", response_model=List[schemas.LoyaltyLevel])
def read_levels(
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db)
):
    return crud.loyalty_level.get_multi(db, branch_id=branch.id, limit=None)


@router.post("/levels", response_model=schemas.LoyaltyLevel, status_code=status.HTTP_201_CREATED)
def create_level(
    level_in: schemas.LoyaltyLevelCreate,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(auth.require_admin_or_owner)
):
    try:
        return crud.loyalty_level.create(db, obj_in=level_in, branch_id=branch.id)
    except IntegrityError:
        raise _duplicated_level(db)


@router.put("/levels/{level_id}", response_model=schemas.LoyaltyLevel)
def update_level(
    level_id: int,
    level_in: schemas.LoyaltyLevelUpdate,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(auth.require_admin_or_owner)
):
    db_level = crud.loyalty_level.get(db, level_id, branch_id=branch.id)
    if db_level is None:
        raise not_found("Loyalty level")
    try:
        return crud.loyalty_level.update(db, db_obj=db_level, obj_in=level_in)
    except IntegrityError:
        raise _duplicated_level(db)


@router.delete("/levels/{level_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_level(
    level_id: int,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(auth.require_admin_or_owner)
):
    db_level = crud.loyalty_level.get(db, level_id, branch_id=branch.id)
    if db_level is None:
        raise not_found("Loyalty level")
    crud.loyalty_level.remove(db, db_obj=db_level)
    return None


# --- Recompensas ---

@router.get("/rewards", response_model=List[schemas.LoyaltyReward])
def read_rewards(
    active_only: bool = False,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db)
):
    if active_only:
        return crud.loyalty_reward.get_active(db, branch_id=branch.id)
    return crud.loyalty_reward.get_multi(db, branch_id=branch.id, limit=None)


@router.post("/rewards", response_model=schemas.LoyaltyReward, status_code=status.HTTP_201_CREATED)
def create_reward(
    reward_in: schemas.LoyaltyRewardCreate,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(auth.require_admin_or_owner)
):
    return crud.loyalty_reward.create(db, obj_in=reward_in, branch_id=branch.id)


@router.put("/rewards/{reward_id}", response_model=schemas.LoyaltyReward)
def update_reward(
    reward_id: int,
    reward_in: schemas.LoyaltyRewardUpdate,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(auth.require_admin_or_owner)
):
    db_reward = crud.loyalty_reward.get(db, reward_id, branch_id=branch.id)
    if db_reward is None:
        raise not_found("Reward")
    return crud.loyalty_reward.update(db, db_obj=db_reward, obj_in=reward_in)


@router.delete("/rewards/{reward_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_reward(
    reward_id: int,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(auth.require_admin_or_owner)
):
    db_reward = crud.loyalty_reward.get(db, reward_id, branch_id=branch.id)
    if db_reward is None:
        raise not_found("Reward")
    crud.loyalty_reward.remove(db, db_obj=db_reward)
    return None


# --- Resgates e inicialização ---

@router.get("/redemptions", response_model=List[schemas.LoyaltyRedemption])
def read_redemptions(
    branch: models.Branch = Depends(auth.get_accessible_branch),
    service: LoyaltyService = Depends(get_loyalty_service)
):
    return service.get_all_redemptions(branch_id=branch.id)


@router.post("/seed")
def seed_loyalty_defaults(
    branch: models.Branch = Depends(auth.get_accessible_branch),
    service: LoyaltyService = Depends(get_loyalty_service),
    current_user: models.User = Depends(auth.require_admin_or_owner)
):
    """Cria níveis e recompensas padrão se a filial ainda não tiver nenhum."""
    return unwrap(service.seed_defaults(branch.id))
