# bolerie/routers/settings.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import models, schemas, auth
from ..database import get_db
from ..services.store_settings_service import StoreSettingsService

router = APIRouter(tags=["Store Settings"])


def get_store_settings_service(db: Session = Depends(get_db)) -> StoreSettingsService:
    return StoreSettingsService(db=db)


@router.get("/settings", response_model=schemas.StoreSettings)
def read_global_settings(
    current_user: models.User = Depends(auth.get_current_user),
    service: StoreSettingsService = Depends(get_store_settings_service)
):
    return service.get_settings(None)


@router.put("/settings", response_model=schemas.StoreSettings)
def save_global_settings(
    settings_in: schemas.StoreSettingsIn,
    current_user: models.User = Depends(auth.require_owner_user),
    service: StoreSettingsService = Depends(get_store_settings_service)
):
    """
    Configurações globais, usadas quando a filial não tem as suas.
    - **Protegido**: apenas donos.
    """
    return service.save_settings(settings_in, None)


@router.get("/branches/{branch_id}/settings", response_model=schemas.StoreSettings)
def read_branch_settings(
    branch: models.Branch = Depends(auth.get_accessible_branch),
    service: StoreSettingsService = Depends(get_store_settings_service)
):
    return service.get_settings(branch.id)


@router.put("/branches/{branch_id}/settings", response_model=schemas.StoreSettings)
def save_branch_settings(
    settings_in: schemas.StoreSettingsIn,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    current_user: models.User = Depends(auth.require_admin_or_owner),
    service: StoreSettingsService = Depends(get_store_settings_service)
):
    return service.save_settings(settings_in, branch.id)
