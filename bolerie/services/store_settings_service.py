# bolerie/services/store_settings_service.py

import logging

from sqlalchemy.orm import Session

from .. import schemas, crud
from ..core.config import settings
from ..crud import crud_store_settings
from ..models import PrinterType

logger = logging.getLogger(__name__)


def default_settings() -> schemas.StoreSettings:
    return schemas.StoreSettings(
        branch_id=None,
        name=settings.DEFAULT_STORE_NAME,
        address=settings.DEFAULT_STORE_ADDRESS,
        phone=settings.DEFAULT_STORE_PHONE,
        email=settings.DEFAULT_STORE_EMAIL,
        theme="light",
        printer_type=PrinterType.THERMAL,
    )


class StoreSettingsService:
    def __init__(self, db: Session):
        self.db = db

    def get_settings(self, branch_id: int | None = None) -> schemas.StoreSettings:
        """
        Ordem de resolução: configuração da filial, dados da própria filial,
        configuração global e, por fim, os padrões do Settings.
        """
        if branch_id is not None:
            row = crud_store_settings.get_settings_row(self.db, branch_id)
            if row is not None:
                return schemas.StoreSettings.model_validate(row)

            branch = crud.branch.get(self.db, branch_id)
            if branch is not None:
                return schemas.StoreSettings(
                    branch_id=branch.id,
                    name=f"Bolerie - {branch.name}",
                    address=branch.address,
                    phone=branch.phone,
                    email=branch.email,
                    theme="light",
                    printer_type=PrinterType.THERMAL,
                )

        row = crud_store_settings.get_settings_row(self.db, None)
        if row is not None:
            return schemas.StoreSettings.model_validate(row)
        return default_settings()

    def save_settings(self, data: schemas.StoreSettingsIn, branch_id: int | None = None) -> schemas.StoreSettings:
        row = crud_store_settings.upsert_settings(self.db, branch_id, data.model_dump())
        logger.info(f"Configurações da loja salvas ({'global' if branch_id is None else f'filial {branch_id}'}).")
        return schemas.StoreSettings.model_validate(row)
