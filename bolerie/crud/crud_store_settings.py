# bolerie/crud/crud_store_settings.py

from sqlalchemy.orm import Session

from ..models import StoreSettings


def get_settings_row(db: Session, branch_id: int | None) -> StoreSettings | None:
    """Linha da filial ou, com branch_id=None, a linha global."""
    if branch_id is None:
        return db.query(StoreSettings).filter(StoreSettings.branch_id.is_(None)).first()
    return db.query(StoreSettings).filter(StoreSettings.branch_id == branch_id).first()


def upsert_settings(db: Session, branch_id: int | None, data: dict) -> StoreSettings:
    db_obj = get_settings_row(db, branch_id)
    if db_obj is None:
        db_obj = StoreSettings(branch_id=branch_id, **data)
    else:
        for key, value in data.items():
            setattr(db_obj, key, value)
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj
