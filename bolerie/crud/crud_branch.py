# bolerie/crud/crud_branch.py

from typing import List, Optional

from sqlalchemy.orm import Session

from ..models import Branch
from ..schemas import BranchCreate, BranchUpdate


class CRUDBranch:
    """Filiais não pertencem a outra filial, por isso não herdam de CRUDBase."""

    def get(self, db: Session, id: int) -> Optional[Branch]:
        return db.query(Branch).filter(Branch.id == id, Branch.is_active.is_(True)).first()

    def get_multi(self, db: Session, *, ids: Optional[List[int]] = None) -> List[Branch]:
        query = db.query(Branch).filter(Branch.is_active.is_(True))
        if ids is not None:
            query = query.filter(Branch.id.in_(ids))
        return query.order_by(Branch.name).all()

    def create(self, db: Session, *, obj_in: BranchCreate) -> Branch:
        db_obj = Branch(**obj_in.model_dump())
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def update(self, db: Session, *, db_obj: Branch, obj_in: BranchUpdate) -> Branch:
        for field, value in obj_in.model_dump(exclude_unset=True).items():
            setattr(db_obj, field, value)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def remove(self, db: Session, *, db_obj: Branch) -> Branch:
        db_obj.is_active = False
        db.add(db_obj)
        db.commit()
        return db_obj


branch = CRUDBranch()
