# bolerie/crud/crud_customer.py

from datetime import datetime
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from .base import CRUDBase
from ..models import Customer
from ..schemas import CustomerCreate, CustomerUpdate


class CRUDCustomer(CRUDBase[Customer, CustomerCreate, CustomerUpdate]):
    order_by = "name"

    def get_for_update(self, db: Session, id: int, *, branch_id: int) -> Optional[Customer]:
        return self._query(db, branch_id).filter(Customer.id == id).with_for_update().first()

    def search(self, db: Session, *, branch_id: int, query: str) -> List[Customer]:
        """Busca por nome ou email (sem diferenciar maiúsculas) ou trecho do telefone."""
        base = self._query(db, branch_id)
        if not query.strip():
            return base.order_by(Customer.name).limit(50).all()

        pattern = f"%{query.strip().lower()}%"
        return base.filter(
            or_(
                Customer.name.ilike(pattern),
                Customer.email.ilike(pattern),
                Customer.phone.contains(query.strip()),
            )
        ).order_by(Customer.name).all()

    def count_new_customers(self, db: Session, *, branch_id: int, start: datetime, end: datetime) -> int:
        return self._query(db, branch_id).filter(
            Customer.created_at >= start,
            Customer.created_at <= end,
        ).count()


customer = CRUDCustomer(Customer)
