# bolerie/crud/crud_sale.py

from datetime import datetime
from decimal import Decimal
from typing import List

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models import Sale, SaleItem, SaleStatus


def _active(db: Session, branch_id: int):
    return db.query(Sale).filter(Sale.branch_id == branch_id, Sale.is_active.is_(True))


def get_sale(db: Session, sale_id: int, branch_id: int) -> Sale | None:
    return _active(db, branch_id).filter(Sale.id == sale_id).first()


def get_sales(db: Session, branch_id: int, skip: int = 0, limit: int = 100) -> List[Sale]:
    return _active(db, branch_id).order_by(Sale.date.desc(), Sale.id.desc()).offset(skip).limit(limit).all()


def get_by_date_range(db: Session, branch_id: int, start: datetime, end: datetime) -> List[Sale]:
    return _active(db, branch_id).filter(
        Sale.date >= start,
        Sale.date <= end,
    ).order_by(Sale.date, Sale.id).all()


def get_recent(db: Session, branch_id: int, limit: int = 5) -> List[Sale]:
    return _active(db, branch_id).filter(
        Sale.status == SaleStatus.COMPLETED
    ).order_by(Sale.date.desc(), Sale.id.desc()).limit(limit).all()


def get_by_customer(db: Session, branch_id: int, customer_id: int) -> List[Sale]:
    return _active(db, branch_id).filter(
        Sale.customer_id == customer_id
    ).order_by(Sale.date.desc(), Sale.id.desc()).all()


def items_sold_count(db: Session, branch_id: int, start: datetime, end: datetime) -> int:
    total = db.query(func.coalesce(func.sum(SaleItem.quantity), 0)).join(Sale).filter(
        Sale.branch_id == branch_id,
        Sale.is_active.is_(True),
        Sale.date >= start,
        Sale.date <= end,
    ).scalar()
    return int(total or 0)


def sales_total(db: Session, branch_id: int, start: datetime, end: datetime) -> Decimal:
    total = db.query(func.coalesce(func.sum(Sale.total), 0)).filter(
        Sale.branch_id == branch_id,
        Sale.is_active.is_(True),
        Sale.date >= start,
        Sale.date <= end,
    ).scalar()
    return Decimal(str(total or 0))


def create_sale(db: Session, *, sale: Sale) -> Sale:
    """Adiciona a venda à sessão e gera o ID. Não faz commit."""
    db.add(sale)
    db.flush()
    return sale


def delete_sale(db: Session, db_sale: Sale):
    db_sale.is_active = False
    db.add(db_sale)
    db.commit()
