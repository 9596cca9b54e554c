# bolerie/crud/crud_reservation.py

from datetime import datetime
from typing import List

from sqlalchemy.orm import Session

from ..models import Reservation, ReservationStatus


def _active(db: Session, branch_id: int):
    return db.query(Reservation).filter(
        Reservation.branch_id == branch_id,
        Reservation.is_active.is_(True),
    )


def get_reservation(db: Session, reservation_id: int, branch_id: int) -> Reservation | None:
    return _active(db, branch_id).filter(Reservation.id == reservation_id).first()


def get_reservations(db: Session, branch_id: int) -> List[Reservation]:
    return _active(db, branch_id).order_by(Reservation.date.desc(), Reservation.id.desc()).all()


def get_by_customer(db: Session, branch_id: int, customer_id: int) -> List[Reservation]:
    return _active(db, branch_id).filter(
        Reservation.customer_id == customer_id
    ).order_by(Reservation.date.desc(), Reservation.id.desc()).all()


def get_by_date_range(db: Session, branch_id: int, start: datetime, end: datetime) -> List[Reservation]:
    return _active(db, branch_id).filter(
        Reservation.date >= start,
        Reservation.date <= end,
    ).order_by(Reservation.date, Reservation.id).all()


def get_upcoming(db: Session, branch_id: int, start: datetime, end: datetime) -> List[Reservation]:
    return _active(db, branch_id).filter(
        Reservation.status == ReservationStatus.PENDING,
        Reservation.date >= start,
        Reservation.date <= end,
    ).order_by(Reservation.date, Reservation.id).all()


def delete_reservation(db: Session, db_reservation: Reservation):
    db_reservation.is_active = False
    db.add(db_reservation)
    db.commit()
