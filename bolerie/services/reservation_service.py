# bolerie/services/reservation_service.py

import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import models, schemas, crud
from ..crud import crud_reservation
from ..models import ReservationStatus
from .calculations import advance_error, compute_remaining, compute_total
from .notification_service import NotificationService
from .result import ServiceResult

logger = logging.getLogger(__name__)


class ReservationError(RuntimeError):
    """Erro inesperado de persistência ao gravar uma reserva."""
    pass


def validate_advance(total: Decimal, has_advance: bool, advance_amount: Optional[Decimal]) -> ServiceResult[None]:
    error = advance_error(total, has_advance, advance_amount)
    if error:
        return ServiceResult.invalid(error)
    return ServiceResult.success()


def _build_items(items: List[schemas.ReservationItemBase]) -> List[models.ReservationItem]:
    return [
        models.ReservationItem(position=position, **item.model_dump())
        for position, item in enumerate(items)
    ]


# Transições permitidas: só reservas pendentes mudam de status
ALLOWED_TRANSITIONS = {
    ReservationStatus.PENDING: {ReservationStatus.COMPLETED, ReservationStatus.CANCELLED},
    ReservationStatus.COMPLETED: set(),
    ReservationStatus.CANCELLED: set(),
}


class ReservationService:
    def __init__(self, db: Session):
        self.db = db
        self.notifications = NotificationService(db)

    def _apply_money_fields(self, reservation: models.Reservation) -> ServiceResult[None]:
        total = compute_total(reservation.items)
        has_advance = bool(reservation.has_advance_payment)
        advance_amount = Decimal(str(reservation.advance_amount or 0)) if has_advance else Decimal("0")

        check = validate_advance(total, has_advance, advance_amount)
        if not check.ok:
            return check

        reservation.total = total
        reservation.advance_amount = advance_amount
        reservation.remaining_amount = compute_remaining(total, has_advance, advance_amount)
        return ServiceResult.success()

    def create(
        self, *, branch_id: int, data: schemas.ReservationCreate, user: Optional[models.User] = None
    ) -> ServiceResult[models.Reservation]:
        if data.customer_id is not None and not crud.customer.get(self.db, data.customer_id, branch_id=branch_id):
            return ServiceResult.not_found("Customer not found")

        reservation = models.Reservation(
            branch_id=branch_id,
            status=ReservationStatus.PENDING,
            **data.model_dump(exclude={"items"}),
        )
        reservation.items = _build_items(data.items)

        check = self._apply_money_fields(reservation)
        if not check.ok:
            logger.warning(f"Reserva recusada na filial {branch_id}: {check.reason}")
            return check

        try:
            self.db.add(reservation)
            self.db.flush()
            if user is not None:
                self.notifications.schedule_reservation_reminders(user.id, reservation)
            self.db.commit()
            self.db.refresh(reservation)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Erro ao gravar reserva na filial {branch_id}: {e}", exc_info=True)
            raise ReservationError(f"An unexpected error occurred while creating the reservation: {e}")

        logger.info(f"Reserva {reservation.id} criada na filial {branch_id} (total {reservation.total}).")
        return ServiceResult.success(reservation)

    def update(
        self, *, reservation: models.Reservation, data: schemas.ReservationUpdate
    ) -> ServiceResult[models.Reservation]:
        update_data = data.model_dump(exclude_unset=True, exclude={"items"})

        if update_data.get("customer_id") is not None and not crud.customer.get(
            self.db, update_data["customer_id"], branch_id=reservation.branch_id
        ):
            return ServiceResult.not_found("Customer not found")

        for key, value in update_data.items():
            setattr(reservation, key, value)
        if data.items is not None:
            reservation.items = _build_items(data.items)

        check = self._apply_money_fields(reservation)
        if not check.ok:
            # Desfaz as alterações em memória
            self.db.rollback()
            logger.warning(f"Atualização da reserva {reservation.id} recusada: {check.reason}")
            return check

        try:
            self.db.add(reservation)
            self.db.commit()
            self.db.refresh(reservation)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Erro ao atualizar a reserva {reservation.id}: {e}", exc_info=True)
            raise ReservationError(f"An unexpected error occurred while updating the reservation: {e}")
        return ServiceResult.success(reservation)

    def change_status(
        self, *, reservation: models.Reservation, new_status: ReservationStatus
    ) -> ServiceResult[models.Reservation]:
        """Muda o status sem efeitos colaterais (nem estoque, nem pontos)."""
        if reservation.status == new_status:
            return ServiceResult.success(reservation)

        if new_status not in ALLOWED_TRANSITIONS[reservation.status]:
            return ServiceResult.constraint(
                f"Cannot change reservation status from '{reservation.status.value}' to '{new_status.value}'."
            )

        reservation.status = new_status
        self.db.add(reservation)
        self.db.commit()
        self.db.refresh(reservation)
        logger.info(f"Reserva {reservation.id} agora está '{new_status.value}'.")
        return ServiceResult.success(reservation)

    # --- Consultas ---

    def get_upcoming(self, *, branch_id: int, days: int = 7, now: Optional[datetime] = None) -> List[models.Reservation]:
        now = now or datetime.now()
        return crud_reservation.get_upcoming(self.db, branch_id, now, now + timedelta(days=days))

    def get_by_customer(self, *, branch_id: int, customer_id: int) -> List[models.Reservation]:
        return crud_reservation.get_by_customer(self.db, branch_id, customer_id)

    def get_by_date_range(self, *, branch_id: int, start: datetime, end: datetime) -> List[models.Reservation]:
        return crud_reservation.get_by_date_range(self.db, branch_id, start, end)
