# bolerie/routers/reservations.py

from datetime import datetime

from fastapi import APIRouter, Depends, status
from fastapi.responses import HTMLResponse, PlainTextResponse
from sqlalchemy.orm import Session
from typing import List, Optional

from .. import models, schemas, auth
from ..crud import crud_reservation
from ..database import get_db
from ..models import PrinterType
from ..services import receipt_service
from ..services.reservation_service import ReservationService
from ..services.store_settings_service import StoreSettingsService
from .deps import not_found, unwrap

router = APIRouter(
    prefix="/branches/{branch_id}/reservations",
    tags=["Reservations"]
)


def get_reservation_service(db: Session = Depends(get_db)) -> ReservationService:
    return ReservationService(db=db)


def _get_or_404(db: Session, reservation_id: int, branch_id: int) -> models.Reservation:
    db_reservation = crud_reservation.get_reservation(db, reservation_id, branch_id)
    if db_reservation is None:
        raise not_found("Reservation")
    return db_reservation


@router.get("/", response_model=List[schemas.Reservation])
def read_reservations(
    customer_id: Optional[int] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db),
    service: ReservationService = Depends(get_reservation_service)
):
    """
    Lista as reservas da filial.
    - `customer_id`: reservas do cliente, mais recentes primeiro.
    - `start` e `end`: reservas do período, em ordem cronológica.
    """
    if customer_id is not None:
        return service.get_by_customer(branch_id=branch.id, customer_id=customer_id)
    if start is not None and end is not None:
        return service.get_by_date_range(branch_id=branch.id, start=start, end=end)
    return crud_reservation.get_reservations(db, branch.id)


@router.get("/upcoming", response_model=List[schemas.Reservation])
def read_upcoming_reservations(
    days: int = 7,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    service: ReservationService = Depends(get_reservation_service)
):
    """Reservas pendentes dos próximos `days` dias."""
    return service.get_upcoming(branch_id=branch.id, days=days)


@router.post("/", response_model=schemas.Reservation, status_code=status.HTTP_201_CREATED)
def create_reservation(
    reservation_in: schemas.ReservationCreate,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    current_user: models.User = Depends(auth.get_current_user),
    service: ReservationService = Depends(get_reservation_service)
):
    """
    Cria uma reserva. Total e valor restante são calculados a partir dos itens.
    - **422**: adiantamento negativo ou maior que o total.
    """
    return unwrap(service.create(branch_id=branch.id, data=reservation_in, user=current_user))


@router.get("/{reservation_id}", response_model=schemas.Reservation)
def read_reservation(
    reservation_id: int,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db)
):
    return _get_or_404(db, reservation_id, branch.id)


@router.put("/{reservation_id}", response_model=schemas.Reservation)
def update_reservation(
    reservation_id: int,
    reservation_in: schemas.ReservationUpdate,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db),
    service: ReservationService = Depends(get_reservation_service)
):
    db_reservation = _get_or_404(db, reservation_id, branch.id)
    return unwrap(service.update(reservation=db_reservation, data=reservation_in))


@router.patch("/{reservation_id}/status", response_model=schemas.Reservation)
def change_reservation_status(
    reservation_id: int,
    status_in: schemas.ReservationStatusUpdate,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db),
    service: ReservationService = Depends(get_reservation_service)
):
    """
    Conclui ou cancela uma reserva pendente.
    - **409**: a reserva já foi concluída ou cancelada.
    """
    db_reservation = _get_or_404(db, reservation_id, branch.id)
    return unwrap(service.change_status(reservation=db_reservation, new_status=status_in.status))


@router.delete("/{reservation_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_reservation(
    reservation_id: int,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db)
):
    db_reservation = _get_or_404(db, reservation_id, branch.id)
    crud_reservation.delete_reservation(db, db_reservation)
    return None


@router.get("/{reservation_id}/receipt")
def read_reservation_receipt(
    reservation_id: int,
    printer_type: Optional[PrinterType] = None,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db)
):
    db_reservation = _get_or_404(db, reservation_id, branch.id)
    store = StoreSettingsService(db).get_settings(branch.id)
    printer_type = printer_type or store.printer_type
    payload = receipt_service.payload_from_reservation(db_reservation, store)
    content = receipt_service.render_receipt(payload, printer_type)
    if printer_type == PrinterType.A4:
        return HTMLResponse(content)
    return PlainTextResponse(content)
