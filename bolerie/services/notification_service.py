# bolerie/services/notification_service.py

import logging
from datetime import datetime, time, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

from .. import models, schemas
from ..crud import crud_notification
from ..models import NotificationType
from .result import ServiceResult

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(self, db: Session):
        self.db = db

    def get_all(self, user_id: int, now: Optional[datetime] = None) -> List[models.Notification]:
        return crud_notification.get_visible(self.db, user_id, now or datetime.now())

    def get_unread(self, user_id: int, now: Optional[datetime] = None) -> List[models.Notification]:
        return crud_notification.get_unread(self.db, user_id, now or datetime.now())

    def add(self, data: schemas.NotificationCreate, *, commit: bool = True) -> models.Notification:
        notification = crud_notification.create_notification(
            self.db, notification=models.Notification(**data.model_dump())
        )
        if commit:
            self.db.commit()
            self.db.refresh(notification)
        return notification

    def mark_as_read(self, notification_id: int, user_id: int) -> ServiceResult[models.Notification]:
        notification = crud_notification.get_notification(self.db, notification_id, user_id)
        if notification is None:
            return ServiceResult.not_found("Notification not found")
        notification.read = True
        self.db.commit()
        self.db.refresh(notification)
        return ServiceResult.success(notification)

    def mark_all_as_read(self, user_id: int, now: Optional[datetime] = None) -> int:
        return crud_notification.mark_all_as_read(self.db, user_id, now or datetime.now())

    def schedule_reservation_reminders(
        self, user_id: int, reservation: models.Reservation, now: Optional[datetime] = None
    ) -> List[models.Notification]:
        """
        Lembretes de entrega da reserva: um para o dia anterior (se ainda
        estiver no futuro) e outro para o próprio dia, se a entrega for hoje.
        Não faz commit.
        """
        now = now or datetime.now()
        delivery = reservation.delivery_date
        link = f"/reservas?id={reservation.id}"
        created = []

        day_before = datetime.combine(delivery.date() - timedelta(days=1), time.min)
        if day_before > now:
            created.append(self.add(schemas.NotificationCreate(
                user_id=user_id,
                title="Reserva Amanhã",
                message=f"A reserva de {reservation.customer_name} deve ser entregue amanhã.",
                type=NotificationType.RESERVATION,
                link=link,
                scheduled_for=day_before,
            ), commit=False))

        if delivery.date() == now.date():
            created.append(self.add(schemas.NotificationCreate(
                user_id=user_id,
                title="Reserva Hoje",
                message=f"A reserva de {reservation.customer_name} deve ser entregue hoje.",
                type=NotificationType.RESERVATION,
                link=link,
            ), commit=False))

        if created:
            logger.info(f"{len(created)} lembretes agendados para a reserva {reservation.id}.")
        return created
