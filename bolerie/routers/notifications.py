# bolerie/routers/notifications.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from .. import models, schemas, auth
from ..database import get_db
from ..services.notification_service import NotificationService
from .deps import unwrap

router = APIRouter(
    prefix="/notifications",
    tags=["Notifications"]
)


def get_notification_service(db: Session = Depends(get_db)) -> NotificationService:
    return NotificationService(db=db)


@router.get("/", response_model=List[schemas.Notification])
def read_notifications(
    unread_only: bool = False,
    current_user: models.User = Depends(auth.get_current_user),
    service: NotificationService = Depends(get_notification_service)
):
    """Notificações do usuário atual. Lembretes agendados só aparecem na hora marcada."""
    if unread_only:
        return service.get_unread(current_user.id)
    return service.get_all(current_user.id)


@router.post("/{notification_id}/read", response_model=schemas.Notification)
def mark_notification_as_read(
    notification_id: int,
    current_user: models.User = Depends(auth.get_current_user),
    service: NotificationService = Depends(get_notification_service)
):
    return unwrap(service.mark_as_read(notification_id, current_user.id))


@router.post("/read-all")
def mark_all_notifications_as_read(
    current_user: models.User = Depends(auth.get_current_user),
    service: NotificationService = Depends(get_notification_service)
):
    return {"updated": service.mark_all_as_read(current_user.id)}
