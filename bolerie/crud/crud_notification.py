# bolerie/crud/crud_notification.py

from datetime import datetime
from typing import List

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ..models import Notification


def _visible(db: Session, user_id: int, now: datetime):
    # Lembretes agendados só aparecem quando chega a hora
    return db.query(Notification).filter(
        Notification.user_id == user_id,
        or_(Notification.scheduled_for.is_(None), Notification.scheduled_for <= now),
    )


def get_visible(db: Session, user_id: int, now: datetime) -> List[Notification]:
    return _visible(db, user_id, now).order_by(
        Notification.created_at.desc(), Notification.id.desc()
    ).all()


def get_unread(db: Session, user_id: int, now: datetime) -> List[Notification]:
    return _visible(db, user_id, now).filter(Notification.read.is_(False)).order_by(
        Notification.created_at.desc(), Notification.id.desc()
    ).all()


def get_notification(db: Session, notification_id: int, user_id: int) -> Notification | None:
    return db.query(Notification).filter(
        Notification.id == notification_id,
        Notification.user_id == user_id,
    ).first()


def create_notification(db: Session, *, notification: Notification) -> Notification:
    """Não faz commit."""
    db.add(notification)
    return notification


def mark_all_as_read(db: Session, user_id: int, now: datetime) -> int:
    unread = get_unread(db, user_id, now)
    for notification in unread:
        notification.read = True
    db.commit()
    return len(unread)
