from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel import Session
from community_moderation.db.session import get_session
from community_moderation.models.user import User
from community_moderation.schemas.notification import NotificationOut, NotificationUpdate, UnreadCount
from community_moderation.services.auth_service import get_current_user
from community_moderation.services.notification_service import (
    count_unread,
    get_notification,
    list_notifications,
    mark_all_read,
    update_notification,
)

router = APIRouter(prefix='/notifications', tags=['notifications'])


@router.get('', response_model=list[NotificationOut])
def list_notifications_endpoint(
    unread_only: bool = False,
    report_id: Optional[str] = None,
    kind: Optional[str] = Query(default=None, alias='type'),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> list[NotificationOut]:
    records = list_notifications(
        session,
        user.id,
        unread_only=unread_only,
        report_id=report_id,
        kind=kind,
        limit=limit,
        offset=offset,
    )
    return [NotificationOut.model_validate(record) for record in records]


@router.get('/unread-count', response_model=UnreadCount)
def unread_count_endpoint(
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> UnreadCount:
    return UnreadCount(unread=count_unread(session, user.id))


@router.patch('/{notification_id}', response_model=NotificationOut)
def update_notification_endpoint(
    notification_id: str,
    payload: NotificationUpdate,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> NotificationOut:
    record = get_notification(session, notification_id)
    # other users' notifications are reported as missing
    if record is None or record.user_id != user.id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Notification not found')
    return NotificationOut.model_validate(update_notification(session, record, payload))


@router.post('/read-all')
def mark_all_notifications_read(
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> dict:
    return {'status': 'ok', 'updated': mark_all_read(session, user.id)}
