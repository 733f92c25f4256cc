from __future__ import annotations

from typing import Iterable, Optional

from loguru import logger
from sqlmodel import Session, func, select

from community_moderation.models.enums import ModeratorStatus
from community_moderation.models.notification import Notification
from community_moderation.models.report import ModerationReport
from community_moderation.models.resolution import ReportResolution
from community_moderation.repositories.base import ModerationRepository
from community_moderation.schemas.notification import NotificationUpdate

REPORT_SUBMITTED = 'moderation.report_submitted'
REPORT_ESCALATED = 'moderation.report_escalated'
REPORT_RESOLVED = 'moderation.report_resolved'
REPORT_APPEALED = 'moderation.report_appealed'


def _value(item) -> str:
    return item.value if hasattr(item, 'value') else str(item)


def _user_notifications(user_id: str):
    return select(Notification).where(Notification.user_id == user_id)


def list_notifications(
    session: Session,
    user_id: str,
    unread_only: bool = False,
    report_id: Optional[str] = None,
    kind: Optional[str] = None,
    limit: Optional[int] = 50,
    offset: int = 0,
) -> list[Notification]:
    statement = _user_notifications(user_id)
    if unread_only:
        statement = statement.where(Notification.read.is_(False))
    if report_id is not None:
        statement = statement.where(Notification.report_id == report_id)
    if kind is not None:
        statement = statement.where(Notification.type == kind)
    statement = statement.order_by(Notification.created_at.desc())
    if offset:
        statement = statement.offset(offset)
    if limit is not None:
        statement = statement.limit(limit)
    return list(session.exec(statement).all())


def count_unread(session: Session, user_id: str) -> int:
    statement = select(func.count()).select_from(Notification).where(
        (Notification.user_id == user_id) & (Notification.read.is_(False))
    )
    return int(session.exec(statement).one())


def get_notification(session: Session, notification_id: str) -> Optional[Notification]:
    return session.get(Notification, notification_id)


def update_notification(session: Session, record: Notification, payload: NotificationUpdate) -> Notification:
    record.read = payload.read
    session.add(record)
    session.commit()
    session.refresh(record)
    return record


def mark_all_read(session: Session, user_id: str) -> int:
    unread = session.exec(_user_notifications(user_id).where(Notification.read.is_(False))).all()
    for record in unread:
        record.read = True
        session.add(record)
    session.commit()
    logger.debug('notifications.read_all', user_id=user_id, updated=len(unread))
    return len(unread)


class ModerationNotifier:
    """Writes in-app notifications for report lifecycle events."""

    def __init__(self, repository: ModerationRepository) -> None:
        self.repository = repository

    def _active_moderator_ids(self) -> list[str]:
        return [profile.moderator_id for profile in self.repository.list_moderators(ModeratorStatus.ACTIVE)]

    def _send(self, user_ids: Iterable[str], kind: str, content: str, report_id: str) -> int:
        sent = 0
        for user_id in dict.fromkeys(user_ids):
            self.repository.add_notification(
                Notification(user_id=user_id, type=kind, content=content, report_id=report_id)
            )
            sent += 1
        logger.info('moderation.notifications.sent', kind=kind, report_id=report_id, recipients=sent)
        return sent

    def notify_moderators(self, report: ModerationReport) -> int:
        content = (
            f'New {_value(report.report_type)} report on {report.content_id} '
            f'(severity {_value(report.severity)}, priority {report.priority})'
        )
        return self._send(self._active_moderator_ids(), REPORT_SUBMITTED, content, report.id)

    def notify_escalation(self, report: ModerationReport) -> int:
        content = f'Report {report.id} was escalated (priority {report.priority})'
        return self._send(self._active_moderator_ids(), REPORT_ESCALATED, content, report.id)

    def notify_resolution(
        self,
        report: ModerationReport,
        resolution: ReportResolution,
        moderator_ids: Iterable[str] = (),
    ) -> int:
        content = f'Report on {report.content_id} resolved: {_value(resolution.resolution_type)}'
        if resolution.appeal_deadline is not None:
            content += f' (appealable until {resolution.appeal_deadline.isoformat()})'
        recipients = [report.reporter_id, *moderator_ids]
        return self._send(recipients, REPORT_RESOLVED, content, report.id)

    def notify_appeal(self, report: ModerationReport) -> int:
        content = f'Resolution of report {report.id} was appealed'
        return self._send(self._active_moderator_ids(), REPORT_APPEALED, content, report.id)
