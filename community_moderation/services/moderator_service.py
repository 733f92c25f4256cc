from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import Depends, HTTPException, status
from loguru import logger
from sqlmodel import Session, select

from community_moderation.db.session import get_session
from community_moderation.models.base import utc_now
from community_moderation.models.enums import (
    ModerationDecision,
    ModeratorActionType,
    ModeratorLevel,
    ModeratorStatus,
    ModeratorType,
)
from community_moderation.models.moderator import ModeratorProfile, ModeratorStatistics
from community_moderation.models.moderator_action import ModeratorAction
from community_moderation.models.user import User
from community_moderation.repositories.base import ModerationRepository
from community_moderation.schemas.moderation import ModeratorCreate
from community_moderation.services.auth_service import get_current_user


def moderator_type_for(profile: ModeratorProfile) -> ModeratorType:
    level = ModeratorLevel(profile.moderator_level)
    if level == ModeratorLevel.ADMIN:
        return ModeratorType.STAFF
    if level in (ModeratorLevel.LEAD, ModeratorLevel.SENIOR):
        return ModeratorType.VOLUNTEER
    return ModeratorType.COMMUNITY


def upsert_moderator(session: Session, moderator_id: str, payload: ModeratorCreate) -> ModeratorProfile:
    record = session.get(ModeratorProfile, moderator_id)
    if record is None:
        record = ModeratorProfile(moderator_id=moderator_id, name=payload.name)
    record.name = payload.name
    record.moderator_level = payload.moderator_level
    record.specializations = list(payload.specializations)
    record.permissions = list(payload.permissions)
    record.reputation = payload.reputation
    record.status = payload.status
    session.add(record)
    session.commit()
    session.refresh(record)
    return record


def list_moderators(
    session: Session,
    status: Optional[ModeratorStatus] = None,
    limit: Optional[int] = 50,
    offset: int = 0,
) -> list[ModeratorProfile]:
    statement = select(ModeratorProfile)
    if status is not None:
        statement = statement.where(ModeratorProfile.status == status)
    statement = statement.order_by(ModeratorProfile.created_at)
    if offset:
        statement = statement.offset(offset)
    if limit is not None:
        statement = statement.limit(limit)
    return list(session.exec(statement).all())


def get_moderator(session: Session, moderator_id: str) -> Optional[ModeratorProfile]:
    return session.get(ModeratorProfile, moderator_id)


def get_moderator_statistics(session: Session, moderator_id: str) -> ModeratorStatistics:
    return session.get(ModeratorStatistics, moderator_id) or ModeratorStatistics(moderator_id=moderator_id)


def get_current_moderator(
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> ModeratorProfile:
    profile = session.get(ModeratorProfile, user.id)
    if profile is None or ModeratorStatus(profile.status) != ModeratorStatus.ACTIVE:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail='Moderator only')
    return profile


class ModeratorStatisticsRecorder:
    """Moderator-performance store fed by every recorded moderator action."""

    def __init__(self, repository: ModerationRepository) -> None:
        self.repository = repository

    def record(self, moderator_id: str, action: ModeratorAction, now: Optional[datetime] = None) -> ModeratorStatistics:
        stats = self.repository.get_moderator_statistics(moderator_id)
        if stats is None:
            stats = ModeratorStatistics(moderator_id=moderator_id)
        action_type = ModeratorActionType(action.action_type)
        if action_type in (ModeratorActionType.REVIEW, ModeratorActionType.APPEAL_REVIEW):
            stats.reports_reviewed += 1
            stats.total_review_time += action.review_time or 0.0
        if action_type == ModeratorActionType.ESCALATE:
            stats.escalations += 1
        if action.decision is not None and ModerationDecision(action.decision) not in (
            ModerationDecision.NO_ACTION,
            ModerationDecision.APPROVE,
        ):
            stats.enforcement_actions += 1
        stats.last_action_at = now or utc_now()
        stats = self.repository.save_moderator_statistics(stats)
        logger.debug(
            'moderation.moderator.statistics_updated',
            moderator_id=moderator_id,
            reports_reviewed=stats.reports_reviewed,
        )
        return stats
