from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session
from community_moderation.db.session import get_session
from community_moderation.models.enums import ModeratorStatus
from community_moderation.models.moderator import ModeratorProfile
from community_moderation.models.user import User
from community_moderation.schemas.moderation import ModeratorCreate, ModeratorOut, ModeratorStatisticsOut
from community_moderation.services.auth_service import get_current_user, require_admin
from community_moderation.services.moderator_service import (
    get_moderator,
    get_moderator_statistics,
    list_moderators,
    moderator_type_for,
    upsert_moderator,
)

router = APIRouter(prefix='/moderators', tags=['moderators'])


def _to_out(profile: ModeratorProfile) -> ModeratorOut:
    return ModeratorOut(
        moderator_id=profile.moderator_id,
        name=profile.name,
        moderator_level=profile.moderator_level,
        moderator_type=moderator_type_for(profile),
        specializations=list(profile.specializations or []),
        permissions=list(profile.permissions or []),
        reputation=profile.reputation,
        status=profile.status,
    )


@router.post('', response_model=ModeratorOut, status_code=status.HTTP_201_CREATED)
def upsert_moderator_endpoint(
    payload: ModeratorCreate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
) -> ModeratorOut:
    moderator_id = payload.user_id or admin.id
    if session.get(User, moderator_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='User not found')
    record = upsert_moderator(session, moderator_id, payload)
    return _to_out(record)


@router.get('', response_model=list[ModeratorOut])
def list_moderators_endpoint(
    status_filter: Optional[ModeratorStatus] = None,
    limit: int = 50,
    offset: int = 0,
    session: Session = Depends(get_session),
    _: User = Depends(get_current_user),
) -> list[ModeratorOut]:
    records = list_moderators(session, status=status_filter, limit=limit, offset=offset)
    return [_to_out(record) for record in records]


@router.get('/{moderator_id}/statistics', response_model=ModeratorStatisticsOut)
def moderator_statistics_endpoint(
    moderator_id: str,
    session: Session = Depends(get_session),
    _: User = Depends(get_current_user),
) -> ModeratorStatisticsOut:
    if get_moderator(session, moderator_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Moderator not found')
    stats = get_moderator_statistics(session, moderator_id)
    return ModeratorStatisticsOut(
        moderator_id=stats.moderator_id,
        reports_reviewed=stats.reports_reviewed,
        average_review_time=stats.average_review_time,
        enforcement_actions=stats.enforcement_actions,
        escalations=stats.escalations,
        last_action_at=stats.last_action_at,
    )
