from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session
from community_moderation.api.v1.moderation import to_report_out
from community_moderation.db.session import get_session
from community_moderation.models.user import User
from community_moderation.schemas.moderation import ReportListFilters, ReportOut
from community_moderation.schemas.user import UserOut, UserUpdate
from community_moderation.services.auth_service import get_current_user
from community_moderation.services.moderation_engine import CommunityModerationEngine, get_moderation_engine
from community_moderation.services.user_service import to_user_out, update_user

router = APIRouter(prefix='/users', tags=['users'])


@router.get('/me', response_model=UserOut)
def me(user: User = Depends(get_current_user)) -> UserOut:
    return to_user_out(user)


@router.patch('/me', response_model=UserOut)
def update_me(
    payload: UserUpdate,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> UserOut:
    try:
        record = update_user(session, user, payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return to_user_out(record)


@router.get('/me/reports', response_model=list[ReportOut])
def my_reports(
    user: User = Depends(get_current_user),
    engine: CommunityModerationEngine = Depends(get_moderation_engine),
) -> list[ReportOut]:
    snapshots = engine.list_reports(ReportListFilters(reporter_id=user.id))
    return [to_report_out(snapshot) for snapshot in snapshots]
