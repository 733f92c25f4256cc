from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel import Session
from community_moderation.db.session import get_session
from community_moderation.models.enums import (
    AgeGroup,
    MetricsTimeframe,
    QueueFilterType,
    QueueSortBy,
    QueueType,
    ReportCategory,
    ReportStatus,
    ReportTimeRange,
    ReportType,
    Severity,
)
from community_moderation.models.moderator import ModeratorProfile
from community_moderation.models.user import User
from community_moderation.schemas.moderation import (
    AppealCreate,
    DismissalCreate,
    EscalationCreate,
    EvidenceOut,
    EvidenceVerificationUpdate,
    ModerationMetrics,
    ModeratorActionOut,
    QueueFilter,
    QueueOut,
    ReportCreate,
    ReporterProfile,
    ReportListFilters,
    ReportOut,
    ResolutionCreate,
    ResolutionOut,
    ReviewCreate,
    VoteCreate,
    VoteOut,
    VoterProfile,
)
from community_moderation.services.auth_service import get_current_user
from community_moderation.services.errors import (
    EvidenceNotFoundError,
    ModerationError,
    ModeratorNotFoundError,
    ReportNotFoundError,
)
from community_moderation.services.moderation_engine import CommunityModerationEngine, get_moderation_engine
from community_moderation.services.moderation_types import ReportSnapshot
from community_moderation.services.moderator_service import get_current_moderator, get_moderator

router = APIRouter(prefix='/moderation', tags=['moderation'])

NOT_FOUND_ERRORS = (ReportNotFoundError, ModeratorNotFoundError, EvidenceNotFoundError)


def _http_error(exc: ModerationError) -> HTTPException:
    if isinstance(exc, NOT_FOUND_ERRORS):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))


def to_report_out(snapshot: ReportSnapshot) -> ReportOut:
    report = snapshot.report
    return ReportOut(
        id=report.id,
        content_id=report.content_id,
        reporter_id=report.reporter_id,
        reporter_name=report.reporter_name,
        reporter_age_group=report.reporter_age_group,
        report_type=report.report_type,
        category=report.category,
        description=report.description,
        severity=report.severity,
        severity_source=report.severity_source,
        tags=list(report.tags or []),
        status=report.status,
        priority=report.priority,
        queue_type=report.queue_type,
        created_at=report.created_at,
        escalated_at=report.escalated_at,
        closed_at=report.closed_at,
        appealed_at=report.appealed_at,
        evidence=[EvidenceOut.model_validate(item) for item in snapshot.evidence],
        community_votes=[VoteOut.model_validate(vote) for vote in snapshot.votes],
        moderator_actions=[ModeratorActionOut.model_validate(action) for action in snapshot.actions],
        resolution=ResolutionOut.model_validate(snapshot.resolution) if snapshot.resolution else None,
    )


@router.post('/reports', response_model=ReportOut, status_code=status.HTTP_201_CREATED)
async def submit_report_endpoint(
    payload: ReportCreate,
    user: User = Depends(get_current_user),
    engine: CommunityModerationEngine = Depends(get_moderation_engine),
) -> ReportOut:
    reporter = ReporterProfile(id=user.id, name=user.name, age_group=user.age_group)
    snapshot = await engine.submit_report(payload.content_id, user.id, reporter, payload)
    return to_report_out(snapshot)


@router.get('/reports', response_model=list[ReportOut])
def list_reports_endpoint(
    status_filter: list[ReportStatus] = Query(default=[], alias='status'),
    report_type: list[ReportType] = Query(default=[]),
    severity: list[Severity] = Query(default=[]),
    category: list[ReportCategory] = Query(default=[]),
    time_range: ReportTimeRange = ReportTimeRange.ALL_TIME,
    mine: bool = False,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
    engine: CommunityModerationEngine = Depends(get_moderation_engine),
) -> list[ReportOut]:
    # only moderators may browse reports filed by other people
    is_moderator = get_moderator(session, user.id) is not None
    filters = ReportListFilters(
        status=status_filter,
        report_type=report_type,
        severity=severity,
        category=category,
        time_range=time_range,
        reporter_id=user.id if mine or not is_moderator else None,
    )
    return [to_report_out(snapshot) for snapshot in engine.list_reports(filters)]


@router.get('/reports/{report_id}', response_model=ReportOut)
def get_report_endpoint(
    report_id: str,
    _: User = Depends(get_current_user),
    engine: CommunityModerationEngine = Depends(get_moderation_engine),
) -> ReportOut:
    try:
        snapshot = engine.get_report(report_id)
    except ModerationError as exc:
        raise _http_error(exc) from exc
    return to_report_out(snapshot)


@router.post('/reports/{report_id}/votes', response_model=VoteOut, status_code=status.HTTP_201_CREATED)
def submit_vote_endpoint(
    report_id: str,
    payload: VoteCreate,
    user: User = Depends(get_current_user),
    engine: CommunityModerationEngine = Depends(get_moderation_engine),
) -> VoteOut:
    voter = VoterProfile(id=user.id, age_group=user.age_group)
    try:
        vote = engine.submit_community_vote(report_id, user.id, voter, payload)
    except ModerationError as exc:
        raise _http_error(exc) from exc
    return VoteOut.model_validate(vote)


@router.post(
    '/reports/{report_id}/reviews',
    response_model=ModeratorActionOut,
    status_code=status.HTTP_201_CREATED,
)
def review_report_endpoint(
    report_id: str,
    payload: ReviewCreate,
    moderator: ModeratorProfile = Depends(get_current_moderator),
    engine: CommunityModerationEngine = Depends(get_moderation_engine),
) -> ModeratorActionOut:
    try:
        action = engine.moderator_review(report_id, moderator.moderator_id, payload)
    except ModerationError as exc:
        raise _http_error(exc) from exc
    return ModeratorActionOut.model_validate(action)


@router.post('/reports/{report_id}/escalate', response_model=ModeratorActionOut)
def escalate_report_endpoint(
    report_id: str,
    payload: EscalationCreate,
    moderator: ModeratorProfile = Depends(get_current_moderator),
    engine: CommunityModerationEngine = Depends(get_moderation_engine),
) -> ModeratorActionOut:
    try:
        action = engine.escalate_report(report_id, moderator.moderator_id, payload.reasoning)
    except ModerationError as exc:
        raise _http_error(exc) from exc
    return ModeratorActionOut.model_validate(action)


@router.post('/reports/{report_id}/dismiss', response_model=ReportOut)
def dismiss_report_endpoint(
    report_id: str,
    payload: DismissalCreate,
    moderator: ModeratorProfile = Depends(get_current_moderator),
    engine: CommunityModerationEngine = Depends(get_moderation_engine),
) -> ReportOut:
    try:
        engine.dismiss_report(report_id, moderator.moderator_id, payload.reasoning)
        snapshot = engine.get_report(report_id)
    except ModerationError as exc:
        raise _http_error(exc) from exc
    return to_report_out(snapshot)


@router.post(
    '/reports/{report_id}/resolution',
    response_model=ResolutionOut,
    status_code=status.HTTP_201_CREATED,
)
def resolve_report_endpoint(
    report_id: str,
    payload: ResolutionCreate,
    moderator: ModeratorProfile = Depends(get_current_moderator),
    engine: CommunityModerationEngine = Depends(get_moderation_engine),
) -> ResolutionOut:
    try:
        resolution = engine.resolve_report(report_id, moderator.moderator_id, payload)
    except ModerationError as exc:
        raise _http_error(exc) from exc
    return ResolutionOut.model_validate(resolution)


@router.post('/reports/{report_id}/appeal', response_model=ReportOut)
def appeal_report_endpoint(
    report_id: str,
    payload: AppealCreate,
    user: User = Depends(get_current_user),
    engine: CommunityModerationEngine = Depends(get_moderation_engine),
) -> ReportOut:
    try:
        if engine.get_report(report_id).report.reporter_id != user.id:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail='Only the reporter can appeal')
        engine.appeal_report(report_id, user.id, payload.reason)
        snapshot = engine.get_report(report_id)
    except ModerationError as exc:
        raise _http_error(exc) from exc
    return to_report_out(snapshot)


@router.patch('/reports/{report_id}/evidence/{evidence_id}', response_model=EvidenceOut)
def verify_evidence_endpoint(
    report_id: str,
    evidence_id: str,
    payload: EvidenceVerificationUpdate,
    moderator: ModeratorProfile = Depends(get_current_moderator),
    engine: CommunityModerationEngine = Depends(get_moderation_engine),
) -> EvidenceOut:
    try:
        evidence = engine.verify_evidence(report_id, evidence_id, moderator.moderator_id, payload.verification_status)
    except ModerationError as exc:
        raise _http_error(exc) from exc
    return EvidenceOut.model_validate(evidence)


@router.get('/queues/{queue_type}', response_model=QueueOut)
def get_queue_endpoint(
    queue_type: QueueType,
    sort_by: Optional[QueueSortBy] = None,
    report_type: Optional[ReportType] = None,
    severity: Optional[Severity] = None,
    age_group: Optional[AgeGroup] = None,
    category: Optional[ReportCategory] = None,
    tag: Optional[str] = None,
    time_range: Optional[ReportTimeRange] = None,
    _: ModeratorProfile = Depends(get_current_moderator),
    engine: CommunityModerationEngine = Depends(get_moderation_engine),
) -> QueueOut:
    requested = {
        QueueFilterType.REPORT_TYPE: report_type,
        QueueFilterType.SEVERITY: severity,
        QueueFilterType.AGE_GROUP: age_group,
        QueueFilterType.CATEGORY: category,
        QueueFilterType.TAG: tag,
        QueueFilterType.TIME_RANGE: time_range,
    }
    filters = [
        QueueFilter(filter_type=filter_type, value=getattr(value, 'value', value))
        for filter_type, value in requested.items()
        if value is not None
    ]
    view = engine.get_moderation_queue(queue_type, filters=filters, sort_by=sort_by)
    return QueueOut(
        queue_type=view.queue_type,
        sort_by=view.sort_by,
        filters=view.filters,
        last_updated=view.last_updated,
        reports=[to_report_out(snapshot) for snapshot in view.reports],
    )


@router.get('/metrics', response_model=ModerationMetrics)
def get_metrics_endpoint(
    timeframe: MetricsTimeframe = MetricsTimeframe.WEEKLY,
    _: ModeratorProfile = Depends(get_current_moderator),
    engine: CommunityModerationEngine = Depends(get_moderation_engine),
) -> ModerationMetrics:
    return engine.get_moderation_metrics(timeframe)
