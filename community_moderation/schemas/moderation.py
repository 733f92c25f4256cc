from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field
from community_moderation.models.enums import (
    AgeGroup,
    EvidenceType,
    MetricsTimeframe,
    ModerationDecision,
    ModeratorActionType,
    ModeratorLevel,
    ModeratorStatus,
    ModeratorType,
    QueueFilterType,
    QueueSortBy,
    QueueType,
    ReportCategory,
    ReportStatus,
    ReportTimeRange,
    ReportType,
    ResolutionType,
    Severity,
    SeveritySource,
    VerificationStatus,
    VoteType,
)


class ReporterProfile(BaseModel):
    id: str
    name: Optional[str] = None
    age_group: Optional[AgeGroup] = None


class VoterProfile(BaseModel):
    id: str
    age_group: Optional[AgeGroup] = None


class EvidenceIn(BaseModel):
    evidence_type: EvidenceType = EvidenceType.TEXT_QUOTE
    content: str = ''
    details: dict[str, Any] = Field(default_factory=dict)


class ReportSubmission(BaseModel):
    report_type: ReportType
    description: str = Field(min_length=1)
    evidence: list[EvidenceIn] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)


class ReportCreate(ReportSubmission):
    content_id: str = Field(min_length=1)


class VoteCreate(BaseModel):
    vote_type: VoteType
    confidence: float = Field(ge=0.0, le=1.0)
    reasoning: Optional[str] = None


class ReviewCreate(BaseModel):
    decision: ModerationDecision
    reasoning: str
    review_time: float = Field(default=0.0, ge=0.0)
    evidence_reviewed: list[str] = Field(default_factory=list)


class ResolutionCreate(BaseModel):
    resolution_type: ResolutionType
    reasoning: str
    actions: list[str] = Field(default_factory=list)
    appealable: Optional[bool] = None


class EscalationCreate(BaseModel):
    reasoning: str = ''


class DismissalCreate(BaseModel):
    reasoning: str = ''


class AppealCreate(BaseModel):
    reason: str = Field(min_length=1)


class EvidenceVerificationUpdate(BaseModel):
    verification_status: VerificationStatus


class QueueFilter(BaseModel):
    filter_type: QueueFilterType
    value: str
    is_active: bool = True


class ReportListFilters(BaseModel):
    status: list[ReportStatus] = Field(default_factory=list)
    report_type: list[ReportType] = Field(default_factory=list)
    severity: list[Severity] = Field(default_factory=list)
    category: list[ReportCategory] = Field(default_factory=list)
    time_range: ReportTimeRange = ReportTimeRange.ALL_TIME
    reporter_id: Optional[str] = None


class ModeratorCreate(BaseModel):
    user_id: Optional[str] = None
    name: str = Field(min_length=1)
    moderator_level: ModeratorLevel = ModeratorLevel.TRAINEE
    specializations: list[str] = Field(default_factory=list)
    permissions: list[str] = Field(default_factory=list)
    reputation: float = 0.0
    status: ModeratorStatus = ModeratorStatus.ACTIVE


class EvidenceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    evidence_type: EvidenceType
    content: str
    details: dict[str, Any]
    verification_status: VerificationStatus
    submitted_by: str
    verified_by: Optional[str] = None


class VoteOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    report_id: str
    voter_id: str
    voter_age_group: AgeGroup
    vote_type: VoteType
    confidence: float
    reasoning: Optional[str] = None
    weight: float
    created_at: datetime


class ModeratorActionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    report_id: str
    moderator_id: str
    moderator_type: ModeratorType
    action_type: ModeratorActionType
    decision: Optional[ModerationDecision] = None
    reasoning: str
    evidence_reviewed: list[str]
    review_time: float
    appealed: bool
    created_at: datetime


class ResolutionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    report_id: str
    resolved_by: str
    resolution_type: ResolutionType
    reasoning: str
    actions: list[str]
    appealable: bool
    appeal_deadline: Optional[datetime] = None
    created_at: datetime


class ReportOut(BaseModel):
    id: str
    content_id: str
    reporter_id: str
    reporter_name: Optional[str] = None
    reporter_age_group: AgeGroup
    report_type: ReportType
    category: ReportCategory
    description: str
    severity: Severity
    severity_source: SeveritySource
    tags: list[str]
    status: ReportStatus
    priority: int
    queue_type: QueueType
    created_at: datetime
    escalated_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None
    appealed_at: Optional[datetime] = None
    evidence: list[EvidenceOut]
    community_votes: list[VoteOut]
    moderator_actions: list[ModeratorActionOut]
    resolution: Optional[ResolutionOut] = None


class QueueOut(BaseModel):
    queue_type: QueueType
    sort_by: QueueSortBy
    filters: list[QueueFilter]
    last_updated: Optional[datetime] = None
    reports: list[ReportOut]


class CommunityParticipation(BaseModel):
    active_reporters: int
    average_votes_per_report: float
    consensus_rate: float


class ModeratorPerformance(BaseModel):
    active_moderators: int
    average_review_time: float
    accuracy_score: float
    escalation_rate: float


class ContentHealth(BaseModel):
    violation_rate: float
    false_positive_rate: float
    repeat_offender_rate: float
    improvement_trend: float


class SystemEfficiency(BaseModel):
    automation_rate: float
    human_review_required: float
    appeal_rate: float
    overturn_rate: float


class ModerationMetrics(BaseModel):
    timeframe: MetricsTimeframe
    total_reports: int
    resolved_reports: int
    average_resolution_time: float
    community_participation: CommunityParticipation
    moderator_performance: ModeratorPerformance
    content_health: ContentHealth
    system_efficiency: SystemEfficiency


class ModeratorOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    moderator_id: str
    name: str
    moderator_level: ModeratorLevel
    moderator_type: ModeratorType
    specializations: list[str]
    permissions: list[str]
    reputation: float
    status: ModeratorStatus


class ModeratorStatisticsOut(BaseModel):
    moderator_id: str
    reports_reviewed: int
    average_review_time: float
    enforcement_actions: int
    escalations: int
    last_action_at: Optional[datetime] = None
