from datetime import datetime
from typing import Optional
import sqlalchemy as sa
from sqlmodel import Field, SQLModel
from community_moderation.models.base import IDModel, TimestampModel, datetime_type
from community_moderation.models.enums import (
    AgeGroup,
    QueueType,
    ReportCategory,
    ReportStatus,
    ReportType,
    Severity,
    SeveritySource,
    enum_column,
)


class ModerationReport(IDModel, TimestampModel, SQLModel, table=True):
    """A community flag against a piece of content.

    ``created_at`` is the submission timestamp. ``queue_type`` records the queue
    chosen at submission and is never rewritten; later escalations and appeals
    add queue entries instead.
    """

    __tablename__ = 'moderation_reports'

    content_id: str = Field(index=True)
    reporter_id: str = Field(index=True)
    reporter_name: Optional[str] = None
    reporter_age_group: AgeGroup = Field(
        default=AgeGroup.ADULT,
        sa_column=enum_column(AgeGroup, 'report_reporter_age_group'),
    )
    report_type: ReportType = Field(sa_column=enum_column(ReportType, 'report_type', index=True))
    category: ReportCategory = Field(sa_column=enum_column(ReportCategory, 'report_category'))
    description: str = Field(sa_column=sa.Column(sa.Text(), nullable=False))
    severity: Severity = Field(
        default=Severity.MEDIUM,
        sa_column=enum_column(Severity, 'report_severity', index=True),
    )
    severity_source: SeveritySource = Field(
        default=SeveritySource.FALLBACK,
        sa_column=enum_column(SeveritySource, 'report_severity_source'),
    )
    tags: list[str] = Field(default_factory=list, sa_column=sa.Column(sa.JSON(), nullable=False))
    status: ReportStatus = Field(
        default=ReportStatus.PENDING,
        sa_column=enum_column(ReportStatus, 'moderation_report_status', index=True),
    )
    priority: int = Field(default=5)
    queue_type: QueueType = Field(sa_column=enum_column(QueueType, 'report_queue_type'))
    referral_source: str = 'community_report'
    escalated_at: Optional[datetime] = Field(default=None, sa_type=datetime_type())
    closed_at: Optional[datetime] = Field(default=None, sa_type=datetime_type())
    appealed_at: Optional[datetime] = Field(default=None, sa_type=datetime_type())
    appeal_reason: Optional[str] = None
