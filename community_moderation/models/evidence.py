from typing import Any, Optional
import sqlalchemy as sa
from sqlmodel import Field, SQLModel
from community_moderation.models.base import IDModel, TimestampModel
from community_moderation.models.enums import EvidenceType, VerificationStatus, enum_column


class ReportEvidence(IDModel, TimestampModel, SQLModel, table=True):
    __tablename__ = 'report_evidence'

    report_id: str = Field(index=True)
    evidence_type: EvidenceType = Field(
        default=EvidenceType.TEXT_QUOTE,
        sa_column=enum_column(EvidenceType, 'evidence_type'),
    )
    content: str = Field(default='', sa_column=sa.Column(sa.Text(), nullable=False))
    details: dict[str, Any] = Field(default_factory=dict, sa_column=sa.Column(sa.JSON(), nullable=False))
    verification_status: VerificationStatus = Field(
        default=VerificationStatus.UNVERIFIED,
        sa_column=enum_column(VerificationStatus, 'evidence_verification_status'),
    )
    submitted_by: str
    verified_by: Optional[str] = None
