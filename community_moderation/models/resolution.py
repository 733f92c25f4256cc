from datetime import datetime
from typing import Optional
import sqlalchemy as sa
from sqlmodel import Field, SQLModel
from community_moderation.models.base import IDModel, TimestampModel, datetime_type
from community_moderation.models.enums import ResolutionType, enum_column


class ReportResolution(IDModel, TimestampModel, SQLModel, table=True):
    __tablename__ = 'report_resolutions'

    report_id: str = Field(index=True, unique=True)
    resolved_by: str
    resolution_type: ResolutionType = Field(sa_column=enum_column(ResolutionType, 'resolution_type'))
    reasoning: str = Field(default='', sa_column=sa.Column(sa.Text(), nullable=False))
    actions: list[str] = Field(default_factory=list, sa_column=sa.Column(sa.JSON(), nullable=False))
    appealable: bool = True
    appeal_deadline: Optional[datetime] = Field(default=None, sa_type=datetime_type())
