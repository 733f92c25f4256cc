from datetime import datetime
from typing import Optional
import sqlalchemy as sa
from sqlmodel import Field, SQLModel
from community_moderation.models.base import TimestampModel, datetime_type
from community_moderation.models.enums import ModeratorLevel, ModeratorStatus, enum_column


class ModeratorProfile(TimestampModel, SQLModel, table=True):
    __tablename__ = 'moderator_profiles'

    moderator_id: str = Field(primary_key=True)
    name: str
    moderator_level: ModeratorLevel = Field(
        default=ModeratorLevel.TRAINEE,
        sa_column=enum_column(ModeratorLevel, 'moderator_level'),
    )
    specializations: list[str] = Field(default_factory=list, sa_column=sa.Column(sa.JSON(), nullable=False))
    permissions: list[str] = Field(default_factory=list, sa_column=sa.Column(sa.JSON(), nullable=False))
    reputation: float = 0.0
    status: ModeratorStatus = Field(
        default=ModeratorStatus.ACTIVE,
        sa_column=enum_column(ModeratorStatus, 'moderator_status'),
    )


class ModeratorStatistics(TimestampModel, SQLModel, table=True):
    __tablename__ = 'moderator_statistics'

    moderator_id: str = Field(primary_key=True)
    reports_reviewed: int = 0
    total_review_time: float = 0.0
    enforcement_actions: int = 0
    escalations: int = 0
    last_action_at: Optional[datetime] = Field(default=None, sa_type=datetime_type())

    @property
    def average_review_time(self) -> float:
        if not self.reports_reviewed:
            return 0.0
        return self.total_review_time / self.reports_reviewed
