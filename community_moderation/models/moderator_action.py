from typing import Optional
import sqlalchemy as sa
from sqlmodel import Field, SQLModel
from community_moderation.models.base import IDModel, TimestampModel
from community_moderation.models.enums import (
    ModerationDecision,
    ModeratorActionType,
    ModeratorType,
    enum_column,
)


class ModeratorAction(IDModel, TimestampModel, SQLModel, table=True):
    __tablename__ = 'moderator_actions'

    report_id: str = Field(index=True)
    moderator_id: str = Field(index=True)
    moderator_type: ModeratorType = Field(sa_column=enum_column(ModeratorType, 'moderator_type'))
    action_type: ModeratorActionType = Field(
        default=ModeratorActionType.REVIEW,
        sa_column=enum_column(ModeratorActionType, 'moderator_action_type'),
    )
    decision: Optional[ModerationDecision] = Field(
        default=None,
        sa_column=enum_column(ModerationDecision, 'moderation_decision', nullable=True),
    )
    reasoning: str = Field(default='', sa_column=sa.Column(sa.Text(), nullable=False))
    evidence_reviewed: list[str] = Field(default_factory=list, sa_column=sa.Column(sa.JSON(), nullable=False))
    review_time: float = 0.0
    appealed: bool = False
