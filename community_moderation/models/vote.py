from typing import Optional
import sqlalchemy as sa
from sqlmodel import Field, SQLModel
from community_moderation.models.base import IDModel, TimestampModel
from community_moderation.models.enums import AgeGroup, VoteType, enum_column


class CommunityVote(IDModel, TimestampModel, SQLModel, table=True):
    __tablename__ = 'community_votes'
    __table_args__ = (sa.UniqueConstraint('report_id', 'voter_id', name='uq_community_vote_report_voter'),)

    report_id: str = Field(index=True)
    voter_id: str = Field(index=True)
    voter_age_group: AgeGroup = Field(
        default=AgeGroup.ADULT,
        sa_column=enum_column(AgeGroup, 'vote_voter_age_group'),
    )
    vote_type: VoteType = Field(sa_column=enum_column(VoteType, 'vote_type'))
    confidence: float = 0.0
    reasoning: Optional[str] = None
    weight: float = 1.0


class VoterWeight(TimestampModel, SQLModel, table=True):
    """Weight assigned to a voter on their first vote and reused afterwards."""

    __tablename__ = 'voter_weights'

    voter_id: str = Field(primary_key=True)
    weight: float
