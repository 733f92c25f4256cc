from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from community_moderation.models.enums import QueueSortBy, QueueType
from community_moderation.models.evidence import ReportEvidence
from community_moderation.models.moderator_action import ModeratorAction
from community_moderation.models.report import ModerationReport
from community_moderation.models.resolution import ReportResolution
from community_moderation.models.vote import CommunityVote
from community_moderation.schemas.moderation import QueueFilter
from community_moderation.services.moderation_scoring import weighted_support_ratio


@dataclass
class ReportSnapshot:
    """A report together with everything recorded against it."""

    report: ModerationReport
    evidence: list[ReportEvidence] = field(default_factory=list)
    votes: list[CommunityVote] = field(default_factory=list)
    actions: list[ModeratorAction] = field(default_factory=list)
    resolution: Optional[ReportResolution] = None

    @property
    def support_ratio(self) -> float:
        return weighted_support_ratio(self.votes)


@dataclass
class ModerationQueueView:
    queue_type: QueueType
    sort_by: QueueSortBy
    filters: list[QueueFilter]
    last_updated: Optional[datetime]
    reports: list[ReportSnapshot]
