from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from community_moderation.models.enums import ModeratorStatus, QueueType
from community_moderation.models.evidence import ReportEvidence
from community_moderation.models.moderator import ModeratorProfile, ModeratorStatistics
from community_moderation.models.moderator_action import ModeratorAction
from community_moderation.models.notification import Notification
from community_moderation.models.queue_entry import QueueEntry
from community_moderation.models.report import ModerationReport
from community_moderation.models.resolution import ReportResolution
from community_moderation.models.vote import CommunityVote


class ModerationRepository(Protocol):
    """Storage used by the moderation engine.

    Implementations persist records as given and never delete reports. Writes
    that would break a uniqueness rule raise the matching domain error:
    ``DuplicateVoteError`` for a second vote by the same voter and
    ``ReportAlreadyResolvedError`` for a second resolution.
    """

    def add_report(self, report: ModerationReport, evidence: list[ReportEvidence]) -> ModerationReport: ...

    def get_report(self, report_id: str) -> Optional[ModerationReport]: ...

    def save_report(self, report: ModerationReport) -> ModerationReport: ...

    def list_reports(
        self,
        *,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        reporter_id: Optional[str] = None,
        content_id: Optional[str] = None,
    ) -> list[ModerationReport]: ...

    def list_evidence(self, report_id: str) -> list[ReportEvidence]: ...

    def get_evidence(self, evidence_id: str) -> Optional[ReportEvidence]: ...

    def save_evidence(self, evidence: ReportEvidence) -> ReportEvidence: ...

    def add_vote(self, vote: CommunityVote) -> CommunityVote: ...

    def get_vote(self, report_id: str, voter_id: str) -> Optional[CommunityVote]: ...

    def list_votes(self, report_id: str) -> list[CommunityVote]: ...

    def get_voter_weight(self, voter_id: str) -> Optional[float]: ...

    def set_voter_weight(self, voter_id: str, weight: float) -> None: ...

    def add_action(self, action: ModeratorAction) -> ModeratorAction: ...

    def save_action(self, action: ModeratorAction) -> ModeratorAction: ...

    def list_actions(self, report_id: str) -> list[ModeratorAction]: ...

    def add_resolution(self, resolution: ReportResolution) -> ReportResolution: ...

    def get_resolution(self, report_id: str) -> Optional[ReportResolution]: ...

    def save_resolution(self, resolution: ReportResolution) -> ReportResolution: ...

    def add_queue_entry(self, entry: QueueEntry) -> bool: ...

    def list_queue(self, queue_type: QueueType) -> list[QueueEntry]: ...

    def get_moderator(self, moderator_id: str) -> Optional[ModeratorProfile]: ...

    def save_moderator(self, profile: ModeratorProfile) -> ModeratorProfile: ...

    def list_moderators(self, status: Optional[ModeratorStatus] = None) -> list[ModeratorProfile]: ...

    def get_moderator_statistics(self, moderator_id: str) -> Optional[ModeratorStatistics]: ...

    def save_moderator_statistics(self, stats: ModeratorStatistics) -> ModeratorStatistics: ...

    def add_notification(self, notification: Notification) -> Notification: ...
