from __future__ import annotations

from datetime import datetime
from typing import Optional

from community_moderation.models.base import ensure_utc
from community_moderation.models.enums import ModeratorStatus, QueueType
from community_moderation.models.evidence import ReportEvidence
from community_moderation.models.moderator import ModeratorProfile, ModeratorStatistics
from community_moderation.models.moderator_action import ModeratorAction
from community_moderation.models.notification import Notification
from community_moderation.models.queue_entry import QueueEntry
from community_moderation.models.report import ModerationReport
from community_moderation.models.resolution import ReportResolution
from community_moderation.models.vote import CommunityVote
from community_moderation.services.errors import DuplicateVoteError, ReportAlreadyResolvedError


class InMemoryModerationRepository:
    """Dict-backed ``ModerationRepository`` for tests and local experiments.

    Records are stored by reference, so mutations made by the engine are visible
    without an explicit save. Nothing here is persisted across processes.
    """

    def __init__(self) -> None:
        self.reports: dict[str, ModerationReport] = {}
        self.evidence: dict[str, ReportEvidence] = {}
        self.votes: dict[tuple[str, str], CommunityVote] = {}
        self.voter_weights: dict[str, float] = {}
        self.actions: list[ModeratorAction] = []
        self.resolutions: dict[str, ReportResolution] = {}
        self.queues: dict[QueueType, list[QueueEntry]] = {queue_type: [] for queue_type in QueueType}
        self.moderators: dict[str, ModeratorProfile] = {}
        self.moderator_statistics: dict[str, ModeratorStatistics] = {}
        self.notifications: list[Notification] = []

    def add_report(self, report: ModerationReport, evidence: list[ReportEvidence]) -> ModerationReport:
        self.reports[report.id] = report
        for item in evidence:
            self.evidence[item.id] = item
        return report

    def get_report(self, report_id: str) -> Optional[ModerationReport]:
        return self.reports.get(report_id)

    def save_report(self, report: ModerationReport) -> ModerationReport:
        self.reports[report.id] = report
        return report

    def list_reports(
        self,
        *,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        reporter_id: Optional[str] = None,
        content_id: Optional[str] = None,
    ) -> list[ModerationReport]:
        results = []
        for report in self.reports.values():
            created_at = ensure_utc(report.created_at)
            if since is not None and created_at < since:
                continue
            if until is not None and created_at >= until:
                continue
            if reporter_id is not None and report.reporter_id != reporter_id:
                continue
            if content_id is not None and report.content_id != content_id:
                continue
            results.append(report)
        return sorted(results, key=lambda item: ensure_utc(item.created_at))

    def list_evidence(self, report_id: str) -> list[ReportEvidence]:
        return [item for item in self.evidence.values() if item.report_id == report_id]

    def get_evidence(self, evidence_id: str) -> Optional[ReportEvidence]:
        return self.evidence.get(evidence_id)

    def save_evidence(self, evidence: ReportEvidence) -> ReportEvidence:
        self.evidence[evidence.id] = evidence
        return evidence

    def add_vote(self, vote: CommunityVote) -> CommunityVote:
        key = (vote.report_id, vote.voter_id)
        if key in self.votes:
            raise DuplicateVoteError(vote.report_id, vote.voter_id)
        self.votes[key] = vote
        return vote

    def get_vote(self, report_id: str, voter_id: str) -> Optional[CommunityVote]:
        return self.votes.get((report_id, voter_id))

    def list_votes(self, report_id: str) -> list[CommunityVote]:
        return [vote for (vote_report_id, _), vote in self.votes.items() if vote_report_id == report_id]

    def get_voter_weight(self, voter_id: str) -> Optional[float]:
        return self.voter_weights.get(voter_id)

    def set_voter_weight(self, voter_id: str, weight: float) -> None:
        self.voter_weights[voter_id] = weight

    def add_action(self, action: ModeratorAction) -> ModeratorAction:
        self.actions.append(action)
        return action

    def save_action(self, action: ModeratorAction) -> ModeratorAction:
        return action

    def list_actions(self, report_id: str) -> list[ModeratorAction]:
        return [action for action in self.actions if action.report_id == report_id]

    def add_resolution(self, resolution: ReportResolution) -> ReportResolution:
        if resolution.report_id in self.resolutions:
            raise ReportAlreadyResolvedError(resolution.report_id)
        self.resolutions[resolution.report_id] = resolution
        return resolution

    def get_resolution(self, report_id: str) -> Optional[ReportResolution]:
        return self.resolutions.get(report_id)

    def save_resolution(self, resolution: ReportResolution) -> ReportResolution:
        self.resolutions[resolution.report_id] = resolution
        return resolution

    def add_queue_entry(self, entry: QueueEntry) -> bool:
        entries = self.queues[QueueType(entry.queue_type)]
        if any(item.report_id == entry.report_id for item in entries):
            return False
        entries.append(entry)
        return True

    def list_queue(self, queue_type: QueueType) -> list[QueueEntry]:
        return list(self.queues[QueueType(queue_type)])

    def get_moderator(self, moderator_id: str) -> Optional[ModeratorProfile]:
        return self.moderators.get(moderator_id)

    def save_moderator(self, profile: ModeratorProfile) -> ModeratorProfile:
        self.moderators[profile.moderator_id] = profile
        return profile

    def list_moderators(self, status: Optional[ModeratorStatus] = None) -> list[ModeratorProfile]:
        return [
            profile
            for profile in self.moderators.values()
            if status is None or profile.status == status
        ]

    def get_moderator_statistics(self, moderator_id: str) -> Optional[ModeratorStatistics]:
        return self.moderator_statistics.get(moderator_id)

    def save_moderator_statistics(self, stats: ModeratorStatistics) -> ModeratorStatistics:
        self.moderator_statistics[stats.moderator_id] = stats
        return stats

    def add_notification(self, notification: Notification) -> Notification:
        self.notifications.append(notification)
        return notification
