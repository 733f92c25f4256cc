from __future__ import annotations

from datetime import datetime
from typing import Optional

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from community_moderation.models.enums import ModeratorStatus, QueueType
from community_moderation.models.evidence import ReportEvidence
from community_moderation.models.moderator import ModeratorProfile, ModeratorStatistics
from community_moderation.models.moderator_action import ModeratorAction
from community_moderation.models.notification import Notification
from community_moderation.models.queue_entry import QueueEntry
from community_moderation.models.report import ModerationReport
from community_moderation.models.resolution import ReportResolution
from community_moderation.models.vote import CommunityVote, VoterWeight
from community_moderation.services.errors import DuplicateVoteError, ReportAlreadyResolvedError


class SqlModerationRepository:
    """``ModerationRepository`` backed by a SQLModel session; every write commits."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def _persist(self, record):
        self.session.add(record)
        self.session.commit()
        self.session.refresh(record)
        return record

    def add_report(self, report: ModerationReport, evidence: list[ReportEvidence]) -> ModerationReport:
        self.session.add(report)
        for item in evidence:
            self.session.add(item)
        self.session.commit()
        self.session.refresh(report)
        return report

    def get_report(self, report_id: str) -> Optional[ModerationReport]:
        return self.session.exec(select(ModerationReport).where(ModerationReport.id == report_id)).first()

    def save_report(self, report: ModerationReport) -> ModerationReport:
        return self._persist(report)

    def list_reports(
        self,
        *,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        reporter_id: Optional[str] = None,
        content_id: Optional[str] = None,
    ) -> list[ModerationReport]:
        statement = select(ModerationReport)
        if since is not None:
            statement = statement.where(ModerationReport.created_at >= since)
        if until is not None:
            statement = statement.where(ModerationReport.created_at < until)
        if reporter_id is not None:
            statement = statement.where(ModerationReport.reporter_id == reporter_id)
        if content_id is not None:
            statement = statement.where(ModerationReport.content_id == content_id)
        statement = statement.order_by(ModerationReport.created_at)
        return list(self.session.exec(statement).all())

    def list_evidence(self, report_id: str) -> list[ReportEvidence]:
        statement = (
            select(ReportEvidence)
            .where(ReportEvidence.report_id == report_id)
            .order_by(ReportEvidence.created_at)
        )
        return list(self.session.exec(statement).all())

    def get_evidence(self, evidence_id: str) -> Optional[ReportEvidence]:
        return self.session.exec(select(ReportEvidence).where(ReportEvidence.id == evidence_id)).first()

    def save_evidence(self, evidence: ReportEvidence) -> ReportEvidence:
        return self._persist(evidence)

    def add_vote(self, vote: CommunityVote) -> CommunityVote:
        self.session.add(vote)
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            logger.warning('moderation.vote.integrity_conflict', report_id=vote.report_id, voter_id=vote.voter_id)
            raise DuplicateVoteError(vote.report_id, vote.voter_id) from exc
        self.session.refresh(vote)
        return vote

    def get_vote(self, report_id: str, voter_id: str) -> Optional[CommunityVote]:
        return self.session.exec(
            select(CommunityVote).where(
                (CommunityVote.report_id == report_id) & (CommunityVote.voter_id == voter_id)
            )
        ).first()

    def list_votes(self, report_id: str) -> list[CommunityVote]:
        statement = (
            select(CommunityVote)
            .where(CommunityVote.report_id == report_id)
            .order_by(CommunityVote.created_at)
        )
        return list(self.session.exec(statement).all())

    def get_voter_weight(self, voter_id: str) -> Optional[float]:
        record = self.session.get(VoterWeight, voter_id)
        return record.weight if record else None

    def set_voter_weight(self, voter_id: str, weight: float) -> None:
        record = self.session.get(VoterWeight, voter_id)
        if record is None:
            record = VoterWeight(voter_id=voter_id, weight=weight)
        else:
            record.weight = weight
        self._persist(record)

    def add_action(self, action: ModeratorAction) -> ModeratorAction:
        return self._persist(action)

    def save_action(self, action: ModeratorAction) -> ModeratorAction:
        return self._persist(action)

    def list_actions(self, report_id: str) -> list[ModeratorAction]:
        statement = (
            select(ModeratorAction)
            .where(ModeratorAction.report_id == report_id)
            .order_by(ModeratorAction.created_at)
        )
        return list(self.session.exec(statement).all())

    def add_resolution(self, resolution: ReportResolution) -> ReportResolution:
        self.session.add(resolution)
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise ReportAlreadyResolvedError(resolution.report_id) from exc
        self.session.refresh(resolution)
        return resolution

    def get_resolution(self, report_id: str) -> Optional[ReportResolution]:
        return self.session.exec(
            select(ReportResolution).where(ReportResolution.report_id == report_id)
        ).first()

    def save_resolution(self, resolution: ReportResolution) -> ReportResolution:
        return self._persist(resolution)

    def add_queue_entry(self, entry: QueueEntry) -> bool:
        existing = self.session.exec(
            select(QueueEntry).where(
                (QueueEntry.queue_type == entry.queue_type) & (QueueEntry.report_id == entry.report_id)
            )
        ).first()
        if existing:
            return False
        self.session.add(entry)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            return False
        return True

    def list_queue(self, queue_type: QueueType) -> list[QueueEntry]:
        statement = (
            select(QueueEntry)
            .where(QueueEntry.queue_type == queue_type)
            .order_by(QueueEntry.created_at)
        )
        return list(self.session.exec(statement).all())

    def get_moderator(self, moderator_id: str) -> Optional[ModeratorProfile]:
        return self.session.get(ModeratorProfile, moderator_id)

    def save_moderator(self, profile: ModeratorProfile) -> ModeratorProfile:
        return self._persist(profile)

    def list_moderators(self, status: Optional[ModeratorStatus] = None) -> list[ModeratorProfile]:
        statement = select(ModeratorProfile)
        if status is not None:
            statement = statement.where(ModeratorProfile.status == status)
        return list(self.session.exec(statement.order_by(ModeratorProfile.created_at)).all())

    def get_moderator_statistics(self, moderator_id: str) -> Optional[ModeratorStatistics]:
        return self.session.get(ModeratorStatistics, moderator_id)

    def save_moderator_statistics(self, stats: ModeratorStatistics) -> ModeratorStatistics:
        return self._persist(stats)

    def add_notification(self, notification: Notification) -> Notification:
        return self._persist(notification)
