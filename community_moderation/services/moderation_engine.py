"""Report lifecycle for community moderation.

``CommunityModerationEngine`` owns every state change of a report: submission,
community voting, moderator review, escalation, dismissal, resolution and
appeal. Storage goes through a ``ModerationRepository``; per-report operations
run under the shared ``ReportLockRegistry`` so their read-then-write checks do
not interleave.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta
from typing import Callable, Iterable, Optional, Protocol

from fastapi import Depends
from loguru import logger
from sqlmodel import Session

from community_moderation.core.config import settings
from community_moderation.db.session import get_session
from community_moderation.models.base import ensure_utc, utc_now
from community_moderation.models.enums import (
    AgeGroup,
    MetricsTimeframe,
    ModerationDecision,
    ModeratorActionType,
    QueueFilterType,
    QueueSortBy,
    QueueType,
    ReportStatus,
    ReportTimeRange,
    ResolutionType,
    Severity,
    SeveritySource,
    VerificationStatus,
)
from community_moderation.models.evidence import ReportEvidence
from community_moderation.models.moderator import ModeratorProfile
from community_moderation.models.moderator_action import ModeratorAction
from community_moderation.models.queue_entry import QueueEntry
from community_moderation.models.report import ModerationReport
from community_moderation.models.resolution import ReportResolution
from community_moderation.models.vote import CommunityVote
from community_moderation.repositories.base import ModerationRepository
from community_moderation.repositories.sql import SqlModerationRepository
from community_moderation.schemas.moderation import (
    ModerationMetrics,
    QueueFilter,
    ReporterProfile,
    ReportListFilters,
    ReportSubmission,
    ResolutionCreate,
    ReviewCreate,
    VoteCreate,
    VoterProfile,
)
from community_moderation.services.errors import (
    AppealWindowClosedError,
    DuplicateVoteError,
    EvidenceNotFoundError,
    InvalidReportTransitionError,
    ModeratorNotFoundError,
    ReportAlreadyResolvedError,
    ReportNotFoundError,
)
from community_moderation.services.moderation_metrics import build_metrics, metrics_window
from community_moderation.services.moderation_scoring import (
    SEVERITY_RANK,
    apply_vote_boosts,
    calculate_report_priority,
    categorize_report,
    initial_vote_weight,
    select_queue,
)
from community_moderation.services.moderation_types import ModerationQueueView, ReportSnapshot
from community_moderation.services.moderator_service import ModeratorStatisticsRecorder, moderator_type_for
from community_moderation.services.notification_service import ModerationNotifier
from community_moderation.services.report_locks import ReportLockRegistry, report_locks
from community_moderation.services.severity_classifier import (
    SeverityClassifier,
    get_severity_classifier,
    parse_severity,
)

APPEAL_WINDOW = timedelta(days=7)
PATTERN_WINDOW = timedelta(hours=24)
COORDINATED_REPORT_THRESHOLD = 5

CLOSED_STATUSES = (ReportStatus.RESOLVED, ReportStatus.DISMISSED)

TIME_RANGE_WINDOWS: dict[ReportTimeRange, Optional[timedelta]] = {
    ReportTimeRange.LAST_DAY: timedelta(days=1),
    ReportTimeRange.LAST_WEEK: timedelta(days=7),
    ReportTimeRange.LAST_MONTH: timedelta(days=30),
    ReportTimeRange.ALL_TIME: None,
}


def _value(item) -> str:
    return item.value if hasattr(item, 'value') else str(item)


class ContentEnforcer(Protocol):
    def enforce(self, report: ModerationReport, action: ModeratorAction) -> None: ...


class LoggingEnforcer:
    """Records enforcement requests; applying them is up to the content owner."""

    def enforce(self, report: ModerationReport, action: ModeratorAction) -> None:
        logger.info(
            'moderation.enforcement.requested',
            report_id=report.id,
            content_id=report.content_id,
            decision=_value(action.decision),
            moderator_id=action.moderator_id,
        )


class CommunityModerationEngine:
    def __init__(
        self,
        repository: ModerationRepository,
        classifier: SeverityClassifier,
        *,
        notifier: Optional[ModerationNotifier] = None,
        statistics: Optional[ModeratorStatisticsRecorder] = None,
        locks: ReportLockRegistry = report_locks,
        clock: Callable[[], datetime] = utc_now,
        enforcer: Optional[ContentEnforcer] = None,
        severity_timeout: Optional[float] = None,
    ) -> None:
        self.repository = repository
        self.classifier = classifier
        self.notifier = notifier or ModerationNotifier(repository)
        self.statistics = statistics or ModeratorStatisticsRecorder(repository)
        self.locks = locks
        self.clock = clock
        self.enforcer = enforcer or LoggingEnforcer()
        self.severity_timeout = settings.SEVERITY_TIMEOUT_SECONDS if severity_timeout is None else severity_timeout

    # lookups

    def _require_report(self, report_id: str) -> ModerationReport:
        report = self.repository.get_report(report_id)
        if report is None:
            raise ReportNotFoundError(report_id)
        return report

    def _require_moderator(self, moderator_id: str) -> ModeratorProfile:
        moderator = self.repository.get_moderator(moderator_id)
        if moderator is None:
            raise ModeratorNotFoundError(moderator_id)
        return moderator

    def _snapshot(self, report: ModerationReport) -> ReportSnapshot:
        return ReportSnapshot(
            report=report,
            evidence=self.repository.list_evidence(report.id),
            votes=self.repository.list_votes(report.id),
            actions=self.repository.list_actions(report.id),
            resolution=self.repository.get_resolution(report.id),
        )

    def _enqueue(self, queue_type: QueueType, report: ModerationReport, now: datetime) -> None:
        added = self.repository.add_queue_entry(
            QueueEntry(queue_type=queue_type, report_id=report.id, created_at=now, updated_at=now)
        )
        if added:
            logger.debug('moderation.queue.entry_added', queue=queue_type.value, report_id=report.id)

    # submission

    async def _assess_severity(self, report_data: ReportSubmission, content_id: str) -> tuple[Severity, SeveritySource]:
        try:
            assessment = await asyncio.wait_for(
                self.classifier.classify(
                    report_type=report_data.report_type,
                    description=report_data.description,
                    content_id=content_id,
                ),
                timeout=self.severity_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(
                'moderation.severity.fallback',
                reason='timeout',
                content_id=content_id,
                timeout=self.severity_timeout,
            )
            return Severity.MEDIUM, SeveritySource.FALLBACK
        except Exception as exc:
            logger.warning(
                'moderation.severity.fallback',
                reason='error',
                content_id=content_id,
                error=repr(exc),
            )
            return Severity.MEDIUM, SeveritySource.FALLBACK
        severity = parse_severity(getattr(assessment, 'severity', None))
        if severity is None:
            logger.warning(
                'moderation.severity.fallback',
                reason='invalid_label',
                content_id=content_id,
                label=getattr(assessment, 'severity', None),
            )
            return Severity.MEDIUM, SeveritySource.FALLBACK
        return severity, SeveritySource.CLASSIFIER

    def _analyze_patterns(self, report: ModerationReport, now: datetime) -> None:
        since = now - PATTERN_WINDOW
        same_content = [
            item
            for item in self.repository.list_reports(since=since, content_id=report.content_id)
            if item.id != report.id and ReportStatus(item.status) not in CLOSED_STATUSES
        ]
        same_reporter = [
            item
            for item in self.repository.list_reports(since=since, reporter_id=report.reporter_id)
            if item.id != report.id
        ]
        logger.info(
            'moderation.report.patterns',
            report_id=report.id,
            content_reports=len(same_content),
            reporter_reports=len(same_reporter),
        )
        if len(same_content) >= COORDINATED_REPORT_THRESHOLD or len(same_reporter) >= COORDINATED_REPORT_THRESHOLD:
            logger.warning(
                'moderation.report.coordinated_reporting_suspected',
                report_id=report.id,
                content_id=report.content_id,
                reporter_id=report.reporter_id,
            )

    async def submit_report(
        self,
        content_id: str,
        reporter_id: str,
        reporter_profile: Optional[ReporterProfile],
        report_data: ReportSubmission,
    ) -> ReportSnapshot:
        severity, severity_source = await self._assess_severity(report_data, content_id)
        age_group = reporter_profile.age_group if reporter_profile else None
        priority = calculate_report_priority(severity, report_data.report_type, age_group)
        queue_type = select_queue(priority, severity)
        now = self.clock()
        urgent = severity == Severity.URGENT

        report = ModerationReport(
            content_id=content_id,
            reporter_id=reporter_id,
            reporter_name=reporter_profile.name if reporter_profile else None,
            reporter_age_group=age_group or AgeGroup.ADULT,
            report_type=report_data.report_type,
            category=categorize_report(report_data.report_type),
            description=report_data.description,
            severity=severity,
            severity_source=severity_source,
            tags=list(report_data.tags),
            status=ReportStatus.ESCALATED if urgent else ReportStatus.PENDING,
            priority=priority,
            escalated_at=now if urgent else None,
            queue_type=queue_type,
            created_at=now,
            updated_at=now,
        )
        evidence = [
            ReportEvidence(
                report_id=report.id,
                evidence_type=item.evidence_type,
                content=item.content,
                details=dict(item.details),
                verification_status=VerificationStatus.UNVERIFIED,
                submitted_by=reporter_id,
                created_at=now,
                updated_at=now,
            )
            for item in report_data.evidence
        ]
        report = self.repository.add_report(report, evidence)
        self._enqueue(queue_type, report, now)
        if urgent:
            self._enqueue(QueueType.ESCALATED, report, now)
        logger.info(
            'moderation.report.submitted',
            report_id=report.id,
            content_id=content_id,
            report_type=_value(report.report_type),
            severity=severity.value,
            severity_source=severity_source.value,
            priority=priority,
            queue=queue_type.value,
        )
        self.notifier.notify_moderators(report)
        if urgent:
            self.notifier.notify_escalation(report)
            logger.info('moderation.report.escalated', report_id=report.id, source='urgent_severity')
        self._analyze_patterns(report, now)
        return self._snapshot(report)

    # community voting

    def submit_community_vote(
        self,
        report_id: str,
        voter_id: str,
        voter_profile: Optional[VoterProfile],
        vote_data: VoteCreate,
    ) -> CommunityVote:
        with self.locks.hold(report_id):
            report = self._require_report(report_id)
            if self.repository.get_vote(report_id, voter_id) is not None:
                raise DuplicateVoteError(report_id, voter_id)

            age_group = voter_profile.age_group if voter_profile else None
            weight = self.repository.get_voter_weight(voter_id)
            if weight is None:
                weight = initial_vote_weight(age_group)
                self.repository.set_voter_weight(voter_id, weight)

            now = self.clock()
            vote = self.repository.add_vote(
                CommunityVote(
                    report_id=report_id,
                    voter_id=voter_id,
                    # unknown voters share the child bucket, matching their weight
                    voter_age_group=age_group or AgeGroup.CHILD,
                    vote_type=vote_data.vote_type,
                    confidence=vote_data.confidence,
                    reasoning=vote_data.reasoning,
                    weight=weight,
                    created_at=now,
                    updated_at=now,
                )
            )

            votes = self.repository.list_votes(report_id)
            priority, consensus = apply_vote_boosts(report.priority, votes)
            escalated = consensus and ReportStatus(report.status) == ReportStatus.PENDING
            report.priority = priority
            if escalated:
                report.status = ReportStatus.ESCALATED
                report.escalated_at = now
            report = self.repository.save_report(report)
            if escalated:
                self._enqueue(QueueType.ESCALATED, report, now)
                self.notifier.notify_escalation(report)

        logger.info(
            'moderation.vote.recorded',
            report_id=report_id,
            voter_id=voter_id,
            vote_type=_value(vote.vote_type),
            weight=weight,
            priority=priority,
            consensus=consensus,
        )
        if escalated:
            logger.info('moderation.report.escalated', report_id=report_id, source='community_consensus')
        return vote

    # moderator actions

    def moderator_review(self, report_id: str, moderator_id: str, review_data: ReviewCreate) -> ModeratorAction:
        """Record a moderator decision on an open report.

        Reviewing an appealed report decides the appeal and closes the report
        again: ``approve`` overturns the resolution to ``no_violation``, any
        other decision upholds it. Either way the resolution is no longer
        appealable.
        """
        with self.locks.hold(report_id):
            report = self._require_report(report_id)
            moderator = self._require_moderator(moderator_id)
            status = ReportStatus(report.status)
            if status in CLOSED_STATUSES:
                raise InvalidReportTransitionError(report_id, status.value, ReportStatus.REVIEWING.value)

            now = self.clock()
            deciding_appeal = status == ReportStatus.APPEALED
            action_type = ModeratorActionType.APPEAL_REVIEW if deciding_appeal else ModeratorActionType.REVIEW
            action = self.repository.add_action(
                ModeratorAction(
                    report_id=report_id,
                    moderator_id=moderator_id,
                    moderator_type=moderator_type_for(moderator),
                    action_type=action_type,
                    decision=review_data.decision,
                    reasoning=review_data.reasoning,
                    evidence_reviewed=list(review_data.evidence_reviewed),
                    review_time=review_data.review_time,
                    created_at=now,
                    updated_at=now,
                )
            )
            if deciding_appeal:
                resolution = self._close_appeal(report, action, now)
            else:
                report.status = ReportStatus.REVIEWING
                report = self.repository.save_report(report)
            if ModerationDecision(review_data.decision) != ModerationDecision.NO_ACTION:
                self.enforcer.enforce(report, action)
            self.statistics.record(moderator_id, action, now=now)
            if deciding_appeal:
                reviewers = [item.moderator_id for item in self.repository.list_actions(report_id)]
                self.notifier.notify_resolution(report, resolution, reviewers)

        logger.info(
            'moderation.report.reviewed',
            report_id=report_id,
            moderator_id=moderator_id,
            action_type=action_type.value,
            decision=_value(review_data.decision),
        )
        return action

    def _close_appeal(self, report: ModerationReport, action: ModeratorAction, now: datetime) -> ReportResolution:
        resolution = self.repository.get_resolution(report.id)
        if resolution is None:
            raise InvalidReportTransitionError(report.id, ReportStatus.APPEALED.value, ReportStatus.RESOLVED.value)
        overturned = ModerationDecision(action.decision) == ModerationDecision.APPROVE
        if overturned:
            resolution.resolution_type = ResolutionType.NO_VIOLATION
            resolution.resolved_by = action.moderator_id
            resolution.reasoning = action.reasoning
            resolution.actions = []
        resolution.appealable = False
        resolution.appeal_deadline = None
        resolution.updated_at = now
        resolution = self.repository.save_resolution(resolution)

        report.status = ReportStatus.RESOLVED
        report.closed_at = now
        self.repository.save_report(report)
        logger.info('moderation.appeal.decided', report_id=report.id, overturned=overturned)
        return resolution

    def escalate_report(self, report_id: str, moderator_id: str, reasoning: str = '') -> ModeratorAction:
        with self.locks.hold(report_id):
            report = self._require_report(report_id)
            moderator = self._require_moderator(moderator_id)
            status = ReportStatus(report.status)
            if status not in (ReportStatus.PENDING, ReportStatus.REVIEWING):
                raise InvalidReportTransitionError(report_id, status.value, ReportStatus.ESCALATED.value)

            now = self.clock()
            action = self.repository.add_action(
                ModeratorAction(
                    report_id=report_id,
                    moderator_id=moderator_id,
                    moderator_type=moderator_type_for(moderator),
                    action_type=ModeratorActionType.ESCALATE,
                    reasoning=reasoning,
                    created_at=now,
                    updated_at=now,
                )
            )
            report.status = ReportStatus.ESCALATED
            report.escalated_at = now
            report = self.repository.save_report(report)
            self._enqueue(QueueType.ESCALATED, report, now)
            self.notifier.notify_escalation(report)
            self.statistics.record(moderator_id, action, now=now)

        logger.info('moderation.report.escalated', report_id=report_id, source='moderator', moderator_id=moderator_id)
        return action

    def dismiss_report(self, report_id: str, moderator_id: str, reasoning: str = '') -> ModerationReport:
        with self.locks.hold(report_id):
            report = self._require_report(report_id)
            moderator = self._require_moderator(moderator_id)
            status = ReportStatus(report.status)
            # a resolved report under appeal is closed by deciding the appeal
            if status in CLOSED_STATUSES or self.repository.get_resolution(report_id) is not None:
                raise InvalidReportTransitionError(report_id, status.value, ReportStatus.DISMISSED.value)

            now = self.clock()
            action = self.repository.add_action(
                ModeratorAction(
                    report_id=report_id,
                    moderator_id=moderator_id,
                    moderator_type=moderator_type_for(moderator),
                    action_type=ModeratorActionType.RESOLVE,
                    decision=ModerationDecision.NO_ACTION,
                    reasoning=reasoning,
                    created_at=now,
                    updated_at=now,
                )
            )
            report.status = ReportStatus.DISMISSED
            report.closed_at = now
            report = self.repository.save_report(report)
            self.statistics.record(moderator_id, action, now=now)

        logger.info('moderation.report.dismissed', report_id=report_id, moderator_id=moderator_id)
        return report

    def resolve_report(self, report_id: str, resolver_id: str, resolution_data: ResolutionCreate) -> ReportResolution:
        with self.locks.hold(report_id):
            report = self._require_report(report_id)
            if self.repository.get_resolution(report_id) is not None:
                raise ReportAlreadyResolvedError(report_id)
            status = ReportStatus(report.status)
            if status == ReportStatus.DISMISSED:
                raise InvalidReportTransitionError(report_id, status.value, ReportStatus.RESOLVED.value)

            now = self.clock()
            appealable = resolution_data.appealable is not False
            resolution = self.repository.add_resolution(
                ReportResolution(
                    report_id=report_id,
                    resolved_by=resolver_id,
                    resolution_type=resolution_data.resolution_type,
                    reasoning=resolution_data.reasoning,
                    actions=list(resolution_data.actions),
                    appealable=appealable,
                    appeal_deadline=now + APPEAL_WINDOW if appealable else None,
                    created_at=now,
                    updated_at=now,
                )
            )
            report.status = ReportStatus.RESOLVED
            report.closed_at = now
            report = self.repository.save_report(report)
            reviewers = [action.moderator_id for action in self.repository.list_actions(report_id)]
            self.notifier.notify_resolution(report, resolution, reviewers)

        logger.info(
            'moderation.report.resolved',
            report_id=report_id,
            resolver_id=resolver_id,
            resolution_type=_value(resolution.resolution_type),
            appealable=appealable,
        )
        return resolution

    def appeal_report(self, report_id: str, appellant_id: str, reason: str) -> ModerationReport:
        with self.locks.hold(report_id):
            report = self._require_report(report_id)
            status = ReportStatus(report.status)
            if status != ReportStatus.RESOLVED:
                raise InvalidReportTransitionError(report_id, status.value, ReportStatus.APPEALED.value)
            now = self.clock()
            resolution = self.repository.get_resolution(report_id)
            if (
                resolution is None
                or not resolution.appealable
                or resolution.appeal_deadline is None
                or ensure_utc(resolution.appeal_deadline) < now
            ):
                raise AppealWindowClosedError(report_id)

            for action in self.repository.list_actions(report_id):
                if ModeratorActionType(action.action_type) == ModeratorActionType.REVIEW and not action.appealed:
                    action.appealed = True
                    self.repository.save_action(action)
            report.status = ReportStatus.APPEALED
            report.appealed_at = now
            report.appeal_reason = reason
            report = self.repository.save_report(report)
            self._enqueue(QueueType.APPEALS, report, now)
            self.notifier.notify_appeal(report)

        logger.info('moderation.report.appealed', report_id=report_id, appellant_id=appellant_id)
        return report

    def verify_evidence(
        self,
        report_id: str,
        evidence_id: str,
        moderator_id: str,
        verification_status: VerificationStatus,
    ) -> ReportEvidence:
        with self.locks.hold(report_id):
            self._require_report(report_id)
            self._require_moderator(moderator_id)
            evidence = self.repository.get_evidence(evidence_id)
            if evidence is None or evidence.report_id != report_id:
                raise EvidenceNotFoundError(evidence_id)
            evidence.verification_status = VerificationStatus(verification_status)
            evidence.verified_by = moderator_id
            evidence.updated_at = self.clock()
            evidence = self.repository.save_evidence(evidence)

        logger.info(
            'moderation.evidence.verified',
            report_id=report_id,
            evidence_id=evidence_id,
            status=evidence.verification_status.value,
        )
        return evidence

    # reads

    def get_report(self, report_id: str) -> ReportSnapshot:
        return self._snapshot(self._require_report(report_id))

    def list_reports(self, filters: Optional[ReportListFilters] = None) -> list[ReportSnapshot]:
        filters = filters or ReportListFilters()
        window = TIME_RANGE_WINDOWS[ReportTimeRange(filters.time_range)]
        since = self.clock() - window if window is not None else None
        reports = self.repository.list_reports(since=since, reporter_id=filters.reporter_id)
        selected = [
            report
            for report in reports
            if (not filters.status or ReportStatus(report.status) in filters.status)
            and (not filters.report_type or report.report_type in filters.report_type)
            and (not filters.severity or Severity(report.severity) in filters.severity)
            and (not filters.category or report.category in filters.category)
        ]
        selected.sort(key=lambda item: ensure_utc(item.created_at), reverse=True)
        return [self._snapshot(report) for report in selected]

    def _matches(self, snapshot: ReportSnapshot, queue_filter: QueueFilter, now: datetime) -> bool:
        if not queue_filter.is_active:
            return True
        report = snapshot.report
        filter_type = QueueFilterType(queue_filter.filter_type)
        if filter_type == QueueFilterType.REPORT_TYPE:
            return _value(report.report_type) == queue_filter.value
        if filter_type == QueueFilterType.SEVERITY:
            return _value(report.severity) == queue_filter.value
        if filter_type == QueueFilterType.AGE_GROUP:
            return _value(report.reporter_age_group) == queue_filter.value
        if filter_type == QueueFilterType.CATEGORY:
            return _value(report.category) == queue_filter.value
        if filter_type == QueueFilterType.TAG:
            return queue_filter.value in (report.tags or [])
        if filter_type == QueueFilterType.TIME_RANGE:
            try:
                window = TIME_RANGE_WINDOWS[ReportTimeRange(queue_filter.value)]
            except ValueError:
                return True
            return window is None or ensure_utc(report.created_at) >= now - window
        # reports carry no content type
        return True

    def get_moderation_queue(
        self,
        queue_type: QueueType,
        filters: Optional[Iterable[QueueFilter]] = None,
        sort_by: Optional[QueueSortBy] = None,
    ) -> ModerationQueueView:
        queue_type = QueueType(queue_type)
        sort_by = QueueSortBy(sort_by) if sort_by else QueueSortBy.TIMESTAMP
        filters = list(filters or [])
        entries = self.repository.list_queue(queue_type)
        now = self.clock()

        snapshots = []
        for entry in entries:
            report = self.repository.get_report(entry.report_id)
            if report is None:
                continue
            snapshot = self._snapshot(report)
            if all(self._matches(snapshot, item, now) for item in filters):
                snapshots.append(snapshot)

        def timestamp(item: ReportSnapshot) -> datetime:
            return ensure_utc(item.report.created_at)

        if sort_by == QueueSortBy.PRIORITY:
            snapshots.sort(key=lambda item: (item.report.priority, timestamp(item)), reverse=True)
        elif sort_by == QueueSortBy.SEVERITY:
            snapshots.sort(key=lambda item: (SEVERITY_RANK[Severity(item.report.severity)], timestamp(item)), reverse=True)
        elif sort_by == QueueSortBy.COMMUNITY_VOTES:
            snapshots.sort(key=lambda item: (len(item.votes), timestamp(item)), reverse=True)
        else:
            snapshots.sort(key=timestamp, reverse=True)

        last_updated = max((ensure_utc(entry.created_at) for entry in entries), default=None)
        return ModerationQueueView(
            queue_type=queue_type,
            sort_by=sort_by,
            filters=filters,
            last_updated=last_updated,
            reports=snapshots,
        )

    def get_moderation_metrics(self, timeframe: MetricsTimeframe = MetricsTimeframe.WEEKLY) -> ModerationMetrics:
        timeframe = MetricsTimeframe(timeframe)
        since, until = metrics_window(timeframe, self.clock())
        previous_since = since - (until - since)
        current = [self._snapshot(report) for report in self.repository.list_reports(since=since)]
        previous = [
            self._snapshot(report) for report in self.repository.list_reports(since=previous_since, until=since)
        ]
        metrics = build_metrics(timeframe, current, previous)
        logger.debug('moderation.metrics.computed', timeframe=timeframe.value, total_reports=metrics.total_reports)
        return metrics


def get_moderation_engine(
    session: Session = Depends(get_session),
    classifier: SeverityClassifier = Depends(get_severity_classifier),
) -> CommunityModerationEngine:
    return CommunityModerationEngine(SqlModerationRepository(session), classifier)
