"""Aggregate moderation metrics computed from report snapshots.

Every ratio is 0.0 when its denominator is empty.
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime, timedelta
from typing import Iterable

from community_moderation.models.base import ensure_utc
from community_moderation.models.enums import (
    MetricsTimeframe,
    ModerationDecision,
    ModeratorActionType,
    ResolutionType,
    SeveritySource,
)
from community_moderation.schemas.moderation import (
    CommunityParticipation,
    ContentHealth,
    ModerationMetrics,
    ModeratorPerformance,
    SystemEfficiency,
)
from community_moderation.services.moderation_scoring import support_share
from community_moderation.services.moderation_types import ReportSnapshot

TIMEFRAME_WINDOWS: dict[MetricsTimeframe, timedelta] = {
    MetricsTimeframe.DAILY: timedelta(days=1),
    MetricsTimeframe.WEEKLY: timedelta(days=7),
    MetricsTimeframe.MONTHLY: timedelta(days=30),
    MetricsTimeframe.QUARTERLY: timedelta(days=90),
}

CONSENSUS_RATE_MIN_VOTES = 3
CONSENSUS_RATE_THRESHOLD = 0.7

REVIEW_ACTIONS = (ModeratorActionType.REVIEW, ModeratorActionType.APPEAL_REVIEW)


def metrics_window(timeframe: MetricsTimeframe, now: datetime) -> tuple[datetime, datetime]:
    return now - TIMEFRAME_WINDOWS[MetricsTimeframe(timeframe)], now


def _ratio(numerator: float, denominator: float) -> float:
    if not denominator:
        return 0.0
    return numerator / denominator


def _mean(values: list[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def _resolved(snapshots: Iterable[ReportSnapshot]) -> list[ReportSnapshot]:
    return [snapshot for snapshot in snapshots if snapshot.resolution is not None]


def _is_violation(snapshot: ReportSnapshot) -> bool:
    return ResolutionType(snapshot.resolution.resolution_type) != ResolutionType.NO_VIOLATION


def _was_overturned(snapshot: ReportSnapshot) -> bool:
    return any(
        ModeratorActionType(action.action_type) == ModeratorActionType.APPEAL_REVIEW
        and action.decision is not None
        and ModerationDecision(action.decision) == ModerationDecision.APPROVE
        for action in snapshot.actions
    )


def average_resolution_hours(snapshots: list[ReportSnapshot]) -> float:
    durations = []
    for snapshot in _resolved(snapshots):
        elapsed = ensure_utc(snapshot.resolution.created_at) - ensure_utc(snapshot.report.created_at)
        durations.append(elapsed.total_seconds() / 3600)
    return _mean(durations)


def consensus_rate(snapshots: list[ReportSnapshot]) -> float:
    voted = [snapshot for snapshot in snapshots if len(snapshot.votes) >= CONSENSUS_RATE_MIN_VOTES]
    agreed = [snapshot for snapshot in voted if support_share(snapshot.votes) >= CONSENSUS_RATE_THRESHOLD]
    return _ratio(len(agreed), len(voted))


def accuracy_score(snapshots: list[ReportSnapshot]) -> float:
    reviewed = [
        snapshot
        for snapshot in snapshots
        if any(ModeratorActionType(action.action_type) == ModeratorActionType.REVIEW for action in snapshot.actions)
    ]
    upheld = [snapshot for snapshot in reviewed if not _was_overturned(snapshot)]
    return _ratio(len(upheld), len(reviewed))


def violation_rate(snapshots: list[ReportSnapshot]) -> float:
    resolved = _resolved(snapshots)
    return _ratio(sum(1 for snapshot in resolved if _is_violation(snapshot)), len(resolved))


def repeat_offender_rate(snapshots: list[ReportSnapshot]) -> float:
    violations = Counter(
        snapshot.report.content_id for snapshot in _resolved(snapshots) if _is_violation(snapshot)
    )
    repeated = sum(1 for count in violations.values() if count >= 2)
    return _ratio(repeated, len(violations))


def build_metrics(
    timeframe: MetricsTimeframe,
    current: list[ReportSnapshot],
    previous: list[ReportSnapshot],
) -> ModerationMetrics:
    """Summarise ``current`` and compare its violation rate against ``previous``."""
    total = len(current)
    resolved = _resolved(current)
    actions = [action for snapshot in current for action in snapshot.actions]
    review_times = [
        float(action.review_time or 0.0)
        for action in actions
        if ModeratorActionType(action.action_type) in REVIEW_ACTIONS
    ]
    appealed = [snapshot for snapshot in current if snapshot.report.appealed_at is not None]
    current_violation_rate = violation_rate(current)

    return ModerationMetrics(
        timeframe=MetricsTimeframe(timeframe),
        total_reports=total,
        resolved_reports=len(resolved),
        average_resolution_time=average_resolution_hours(current),
        community_participation=CommunityParticipation(
            active_reporters=len({snapshot.report.reporter_id for snapshot in current}),
            average_votes_per_report=_ratio(sum(len(snapshot.votes) for snapshot in current), total),
            consensus_rate=consensus_rate(current),
        ),
        moderator_performance=ModeratorPerformance(
            active_moderators=len({action.moderator_id for action in actions}),
            average_review_time=_mean(review_times),
            accuracy_score=accuracy_score(current),
            escalation_rate=_ratio(
                sum(1 for snapshot in current if snapshot.report.escalated_at is not None), total
            ),
        ),
        content_health=ContentHealth(
            violation_rate=current_violation_rate,
            false_positive_rate=_ratio(
                sum(1 for snapshot in resolved if not _is_violation(snapshot)), len(resolved)
            ),
            repeat_offender_rate=repeat_offender_rate(current),
            improvement_trend=violation_rate(previous) - current_violation_rate,
        ),
        system_efficiency=SystemEfficiency(
            automation_rate=_ratio(
                sum(
                    1
                    for snapshot in current
                    if SeveritySource(snapshot.report.severity_source) == SeveritySource.CLASSIFIER
                ),
                total,
            ),
            human_review_required=_ratio(sum(1 for snapshot in current if snapshot.actions), total),
            appeal_rate=_ratio(len(appealed), len(resolved)),
            overturn_rate=_ratio(sum(1 for snapshot in appealed if _was_overturned(snapshot)), len(appealed)),
        ),
    )
