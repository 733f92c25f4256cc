"""Deterministic scoring rules for community reports.

Everything here is a pure function of its arguments so the priority formula,
queue routing and consensus checks can be reproduced exactly.
"""

from __future__ import annotations

from typing import Iterable, Optional

from community_moderation.models.enums import (
    AgeGroup,
    QueueType,
    ReportCategory,
    ReportType,
    Severity,
    VoteType,
)
from community_moderation.models.vote import CommunityVote

BASE_PRIORITY = 5
MIN_PRIORITY = 1
MAX_PRIORITY = 10
PRIORITY_QUEUE_THRESHOLD = 8

SUPPORT_BOOST_WEIGHT = 5.0
SUPPORT_BOOST = 2
CONSENSUS_MIN_VOTES = 5
CONSENSUS_THRESHOLD = 0.7
CONSENSUS_BOOST = 1

CATEGORY_BY_TYPE: dict[ReportType, ReportCategory] = {
    ReportType.INAPPROPRIATE_CONTENT: ReportCategory.SAFETY,
    ReportType.HARASSMENT: ReportCategory.SAFETY,
    ReportType.MISINFORMATION: ReportCategory.QUALITY,
    ReportType.SPAM: ReportCategory.POLICY,
    ReportType.PRIVACY_VIOLATION: ReportCategory.LEGAL,
    ReportType.COPYRIGHT: ReportCategory.LEGAL,
    ReportType.OTHER: ReportCategory.POLICY,
}

SEVERITY_WEIGHTS: dict[Severity, int] = {
    Severity.LOW: 1,
    Severity.MEDIUM: 3,
    Severity.HIGH: 6,
    Severity.URGENT: 10,
}

TYPE_WEIGHTS: dict[ReportType, int] = {
    ReportType.HARASSMENT: 4,
    ReportType.INAPPROPRIATE_CONTENT: 3,
    ReportType.PRIVACY_VIOLATION: 3,
    ReportType.MISINFORMATION: 2,
    ReportType.SPAM: 1,
    ReportType.COPYRIGHT: 1,
    ReportType.OTHER: 1,
}

AGE_GROUP_BONUS: dict[AgeGroup, int] = {
    AgeGroup.CHILD: 3,
    AgeGroup.TEEN: 2,
    AgeGroup.ADULT: 0,
}

VOTE_WEIGHT_BY_AGE_GROUP: dict[AgeGroup, float] = {
    AgeGroup.ADULT: 1.2,
    AgeGroup.TEEN: 0.8,
    AgeGroup.CHILD: 0.6,
}

SEVERITY_RANK: dict[Severity, int] = {
    Severity.LOW: 1,
    Severity.MEDIUM: 2,
    Severity.HIGH: 3,
    Severity.URGENT: 4,
}


def categorize_report(report_type: ReportType) -> ReportCategory:
    return CATEGORY_BY_TYPE[ReportType(report_type)]


def clamp_priority(value: int) -> int:
    return max(MIN_PRIORITY, min(value, MAX_PRIORITY))


def calculate_report_priority(
    severity: Severity,
    report_type: ReportType,
    age_group: Optional[AgeGroup],
) -> int:
    priority = BASE_PRIORITY
    priority += SEVERITY_WEIGHTS[Severity(severity)]
    priority += TYPE_WEIGHTS[ReportType(report_type)]
    if age_group is not None:
        priority += AGE_GROUP_BONUS[AgeGroup(age_group)]
    return clamp_priority(priority)


def select_queue(priority: int, severity: Severity) -> QueueType:
    if priority >= PRIORITY_QUEUE_THRESHOLD or Severity(severity) == Severity.URGENT:
        return QueueType.PRIORITY
    return QueueType.COMMUNITY


def initial_vote_weight(age_group: Optional[AgeGroup]) -> float:
    # unknown age groups are treated like the most cautious bucket
    if age_group is None:
        return VOTE_WEIGHT_BY_AGE_GROUP[AgeGroup.CHILD]
    return VOTE_WEIGHT_BY_AGE_GROUP[AgeGroup(age_group)]


def support_weight(votes: Iterable[CommunityVote]) -> float:
    return sum(vote.weight for vote in votes if VoteType(vote.vote_type) == VoteType.SUPPORT)


def total_weight(votes: Iterable[CommunityVote]) -> float:
    return sum(vote.weight for vote in votes)


def weighted_support_ratio(votes: list[CommunityVote]) -> float:
    total = total_weight(votes)
    if total <= 0:
        return 0.0
    return support_weight(votes) / total


def support_share(votes: list[CommunityVote]) -> float:
    """Unweighted share of support votes, used by the consensus-rate metric."""
    if not votes:
        return 0.0
    supporting = sum(1 for vote in votes if VoteType(vote.vote_type) == VoteType.SUPPORT)
    return supporting / len(votes)


def has_support_boost(votes: list[CommunityVote]) -> bool:
    return support_weight(votes) > SUPPORT_BOOST_WEIGHT


def has_consensus(votes: list[CommunityVote]) -> bool:
    if len(votes) < CONSENSUS_MIN_VOTES:
        return False
    return weighted_support_ratio(votes) > CONSENSUS_THRESHOLD


def apply_vote_boosts(priority: int, votes: list[CommunityVote]) -> tuple[int, bool]:
    """Return the boosted priority and whether consensus was reached.

    Boosts only ever add, so the result is never below ``priority``.
    """
    boosted = priority
    if has_support_boost(votes):
        boosted = min(boosted + SUPPORT_BOOST, MAX_PRIORITY)
    consensus = has_consensus(votes)
    if consensus:
        boosted = min(boosted + CONSENSUS_BOOST, MAX_PRIORITY)
    return max(boosted, priority), consensus
