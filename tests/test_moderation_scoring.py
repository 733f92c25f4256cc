import pytest

from community_moderation.models.enums import (
    AgeGroup,
    QueueType,
    ReportCategory,
    ReportType,
    Severity,
    VoteType,
)
from community_moderation.models.vote import CommunityVote
from community_moderation.services.moderation_scoring import (
    apply_vote_boosts,
    calculate_report_priority,
    categorize_report,
    has_consensus,
    initial_vote_weight,
    select_queue,
    support_share,
    weighted_support_ratio,
)


def _vote(vote_type: VoteType, weight: float = 1.2, voter: str = "v") -> CommunityVote:
    return CommunityVote(report_id="r1", voter_id=voter, vote_type=vote_type, confidence=0.9, weight=weight)


@pytest.mark.parametrize(
    ("report_type", "category"),
    [
        (ReportType.INAPPROPRIATE_CONTENT, ReportCategory.SAFETY),
        (ReportType.HARASSMENT, ReportCategory.SAFETY),
        (ReportType.MISINFORMATION, ReportCategory.QUALITY),
        (ReportType.SPAM, ReportCategory.POLICY),
        (ReportType.PRIVACY_VIOLATION, ReportCategory.LEGAL),
        (ReportType.COPYRIGHT, ReportCategory.LEGAL),
        (ReportType.OTHER, ReportCategory.POLICY),
    ],
)
def test_categorize_report_covers_every_type(report_type, category):
    assert categorize_report(report_type) == category


def test_priority_is_capped_at_ten():
    # 5 + urgent 10 + harassment 4 + child 3 = 22
    assert calculate_report_priority(Severity.URGENT, ReportType.HARASSMENT, AgeGroup.CHILD) == 10


def test_priority_for_low_spam_adult():
    assert calculate_report_priority(Severity.LOW, ReportType.SPAM, AgeGroup.ADULT) == 7


def test_priority_without_age_group_gets_no_bonus():
    assert calculate_report_priority(Severity.MEDIUM, ReportType.OTHER, None) == 9


def test_select_queue_uses_threshold_and_urgency():
    assert select_queue(8, Severity.MEDIUM) == QueueType.PRIORITY
    assert select_queue(7, Severity.LOW) == QueueType.COMMUNITY
    assert select_queue(1, Severity.URGENT) == QueueType.PRIORITY


def test_initial_vote_weight_by_age_group():
    assert initial_vote_weight(AgeGroup.ADULT) == pytest.approx(1.2)
    assert initial_vote_weight(AgeGroup.TEEN) == pytest.approx(0.8)
    assert initial_vote_weight(AgeGroup.CHILD) == pytest.approx(0.6)
    assert initial_vote_weight(None) == pytest.approx(0.6)


def test_weighted_support_ratio_and_consensus():
    votes = [_vote(VoteType.SUPPORT, voter=f"s{i}") for i in range(4)] + [_vote(VoteType.DISPUTE, voter="d")]
    assert weighted_support_ratio(votes) == pytest.approx(0.8)
    assert has_consensus(votes) is True
    assert has_consensus(votes[:4]) is False


def test_ratio_is_zero_without_votes():
    assert weighted_support_ratio([]) == 0.0
    assert support_share([]) == 0.0


def test_apply_vote_boosts_never_lowers_priority():
    votes = [_vote(VoteType.DISPUTE, voter=f"d{i}") for i in range(6)]
    assert apply_vote_boosts(6, votes) == (6, False)


def test_apply_vote_boosts_adds_support_and_consensus():
    votes = [_vote(VoteType.SUPPORT, weight=1.2, voter=f"s{i}") for i in range(5)]
    # support weight 6.0 > 5 and unanimous consensus
    assert apply_vote_boosts(5, votes) == (8, True)
    assert apply_vote_boosts(9, votes) == (10, True)
