import pytest

from conftest import FakeClock, StubClassifier
from community_moderation.models.enums import (
    AgeGroup,
    MetricsTimeframe,
    ModerationDecision,
    ReportType,
    ResolutionType,
    VoteType,
)
from community_moderation.models.moderator import ModeratorProfile
from community_moderation.repositories.memory import InMemoryModerationRepository
from community_moderation.schemas.moderation import (
    ReporterProfile,
    ReportSubmission,
    ResolutionCreate,
    ReviewCreate,
    VoteCreate,
    VoterProfile,
)
from community_moderation.services.moderation_engine import CommunityModerationEngine
from community_moderation.services.moderation_metrics import metrics_window
from community_moderation.services.report_locks import ReportLockRegistry

pytestmark = pytest.mark.anyio


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def classifier():
    return StubClassifier("low")


@pytest.fixture
def engine(clock, classifier):
    repository = InMemoryModerationRepository()
    repository.save_moderator(ModeratorProfile(moderator_id="mod-1", name="Morgan"))
    return CommunityModerationEngine(repository, classifier, locks=ReportLockRegistry(), clock=clock)


async def _submit(engine, content_id, reporter_id):
    snapshot = await engine.submit_report(
        content_id,
        reporter_id,
        ReporterProfile(id=reporter_id, age_group=AgeGroup.ADULT),
        ReportSubmission(report_type=ReportType.SPAM, description="spam links"),
    )
    return snapshot.report.id


def _review(decision, minutes):
    return ReviewCreate(decision=decision, reasoning="checked", review_time=minutes)


def _resolve(resolution_type):
    return ResolutionCreate(resolution_type=resolution_type, reasoning="done")


async def test_metrics_are_zero_without_reports(engine):
    metrics = engine.get_moderation_metrics()
    assert metrics.timeframe == MetricsTimeframe.WEEKLY
    assert metrics.total_reports == 0
    assert metrics.average_resolution_time == 0.0
    assert metrics.community_participation.consensus_rate == 0.0
    assert metrics.moderator_performance.accuracy_score == 0.0
    assert metrics.content_health.violation_rate == 0.0
    assert metrics.content_health.improvement_trend == 0.0
    assert metrics.system_efficiency.overturn_rate == 0.0


async def test_metrics_aggregate_report_history(engine, clock, classifier):
    report_a = await _submit(engine, "c1", "r1")
    classifier.error = RuntimeError("model down")
    report_b = await _submit(engine, "c2", "r2")
    classifier.error = None
    report_c = await _submit(engine, "c1", "r1")
    report_d = await _submit(engine, "c3", "r3")

    for index in range(3):
        engine.submit_community_vote(
            report_d,
            f"voter-{index}",
            VoterProfile(id=f"voter-{index}", age_group=AgeGroup.ADULT),
            VoteCreate(vote_type=VoteType.SUPPORT, confidence=1.0),
        )
    engine.escalate_report(report_d, "mod-1", "coordinated spam")

    clock.advance(hours=2)
    engine.moderator_review(report_a, "mod-1", _review(ModerationDecision.REMOVE, 10))
    engine.moderator_review(report_b, "mod-1", _review(ModerationDecision.NO_ACTION, 20))
    engine.resolve_report(report_a, "mod-1", _resolve(ResolutionType.CONTENT_REMOVED))
    engine.resolve_report(report_b, "mod-1", _resolve(ResolutionType.NO_VIOLATION))
    engine.resolve_report(report_c, "mod-1", _resolve(ResolutionType.CONTENT_REMOVED))

    engine.appeal_report(report_a, "r1", "this was satire")
    engine.moderator_review(report_a, "mod-1", _review(ModerationDecision.APPROVE, 30))

    metrics = engine.get_moderation_metrics(MetricsTimeframe.WEEKLY)

    assert metrics.total_reports == 4
    assert metrics.resolved_reports == 3
    assert metrics.average_resolution_time == pytest.approx(2.0)

    assert metrics.community_participation.active_reporters == 3
    assert metrics.community_participation.average_votes_per_report == pytest.approx(0.75)
    assert metrics.community_participation.consensus_rate == pytest.approx(1.0)

    assert metrics.moderator_performance.active_moderators == 1
    assert metrics.moderator_performance.average_review_time == pytest.approx(20.0)
    assert metrics.moderator_performance.accuracy_score == pytest.approx(0.5)
    assert metrics.moderator_performance.escalation_rate == pytest.approx(0.25)

    # the approved appeal on report_a overturned it to no_violation
    assert metrics.content_health.violation_rate == pytest.approx(1 / 3)
    assert metrics.content_health.false_positive_rate == pytest.approx(2 / 3)
    assert metrics.content_health.repeat_offender_rate == 0.0
    assert metrics.content_health.improvement_trend == pytest.approx(-1 / 3)

    assert metrics.system_efficiency.automation_rate == pytest.approx(0.75)
    assert metrics.system_efficiency.human_review_required == pytest.approx(0.75)
    assert metrics.system_efficiency.appeal_rate == pytest.approx(1 / 3)
    assert metrics.system_efficiency.overturn_rate == pytest.approx(1.0)


async def test_improvement_trend_compares_with_previous_window(engine, clock):
    earlier = await _submit(engine, "c1", "r1")
    engine.resolve_report(earlier, "mod-1", _resolve(ResolutionType.USER_WARNED))
    clock.advance(days=8)
    later = await _submit(engine, "c2", "r2")
    engine.resolve_report(later, "mod-1", _resolve(ResolutionType.NO_VIOLATION))

    metrics = engine.get_moderation_metrics(MetricsTimeframe.WEEKLY)
    assert metrics.total_reports == 1
    assert metrics.content_health.violation_rate == 0.0
    assert metrics.content_health.improvement_trend == pytest.approx(1.0)


async def test_daily_window_excludes_older_reports(engine, clock):
    await _submit(engine, "c1", "r1")
    clock.advance(days=2)
    await _submit(engine, "c2", "r2")
    assert engine.get_moderation_metrics(MetricsTimeframe.DAILY).total_reports == 1
    assert engine.get_moderation_metrics(MetricsTimeframe.QUARTERLY).total_reports == 2


async def test_metrics_window_lengths(clock):
    since, until = metrics_window(MetricsTimeframe.MONTHLY, clock.now)
    assert until == clock.now
    assert (until - since).days == 30


async def test_repeat_offender_rate_counts_content_with_two_violations(engine):
    first = await _submit(engine, "c1", "r1")
    second = await _submit(engine, "c1", "r2")
    other = await _submit(engine, "c2", "r3")
    for report_id in (first, second, other):
        engine.resolve_report(report_id, "mod-1", _resolve(ResolutionType.CONTENT_REMOVED))

    metrics = engine.get_moderation_metrics(MetricsTimeframe.WEEKLY)
    assert metrics.content_health.repeat_offender_rate == pytest.approx(0.5)
