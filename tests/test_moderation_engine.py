import asyncio
from datetime import timedelta

import pytest
from loguru import logger

from conftest import FakeClock, StubClassifier
from community_moderation.models.enums import (
    AgeGroup,
    ModerationDecision,
    ModeratorActionType,
    ModeratorLevel,
    QueueFilterType,
    QueueSortBy,
    QueueType,
    ReportCategory,
    ReportStatus,
    ReportTimeRange,
    ReportType,
    ResolutionType,
    Severity,
    SeveritySource,
    VerificationStatus,
    VoteType,
)
from community_moderation.models.moderator import ModeratorProfile
from community_moderation.repositories.memory import InMemoryModerationRepository
from community_moderation.schemas.moderation import (
    EvidenceIn,
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
from community_moderation.services.moderation_engine import CommunityModerationEngine
from community_moderation.services.report_locks import ReportLockRegistry

pytestmark = pytest.mark.anyio

ADULT = ReporterProfile(id="reporter-1", name="Riley", age_group=AgeGroup.ADULT)


class SlowClassifier:
    async def classify(self, *, report_type, description, content_id):
        await asyncio.sleep(1)


class RecordingEnforcer:
    def __init__(self) -> None:
        self.calls = []

    def enforce(self, report, action):
        self.calls.append((report.id, action.decision))


@pytest.fixture
def repository():
    repo = InMemoryModerationRepository()
    repo.save_moderator(ModeratorProfile(moderator_id="mod-1", name="Morgan", moderator_level=ModeratorLevel.SENIOR))
    return repo


@pytest.fixture
def clock():
    return FakeClock()


def _engine(repository, clock, classifier=None, **kwargs) -> CommunityModerationEngine:
    return CommunityModerationEngine(
        repository,
        classifier or StubClassifier("medium"),
        locks=ReportLockRegistry(),
        clock=clock,
        **kwargs,
    )


def _submission(report_type=ReportType.SPAM, **kwargs) -> ReportSubmission:
    return ReportSubmission(report_type=report_type, description="Looks wrong", **kwargs)


def _vote(vote_type=VoteType.SUPPORT) -> VoteCreate:
    return VoteCreate(vote_type=vote_type, confidence=0.9)


def _review(decision=ModerationDecision.REMOVE) -> ReviewCreate:
    return ReviewCreate(decision=decision, reasoning="checked", review_time=12.0)


def _resolution(**kwargs) -> ResolutionCreate:
    data = {"resolution_type": ResolutionType.CONTENT_REMOVED, "reasoning": "violates policy"}
    data.update(kwargs)
    return ResolutionCreate(**data)


def _adult(voter_id: str) -> VoterProfile:
    return VoterProfile(id=voter_id, age_group=AgeGroup.ADULT)


async def test_submit_report_scores_and_routes(repository, clock):
    classifier = StubClassifier("high")
    engine = _engine(repository, clock, classifier)
    snapshot = await engine.submit_report(
        "content-1",
        "reporter-1",
        ReporterProfile(id="reporter-1", age_group=AgeGroup.CHILD),
        _submission(
            ReportType.HARASSMENT,
            evidence=[EvidenceIn(content="quote"), EvidenceIn(content="more", details={"line": 3})],
            tags=["bullying"],
        ),
    )

    report = snapshot.report
    assert report.severity == Severity.HIGH
    assert report.severity_source == SeveritySource.CLASSIFIER
    assert report.category == ReportCategory.SAFETY
    assert report.priority == 10
    assert report.queue_type == QueueType.PRIORITY
    assert report.status == ReportStatus.PENDING
    assert report.created_at == clock.now
    assert [entry.report_id for entry in repository.list_queue(QueueType.PRIORITY)] == [report.id]
    assert repository.list_queue(QueueType.COMMUNITY) == []
    assert len(snapshot.evidence) == 2
    assert all(item.verification_status == VerificationStatus.UNVERIFIED for item in snapshot.evidence)
    assert all(item.submitted_by == "reporter-1" for item in snapshot.evidence)
    assert classifier.calls[0]["content_id"] == "content-1"
    assert [item.user_id for item in repository.notifications] == ["mod-1"]


async def test_submit_report_falls_back_on_classifier_error(repository, clock):
    engine = _engine(repository, clock, StubClassifier(error=RuntimeError("boom")))
    snapshot = await engine.submit_report("content-1", "reporter-1", ADULT, _submission(ReportType.SPAM))
    assert snapshot.report.severity == Severity.MEDIUM
    assert snapshot.report.severity_source == SeveritySource.FALLBACK
    # 5 + medium 3 + spam 1
    assert snapshot.report.priority == 9


async def test_submit_report_falls_back_on_unknown_label(repository, clock):
    engine = _engine(repository, clock, StubClassifier("catastrophic"))
    snapshot = await engine.submit_report("content-1", "reporter-1", ADULT, _submission())
    assert snapshot.report.severity == Severity.MEDIUM
    assert snapshot.report.severity_source == SeveritySource.FALLBACK


async def test_submit_report_falls_back_on_timeout(repository, clock):
    engine = _engine(repository, clock, SlowClassifier(), severity_timeout=0.01)
    snapshot = await engine.submit_report("content-1", "reporter-1", ADULT, _submission())
    assert snapshot.report.severity_source == SeveritySource.FALLBACK


async def test_low_severity_report_lands_in_community_queue(repository, clock):
    engine = _engine(repository, clock, StubClassifier("low"))
    snapshot = await engine.submit_report("content-1", "reporter-1", None, _submission(ReportType.SPAM))
    assert snapshot.report.priority == 7
    assert snapshot.report.queue_type == QueueType.COMMUNITY
    assert len(engine.get_moderation_queue(QueueType.COMMUNITY).reports) == 1


async def test_duplicate_vote_is_rejected(repository, clock):
    engine = _engine(repository, clock)
    report_id = (await engine.submit_report("c", "reporter-1", ADULT, _submission())).report.id
    engine.submit_community_vote(report_id, "voter-1", _adult("voter-1"), _vote())
    with pytest.raises(DuplicateVoteError):
        engine.submit_community_vote(report_id, "voter-1", _adult("voter-1"), _vote(VoteType.DISPUTE))
    assert len(repository.list_votes(report_id)) == 1


async def test_vote_on_unknown_report(repository, clock):
    engine = _engine(repository, clock)
    with pytest.raises(ReportNotFoundError):
        engine.submit_community_vote("missing", "voter-1", _adult("voter-1"), _vote())


async def test_voter_weight_is_sticky_across_reports(repository, clock):
    engine = _engine(repository, clock)
    first = (await engine.submit_report("c1", "reporter-1", ADULT, _submission())).report.id
    second = (await engine.submit_report("c2", "reporter-1", ADULT, _submission())).report.id

    vote = engine.submit_community_vote(first, "voter-1", VoterProfile(id="voter-1", age_group=AgeGroup.TEEN), _vote())
    assert vote.weight == pytest.approx(0.8)
    later = engine.submit_community_vote(second, "voter-1", _adult("voter-1"), _vote())
    assert later.weight == pytest.approx(0.8)


async def test_voting_never_lowers_priority_or_moves_queue(repository, clock):
    engine = _engine(repository, clock, StubClassifier("low"))
    report = (await engine.submit_report("c", "reporter-1", ADULT, _submission())).report
    priorities = [report.priority]
    sequence = [VoteType.SUPPORT, VoteType.SUPPORT, VoteType.DISPUTE, VoteType.SUPPORT, VoteType.SUPPORT]
    sequence += [VoteType.SUPPORT, VoteType.DISPUTE, VoteType.DISPUTE]
    for index, vote_type in enumerate(sequence):
        engine.submit_community_vote(report.id, f"voter-{index}", _adult(f"voter-{index}"), _vote(vote_type))
        priorities.append(engine.get_report(report.id).report.priority)
    # 7 -> 8 on consensus at the fifth vote, 10 once support weight passes 5.0
    assert priorities == [7, 7, 7, 7, 7, 8, 10, 10, 10]
    assert engine.get_report(report.id).report.queue_type == QueueType.COMMUNITY


async def test_consensus_escalates_pending_report(repository, clock):
    engine = _engine(repository, clock, StubClassifier("low"))
    report_id = (await engine.submit_report("c", "reporter-1", ADULT, _submission())).report.id
    for index in range(5):
        engine.submit_community_vote(report_id, f"voter-{index}", _adult(f"voter-{index}"), _vote())

    snapshot = engine.get_report(report_id)
    assert snapshot.report.status == ReportStatus.ESCALATED
    assert snapshot.report.escalated_at == clock.now
    assert snapshot.report.queue_type == QueueType.COMMUNITY
    assert [entry.report_id for entry in repository.list_queue(QueueType.ESCALATED)] == [report_id]
    assert snapshot.report.priority == 10


async def test_consensus_does_not_override_moderator_review(repository, clock):
    engine = _engine(repository, clock, StubClassifier("low"))
    report_id = (await engine.submit_report("c", "reporter-1", ADULT, _submission())).report.id
    engine.moderator_review(report_id, "mod-1", _review(ModerationDecision.NO_ACTION))
    for index in range(5):
        engine.submit_community_vote(report_id, f"voter-{index}", _adult(f"voter-{index}"), _vote())
    assert engine.get_report(report_id).report.status == ReportStatus.REVIEWING
    assert repository.list_queue(QueueType.ESCALATED) == []


async def test_review_requires_known_moderator(repository, clock):
    engine = _engine(repository, clock)
    report_id = (await engine.submit_report("c", "reporter-1", ADULT, _submission())).report.id
    with pytest.raises(ModeratorNotFoundError):
        engine.moderator_review(report_id, "nobody", _review())
    with pytest.raises(ReportNotFoundError):
        engine.moderator_review("missing", "mod-1", _review())


async def test_review_runs_enforcement_and_updates_statistics(repository, clock):
    enforcer = RecordingEnforcer()
    engine = _engine(repository, clock, enforcer=enforcer)
    report_id = (await engine.submit_report("c", "reporter-1", ADULT, _submission())).report.id

    action = engine.moderator_review(report_id, "mod-1", _review(ModerationDecision.REMOVE))
    engine.moderator_review(report_id, "mod-1", _review(ModerationDecision.NO_ACTION))

    assert action.action_type == ModeratorActionType.REVIEW
    assert enforcer.calls == [(report_id, ModerationDecision.REMOVE)]
    stats = repository.get_moderator_statistics("mod-1")
    assert stats.reports_reviewed == 2
    assert stats.enforcement_actions == 1
    assert stats.average_review_time == pytest.approx(12.0)


async def test_second_resolution_is_rejected(repository, clock):
    engine = _engine(repository, clock)
    report_id = (await engine.submit_report("c", "reporter-1", ADULT, _submission())).report.id
    engine.resolve_report(report_id, "mod-1", _resolution())
    with pytest.raises(ReportAlreadyResolvedError):
        engine.resolve_report(report_id, "mod-1", _resolution(resolution_type=ResolutionType.NO_VIOLATION))
    assert engine.get_report(report_id).resolution.resolution_type == ResolutionType.CONTENT_REMOVED


async def test_non_appealable_resolution_has_no_deadline(repository, clock):
    engine = _engine(repository, clock)
    report_id = (await engine.submit_report("c", "reporter-1", ADULT, _submission())).report.id
    resolution = engine.resolve_report(report_id, "mod-1", _resolution(appealable=False))
    assert resolution.appealable is False
    assert resolution.appeal_deadline is None
    with pytest.raises(AppealWindowClosedError):
        engine.appeal_report(report_id, "reporter-1", "please reconsider")


async def test_closed_report_rejects_review_and_escalation(repository, clock):
    engine = _engine(repository, clock)
    report_id = (await engine.submit_report("c", "reporter-1", ADULT, _submission())).report.id
    engine.dismiss_report(report_id, "mod-1", "not a violation")
    assert engine.get_report(report_id).report.status == ReportStatus.DISMISSED
    with pytest.raises(InvalidReportTransitionError):
        engine.moderator_review(report_id, "mod-1", _review())
    with pytest.raises(InvalidReportTransitionError):
        engine.escalate_report(report_id, "mod-1")
    with pytest.raises(InvalidReportTransitionError):
        engine.resolve_report(report_id, "mod-1", _resolution())


async def test_escalate_report_once(repository, clock):
    engine = _engine(repository, clock)
    report_id = (await engine.submit_report("c", "reporter-1", ADULT, _submission())).report.id
    action = engine.escalate_report(report_id, "mod-1", "needs staff")
    assert action.action_type == ModeratorActionType.ESCALATE
    assert engine.get_report(report_id).report.status == ReportStatus.ESCALATED
    assert repository.get_moderator_statistics("mod-1").escalations == 1
    with pytest.raises(InvalidReportTransitionError):
        engine.escalate_report(report_id, "mod-1", "again")


async def test_appeal_flow(repository, clock):
    engine = _engine(repository, clock)
    report_id = (await engine.submit_report("c", "reporter-1", ADULT, _submission())).report.id
    engine.moderator_review(report_id, "mod-1", _review())
    engine.resolve_report(report_id, "mod-1", _resolution())
    clock.advance(days=3)

    report = engine.appeal_report(report_id, "reporter-1", "context was missing")
    assert report.status == ReportStatus.APPEALED
    assert report.appeal_reason == "context was missing"
    assert [entry.report_id for entry in repository.list_queue(QueueType.APPEALS)] == [report_id]
    assert all(action.appealed for action in repository.list_actions(report_id))

    action = engine.moderator_review(report_id, "mod-1", _review(ModerationDecision.APPROVE))
    assert action.action_type == ModeratorActionType.APPEAL_REVIEW
    closed = engine.get_report(report_id)
    assert closed.report.status == ReportStatus.RESOLVED
    assert closed.report.closed_at == clock.now
    assert closed.resolution.resolution_type == ResolutionType.NO_VIOLATION
    assert closed.resolution.appealable is False


async def test_appeal_after_deadline_is_rejected(repository, clock):
    engine = _engine(repository, clock)
    report_id = (await engine.submit_report("c", "reporter-1", ADULT, _submission())).report.id
    engine.resolve_report(report_id, "mod-1", _resolution())
    clock.advance(days=8)
    with pytest.raises(AppealWindowClosedError):
        engine.appeal_report(report_id, "reporter-1", "too late")


async def test_appeal_requires_resolution(repository, clock):
    engine = _engine(repository, clock)
    report_id = (await engine.submit_report("c", "reporter-1", ADULT, _submission())).report.id
    with pytest.raises(InvalidReportTransitionError):
        engine.appeal_report(report_id, "reporter-1", "why")


async def test_verify_evidence(repository, clock):
    engine = _engine(repository, clock)
    snapshot = await engine.submit_report(
        "c", "reporter-1", ADULT, _submission(evidence=[EvidenceIn(content="screenshot text")])
    )
    evidence_id = snapshot.evidence[0].id
    evidence = engine.verify_evidence(snapshot.report.id, evidence_id, "mod-1", VerificationStatus.VERIFIED)
    assert evidence.verification_status == VerificationStatus.VERIFIED
    assert evidence.verified_by == "mod-1"
    with pytest.raises(EvidenceNotFoundError):
        engine.verify_evidence(snapshot.report.id, "missing", "mod-1", VerificationStatus.INVALID)


async def test_queue_filters_and_sorting(repository, clock):
    engine = _engine(repository, clock, StubClassifier("urgent"))
    spam = (await engine.submit_report("c1", "reporter-1", ADULT, _submission(ReportType.SPAM, tags=["ads"]))).report
    clock.advance(minutes=5)
    harassment = (await engine.submit_report("c2", "reporter-1", ADULT, _submission(ReportType.HARASSMENT))).report
    engine.submit_community_vote(spam.id, "voter-1", _adult("voter-1"), _vote())

    newest_first = engine.get_moderation_queue(QueueType.PRIORITY)
    assert newest_first.sort_by == QueueSortBy.TIMESTAMP
    assert [item.report.id for item in newest_first.reports] == [harassment.id, spam.id]

    by_votes = engine.get_moderation_queue(QueueType.PRIORITY, sort_by=QueueSortBy.COMMUNITY_VOTES)
    assert [item.report.id for item in by_votes.reports] == [spam.id, harassment.id]

    only_spam = engine.get_moderation_queue(
        QueueType.PRIORITY,
        filters=[QueueFilter(filter_type=QueueFilterType.REPORT_TYPE, value="spam")],
    )
    assert [item.report.id for item in only_spam.reports] == [spam.id]

    inactive = engine.get_moderation_queue(
        QueueType.PRIORITY,
        filters=[
            QueueFilter(filter_type=QueueFilterType.REPORT_TYPE, value="spam", is_active=False),
            QueueFilter(filter_type=QueueFilterType.CONTENT_TYPE, value="video"),
        ],
    )
    assert len(inactive.reports) == 2

    tagged = engine.get_moderation_queue(
        QueueType.PRIORITY,
        filters=[QueueFilter(filter_type=QueueFilterType.TAG, value="ads")],
    )
    assert [item.report.id for item in tagged.reports] == [spam.id]


async def test_every_queue_exists_even_when_empty(repository, clock):
    engine = _engine(repository, clock)
    for queue_type in QueueType:
        view = engine.get_moderation_queue(queue_type)
        assert view.reports == []
        assert view.last_updated is None


async def test_list_reports_filters(repository, clock):
    engine = _engine(repository, clock)
    old = (await engine.submit_report("c1", "reporter-1", ADULT, _submission(ReportType.SPAM))).report
    clock.advance(days=10)
    recent = (await engine.submit_report("c2", "reporter-2", None, _submission(ReportType.COPYRIGHT))).report

    assert [item.report.id for item in engine.list_reports()] == [recent.id, old.id]
    last_week = engine.list_reports(ReportListFilters(time_range=ReportTimeRange.LAST_WEEK))
    assert [item.report.id for item in last_week] == [recent.id]
    mine = engine.list_reports(ReportListFilters(reporter_id="reporter-1"))
    assert [item.report.id for item in mine] == [old.id]
    legal = engine.list_reports(ReportListFilters(category=[ReportCategory.LEGAL]))
    assert [item.report.id for item in legal] == [recent.id]


async def test_end_to_end_scenario(repository, clock):
    engine = _engine(repository, clock, StubClassifier("high"))
    snapshot = await engine.submit_report("content-42", "reporter-1", ADULT, _submission(ReportType.HARASSMENT))
    report_id = snapshot.report.id
    assert snapshot.report.priority == 10
    assert snapshot.report.queue_type == QueueType.PRIORITY

    for index in range(4):
        engine.submit_community_vote(report_id, f"voter-{index}", _adult(f"voter-{index}"), _vote())
    engine.submit_community_vote(report_id, "voter-4", _adult("voter-4"), _vote(VoteType.DISPUTE))
    assert engine.get_report(report_id).support_ratio == pytest.approx(0.8)

    engine.moderator_review(report_id, "mod-1", _review())
    assert engine.get_report(report_id).report.status == ReportStatus.REVIEWING

    resolution = engine.resolve_report(report_id, "mod-1", _resolution())
    final = engine.get_report(report_id)
    assert final.report.status == ReportStatus.RESOLVED
    assert final.report.closed_at == clock.now
    assert resolution.appeal_deadline == clock.now + timedelta(days=7)
    assert {item.user_id for item in repository.notifications if item.type == "moderation.report_resolved"} == {
        "reporter-1",
        "mod-1",
    }


async def test_burst_of_reports_on_one_content_is_flagged(repository, clock):
    engine = _engine(repository, clock)
    messages = []
    sink_id = logger.add(messages.append, level="WARNING", format="{message}")
    try:
        for index in range(6):
            reporter = ReporterProfile(id=f"reporter-{index}", age_group=AgeGroup.ADULT)
            await engine.submit_report("video-9", reporter.id, reporter, _submission())
            clock.advance(minutes=5)
    finally:
        logger.remove(sink_id)
    flagged = [message for message in messages if "coordinated_reporting_suspected" in str(message)]
    assert len(flagged) == 1


async def test_boosted_community_report_stays_out_of_priority_queue(repository, clock):
    engine = _engine(repository, clock, StubClassifier("low"))
    report_id = (await engine.submit_report("c", "reporter-1", ADULT, _submission())).report.id
    for index in range(6):
        engine.submit_community_vote(report_id, f"voter-{index}", _adult(f"voter-{index}"), _vote())

    assert engine.get_report(report_id).report.priority == 10
    assert engine.get_moderation_queue(QueueType.PRIORITY).reports == []
    community = engine.get_moderation_queue(QueueType.COMMUNITY)
    assert [item.report.id for item in community.reports] == [report_id]


async def test_urgent_report_is_escalated_on_submission(repository, clock):
    engine = _engine(repository, clock, StubClassifier("urgent"))
    report = (await engine.submit_report("c", "reporter-1", ADULT, _submission(ReportType.HARASSMENT))).report

    assert report.status == ReportStatus.ESCALATED
    assert report.escalated_at == clock.now
    assert [entry.report_id for entry in repository.list_queue(QueueType.PRIORITY)] == [report.id]
    assert [entry.report_id for entry in repository.list_queue(QueueType.ESCALATED)] == [report.id]
    escalations = [item for item in repository.notifications if item.type == "moderation.report_escalated"]
    assert [item.user_id for item in escalations] == ["mod-1"]
    with pytest.raises(InvalidReportTransitionError):
        engine.escalate_report(report.id, "mod-1", "again")


async def test_upheld_appeal_closes_report_for_good(repository, clock):
    engine = _engine(repository, clock)
    report_id = (await engine.submit_report("c", "reporter-1", ADULT, _submission())).report.id
    engine.moderator_review(report_id, "mod-1", _review())
    engine.resolve_report(report_id, "mod-1", _resolution())
    engine.appeal_report(report_id, "reporter-1", "context was missing")

    with pytest.raises(InvalidReportTransitionError):
        engine.dismiss_report(report_id, "mod-1", "skip")

    clock.advance(hours=1)
    engine.moderator_review(report_id, "mod-1", _review(ModerationDecision.NO_ACTION))
    closed = engine.get_report(report_id)
    assert closed.report.status == ReportStatus.RESOLVED
    assert closed.resolution.resolution_type == ResolutionType.CONTENT_REMOVED
    assert closed.resolution.appealable is False
    assert closed.resolution.appeal_deadline is None

    with pytest.raises(AppealWindowClosedError):
        engine.appeal_report(report_id, "reporter-1", "one more time")
    with pytest.raises(InvalidReportTransitionError):
        engine.dismiss_report(report_id, "mod-1", "skip")
    with pytest.raises(ReportAlreadyResolvedError):
        engine.resolve_report(report_id, "mod-1", _resolution())
    with pytest.raises(InvalidReportTransitionError):
        engine.moderator_review(report_id, "mod-1", _review())


async def test_explicit_zero_timeout_is_kept(repository, clock):
    engine = _engine(repository, clock, SlowClassifier(), severity_timeout=0)
    assert engine.severity_timeout == 0
    snapshot = await engine.submit_report("c", "reporter-1", ADULT, _submission())
    assert snapshot.report.severity_source == SeveritySource.FALLBACK
