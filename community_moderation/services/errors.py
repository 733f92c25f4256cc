from __future__ import annotations


class ModerationError(Exception):
    """Base class for failures raised by the moderation engine."""


class ReportNotFoundError(ModerationError):
    def __init__(self, report_id: str) -> None:
        super().__init__(f'Report {report_id} not found')
        self.report_id = report_id


class ModeratorNotFoundError(ModerationError):
    def __init__(self, moderator_id: str) -> None:
        super().__init__(f'Moderator {moderator_id} not found')
        self.moderator_id = moderator_id


class EvidenceNotFoundError(ModerationError):
    def __init__(self, evidence_id: str) -> None:
        super().__init__(f'Evidence {evidence_id} not found')
        self.evidence_id = evidence_id


class DuplicateVoteError(ModerationError):
    def __init__(self, report_id: str, voter_id: str) -> None:
        super().__init__('User has already voted on this report')
        self.report_id = report_id
        self.voter_id = voter_id


class ReportAlreadyResolvedError(ModerationError):
    def __init__(self, report_id: str) -> None:
        super().__init__(f'Report {report_id} is already resolved')
        self.report_id = report_id


class InvalidReportTransitionError(ModerationError):
    def __init__(self, report_id: str, current: str, attempted: str) -> None:
        super().__init__(f'Report {report_id} cannot move from {current} to {attempted}')
        self.report_id = report_id
        self.current = current
        self.attempted = attempted


class AppealWindowClosedError(ModerationError):
    def __init__(self, report_id: str) -> None:
        super().__init__(f'Report {report_id} is not open for appeal')
        self.report_id = report_id
