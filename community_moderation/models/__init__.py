from community_moderation.models.base import IDModel, TimestampModel
from community_moderation.models.user import User
from community_moderation.models.refresh_token import RefreshToken
from community_moderation.models.notification import Notification
from community_moderation.models.report import ModerationReport
from community_moderation.models.evidence import ReportEvidence
from community_moderation.models.vote import CommunityVote, VoterWeight
from community_moderation.models.moderator_action import ModeratorAction
from community_moderation.models.resolution import ReportResolution
from community_moderation.models.queue_entry import QueueEntry
from community_moderation.models.moderator import ModeratorProfile, ModeratorStatistics

__all__ = [
    'IDModel',
    'TimestampModel',
    'User',
    'RefreshToken',
    'Notification',
    'ModerationReport',
    'ReportEvidence',
    'CommunityVote',
    'VoterWeight',
    'ModeratorAction',
    'ReportResolution',
    'QueueEntry',
    'ModeratorProfile',
    'ModeratorStatistics',
]
