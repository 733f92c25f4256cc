from enum import Enum
import sqlalchemy as sa
from sqlalchemy import Column


class UserRole(str, Enum):
    USER = 'user'
    ADMIN = 'admin'


class AgeGroup(str, Enum):
    CHILD = 'child'
    TEEN = 'teen'
    ADULT = 'adult'


class ReportType(str, Enum):
    INAPPROPRIATE_CONTENT = 'inappropriate_content'
    MISINFORMATION = 'misinformation'
    HARASSMENT = 'harassment'
    SPAM = 'spam'
    PRIVACY_VIOLATION = 'privacy_violation'
    COPYRIGHT = 'copyright'
    OTHER = 'other'


class ReportCategory(str, Enum):
    SAFETY = 'safety'
    QUALITY = 'quality'
    POLICY = 'policy'
    LEGAL = 'legal'


class Severity(str, Enum):
    LOW = 'low'
    MEDIUM = 'medium'
    HIGH = 'high'
    URGENT = 'urgent'


class SeveritySource(str, Enum):
    CLASSIFIER = 'classifier'
    FALLBACK = 'fallback'


class ReportStatus(str, Enum):
    PENDING = 'pending'
    REVIEWING = 'reviewing'
    ESCALATED = 'escalated'
    RESOLVED = 'resolved'
    DISMISSED = 'dismissed'
    APPEALED = 'appealed'


class EvidenceType(str, Enum):
    SCREENSHOT = 'screenshot'
    TEXT_QUOTE = 'text_quote'
    VIDEO_TIMESTAMP = 'video_timestamp'
    URL = 'url'
    FILE_ATTACHMENT = 'file_attachment'
    USER_INTERACTION_LOG = 'user_interaction_log'


class VerificationStatus(str, Enum):
    UNVERIFIED = 'unverified'
    VERIFIED = 'verified'
    DISPUTED = 'disputed'
    INVALID = 'invalid'


class VoteType(str, Enum):
    SUPPORT = 'support'
    DISPUTE = 'dispute'
    NEUTRAL = 'neutral'


class ModeratorType(str, Enum):
    COMMUNITY = 'community'
    VOLUNTEER = 'volunteer'
    STAFF = 'staff'
    AI_ASSISTED = 'ai_assisted'


class ModeratorActionType(str, Enum):
    REVIEW = 'review'
    INVESTIGATE = 'investigate'
    ESCALATE = 'escalate'
    RESOLVE = 'resolve'
    APPEAL_REVIEW = 'appeal_review'
    POLICY_UPDATE = 'policy_update'


class ModerationDecision(str, Enum):
    APPROVE = 'approve'
    REMOVE = 'remove'
    MODIFY = 'modify'
    WARN_USER = 'warn_user'
    SUSPEND_USER = 'suspend_user'
    BAN_USER = 'ban_user'
    NO_ACTION = 'no_action'


class ResolutionType(str, Enum):
    CONTENT_REMOVED = 'content_removed'
    CONTENT_MODIFIED = 'content_modified'
    USER_WARNED = 'user_warned'
    USER_SUSPENDED = 'user_suspended'
    NO_VIOLATION = 'no_violation'
    POLICY_CLARIFICATION = 'policy_clarification'


class QueueType(str, Enum):
    PRIORITY = 'priority'
    COMMUNITY = 'community'
    AI_FLAGGED = 'ai_flagged'
    ESCALATED = 'escalated'
    APPEALS = 'appeals'


class QueueSortBy(str, Enum):
    TIMESTAMP = 'timestamp'
    PRIORITY = 'priority'
    SEVERITY = 'severity'
    COMMUNITY_VOTES = 'community_votes'


class QueueFilterType(str, Enum):
    CONTENT_TYPE = 'content_type'
    REPORT_TYPE = 'report_type'
    SEVERITY = 'severity'
    AGE_GROUP = 'age_group'
    CATEGORY = 'category'
    TAG = 'tag'
    TIME_RANGE = 'time_range'


class MetricsTimeframe(str, Enum):
    DAILY = 'daily'
    WEEKLY = 'weekly'
    MONTHLY = 'monthly'
    QUARTERLY = 'quarterly'


class ReportTimeRange(str, Enum):
    LAST_DAY = 'last_day'
    LAST_WEEK = 'last_week'
    LAST_MONTH = 'last_month'
    ALL_TIME = 'all_time'


class ModeratorLevel(str, Enum):
    TRAINEE = 'trainee'
    JUNIOR = 'junior'
    SENIOR = 'senior'
    LEAD = 'lead'
    ADMIN = 'admin'


class ModeratorStatus(str, Enum):
    ACTIVE = 'active'
    INACTIVE = 'inactive'
    ON_LEAVE = 'on_leave'
    UNDER_REVIEW = 'under_review'


def enum_column(enum_cls: type[Enum], name: str, *, nullable: bool = False, index: bool = False) -> Column:
    return Column(
        sa.Enum(
            enum_cls,
            values_callable=lambda enum: [item.value for item in enum],
            name=name,
        ),
        nullable=nullable,
        index=index,
    )
