"""Core enums used across modules."""

from enum import StrEnum


class RoleEnum(StrEnum):
    """System roles."""

    TRAINEE = "trainee"
    INTERVIEWER = "interviewer"
    ADMIN = "admin"


class UserStatusEnum(StrEnum):
    """Account verification status (interviewers start pending)."""

    PENDING_VERIFICATION = "pending_verification"
    APPROVED = "approved"
    REJECTED = "rejected"


class InterviewModeEnum(StrEnum):
    """Interview practice modes."""

    AI = "ai"
    PEER = "peer"
    FAMILY = "family"
    LIVE = "live"


class InterviewStatusEnum(StrEnum):
    """Interview status label."""

    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"


class LanguageEnum(StrEnum):
    """Interview language."""

    ENGLISH = "english"
    ARABIC = "arabic"


class DifficultyEnum(StrEnum):
    """Interview difficulty level."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


class AISessionStatusEnum(StrEnum):
    """AI session lifecycle status."""

    INITIALIZED = "initialized"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


class NotificationTypeEnum(StrEnum):
    """Notification severity shown in the inbox."""

    SUCCESS = "success"
    WARNING = "warning"
    INFO = "info"
    ERROR = "error"


class OutboxStatusEnum(StrEnum):
    """Outbox event status for integration publishing."""

    PENDING = "pending"
    PROCESSED = "processed"
    FAILED = "failed"
