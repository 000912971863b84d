from enum import Enum, IntEnum


class RiskLevel(IntEnum):
    # Ordered: comparisons such as `risk >= RiskLevel.HIGH` are meaningful.
    LOW = 0
    MEDIUM = 1
    HIGH = 2
    CRITICAL = 3

    @property
    def label(self) -> str:
        return self.name.capitalize()


class AlertStatus(str, Enum):
    NEW = "New"
    IN_REVIEW = "InReview"
    RESOLVED = "Resolved"
    AUTO_CLEARED = "AutoCleared"  # set only by the clinician workflow


class BatchStatus(str, Enum):
    FAILED = "Failed"
    COMPLETED = "Completed"
    COMPLETED_WITH_ERRORS = "CompletedWithErrors"
