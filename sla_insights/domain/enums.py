"""
Enumeration types for SLA Insights domain models.
"""

from enum import Enum


class RiskLevel(str, Enum):
    """Risk band assigned upstream to each case."""
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @classmethod
    def parse(cls, value: str | None) -> "RiskLevel | None":
        """Match a source value case-insensitively, returning None if unknown."""
        if value is None:
            return None
        text = value.strip().lower()
        for member in cls:
            if member.value.lower() == text:
                return member
        return None


class SortDirection(str, Enum):
    """Direction for case sorting."""
    ASC = "asc"
    DESC = "desc"


class ActionGroupBy(str, Enum):
    """Dimensions recommendation groups can be built on."""
    QUEUE = "queue"
    RISK = "risk"
    BOTTLENECK = "bottleneck"
    ACTION = "action"


class Weekday(int, Enum):
    """Day of week as supplied by the state source (0 = Sunday)."""
    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6

    @property
    def label(self) -> str:
        return self.name.capitalize()
