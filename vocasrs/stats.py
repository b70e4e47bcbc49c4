"""
Study statistics updated by callers after each review.
"""

from datetime import date, datetime
from typing import Dict, Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field

from .models import ensure_utc


class GroupStats(BaseModel):
    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    studied: int = Field(default=0, ge=0)
    correct: int = Field(default=0, ge=0)


class StudyStats(BaseModel):
    """
    Running totals of reviews, overall and per group, plus the daily study
    streak.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    total_studied: int = Field(default=0, ge=0)
    total_correct: int = Field(default=0, ge=0)
    streak_days: int = Field(default=0, ge=0)
    last_study_date: Optional[datetime] = Field(
        default=None,
        description="UTC timestamp of the most recent review.",
    )
    by_group: Dict[str, GroupStats] = Field(default_factory=dict)

    @property
    def accuracy(self) -> Optional[float]:
        """Share of correct reviews in percent, None before any review."""
        if self.total_studied == 0:
            return None
        return self.total_correct / self.total_studied * 100

    def _next_streak(self, today: date) -> int:
        if self.last_study_date is None:
            return 1
        gap = (today - self.last_study_date.date()).days
        if gap <= 0:
            return max(self.streak_days, 1)
        if gap == 1:
            return self.streak_days + 1
        return 1

    def record_review(
        self, correct: bool, group_ids: Iterable[str], now: datetime
    ) -> None:
        """
        Count one review.

        Studying again on the same calendar day keeps the streak, the next
        day extends it, and any longer gap starts it over at 1.
        """
        now = ensure_utc(now)
        self.total_studied += 1
        if correct:
            self.total_correct += 1

        self.streak_days = self._next_streak(now.date())
        self.last_study_date = now

        for group_id in group_ids:
            group = self.by_group.setdefault(group_id, GroupStats())
            group.studied += 1
            if correct:
                group.correct += 1
