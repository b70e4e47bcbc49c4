"""
Pydantic models for cards, review qualities and scheduler settings.
"""

from __future__ import annotations

import math
import uuid
from datetime import datetime, timezone
from enum import Enum, IntEnum
from typing import Optional, Set, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import (
    DEFAULT_EASY_INTERVAL,
    DEFAULT_GRADUATING_INTERVAL,
    DEFAULT_LAPSE_STEPS,
    DEFAULT_LEARN_STEPS,
    DEFAULT_LEECH_THRESHOLD,
    DEFAULT_MASTERED_INTERVAL,
    DEFAULT_MAXIMUM_INTERVAL,
    DEFAULT_NEW_CARDS_PER_DAY,
    DEFAULT_NEW_INTERVAL,
    DEFAULT_REVIEW_CARDS_PER_DAY,
    INITIAL_EASE,
    MIN_EASE,
    MINUTES_PER_DAY,
)


def ensure_utc(ts: datetime) -> datetime:
    """Ensures the given datetime is UTC. Assumes UTC if naive."""
    if ts.tzinfo is None or ts.tzinfo.utcoffset(ts) is None:
        return ts.replace(tzinfo=timezone.utc)
    if ts.tzinfo != timezone.utc:
        return ts.astimezone(timezone.utc)
    return ts


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CardState(str, Enum):
    """
    Scheduling phase of a card.

    `Mastered` is a labelled sub-state of `Review`: both follow the same
    success and lapse rules.
    """

    New = "new"
    Learning = "learning"
    Relearning = "relearning"
    Review = "review"
    Mastered = "mastered"

    @property
    def is_review_phase(self) -> bool:
        return self in (
            CardState.Review,
            CardState.Relearning,
            CardState.Mastered,
        )


class ReviewQuality(IntEnum):
    """
    The learner's grade for a single review.

    Classic mode emits the whole 1-5 scale; swipe mode only emits
    Again (fail) and Perfect (success).
    """

    Again = 1
    Hard = 2
    Good = 3
    Easy = 4
    Perfect = 5

    @property
    def is_success(self) -> bool:
        return self >= ReviewQuality.Good


def quality_from_swipe(success: bool) -> ReviewQuality:
    """Map a binary swipe gesture onto the five-level scale."""
    return ReviewQuality.Perfect if success else ReviewQuality.Again


class StudyMode(str, Enum):
    """Selection policy used when building a study session."""

    Normal = "normal"
    Intensive = "intensive"


class Card(BaseModel):
    """
    A unit of vocabulary knowledge plus its scheduling state.

    Content fields are opaque to the scheduler. Scheduling fields are only
    changed by the review state machine.
    """

    model_config = ConfigDict(
        validate_assignment=True, extra="forbid", allow_inf_nan=False
    )

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        min_length=1,
        description="Opaque unique identifier. UUIDv4 string by default.",
    )
    front: str = Field(..., description="Word or prompt shown first.")
    back: str = Field(..., description="Translation or answer.")
    example: Optional[str] = Field(default=None)
    definition: Optional[str] = Field(default=None)
    category: Optional[str] = Field(default=None)
    groups: Set[str] = Field(
        default_factory=set,
        description="Group ids the card belongs to (used as a filter only).",
    )

    ease_factor: float = Field(
        default=INITIAL_EASE,
        ge=MIN_EASE,
        description="Multiplier controlling interval growth.",
    )
    interval: int = Field(
        default=0,
        ge=0,
        description="Days until the next review once in review phase.",
    )
    repetitions: int = Field(
        default=0,
        ge=0,
        description="Consecutive successful steps in the current cycle.",
    )
    due_date: datetime = Field(
        default_factory=utc_now,
        description="UTC timestamp when the card becomes eligible again.",
    )
    lapses: int = Field(default=0, ge=0)
    streak: int = Field(default=0, ge=0)
    state: CardState = Field(default=CardState.New)
    priority: int = Field(
        default=1,
        description="Reserved weighting field, not read by the scheduler.",
    )

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("due_date", "created_at", "updated_at")
    @classmethod
    def normalize_to_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    def is_due(self, now: datetime) -> bool:
        return self.due_date <= ensure_utc(now)

    def is_leech(self, leech_threshold: int) -> bool:
        return self.lapses >= leech_threshold


def create_new_card(
    front: str,
    back: str,
    example: Optional[str] = None,
    definition: Optional[str] = None,
    category: Optional[str] = None,
    groups: Optional[Set[str]] = None,
    now: Optional[datetime] = None,
) -> Card:
    """
    Create a fresh card that is due immediately.

    Text fields are stripped of surrounding whitespace; optional text that
    ends up empty is stored as None.
    """
    ts = ensure_utc(now) if now is not None else utc_now()
    return Card(
        front=front.strip(),
        back=back.strip(),
        example=(example or "").strip() or None,
        definition=(definition or "").strip() or None,
        category=category,
        groups=set(groups or ()),
        due_date=ts,
        created_at=ts,
        updated_at=ts,
    )


class Settings(BaseModel):
    """
    Scheduler and selector settings.

    Immutable: every call treats its settings as a snapshot. Accepts either
    the snake_case field names or the camelCase keys of stored settings.
    Durations in `learn_steps` / `lapse_steps` are minutes, intervals are
    days.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        allow_inf_nan=False,
    )

    new_cards_per_day: int = Field(
        default=DEFAULT_NEW_CARDS_PER_DAY, gt=0, alias="newCardsPerDay"
    )
    review_cards_per_day: int = Field(
        default=DEFAULT_REVIEW_CARDS_PER_DAY, gt=0, alias="reviewCardsPerDay"
    )
    learn_steps: Tuple[float, ...] = Field(
        default=DEFAULT_LEARN_STEPS, alias="learnSteps"
    )
    lapse_steps: Tuple[float, ...] = Field(
        default=DEFAULT_LAPSE_STEPS,
        alias="lapseSteps",
        description=(
            "Kept for stored settings only. The scheduler does not read it: "
            "lapsed cards are rescheduled on learn_steps."
        ),
    )
    graduating_interval: float = Field(
        default=DEFAULT_GRADUATING_INTERVAL,
        gt=0,
        le=DEFAULT_MAXIMUM_INTERVAL,
        alias="graduatingInterval",
    )
    easy_interval: float = Field(
        default=DEFAULT_EASY_INTERVAL,
        gt=0,
        le=DEFAULT_MAXIMUM_INTERVAL,
        alias="easyInterval",
    )
    new_interval: float = Field(
        default=DEFAULT_NEW_INTERVAL,
        gt=0,
        le=DEFAULT_MAXIMUM_INTERVAL,
        alias="newInterval",
    )
    mastered_interval: int = Field(
        default=DEFAULT_MASTERED_INTERVAL, gt=0, alias="masteredInterval"
    )
    maximum_interval: int = Field(
        default=DEFAULT_MAXIMUM_INTERVAL,
        gt=0,
        le=DEFAULT_MAXIMUM_INTERVAL,
        alias="maximumInterval",
        description="Longest interval in days a card can be scheduled for.",
    )
    leech_threshold: int = Field(
        default=DEFAULT_LEECH_THRESHOLD, gt=0, alias="leechThreshold"
    )

    @field_validator("learn_steps", "lapse_steps")
    @classmethod
    def validate_steps_positive(
        cls, steps: Tuple[float, ...]
    ) -> Tuple[float, ...]:
        """Each step must be a positive, finite number of minutes, no longer
        than the maximum interval."""
        for step in steps:
            if not math.isfinite(step) or step <= 0:
                raise ValueError(
                    f"Step '{step}' must be a positive number of minutes."
                )
            if step > DEFAULT_MAXIMUM_INTERVAL * MINUTES_PER_DAY:
                raise ValueError(
                    f"Step '{step}' exceeds {DEFAULT_MAXIMUM_INTERVAL} days."
                )
        return steps

    def clamped(self) -> "Settings":
        """
        Return a copy with every value forced into the ranges the settings
        screen allows. Learn steps are sorted ascending.
        """
        learn_steps = tuple(
            sorted(
                max(0.5 if i == 0 else 1.0, step)
                for i, step in enumerate(self.learn_steps)
            )
        )
        lapse_steps = tuple(max(1.0, step) for step in self.lapse_steps)
        return self.model_copy(
            update={
                "new_cards_per_day": max(1, min(100, self.new_cards_per_day)),
                "review_cards_per_day": max(
                    10, min(500, self.review_cards_per_day)
                ),
                "learn_steps": learn_steps,
                "lapse_steps": lapse_steps,
                "graduating_interval": max(0.5, self.graduating_interval),
                "easy_interval": max(1.0, self.easy_interval),
                "new_interval": max(0.5, self.new_interval),
                "leech_threshold": max(1, min(20, self.leech_threshold)),
            }
        )
