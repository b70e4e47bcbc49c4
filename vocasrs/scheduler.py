# vocasrs/scheduler.py

"""
Defines the BaseScheduler abstract class and the SM2Scheduler, the review
state machine that decides when a card becomes due again after a review.
"""

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Optional, Tuple

from .constants import (
    FALLBACK_LEARN_STEPS,
    GOOD_INTERVAL_DAMPING,
    LAPSE_EASE_PENALTY,
    MIN_EASE,
    MINUTES_PER_DAY,
    PERFECT_INTERVAL_BOOST,
    SUCCESS_EASE_BONUS,
)
from .exceptions import InvalidQualityError
from .models import Card, CardState, ReviewQuality, Settings, ensure_utc

logger = logging.getLogger(__name__)


@dataclass
class SchedulerOutput:
    state: CardState
    ease_factor: float
    interval: int
    repetitions: int
    lapses: int
    streak: int
    due_date: datetime
    review_type: str
    # Set by the scheduler once the output is built.
    reviewed_at: Optional[datetime] = None

    @property
    def delay(self) -> timedelta:
        """Time between the review and the next due date."""
        return self.due_date - self.reviewed_at


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_delay(delay: timedelta) -> str:
    """
    Render a scheduling delay the way study buttons show it:
    "10 min", "5 h", "1 day", "12 days".
    """
    minutes = delay.total_seconds() / 60
    if minutes < 60:
        return f"{round_half_up(minutes)} min"
    if minutes < MINUTES_PER_DAY:
        return f"{round_half_up(minutes / 60)} h"
    days = round_half_up(minutes / MINUTES_PER_DAY)
    return "1 day" if days == 1 else f"{days} days"


class BaseScheduler(ABC):
    """
    Abstract base class for all schedulers in vocasrs.
    """

    @abstractmethod
    def compute_next_state(
        self, card: Card, quality: int, review_ts: datetime
    ) -> SchedulerOutput:
        """
        Computes the next scheduling state of a card for a new grade.

        Args:
            card: The card being graded.
            quality: The grade for this review (1=Again ... 5=Perfect).
            review_ts: The timestamp of the review.

        Returns:
            A SchedulerOutput object containing the new state.

        Raises:
            InvalidQualityError: If the quality is outside 1-5.
        """
        pass

    def review_card(
        self, card: Card, quality: int, review_ts: datetime
    ) -> Card:
        """
        Apply a grade to a card and return the updated copy.

        The input card is left untouched; persisting the result is up to
        the caller.
        """
        output = self.compute_next_state(card, quality, review_ts)
        data = card.model_dump()
        data.update(
            state=output.state,
            ease_factor=output.ease_factor,
            interval=output.interval,
            repetitions=output.repetitions,
            lapses=output.lapses,
            streak=output.streak,
            due_date=output.due_date,
            updated_at=output.reviewed_at,
        )
        return Card.model_validate(data)

    def preview_outcomes(
        self, card: Card, review_ts: datetime
    ) -> Dict[ReviewQuality, SchedulerOutput]:
        """Compute what every possible grade would do to the card."""
        return {
            quality: self.compute_next_state(card, quality, review_ts)
            for quality in ReviewQuality
        }


class SM2Scheduler(BaseScheduler):
    """
    SM-2 style scheduler with minute-based learning steps, a mastered
    sub-state and an ease floor.

    Cards in New/Learning walk through `learn_steps` until they graduate.
    Cards in Review/Relearning/Mastered grow their interval by the ease
    factor on success and fall back to Learning on a lapse.
    """

    REVIEW_TYPE_MAP = {
        CardState.New: "learn",
        CardState.Learning: "learn",
        CardState.Review: "review",
        CardState.Mastered: "review",
        CardState.Relearning: "relearn",
    }

    def __init__(self, settings: Optional[Settings] = None):
        if settings is None:
            settings = Settings()
        self.settings = settings

    def _validate_quality(self, quality: int) -> ReviewQuality:
        """Maps an integer grade to ReviewQuality and validates it."""
        if isinstance(quality, bool) or not isinstance(quality, int):
            raise InvalidQualityError(
                f"Invalid quality: {quality!r}. Must be an integer 1-5."
            )
        if not (1 <= quality <= 5):
            raise InvalidQualityError(
                f"Invalid quality: {quality}. Must be 1-5 "
                "(1=Again, 2=Hard, 3=Good, 4=Easy, 5=Perfect)."
            )
        return ReviewQuality(quality)

    @property
    def learn_steps(self) -> Tuple[float, ...]:
        steps = self.settings.learn_steps
        if not steps:
            logger.warning(
                f"learn_steps is empty; using {FALLBACK_LEARN_STEPS} minutes"
            )
            return FALLBACK_LEARN_STEPS
        return steps

    def _learn_step(self, index: int) -> timedelta:
        steps = self.learn_steps
        return timedelta(minutes=steps[min(index, len(steps) - 1)])

    def _day_interval(self, days: float) -> int:
        return min(self.settings.maximum_interval, max(1, round_half_up(days)))

    def compute_next_state(
        self, card: Card, quality: int, review_ts: datetime
    ) -> SchedulerOutput:
        grade = self._validate_quality(quality)
        now = ensure_utc(review_ts)

        if card.state.is_review_phase:
            if grade.is_success:
                output = self._review_success(card, grade, now)
            else:
                output = self._lapse(card, grade, now)
        elif grade.is_success:
            output = self._learning_success(card, grade, now)
        else:
            output = self._learning_failure(card, now)

        output.reviewed_at = now
        logger.debug(
            f"Card {card.id}: {card.state.value} -> {output.state.value} "
            f"(quality={int(grade)}, interval={output.interval}, "
            f"ease={output.ease_factor:.2f}, due={output.due_date.isoformat()})"
        )
        return output

    def _learning_failure(self, card: Card, now: datetime) -> SchedulerOutput:
        return SchedulerOutput(
            state=CardState.Learning,
            ease_factor=card.ease_factor,
            interval=0,
            repetitions=0,
            lapses=card.lapses,
            streak=card.streak,
            due_date=now + self._learn_step(0),
            review_type=self.REVIEW_TYPE_MAP[card.state],
        )

    def _learning_success(
        self, card: Card, grade: ReviewQuality, now: datetime
    ) -> SchedulerOutput:
        # A perfect answer skips one extra step.
        step = 2 if grade == ReviewQuality.Perfect else 1
        repetitions = card.repetitions + step

        if repetitions >= len(self.learn_steps):
            if grade == ReviewQuality.Perfect:
                interval = self._day_interval(self.settings.easy_interval)
            else:
                interval = self._day_interval(
                    self.settings.graduating_interval
                )
            return SchedulerOutput(
                state=CardState.Review,
                ease_factor=card.ease_factor,
                interval=interval,
                repetitions=repetitions,
                lapses=card.lapses,
                streak=card.streak,
                due_date=now + timedelta(days=interval),
                review_type=self.REVIEW_TYPE_MAP[card.state],
            )

        return SchedulerOutput(
            state=CardState.Learning,
            ease_factor=card.ease_factor,
            interval=0,
            repetitions=repetitions,
            lapses=card.lapses,
            streak=card.streak,
            due_date=now + self._learn_step(repetitions),
            review_type=self.REVIEW_TYPE_MAP[card.state],
        )

    def _lapse(
        self, card: Card, grade: ReviewQuality, now: datetime
    ) -> SchedulerOutput:
        # Only Again counts as a lapse; Hard is a retry one step further in.
        lapses = card.lapses + 1 if grade == ReviewQuality.Again else card.lapses
        step_index = 0 if grade == ReviewQuality.Again else 1
        ease = max(MIN_EASE, card.ease_factor - LAPSE_EASE_PENALTY[grade])
        return SchedulerOutput(
            state=CardState.Learning,
            ease_factor=ease,
            interval=0,
            repetitions=0,
            lapses=lapses,
            streak=0,
            due_date=now + self._learn_step(step_index),
            review_type=self.REVIEW_TYPE_MAP[card.state],
        )

    def _review_success(
        self, card: Card, grade: ReviewQuality, now: datetime
    ) -> SchedulerOutput:
        ease = max(MIN_EASE, card.ease_factor + SUCCESS_EASE_BONUS[grade])

        multiplier = ease
        if grade == ReviewQuality.Perfect:
            multiplier *= PERFECT_INTERVAL_BOOST
        elif grade == ReviewQuality.Good:
            multiplier *= GOOD_INTERVAL_DAMPING

        previous = card.interval or self.settings.new_interval
        interval = self._day_interval(max(1.0, previous * multiplier))

        state = CardState.Review
        if interval >= self.settings.mastered_interval:
            state = CardState.Mastered

        return SchedulerOutput(
            state=state,
            ease_factor=ease,
            interval=interval,
            repetitions=card.repetitions + 1,
            lapses=card.lapses,
            streak=card.streak + 1,
            due_date=now + timedelta(days=interval),
            review_type=self.REVIEW_TYPE_MAP[card.state],
        )
