"""
Shared review processing logic for vocasrs.

The ReviewProcessor is the caller-side glue around the pure scheduler:
1. Timestamp handling
2. Scheduler computation
3. Persistence through the card store
4. Statistics update
5. Returning the outcome for the caller to broadcast
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import FrozenSet, Optional

from .exceptions import CardNotFoundError
from .models import Card, CardState, ReviewQuality, ensure_utc, utc_now
from .scheduler import BaseScheduler
from .stats import StudyStats
from .store import CardStore

# Initialize logger
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReviewOutcome:
    """What happened in one review. The core emits no events; callers
    decide what to do with this."""

    card_id: str
    quality: ReviewQuality
    reviewed_at: datetime
    previous_state: CardState
    new_state: CardState
    card: Card
    group_ids: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def correct(self) -> bool:
        return self.quality.is_success

    @property
    def lapsed(self) -> bool:
        return (
            self.previous_state.is_review_phase
            and self.quality == ReviewQuality.Again
        )

    @property
    def newly_mastered(self) -> bool:
        return (
            self.new_state == CardState.Mastered
            and self.previous_state != CardState.Mastered
        )


class ReviewProcessor:
    """
    Processes review submissions with consistent logic across all review
    workflows.
    """

    def __init__(
        self,
        store: CardStore,
        scheduler: BaseScheduler,
        stats: Optional[StudyStats] = None,
    ):
        """
        Initialize the ReviewProcessor.

        Args:
            store: Card store the updated cards are written back to
            scheduler: Scheduler computing the next card state
            stats: Optional statistics object updated after every review
        """
        self.store = store
        self.scheduler = scheduler
        self.stats = stats

    def process_review(
        self,
        card: Card,
        quality: int,
        reviewed_at: Optional[datetime] = None,
    ) -> ReviewOutcome:
        """
        Grade a card, persist the result and update statistics.

        Args:
            card: The card being reviewed
            quality: Grade 1-5 (Again, Hard, Good, Easy, Perfect)
            reviewed_at: Review timestamp (defaults to current time)

        Returns:
            ReviewOutcome describing the review, including the updated card

        Raises:
            InvalidQualityError: If quality is outside 1-5
        """
        ts = ensure_utc(reviewed_at) if reviewed_at is not None else utc_now()

        logger.debug(f"Processing review for card {card.id} with quality {quality}")

        try:
            updated_card = self.scheduler.review_card(card, quality, ts)
            self.store.save_card(updated_card)
        except Exception:
            logger.exception(f"Failed to process review for card {card.id}")
            raise

        outcome = ReviewOutcome(
            card_id=card.id,
            quality=ReviewQuality(quality),
            reviewed_at=ts,
            previous_state=card.state,
            new_state=updated_card.state,
            card=updated_card,
            group_ids=frozenset(card.groups),
        )

        if self.stats is not None:
            self.stats.record_review(outcome.correct, sorted(outcome.group_ids), ts)

        logger.debug(
            f"Review processed for card {card.id}. "
            f"Next due: {updated_card.due_date.isoformat()}, State: {updated_card.state.value}"
        )
        return outcome

    def process_review_by_id(
        self,
        card_id: str,
        quality: int,
        reviewed_at: Optional[datetime] = None,
    ) -> ReviewOutcome:
        """
        Fetch a card from the store by id and process a review for it.

        Raises:
            CardNotFoundError: If the store has no card with this id
        """
        card = self.store.get_card(card_id)
        if card is None:
            raise CardNotFoundError(f"Card {card_id} not found in store")

        return self.process_review(
            card=card, quality=quality, reviewed_at=reviewed_at
        )
