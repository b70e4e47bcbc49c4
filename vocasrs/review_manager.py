"""
This module defines the ReviewSessionManager class, which builds a study
session from the card store, hands out cards one by one and records the
learner's grades.
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional, Set
from uuid import uuid4

from .exceptions import CardNotFoundError
from .models import Card, StudyMode, ensure_utc, utc_now
from .review_processor import ReviewOutcome, ReviewProcessor
from .scheduler import SM2Scheduler
from .selector import count_due_cards, select_due_cards
from .stats import StudyStats
from .store import CardStore

# Initialize logger
logger = logging.getLogger(__name__)


class ReviewSessionManager:
    """
    Manages a study session.

    This class is responsible for:
    - Selecting the session's cards from a snapshot of the store.
    - Providing cards one by one for review.
    - Processing grades and writing updated cards back.
    """

    def __init__(
        self,
        store: CardStore,
        scheduler: SM2Scheduler,
        stats: Optional[StudyStats] = None,
    ):
        self.store = store
        self.scheduler = scheduler
        self.session_uuid = uuid4()
        self.review_queue: List[Card] = []
        self.current_session_card_ids: Set[str] = set()
        self.outcomes: List[ReviewOutcome] = []
        self.review_processor = ReviewProcessor(store, scheduler, stats)

    @property
    def settings(self):
        return self.scheduler.settings

    def initialize_session(
        self,
        groups: Optional[Set[str]] = None,
        mode: StudyMode = StudyMode.Normal,
        limit: Optional[int] = None,
        ignore_limits: bool = False,
        now: Optional[datetime] = None,
    ) -> None:
        """
        Select the cards for this session and queue them in study order.

        Parameters:
            groups: Optional group ids restricting the session.
            mode: Normal (caps and due dates) or Intensive (everything).
            limit: Optional overall cap on the session size.
            ignore_limits: Bypass daily caps in normal mode.
            now: Selection time; defaults to the current UTC time.
        """
        logger.info(
            f"Initializing {mode.value} session {self.session_uuid}"
            + (f" for groups {sorted(groups)}" if groups else "")
        )
        self.review_queue = select_due_cards(
            self.store.load_all_cards(),
            self.settings,
            now=now,
            groups=groups,
            mode=mode,
            limit=limit,
            ignore_limits=ignore_limits,
        )
        self.current_session_card_ids = {card.id for card in self.review_queue}
        self.outcomes = []
        logger.info(f"Initialized session with {len(self.review_queue)} cards.")

    def get_next_card(self) -> Optional[Card]:
        """
        Retrieves the next card to be reviewed.

        Returns:
            The next Card, or None if the queue is empty.
        """
        if not self.review_queue:
            logger.info("Review queue is empty. Session may be complete.")
            return None
        return self.review_queue[0]

    def _get_card_from_queue(self, card_id: str) -> Optional[Card]:
        for card in self.review_queue:
            if card.id == card_id:
                return card
        return None

    def _remove_card_from_queue(self, card_id: str) -> None:
        self.review_queue = [
            card for card in self.review_queue if card.id != card_id
        ]

    def submit_review(
        self,
        card_id: str,
        quality: int,
        reviewed_at: Optional[datetime] = None,
    ) -> ReviewOutcome:
        """
        Grade a card from the current session and write it back.

        Raises:
            CardNotFoundError: If the card is not part of the current session.
            InvalidQualityError: If the quality is outside 1-5.
        """
        card = self._get_card_from_queue(card_id)
        if not card:
            raise CardNotFoundError(
                f"Card {card_id} not found in the current review session."
            )

        outcome = self.review_processor.process_review(
            card=card, quality=quality, reviewed_at=reviewed_at
        )
        self.outcomes.append(outcome)
        self._remove_card_from_queue(card_id)
        return outcome

    def get_session_stats(self) -> Dict[str, int]:
        """
        Returns:
            dict with "total_cards", "reviewed_cards", "correct_cards" and
            "remaining_cards".
        """
        total_cards = len(self.current_session_card_ids)
        return {
            "total_cards": total_cards,
            "reviewed_cards": len(self.outcomes),
            "correct_cards": sum(1 for o in self.outcomes if o.correct),
            "remaining_cards": len(self.review_queue),
        }

    def get_due_card_count(
        self,
        groups: Optional[Set[str]] = None,
        now: Optional[datetime] = None,
    ) -> int:
        """
        Number of eligible due cards in the store, ignoring daily caps.
        """
        ts = ensure_utc(now) if now is not None else utc_now()
        return count_due_cards(
            self.store.load_all_cards(), self.settings, now=ts, groups=groups
        )
