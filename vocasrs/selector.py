"""
Due-set selection: which cards are served in a study session, and in what
order.

Both entry points are pure functions over a snapshot of the collection.
`count_due_cards` answers "how many cards are eligible right now" and is
deliberately not bounded by the daily caps; `select_due_cards` in normal
mode is. The count can therefore exceed the size of the next session.
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional, Set, Tuple

from .models import Card, CardState, Settings, StudyMode, ensure_utc, utc_now

logger = logging.getLogger(__name__)

STATE_RANK = {
    CardState.New: 0,
    CardState.Learning: 1,
    CardState.Relearning: 1,
    CardState.Review: 2,
    CardState.Mastered: 2,
}


def _matches_groups(card: Card, groups: Optional[Set[str]]) -> bool:
    # None or an empty filter means "all groups".
    if not groups:
        return True
    return not card.groups.isdisjoint(groups)


def _eligible(
    cards: Iterable[Card], settings: Settings, groups: Optional[Set[str]]
) -> List[Card]:
    """Drop leeches and cards outside the group filter, keeping input order."""
    return [
        card
        for card in cards
        if not card.is_leech(settings.leech_threshold)
        and _matches_groups(card, groups)
    ]


def _intensive_key(now: datetime):
    def key(card: Card) -> Tuple[int, int, datetime]:
        return (
            0 if card.due_date <= now else 1,
            STATE_RANK[card.state],
            card.due_date,
        )

    return key


def select_due_cards(
    cards: Iterable[Card],
    settings: Settings,
    now: Optional[datetime] = None,
    groups: Optional[Set[str]] = None,
    mode: StudyMode = StudyMode.Normal,
    limit: Optional[int] = None,
    ignore_limits: bool = False,
) -> List[Card]:
    """
    Build the ordered list of cards to study now.

    Args:
        cards: The full card collection.
        settings: Daily caps and leech threshold.
        now: Current time; defaults to the current UTC time.
        groups: Group ids to restrict to. None or empty selects every group.
        mode: Normal respects caps and due dates; Intensive surfaces the
            whole filtered set, due cards first.
        limit: Overall cap on the session size, applied in both modes.
        ignore_limits: In normal mode, bypass the daily caps while still
            requiring cards to be due.

    Returns:
        The selected cards. Normal mode orders by due date; intensive mode by
        (due before not-due, new < learning < review, due date). Sorting is
        stable, so equal keys keep collection order.
    """
    now = ensure_utc(now) if now is not None else utc_now()
    if limit is not None and limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")

    candidates = _eligible(cards, settings, groups)

    if mode == StudyMode.Intensive:
        selected = sorted(candidates, key=_intensive_key(now))
        if limit is not None:
            selected = selected[:limit]
        logger.debug(
            f"Intensive selection: {len(selected)} of {len(candidates)} cards"
        )
        return selected

    due = [card for card in candidates if card.due_date <= now]
    new_cards = [card for card in due if card.state == CardState.New]
    review_cards = [card for card in due if card.state != CardState.New]

    if ignore_limits:
        new_cap = len(new_cards)
        review_cap = len(review_cards)
    else:
        new_cap = settings.new_cards_per_day
        review_cap = settings.review_cards_per_day

    new_take = min(new_cap, len(new_cards))
    if limit is not None:
        new_take = min(new_take, limit)
    review_take = min(review_cap, len(review_cards))
    if limit is not None:
        review_take = min(review_take, limit - new_take)

    selected = sorted(
        new_cards[:new_take] + review_cards[:review_take],
        key=lambda card: card.due_date,
    )
    logger.debug(
        f"Normal selection: {new_take} new + {review_take} review "
        f"out of {len(due)} due cards"
    )
    return selected


def count_due_cards(
    cards: Iterable[Card],
    settings: Settings,
    now: Optional[datetime] = None,
    groups: Optional[Set[str]] = None,
) -> int:
    """
    Count cards that are due, not leeches and inside the group filter.

    Single pass with no sorting. Daily caps are NOT applied: this is the
    number of eligible cards, not the number the next session will show.
    """
    now = ensure_utc(now) if now is not None else utc_now()
    return sum(
        1
        for card in cards
        if card.due_date <= now
        and not card.is_leech(settings.leech_threshold)
        and _matches_groups(card, groups)
    )
