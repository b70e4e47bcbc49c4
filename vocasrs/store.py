"""
The persistence collaborator seen from the scheduling core.

The core never reads or writes storage itself; callers hand it a snapshot
from a `CardStore` and write the returned cards back. `InMemoryCardStore`
is the reference implementation used by sessions and tests.
"""

import logging
from typing import Dict, Iterable, List, Optional, Protocol

from .models import Card

logger = logging.getLogger(__name__)


class CardStore(Protocol):
    def load_all_cards(self) -> List[Card]:
        ...

    def get_card(self, card_id: str) -> Optional[Card]:
        ...

    def save_card(self, card: Card) -> None:
        ...

    def save_cards(self, cards: Iterable[Card]) -> None:
        ...


class InMemoryCardStore:
    """Dictionary-backed store keyed by card id, in insertion order."""

    def __init__(self, cards: Optional[Iterable[Card]] = None):
        self._cards: Dict[str, Card] = {}
        if cards:
            self.save_cards(cards)

    def __len__(self) -> int:
        return len(self._cards)

    def __contains__(self, card_id: object) -> bool:
        return card_id in self._cards

    def load_all_cards(self) -> List[Card]:
        return list(self._cards.values())

    def get_card(self, card_id: str) -> Optional[Card]:
        return self._cards.get(card_id)

    def save_card(self, card: Card) -> None:
        self._cards[card.id] = card

    def save_cards(self, cards: Iterable[Card]) -> None:
        count = 0
        for card in cards:
            self._cards[card.id] = card
            count += 1
        logger.debug(f"Saved {count} cards ({len(self._cards)} in store)")
