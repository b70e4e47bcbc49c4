import pytest
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Set

from vocasrs.models import Card, CardState, Settings
from vocasrs.scheduler import SM2Scheduler

UTC = timezone.utc


@pytest.fixture
def review_ts() -> datetime:
    """
    Fixed UTC timestamp used as "now" across tests.

    Returns:
        datetime: 2024-01-01 10:00:00 UTC.
    """
    return datetime(2024, 1, 1, 10, 0, 0, tzinfo=UTC)


@pytest.fixture
def default_settings() -> Settings:
    return Settings()


@pytest.fixture
def short_settings() -> Settings:
    """
    Settings with two learn steps (1 and 10 minutes) and distinct
    graduating (3 days) and easy (5 days) intervals.
    """
    return Settings(learn_steps=(1, 10), graduating_interval=3, easy_interval=5)


@pytest.fixture
def scheduler(default_settings: Settings) -> SM2Scheduler:
    return SM2Scheduler(default_settings)


@pytest.fixture
def short_scheduler(short_settings: Settings) -> SM2Scheduler:
    return SM2Scheduler(short_settings)


@pytest.fixture
def make_card(review_ts: datetime) -> Callable[..., Card]:
    """
    Factory building cards relative to `review_ts`.

    Parameters (of the returned callable):
        state: Scheduling state of the card.
        due_in: Offset of the due date from `review_ts`; negative means
            overdue.
        lapses, interval, ease_factor, repetitions, streak: Scheduling fields.
        groups: Group ids.
        card_id: Explicit id; a counter-based id is generated otherwise.
    """
    counter = {"n": 0}

    def _make(
        state: CardState = CardState.New,
        due_in: timedelta = timedelta(0),
        lapses: int = 0,
        interval: int = 0,
        ease_factor: float = 2.5,
        repetitions: int = 0,
        streak: int = 0,
        groups: Optional[Set[str]] = None,
        card_id: Optional[str] = None,
    ) -> Card:
        counter["n"] += 1
        return Card(
            id=card_id or f"card-{counter['n']:03d}",
            front=f"word {counter['n']}",
            back=f"palabra {counter['n']}",
            state=state,
            due_date=review_ts + due_in,
            lapses=lapses,
            interval=interval,
            ease_factor=ease_factor,
            repetitions=repetitions,
            streak=streak,
            groups=groups or set(),
        )

    return _make
