import logging
from datetime import datetime
from typing import List, Optional

from rich.console import Console
from rich.table import Table

from vocasrs.models import Card, Settings, create_new_card, utc_now
from vocasrs.scheduler import SM2Scheduler, format_delay

logger = logging.getLogger(__name__)


def simulate_logic(
    settings: Settings,
    grades: List[int],
    console: Console,
    start: Optional[datetime] = None,
) -> Card:
    """
    Replay a sequence of grades on a fresh card, reviewing it each time
    exactly when it falls due, and print one row per review.

    Returns:
        Card: The card after the last grade.

    Raises:
        InvalidQualityError: If any grade is outside 1-5.
    """
    scheduler = SM2Scheduler(settings)
    card = create_new_card("simulated", "simulated", now=start or utc_now())

    table = Table(title="Simulated reviews")
    table.add_column("#", justify="right")
    table.add_column("Quality", justify="right")
    table.add_column("State")
    table.add_column("Interval", justify="right")
    table.add_column("Next review", justify="right")
    table.add_column("Ease", justify="right")
    table.add_column("Reps", justify="right")
    table.add_column("Lapses", justify="right")
    table.add_column("Streak", justify="right")

    for number, grade in enumerate(grades, start=1):
        reviewed_at = card.due_date
        card = scheduler.review_card(card, grade, reviewed_at)
        table.add_row(
            str(number),
            str(grade),
            card.state.value,
            f"{card.interval}d",
            format_delay(card.due_date - reviewed_at),
            f"{card.ease_factor:.2f}",
            str(card.repetitions),
            str(card.lapses),
            str(card.streak),
        )

    logger.debug(f"Simulated {len(grades)} reviews; final state {card.state.value}")
    console.print(table)
    return card
