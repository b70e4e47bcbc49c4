from datetime import datetime
from typing import Optional

from rich.console import Console
from rich.table import Table

from vocasrs.models import Card, CardState, Settings, utc_now
from vocasrs.scheduler import SM2Scheduler, format_delay


def preview_logic(
    settings: Settings,
    state: CardState,
    interval: int,
    ease: float,
    repetitions: int,
    lapses: int,
    console: Console,
    now: Optional[datetime] = None,
) -> Table:
    """
    Print what each grade would do to a card in the given scheduling state.

    Returns:
        Table: The rendered table, one row per quality 1-5.
    """
    card = Card(
        front="preview",
        back="preview",
        state=state,
        interval=interval,
        ease_factor=ease,
        repetitions=repetitions,
        lapses=lapses,
    )
    scheduler = SM2Scheduler(settings)
    outcomes = scheduler.preview_outcomes(card, now or utc_now())

    table = Table(title=f"Next review for a '{state.value}' card")
    table.add_column("Quality", justify="right")
    table.add_column("Grade")
    table.add_column("State")
    table.add_column("Interval", justify="right")
    table.add_column("Next review", justify="right")
    table.add_column("Ease", justify="right")
    table.add_column("Lapses", justify="right")

    for quality, output in outcomes.items():
        table.add_row(
            str(int(quality)),
            quality.name,
            output.state.value,
            f"{output.interval}d",
            format_delay(output.delay),
            f"{output.ease_factor:.2f}",
            str(output.lapses),
        )

    console.print(table)
    return table
