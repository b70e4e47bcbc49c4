"""
CLI entry point for vocasrs.
"""

# Standard library imports
import logging
from pathlib import Path
from typing import List, Optional

# Third-party imports
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

# Local application imports
from vocasrs.config import load_settings
from vocasrs.constants import SETTINGS_ENV_VAR
from vocasrs.exceptions import InvalidQualityError, SettingsError
from vocasrs.models import CardState, Settings
from vocasrs.cli._preview_logic import preview_logic
from vocasrs.cli._simulate_logic import simulate_logic


console = Console()

app = typer.Typer(
    name="vocasrs",
    help="vocasrs: spaced-repetition scheduling for vocabulary cards.",
    add_completion=False,
    rich_markup_mode="markdown",
)


# Common typer options reused across commands
_config_option = typer.Option(  # noqa: B008
    None,
    "--config",
    help="YAML settings file. Falls back to the VOCASRS_SETTINGS env var.",
    envvar=SETTINGS_ENV_VAR,
)


def _load_settings_or_exit(config: Optional[Path]) -> Settings:
    """Load settings, printing the error and exiting with code 1 on failure."""
    try:
        return load_settings(config)
    except SettingsError as e:
        console.print(f"[bold red]Error: {escape(str(e))}[/bold red]")
        raise typer.Exit(code=1)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug logging."
    ),
):
    """Configure logging for every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@app.command()
def settings(config: Optional[Path] = _config_option):
    """
    Show the resolved scheduler settings.
    """
    resolved = _load_settings_or_exit(config)

    table = Table(title="Scheduler settings")
    table.add_column("Option", style="cyan")
    table.add_column("Value", justify="right")
    for name, value in resolved.model_dump().items():
        if isinstance(value, tuple):
            value = ", ".join(f"{step:g}" for step in value) or "-"
        table.add_row(name, str(value))
    console.print(table)


# ---------------------------------------------------------------------------
# Preview
# ---------------------------------------------------------------------------


@app.command()
def preview(
    state: CardState = typer.Option(
        CardState.Review, "--state", help="Current state of the card."
    ),
    interval: int = typer.Option(
        0, "--interval", min=0, help="Current interval in days."
    ),
    ease: float = typer.Option(
        2.5, "--ease", min=1.3, help="Current ease factor."
    ),
    repetitions: int = typer.Option(0, "--repetitions", min=0),
    lapses: int = typer.Option(0, "--lapses", min=0),
    config: Optional[Path] = _config_option,
):
    """
    Show the outcome of every grade (1-5) for a card in the given state.
    """
    resolved = _load_settings_or_exit(config)
    preview_logic(
        settings=resolved,
        state=state,
        interval=interval,
        ease=ease,
        repetitions=repetitions,
        lapses=lapses,
        console=console,
    )


# ---------------------------------------------------------------------------
# Simulate
# ---------------------------------------------------------------------------


@app.command()
def simulate(
    grades: List[int] = typer.Argument(  # noqa: B008
        ..., help="Grades to apply in order (1=Again ... 5=Perfect)."
    ),
    config: Optional[Path] = _config_option,
):
    """
    Replay a grade sequence on a fresh card, reviewing it whenever it is due.
    """
    resolved = _load_settings_or_exit(config)
    try:
        card = simulate_logic(settings=resolved, grades=grades, console=console)
    except InvalidQualityError as e:
        console.print(f"[bold red]Error: {escape(str(e))}[/bold red]")
        raise typer.Exit(code=1)

    console.print(
        f"Final state: [bold]{card.state.value}[/bold], "
        f"interval {card.interval}d, ease {card.ease_factor:.2f}"
    )


if __name__ == "__main__":
    app()
