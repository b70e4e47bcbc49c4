"""vocasrs - Spaced-repetition scheduling for vocabulary flashcards."""

from .models import (
    Card,
    CardState,
    ReviewQuality,
    Settings,
    StudyMode,
    create_new_card,
    quality_from_swipe,
)
from .constants import INITIAL_EASE, MIN_EASE
from .exceptions import (
    CardNotFoundError,
    InvalidQualityError,
    SettingsError,
    VocaSRSError,
)
from .scheduler import BaseScheduler, SchedulerOutput, SM2Scheduler
from .selector import count_due_cards, select_due_cards
from .config import load_settings

__all__ = [
    "Card",
    "CardState",
    "ReviewQuality",
    "Settings",
    "StudyMode",
    "create_new_card",
    "quality_from_swipe",
    "INITIAL_EASE",
    "MIN_EASE",
    "CardNotFoundError",
    "InvalidQualityError",
    "SettingsError",
    "VocaSRSError",
    "BaseScheduler",
    "SchedulerOutput",
    "SM2Scheduler",
    "count_due_cards",
    "select_due_cards",
    "load_settings",
]
