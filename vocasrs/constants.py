"""
Scheduling constants.

This module contains the static parameters of the SM-2 style scheduler and the
default study settings. No runtime configuration - pure constants only.
"""
from typing import Dict, Tuple

# Ease factor assigned to freshly created cards.
INITIAL_EASE: float = 2.5

# Lower bound for the ease factor. Intervals stop shrinking below this.
MIN_EASE: float = 1.3

# Ease penalty applied on a lapse, keyed by quality (Again, Hard).
LAPSE_EASE_PENALTY: Dict[int, float] = {1: 0.2, 2: 0.15}

# Ease bonus applied on a successful review, keyed by quality.
SUCCESS_EASE_BONUS: Dict[int, float] = {3: 0.0, 4: 0.1, 5: 0.2}

# Interval multiplier adjustments for Good (dampened) and Easy+ (amplified).
GOOD_INTERVAL_DAMPING: float = 0.8
PERFECT_INTERVAL_BOOST: float = 1.3

# Used in place of an empty learn_steps setting.
FALLBACK_LEARN_STEPS: Tuple[float, ...] = (1.0,)

MINUTES_PER_DAY: int = 24 * 60

# Defaults mirrored by vocasrs.models.Settings.
DEFAULT_NEW_CARDS_PER_DAY: int = 50
DEFAULT_REVIEW_CARDS_PER_DAY: int = 200
DEFAULT_LEARN_STEPS: Tuple[float, ...] = (1.0, 10.0, 60.0, 300.0)
DEFAULT_LAPSE_STEPS: Tuple[float, ...] = (10.0, 60.0)
DEFAULT_GRADUATING_INTERVAL: float = 1.0
DEFAULT_EASY_INTERVAL: float = 1.0
DEFAULT_NEW_INTERVAL: float = 1.0
DEFAULT_MASTERED_INTERVAL: int = 14
# Upper bound for any day interval (about 100 years).
DEFAULT_MAXIMUM_INTERVAL: int = 36500
DEFAULT_LEECH_THRESHOLD: int = 8

# Name of the environment variable pointing at a YAML settings file.
SETTINGS_ENV_VAR: str = "VOCASRS_SETTINGS"
