"""
Puzzle Rules Module

Defines the fixed rules of a Connections Plus puzzle: how many levels a day
has, how big a group is, how many mistakes a level allows and how finished
levels are rated. All values are module constants so the engine, the
authoring flow and the HTTP layer agree on them.
"""

import re
from typing import Dict, Final, Pattern

LEVEL_COUNT: Final[int] = 4
"""Number of levels in a daily puzzle. The last level is the reveal level."""

FINAL_LEVEL: Final[int] = LEVEL_COUNT

WORDS_PER_GROUP: Final[int] = 4

GROUPS_PER_LEVEL: Final[int] = 4
"""Groups in every level. Level 4 holds 3 real groups plus the final group."""

MISTAKES_PER_LEVEL: Final[int] = 4
"""
Mistakes allowed per level. The counter resets on every level transition
and never drops below zero.
"""

RATING_LABELS: Final[Dict[int, str]] = {
    0: "Perfect!",
    1: "Great!",
    2: "Okay",
    3: "Not bad",
    4: "Charity case",
}
DEFAULT_RATING: Final[str] = "Complete!"

# Difficulty table used by the authoring flow and the word generator.
# Each key doubles as the color tag stored on a WordGroup.
DIFFICULTY_LEVELS: Final[Dict[str, Dict[str, str]]] = {
    "yellow": {
        "label": "Yellow (Easiest)",
        "description": "very straightforward and obvious",
    },
    "green": {
        "label": "Green (Easy)",
        "description": "moderately clear but requires some thought",
    },
    "blue": {
        "label": "Blue (Medium)",
        "description": "challenging and requires deeper knowledge",
    },
    "purple": {
        "label": "Purple (Hard)",
        "description": "very difficult with subtle connections or wordplay",
    },
}
DEFAULT_DIFFICULTY_DESCRIPTION: Final[str] = "moderate"

FINAL_GROUP_COLOR: Final[str] = "red"
FINAL_GROUP_DEFAULT_TITLE: Final[str] = "DOUBLE MEANINGS"

DATE_PATTERN: Final[Pattern[str]] = re.compile(r"\d{4}-\d{2}-\d{2}")

GAME_KEY_PREFIX: Final[str] = "game:"
PLAYER_KEY_PREFIX: Final[str] = "player:"
PLAYER_ID_PREFIX: Final[str] = "player_"


def groups_required(level: int) -> int:
    """
    Number of real (non-final) groups an author must supply for a level.

    Levels 1-3 need the full set; the final level needs one fewer because
    the last slot is taken by the authored final group.
    """
    if level == FINAL_LEVEL:
        return GROUPS_PER_LEVEL - 1
    return GROUPS_PER_LEVEL


def describe_difficulty(difficulty: str) -> str:
    """Prompt wording for a difficulty key, falling back to a neutral one."""
    info = DIFFICULTY_LEVELS.get((difficulty or "").lower())
    if info is None:
        return DEFAULT_DIFFICULTY_DESCRIPTION
    return info["description"]
