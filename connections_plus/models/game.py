"""
Game Data Models

Contains the puzzle play state and the enums describing where a play
session stands and how a guess was received.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from ..config.game_settings import MISTAKES_PER_LEVEL
from .puzzle import WordGroup


class Phase(Enum):
    """Where a play session currently stands."""
    PLAYING = "PLAYING"
    LEVEL_COMPLETE = "LEVEL_COMPLETE"
    ALL_COMPLETE = "ALL_COMPLETE"


class GuessOutcome(Enum):
    """How a submitted guess was received."""
    CORRECT = "CORRECT"
    LEVEL_COMPLETE = "LEVEL_COMPLETE"
    INCORRECT = "INCORRECT"
    IGNORED = "IGNORED"


@dataclass(frozen=True)
class PuzzleState:
    """
    Immutable snapshot of a play session.

    Transitions in services.puzzle_engine build new instances with
    dataclasses.replace; nothing mutates a state in place.
    """
    current_level: int = 1
    tiles: Tuple[str, ...] = ()
    selected_words: Tuple[str, ...] = ()
    solved_group_indices: Tuple[int, ...] = ()
    accumulated_red_herrings: Tuple[str, ...] = ()
    mistakes_remaining: int = MISTAKES_PER_LEVEL
    total_mistakes: int = 0
    completed_groups: Tuple[Tuple[str, ...], ...] = ()
    game_complete: bool = False
    all_levels_complete: bool = False
    message: str = ""

    @property
    def phase(self) -> Phase:
        if self.all_levels_complete:
            return Phase.ALL_COMPLETE
        if self.game_complete:
            return Phase.LEVEL_COMPLETE
        return Phase.PLAYING

    @property
    def mistakes_made(self) -> int:
        """Mistakes made in the current level."""
        return MISTAKES_PER_LEVEL - self.mistakes_remaining

    def to_dict(self) -> Dict[str, Any]:
        return {
            'current_level': self.current_level,
            'phase': self.phase.value,
            'selected_words': list(self.selected_words),
            'solved_group_indices': list(self.solved_group_indices),
            'accumulated_red_herrings': list(self.accumulated_red_herrings),
            'mistakes_remaining': self.mistakes_remaining,
            'total_mistakes': self.total_mistakes,
            'game_complete': self.game_complete,
            'all_levels_complete': self.all_levels_complete,
            'message': self.message,
        }


@dataclass(frozen=True)
class GuessResult:
    """Result of submitting the current selection."""
    state: PuzzleState
    outcome: GuessOutcome
    group: Optional[WordGroup] = None
    guessed_words: Tuple[str, ...] = ()
