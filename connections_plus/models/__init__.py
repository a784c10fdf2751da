"""
Data Models Package

Contains all data models and schemas used throughout the application.
"""

from .game import GuessOutcome, GuessResult, Phase, PuzzleState
from .progress import PlayerProgress
from .puzzle import GameConfig, GameSummary, Level, WordGroup

__all__ = [
    'GuessOutcome', 'GuessResult', 'Phase', 'PuzzleState',
    'PlayerProgress',
    'GameConfig', 'GameSummary', 'Level', 'WordGroup',
]
