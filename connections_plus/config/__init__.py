"""
Configuration Package

Contains all configuration-related files and settings.

This package separates two types of configuration:
- app_config.py: Flask application configuration (environment-based)
- game_settings.py: Puzzle rules and constants (business logic)
"""

from .app_config import Config, DevelopmentConfig, ProductionConfig, TestingConfig, config
from .game_settings import (
    LEVEL_COUNT, FINAL_LEVEL, WORDS_PER_GROUP, GROUPS_PER_LEVEL,
    MISTAKES_PER_LEVEL, RATING_LABELS, DIFFICULTY_LEVELS,
)

__all__ = [
    # App configuration
    'Config', 'DevelopmentConfig', 'ProductionConfig', 'TestingConfig', 'config',
    # Puzzle rules
    'LEVEL_COUNT', 'FINAL_LEVEL', 'WORDS_PER_GROUP', 'GROUPS_PER_LEVEL',
    'MISTAKES_PER_LEVEL', 'RATING_LABELS', 'DIFFICULTY_LEVELS',
]
