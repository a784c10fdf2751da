"""
Utilities Package

Contains utility functions, decorators, error types and helper modules.
"""

from .decorators import require_admin
from .errors import (
    ConnectionsError, NotFoundError, ProgressLockedError, StorageError,
    ValidationError, WordGenerationError,
)
from .game_logger import game_logger
from .helpers import error_response, format_game_date, generate_player_id, get_user_identity

__all__ = [
    'require_admin',
    'ConnectionsError', 'NotFoundError', 'ProgressLockedError', 'StorageError',
    'ValidationError', 'WordGenerationError',
    'game_logger',
    'error_response', 'format_game_date', 'generate_player_id', 'get_user_identity',
]
