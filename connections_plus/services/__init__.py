"""
Services Package

Contains all business logic and service classes.
"""

from .admin_auth_service import AdminAuthService, get_admin_auth_service
from .authoring_service import AuthoringService, PuzzleDraft, get_authoring_service
from .game_store import GameStore, get_game_store
from .kv_store import KeyValueStore, MemoryKeyValueStore, MongoKeyValueStore
from .play_service import PlayService, get_play_service
from .word_generator import WordGenerator, get_word_generator

__all__ = [
    'AdminAuthService', 'get_admin_auth_service',
    'AuthoringService', 'PuzzleDraft', 'get_authoring_service',
    'GameStore', 'get_game_store',
    'KeyValueStore', 'MemoryKeyValueStore', 'MongoKeyValueStore',
    'PlayService', 'get_play_service',
    'WordGenerator', 'get_word_generator',
]
