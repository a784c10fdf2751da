"""
Shared fixtures for the test suite: a sample puzzle and a fully wired
test application backed by the in-memory store.
"""

import base64
import copy
from types import SimpleNamespace

from connections_plus import create_app
from connections_plus.config import TestingConfig
from connections_plus.models.puzzle import GameConfig
from connections_plus.services.admin_auth_service import AdminAuthService, initialize_admin_auth_service
from connections_plus.services.authoring_service import initialize_authoring_service
from connections_plus.services.game_store import initialize_game_store
from connections_plus.services.kv_store import MemoryKeyValueStore
from connections_plus.services.word_generator import initialize_word_generator

ADMIN_PASSWORD_HASH = AdminAuthService.hash_password(TestingConfig.ADMIN_PASSWORD)

FISH = ['BASS', 'PIKE', 'CARP', 'TROUT']
FRUIT = ['APPLE', 'PEAR', 'PLUM', 'KIWI']
TOOLS = ['HAMMER', 'SAW', 'DRILL', 'WRENCH']
COLORS = ['RED', 'BLUE', 'GREEN', 'PINK']

PLANETS = ['MARS', 'VENUS', 'SATURN', 'PLUTO']
DOGS = ['PUG', 'BOXER', 'BEAGLE', 'POODLE']
DANCES = ['TANGO', 'SALSA', 'WALTZ', 'RUMBA']
METALS = ['IRON', 'GOLD', 'TIN', 'ZINC']

BIRDS = ['CROW', 'ROBIN', 'WREN', 'FINCH']
TREES = ['OAK', 'ELM', 'ASH', 'PINE']
SPORTS = ['GOLF', 'POLO', 'JUDO', 'RUGBY']
CARDS = ['ACE', 'KING', 'QUEEN', 'JACK']

CHESS = ['PAWN', 'ROOK', 'BISHOP', 'KNIGHT']
WEATHER = ['RAIN', 'SNOW', 'HAIL', 'FOG']
SHAPES = ['CIRCLE', 'SQUARE', 'OVAL', 'CUBE']
DOUBLE_MEANINGS = ['BASS', 'BOXER', 'JACK', 'CRANE']

LEVEL_GROUPS = {
    1: [FISH, FRUIT, TOOLS, COLORS],
    2: [PLANETS, DOGS, DANCES, METALS],
    3: [BIRDS, TREES, SPORTS, CARDS],
    4: [CHESS, WEATHER, SHAPES, DOUBLE_MEANINGS],
}

_SAMPLE_LEVELS = [
    {
        'groups': [
            {'title': 'FISH', 'words': FISH, 'color': 'yellow'},
            {'title': 'FRUIT', 'words': FRUIT, 'color': 'green'},
            {'title': 'TOOLS', 'words': TOOLS, 'color': 'blue'},
            {'title': 'COLORS', 'words': COLORS, 'color': 'purple'},
        ],
        'redHerring': 'BASS',
    },
    {
        'groups': [
            {'title': 'PLANETS', 'words': PLANETS, 'color': 'yellow'},
            {'title': 'DOGS', 'words': DOGS, 'color': 'green'},
            {'title': 'DANCES', 'words': DANCES, 'color': 'blue'},
            {'title': 'METALS', 'words': METALS, 'color': 'purple'},
        ],
        'redHerring': 'BOXER',
    },
    {
        'groups': [
            {'title': 'BIRDS', 'words': BIRDS, 'color': 'yellow'},
            {'title': 'TREES', 'words': TREES, 'color': 'green'},
            {'title': 'SPORTS', 'words': SPORTS, 'color': 'blue'},
            {'title': 'CARDS', 'words': CARDS, 'color': 'purple'},
        ],
        'redHerring': 'JACK',
    },
    {
        'groups': [
            {'title': 'CHESS', 'words': CHESS, 'color': 'yellow'},
            {'title': 'WEATHER', 'words': WEATHER, 'color': 'green'},
            {'title': 'SHAPES', 'words': SHAPES, 'color': 'blue'},
            {'title': 'DOUBLE MEANINGS', 'words': DOUBLE_MEANINGS, 'color': 'red'},
        ],
        'redHerring': '',
    },
]


def sample_config_dict(date='2024-01-15', title='Sample Puzzle'):
    """Wire-format config for a complete, valid game."""
    return {'date': date, 'title': title, 'levels': copy.deepcopy(_SAMPLE_LEVELS)}


def sample_config(date='2024-01-15', title='Sample Puzzle'):
    return GameConfig.from_dict(sample_config_dict(date, title))


def fake_claude_client(text='ALPHA, BRAVO, CHARLIE, DELTA', error=None):
    """Stand-in for anthropic.Anthropic exposing messages.create()."""
    calls = []

    def create(**kwargs):
        calls.append(kwargs)
        if error is not None:
            raise error
        return SimpleNamespace(content=[SimpleNamespace(type='text', text=text)])

    client = SimpleNamespace(messages=SimpleNamespace(create=create))
    client.calls = calls
    return client


def build_test_app(word_client=None):
    """
    Wire every service against a fresh memory store and build the app.

    Returns:
        (app, socketio, game_store)
    """
    game_store = initialize_game_store(MemoryKeyValueStore())
    initialize_admin_auth_service(
        TestingConfig.ADMIN_USERNAME,
        password_hash=ADMIN_PASSWORD_HASH,
        jwt_secret=TestingConfig.JWT_SECRET,
    )
    word_generator = initialize_word_generator(client=word_client)
    initialize_authoring_service(game_store, word_generator)
    app, socketio = create_app(TestingConfig)
    return app, socketio, game_store


def basic_auth_headers(username=TestingConfig.ADMIN_USERNAME, password=TestingConfig.ADMIN_PASSWORD):
    token = base64.b64encode(f'{username}:{password}'.encode('utf-8')).decode('ascii')
    return {'Authorization': f'Basic {token}'}
