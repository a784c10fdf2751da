"""
Game Store

Persists one GameConfig per calendar date and one PlayerProgress per
(player, date) pair on top of a KeyValueStore. The two record kinds are
written independently; no transaction spans them.
"""

import calendar
import datetime
import json
import threading
from typing import Callable, List, Optional

from ..config.game_settings import GAME_KEY_PREFIX, LEVEL_COUNT, PLAYER_KEY_PREFIX
from ..models.progress import PlayerProgress
from ..models.puzzle import GameConfig, GameSummary, validate_date
from ..utils.errors import ProgressLockedError, ValidationError
from ..utils.game_logger import game_logger
from .kv_store import KeyValueStore


def utc_now_iso() -> str:
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


def game_key(date: str) -> str:
    return f"{GAME_KEY_PREFIX}{date}"


def progress_key(player_id: str, game_id: str) -> str:
    return f"{PLAYER_KEY_PREFIX}{player_id}:{game_id}"


class GameStore:
    """
    Game configuration and player progress persistence.

    This class handles:
    - Saving, loading and deleting dated game configs
    - Month listings for the admin calendar
    - Player progress records and the one-completion-per-day rule
    """

    def __init__(self, kv_store: KeyValueStore, clock: Callable[[], str] = utc_now_iso):
        self.kv = kv_store
        self.clock = clock
        self._progress_lock = threading.Lock()

    # --- Game configs ---

    def save_game_config(self, config: GameConfig) -> None:
        """Write a config under its date, replacing any existing one."""
        self.kv.set(game_key(config.date), json.dumps(config.to_dict()))
        game_logger.logger.info(f"Saved game config for {config.date} ('{config.title}')")

    def get_game_config(self, date: str) -> Optional[GameConfig]:
        data = self.kv.get(game_key(date))
        if data is None:
            return None
        return GameConfig.from_dict(json.loads(data), date=date)

    def delete_game_config(self, date: str) -> bool:
        """Remove a config. Returns False if none was stored for the date."""
        deleted = self.kv.delete(game_key(date))
        if deleted:
            game_logger.logger.info(f"Deleted game config for {date}")
        return deleted

    def list_game_summaries(self, year: int, month: int) -> List[GameSummary]:
        """
        Summaries of every saved game in a month, sorted by date.

        Each day of the month is probed individually.
        """
        if not 1 <= month <= 12:
            raise ValidationError("Invalid year or month values")
        _, days = calendar.monthrange(year, month)

        summaries = []
        for day in range(1, days + 1):
            date = datetime.date(year, month, day).isoformat()
            config = self.get_game_config(date)
            if config is not None:
                summaries.append(config.summary())
        return summaries

    # --- Player progress ---

    def save_player_progress(self, progress: PlayerProgress) -> None:
        self.kv.set(progress_key(progress.player_id, progress.game_id), json.dumps(progress.to_dict()))

    def get_player_progress(self, player_id: str, game_id: str) -> Optional[PlayerProgress]:
        data = self.kv.get(progress_key(player_id, game_id))
        if data is None:
            return None
        return PlayerProgress.from_dict(json.loads(data))

    def count_players(self, game_id: str) -> int:
        """Number of players with a progress record for a game."""
        suffix = f":{game_id}"
        return sum(1 for key in self.kv.keys(PLAYER_KEY_PREFIX) if key.endswith(suffix))

    def submit_progress(self, player_id: str, game_id: str, current_level: int = None,
                        completed_groups: List[List[str]] = None, mistakes: int = None,
                        completed: bool = False, perfect: bool = False) -> PlayerProgress:
        """
        Upsert a player's progress for a game.

        Args:
            player_id: Player identifier
            game_id: Game date (YYYY-MM-DD)
            current_level: Level the player is on (1-4), defaults to 1
            completed_groups: Word lists of solved groups
            mistakes: Mistakes made so far, defaults to 0
            completed: Whether the player finished the game
            perfect: Whether the game was finished without mistakes

        Returns:
            The stored PlayerProgress

        Raises:
            ValidationError: If identifiers or counters are malformed
            ProgressLockedError: If the stored record is already completed
        """
        if not player_id or not game_id:
            raise ValidationError("Player ID and Game ID are required")

        current_level = current_level or 1
        if isinstance(current_level, bool) or not isinstance(current_level, int) \
                or not 1 <= current_level <= LEVEL_COUNT:
            raise ValidationError(f"currentLevel must be an integer between 1 and {LEVEL_COUNT}")

        mistakes = mistakes or 0
        if isinstance(mistakes, bool) or not isinstance(mistakes, int) or mistakes < 0:
            raise ValidationError("mistakes must be a non-negative integer")

        completed_groups = completed_groups or []
        if not isinstance(completed_groups, list) or \
                not all(isinstance(group, list) for group in completed_groups):
            raise ValidationError("completedGroups must be a list of word lists")

        # Read and write under one lock so a late save cannot overwrite a completed record
        with self._progress_lock:
            existing = self.get_player_progress(player_id, game_id)
            if existing is not None and existing.completed:
                raise ProgressLockedError("Game already completed for today")

            now = self.clock()
            progress = PlayerProgress(
                player_id=player_id,
                game_id=game_id,
                current_level=current_level,
                completed_groups=completed_groups,
                mistakes=mistakes,
                start_time=existing.start_time if existing and existing.start_time else now,
                last_activity=now,
                completed=bool(completed),
                perfect=bool(perfect),
            )
            self.save_player_progress(progress)
        return progress

    def can_play(self, player_id: str, game_id: str) -> bool:
        progress = self.get_player_progress(player_id, game_id)
        return progress is None or not progress.completed


def today_game_id() -> str:
    """Game id for the current UTC date."""
    return datetime.datetime.now(datetime.timezone.utc).date().isoformat()


def parse_game_date(value: str) -> datetime.date:
    """Validate a YYYY-MM-DD string and return it as a date."""
    return datetime.date.fromisoformat(validate_date(value))


# Global service instance
_game_store = None


def get_game_store() -> Optional[GameStore]:
    """Get the global game store instance."""
    return _game_store


def initialize_game_store(kv_store: KeyValueStore) -> GameStore:
    """Initialize the global game store instance."""
    global _game_store
    _game_store = GameStore(kv_store)
    return _game_store
