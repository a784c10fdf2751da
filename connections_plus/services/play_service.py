"""
Play Service

Hosts live play sessions. Each session owns exactly one PuzzleState and
moves it forward with the pure transitions in puzzle_engine.

Progress is persisted best-effort: every evaluated guess schedules a save
on a background task, and the outcome is reported to listeners as a
``progress_saved`` or ``progress_save_failed`` event. Gameplay never waits
for, or depends on, a save.
"""

import random
import time
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from ..config.game_settings import FINAL_LEVEL
from ..models.game import GuessOutcome, GuessResult, Phase, PuzzleState
from ..models.puzzle import GameConfig
from ..utils.errors import ConnectionsError, NotFoundError, ProgressLockedError
from ..utils.game_logger import game_logger
from ..utils.helpers import generate_player_id
from . import puzzle_engine
from .game_store import GameStore, parse_game_date, today_game_id

Listener = Callable[[str, str, Dict[str, Any]], None]


def run_inline(target: Callable, *args, **kwargs):
    """Task runner that runs the task immediately in the caller's thread."""
    return target(*args, **kwargs)


@dataclass
class PlaySession:
    """One player's live run of one day's puzzle."""
    session_id: str
    player_id: str
    config: GameConfig
    state: PuzzleState
    sid: Optional[str] = None
    progress_locked: bool = False

    @property
    def game_id(self) -> str:
        return self.config.id


class PlayService:
    """
    Play session management.

    This class handles:
    - Starting sessions for today's (or a past) puzzle
    - Applying selection, shuffle, guess, advance and restart transitions
    - Scheduling progress saves and reporting their outcome
    - Revealing the final result a short delay after level 4 is solved
    """

    def __init__(self, game_store: GameStore, task_runner: Callable = run_inline,
                 sleep: Callable[[float], Any] = time.sleep, final_reveal_delay: float = 1.5,
                 rng: Optional[random.Random] = None):
        self.game_store = game_store
        self.task_runner = task_runner
        self.sleep = sleep
        self.final_reveal_delay = final_reveal_delay
        self.rng = rng or random.Random()
        self.sessions: Dict[str, PlaySession] = {}
        self.listeners: List[Listener] = []

    def add_listener(self, listener: Listener) -> None:
        """Register a callback receiving (session_id, event, payload)."""
        self.listeners.append(listener)

    def _notify(self, session_id: str, event: str, payload: Dict[str, Any]) -> None:
        for listener in self.listeners:
            try:
                listener(session_id, event, payload)
            except Exception as e:
                game_logger.logger.error(f"Listener failed for event '{event}' on session {session_id}: {e}")

    # --- Session lifecycle ---

    def start_session(self, player_id: Optional[str] = None, date: Optional[str] = None,
                      sid: Optional[str] = None) -> PlaySession:
        """
        Start playing a day's puzzle.

        Args:
            player_id: Player identifier; a new one is generated if missing
            date: Game date, defaults to today (UTC)
            sid: Socket id of the connection driving the session

        Raises:
            ValidationError: If the date is malformed
            NotFoundError: If no game exists for the date
            ProgressLockedError: If the player already completed that game
        """
        game_id = date or today_game_id()
        parse_game_date(game_id)
        player_id = player_id or generate_player_id()

        config = self.game_store.get_game_config(game_id)
        if config is None:
            raise NotFoundError("No game available for today")
        if not self.game_store.can_play(player_id, game_id):
            raise ProgressLockedError("Game already completed for today")

        session = PlaySession(
            session_id=str(uuid.uuid4()),
            player_id=player_id,
            config=config,
            state=puzzle_engine.new_game(config, self.rng),
            sid=sid,
        )
        self.sessions[session.session_id] = session
        game_logger.log_game_event(game_id, 'session_started', player_id, session_id=session.session_id)
        return session

    def get_session(self, session_id: str) -> PlaySession:
        session = self.sessions.get(session_id)
        if session is None:
            raise NotFoundError("Play session not found")
        return session

    def end_session(self, session_id: str) -> bool:
        return self.sessions.pop(session_id, None) is not None

    def end_sessions_for_sid(self, sid: str) -> int:
        """Drop every session driven by a disconnected socket."""
        owned = [session_id for session_id, session in self.sessions.items() if session.sid == sid]
        for session_id in owned:
            del self.sessions[session_id]
        return len(owned)

    def view(self, session: PlaySession) -> Dict[str, Any]:
        view = puzzle_engine.state_view(session.state, session.config)
        view.update({
            'session_id': session.session_id,
            'player_id': session.player_id,
            'game_id': session.game_id,
            'title': session.config.title,
        })
        return view

    # --- Transitions ---

    def select_word(self, session_id: str, word: str) -> PlaySession:
        session = self.get_session(session_id)
        session.state = puzzle_engine.toggle_word(session.state, session.config, word)
        return session

    def deselect_all(self, session_id: str) -> PlaySession:
        session = self.get_session(session_id)
        session.state = puzzle_engine.deselect_all(session.state)
        return session

    def shuffle(self, session_id: str) -> PlaySession:
        session = self.get_session(session_id)
        session.state = puzzle_engine.shuffle(session.state, self.rng)
        return session

    def restart(self, session_id: str) -> PlaySession:
        session = self.get_session(session_id)
        session.state = puzzle_engine.restart(session.config, self.rng)
        return session

    def advance(self, session_id: str) -> PlaySession:
        """
        Move past a completed level 1-3.

        The final level is advanced by the delayed reveal instead.
        """
        session = self.get_session(session_id)
        if session.state.current_level < FINAL_LEVEL:
            session.state = puzzle_engine.advance(session.state, session.config, self.rng)
        return session

    def submit_guess(self, session_id: str) -> GuessResult:
        session = self.get_session(session_id)
        result = puzzle_engine.submit_guess(session.state, session.config)
        session.state = result.state

        if result.outcome is GuessOutcome.IGNORED:
            return result

        game_logger.log_game_event(
            session.game_id, 'guess_' + result.outcome.value.lower(), session.player_id,
            level=result.state.current_level,
            group=result.group.title if result.group else None,
            mistakes_remaining=result.state.mistakes_remaining,
        )

        final_solved = (result.outcome is GuessOutcome.LEVEL_COMPLETE
                        and result.state.current_level == FINAL_LEVEL)
        self._schedule_progress_save(session, completed=final_solved)

        if final_solved:
            self.task_runner(self._reveal_final_result, session.session_id)
        return result

    # --- Persistence ---

    def _progress_snapshot(self, session: PlaySession, completed: bool) -> Dict[str, Any]:
        state = session.state
        return {
            'player_id': session.player_id,
            'game_id': session.game_id,
            'current_level': state.current_level,
            'completed_groups': [list(group) for group in state.completed_groups],
            'mistakes': state.total_mistakes,
            'completed': completed,
            'perfect': completed and state.total_mistakes == 0,
        }

    def _schedule_progress_save(self, session: PlaySession, completed: bool = False) -> None:
        if session.progress_locked:
            game_logger.log_game_event(session.game_id, 'progress_save_skipped', session.player_id,
                                       reason='completed')
            return
        snapshot = self._progress_snapshot(session, completed)
        if completed:
            session.progress_locked = True
        self.task_runner(self._save_progress, session.session_id, snapshot)

    def _save_progress(self, session_id: str, snapshot: Dict[str, Any]) -> None:
        """Background task: persist a snapshot and report the outcome."""
        try:
            progress = self.game_store.submit_progress(**snapshot)
        except Exception as e:
            self._report_save_failure(session_id, snapshot, e)
            return

        game_logger.log_game_event(snapshot['game_id'], 'progress_saved', snapshot['player_id'],
                                   level=progress.current_level, completed=progress.completed)
        self._notify(session_id, 'progress_saved', {'progress': progress.to_dict()})

    def _report_save_failure(self, session_id: str, snapshot: Dict[str, Any], error: Exception) -> None:
        message = error.message if isinstance(error, ConnectionsError) else "Failed to save progress"
        game_logger.log_game_event(snapshot['game_id'], 'progress_save_failed', snapshot['player_id'],
                                   error_type=type(error).__name__, error_message=str(error))
        self._notify(session_id, 'progress_save_failed', {'error': message})

    def _reveal_final_result(self, session_id: str) -> None:
        """Background task: after a pause, finish a session whose level 4 is solved."""
        self.sleep(self.final_reveal_delay)
        session = self.sessions.get(session_id)
        if session is None or session.state.phase is not Phase.LEVEL_COMPLETE:
            return
        session.state = puzzle_engine.advance(session.state, session.config, self.rng)
        game_logger.log_game_event(session.game_id, 'all_levels_complete', session.player_id,
                                   total_mistakes=session.state.total_mistakes)
        self._notify(session_id, 'all_levels_complete', self.view(session))


# Global service instance
_play_service = None


def get_play_service() -> Optional[PlayService]:
    """Get the global play service instance."""
    return _play_service


def initialize_play_service(game_store: GameStore, task_runner: Callable = run_inline,
                            sleep: Callable[[float], Any] = time.sleep,
                            final_reveal_delay: float = 1.5,
                            rng: Optional[random.Random] = None) -> PlayService:
    """Initialize the global play service instance."""
    global _play_service
    _play_service = PlayService(game_store, task_runner=task_runner, sleep=sleep,
                                final_reveal_delay=final_reveal_delay, rng=rng)
    return _play_service
