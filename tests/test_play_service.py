import random
import unittest

from connections_plus.models.game import GuessOutcome, Phase
from connections_plus.services.game_store import GameStore, today_game_id
from connections_plus.services.kv_store import MemoryKeyValueStore
from connections_plus.services.play_service import PlayService
from connections_plus.utils.errors import NotFoundError, ProgressLockedError, StorageError
from tests.support import FISH, LEVEL_GROUPS, sample_config


class FailingProgressStore(GameStore):
    def submit_progress(self, **kwargs):
        raise StorageError("Failed to save 'player'")


class PlayServiceTestCase(unittest.TestCase):
    store_class = GameStore

    def setUp(self):
        self.game_store = self.store_class(MemoryKeyValueStore())
        self.game_id = today_game_id()
        self.game_store.save_game_config(sample_config(self.game_id))
        self.events = []
        self.sleeps = []
        self.service = PlayService(self.game_store, sleep=self.sleeps.append,
                                   final_reveal_delay=1.5, rng=random.Random(4))
        self.service.add_listener(lambda session_id, event, payload: self.events.append((event, payload)))

    def guess(self, session_id, words):
        for word in words:
            self.service.select_word(session_id, word)
        return self.service.submit_guess(session_id)

    def finish_level(self, session_id):
        level = self.service.get_session(session_id).state.current_level
        result = None
        for words in LEVEL_GROUPS[level]:
            result = self.guess(session_id, words)
        return result

    def event_names(self):
        return [name for name, _ in self.events]


class SessionLifecycleTests(PlayServiceTestCase):
    def test_start_session_generates_player_id(self):
        session = self.service.start_session()
        self.assertTrue(session.player_id.startswith('player_'))
        self.assertEqual(session.game_id, self.game_id)
        self.assertIs(session.state.phase, Phase.PLAYING)
        self.assertIs(self.service.get_session(session.session_id), session)

    def test_no_game_today(self):
        self.game_store.delete_game_config(self.game_id)
        with self.assertRaises(NotFoundError) as ctx:
            self.service.start_session('p1')
        self.assertEqual(ctx.exception.message, 'No game available for today')

    def test_completed_player_cannot_start(self):
        self.game_store.submit_progress('p1', self.game_id, current_level=4, completed=True)
        with self.assertRaises(ProgressLockedError):
            self.service.start_session('p1')

    def test_past_date(self):
        self.game_store.save_game_config(sample_config('2024-01-15'))
        session = self.service.start_session('p1', date='2024-01-15')
        self.assertEqual(session.game_id, '2024-01-15')

    def test_end_sessions_for_sid(self):
        first = self.service.start_session('p1', sid='sid-1')
        self.service.start_session('p2', sid='sid-2')
        self.assertEqual(self.service.end_sessions_for_sid('sid-1'), 1)
        with self.assertRaises(NotFoundError):
            self.service.get_session(first.session_id)
        self.assertEqual(len(self.service.sessions), 1)

    def test_view(self):
        session = self.service.start_session('p1')
        view = self.service.view(session)
        self.assertEqual(view['player_id'], 'p1')
        self.assertEqual(view['title'], 'Sample Puzzle')
        self.assertEqual(len(view['tiles']), 16)
        self.assertEqual(view['phase'], 'PLAYING')


class ProgressPersistenceTests(PlayServiceTestCase):
    def test_each_guess_saves_progress(self):
        session = self.service.start_session('p1')
        self.guess(session.session_id, FISH)
        self.guess(session.session_id, ['APPLE', 'PEAR', 'PLUM', 'HAMMER'])

        progress = self.game_store.get_player_progress('p1', self.game_id)
        self.assertEqual(progress.current_level, 1)
        self.assertEqual(progress.completed_groups, [FISH])
        self.assertEqual(progress.mistakes, 1)
        self.assertFalse(progress.completed)
        self.assertEqual(self.event_names(), ['progress_saved', 'progress_saved'])

    def test_ignored_guess_does_not_save(self):
        session = self.service.start_session('p1')
        result = self.service.submit_guess(session.session_id)
        self.assertIs(result.outcome, GuessOutcome.IGNORED)
        self.assertIsNone(self.game_store.get_player_progress('p1', self.game_id))
        self.assertEqual(self.events, [])

    def test_full_game_completes_after_reveal_delay(self):
        session = self.service.start_session('p1')
        for _ in (1, 2, 3):
            result = self.finish_level(session.session_id)
            self.assertIs(result.outcome, GuessOutcome.LEVEL_COMPLETE)
            self.service.advance(session.session_id)

        result = self.finish_level(session.session_id)
        self.assertIs(result.outcome, GuessOutcome.LEVEL_COMPLETE)

        self.assertEqual(self.sleeps, [1.5])
        self.assertIs(session.state.phase, Phase.ALL_COMPLETE)
        self.assertEqual(self.event_names()[-1], 'all_levels_complete')
        self.assertTrue(self.events[-1][1]['all_levels_complete'])

        progress = self.game_store.get_player_progress('p1', self.game_id)
        self.assertTrue(progress.completed)
        self.assertTrue(progress.perfect)
        self.assertEqual(progress.current_level, 4)
        self.assertEqual(len(progress.completed_groups), 16)
        self.assertFalse(self.game_store.can_play('p1', self.game_id))

    def test_completed_session_stops_saving(self):
        session = self.service.start_session('p1')
        for _ in (1, 2, 3):
            self.finish_level(session.session_id)
            self.service.advance(session.session_id)
        self.finish_level(session.session_id)
        saved = self.event_names().count('progress_saved')

        self.service.restart(session.session_id)
        self.guess(session.session_id, FISH)

        self.assertEqual(self.event_names().count('progress_saved'), saved)
        self.assertNotIn('progress_save_failed', self.event_names())
        self.assertTrue(self.game_store.get_player_progress('p1', self.game_id).completed)

    def test_mistake_makes_completion_imperfect(self):
        session = self.service.start_session('p1')
        self.guess(session.session_id, ['PIKE', 'APPLE', 'SAW', 'RED'])
        for _ in (1, 2, 3):
            self.finish_level(session.session_id)
            self.service.advance(session.session_id)
        self.finish_level(session.session_id)
        progress = self.game_store.get_player_progress('p1', self.game_id)
        self.assertTrue(progress.completed)
        self.assertFalse(progress.perfect)
        self.assertEqual(progress.mistakes, 1)

    def test_advance_does_not_skip_final_reveal(self):
        session = self.service.start_session('p1')
        self.service.advance(session.session_id)
        self.assertEqual(session.state.current_level, 1)


class FailedSaveTests(PlayServiceTestCase):
    store_class = FailingProgressStore

    def test_failed_save_is_reported_and_play_continues(self):
        session = self.service.start_session('p1')
        result = self.guess(session.session_id, FISH)

        self.assertIs(result.outcome, GuessOutcome.CORRECT)
        self.assertEqual(self.events, [('progress_save_failed', {'error': "Failed to save 'player'"})])
        self.assertEqual(session.state.solved_group_indices, (0,))

        result = self.guess(session.session_id, LEVEL_GROUPS[1][1])
        self.assertIs(result.outcome, GuessOutcome.CORRECT)


if __name__ == '__main__':
    unittest.main()
