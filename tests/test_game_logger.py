import json
import tempfile
import unittest

from connections_plus.utils.game_logger import GameLogger, game_logger
from tests.support import sample_config


class GameLoggerTests(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.logger = GameLogger(self.tmp.name, 'INFO')

    def tearDown(self):
        for handler in list(self.logger.logger.handlers):
            handler.close()
            self.logger.logger.removeHandler(handler)
        self.tmp.cleanup()
        game_logger.logger = game_logger._setup_logger()

    def test_answers_are_summarized(self):
        public = sample_config().to_public_dict()
        sanitized = self.logger._sanitize_response_data(public)
        self.assertEqual(sanitized['levels'], {'level_count': 4})
        self.assertEqual(sanitized['gameId'], '2024-01-15')

        sanitized = self.logger._sanitize_response_data({'success': True, 'game': sample_config().to_dict()})
        self.assertEqual(sanitized['game'], {'id': '2024-01-15', 'title': 'Sample Puzzle', 'level_count': 4})

    def test_token_is_masked(self):
        sanitized = self.logger._sanitize_response_data({'success': True, 'token': 'abc.def.ghi'})
        self.assertEqual(sanitized['token'], '***')

    def test_game_events_are_json_lines(self):
        self.logger.log_game_event('2024-01-15', 'progress_saved', 'player_1', level=2)
        with open(self.logger._log_file(), encoding='utf-8') as f:
            line = f.read().strip().splitlines()[-1]
        entry = json.loads(line.split(' | ', 2)[2])
        self.assertEqual(entry['event_type'], 'GAME_EVENT')
        self.assertEqual(entry['action'], 'progress_saved')
        self.assertEqual(entry['details']['level'], 2)

        stats = self.logger.get_log_stats()
        self.assertEqual(stats['game_events'], 1)


if __name__ == '__main__':
    unittest.main()
