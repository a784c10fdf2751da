import unittest

from connections_plus.services.game_store import today_game_id
from connections_plus.services.play_service import get_play_service
from tests.support import FISH, LEVEL_GROUPS, build_test_app, sample_config


def events_named(received, name):
    return [message['args'][0] for message in received if message['name'] == name]


class PlaySocketTests(unittest.TestCase):
    def setUp(self):
        self.app, self.socketio, self.game_store = build_test_app()
        self.today = today_game_id()
        self.game_store.save_game_config(sample_config(self.today))
        self.client = self.socketio.test_client(self.app)
        self.assertTrue(self.client.is_connected())

    def tearDown(self):
        if self.client.is_connected():
            self.client.disconnect()

    def start(self, player_id='player_1'):
        self.client.emit('start_game', {'playerId': player_id})
        started = events_named(self.client.get_received(), 'game_started')
        self.assertEqual(len(started), 1)
        return started[0]

    def guess(self, session_id, words):
        for word in words:
            self.client.emit('select_word', {'session_id': session_id, 'word': word})
        self.client.get_received()
        self.client.emit('submit_guess', {'session_id': session_id})
        return self.client.get_received()

    def test_start_game(self):
        view = self.start()
        self.assertEqual(view['player_id'], 'player_1')
        self.assertEqual(view['game_id'], self.today)
        self.assertEqual(view['current_level'], 1)
        self.assertEqual(view['mistakes_remaining'], 4)
        self.assertEqual(len(view['tiles']), 16)

    def test_start_without_game(self):
        self.game_store.delete_game_config(self.today)
        self.client.emit('start_game', {'playerId': 'player_1'})
        errors = events_named(self.client.get_received(), 'error')
        self.assertEqual(errors[0]['error'], 'No game available for today')
        self.assertEqual(errors[0]['status'], 404)

    def test_select_word_updates_state(self):
        session_id = self.start()['session_id']
        self.client.emit('select_word', {'session_id': session_id, 'word': 'PIKE'})
        update = events_named(self.client.get_received(), 'state_update')[-1]
        self.assertEqual(update['selected_words'], ['PIKE'])

    def test_correct_guess_saves_progress(self):
        session_id = self.start()['session_id']
        received = self.guess(session_id, FISH)

        update = events_named(received, 'state_update')[-1]
        self.assertEqual(update['outcome'], 'CORRECT')
        self.assertEqual(update['group']['title'], 'FISH')
        self.assertEqual(len(update['tiles']), 12)

        saved = events_named(received, 'progress_saved')
        self.assertEqual(saved[0]['progress']['completedGroups'], [FISH])

    def test_wrong_guess_costs_a_mistake(self):
        session_id = self.start()['session_id']
        self.guess(session_id, FISH)
        received = self.guess(session_id, ['APPLE', 'PEAR', 'PLUM', 'HAMMER'])
        update = events_named(received, 'state_update')[-1]
        self.assertEqual(update['outcome'], 'INCORRECT')
        self.assertEqual(update['mistakes_remaining'], 3)
        self.assertEqual(update['message'], 'Not quite right. Try again!')

    def test_full_game_ends_with_reveal(self):
        session_id = self.start()['session_id']
        for level in (1, 2, 3):
            for words in LEVEL_GROUPS[level]:
                received = self.guess(session_id, words)
            self.assertEqual(events_named(received, 'state_update')[-1]['phase'], 'LEVEL_COMPLETE')
            self.client.emit('advance_level', {'session_id': session_id})
            update = events_named(self.client.get_received(), 'state_update')[-1]
            self.assertEqual(update['current_level'], level + 1)

        for words in LEVEL_GROUPS[4]:
            received = self.guess(session_id, words)

        final = events_named(received, 'all_levels_complete')
        self.assertEqual(len(final), 1)
        self.assertEqual(final[0]['message'], 'INCREDIBLE! You discovered the secret red herring group!')
        progress = self.game_store.get_player_progress('player_1', self.today)
        self.assertTrue(progress.completed)
        self.assertTrue(progress.perfect)

    def test_restart(self):
        session_id = self.start()['session_id']
        self.guess(session_id, FISH)
        self.client.emit('restart', {'session_id': session_id})
        update = events_named(self.client.get_received(), 'state_update')[-1]
        self.assertEqual(update['solved_groups'], [])
        self.assertEqual(len(update['tiles']), 16)

    def test_shuffle_and_deselect(self):
        session_id = self.start()['session_id']
        self.client.emit('select_word', {'session_id': session_id, 'word': 'PIKE'})
        self.client.emit('deselect_all', {'session_id': session_id})
        self.assertEqual(events_named(self.client.get_received(), 'state_update')[-1]['selected_words'], [])
        self.client.emit('shuffle', {'session_id': session_id})
        update = events_named(self.client.get_received(), 'state_update')[-1]
        self.assertEqual(len(update['tiles']), 16)

    def test_other_socket_cannot_drive_session(self):
        session_id = self.start()['session_id']
        intruder = self.socketio.test_client(self.app)
        intruder.emit('select_word', {'session_id': session_id, 'word': 'PIKE'})
        errors = events_named(intruder.get_received(), 'error')
        self.assertEqual(errors[0]['status'], 404)
        intruder.disconnect()

    def test_disconnect_ends_sessions(self):
        self.start()
        self.assertEqual(len(get_play_service().sessions), 1)
        self.client.disconnect()
        self.assertEqual(len(get_play_service().sessions), 0)

    def test_completed_player_cannot_start_again(self):
        self.game_store.submit_progress('player_1', self.today, current_level=4, completed=True)
        self.client.emit('start_game', {'playerId': 'player_1'})
        errors = events_named(self.client.get_received(), 'error')
        self.assertEqual(errors[0]['error'], 'Game already completed for today')


if __name__ == '__main__':
    unittest.main()
