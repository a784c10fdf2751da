import unittest

from tests.support import basic_auth_headers, build_test_app, fake_claude_client, sample_config, sample_config_dict


class AdminAuthTests(unittest.TestCase):
    def setUp(self):
        self.app, self.socketio, self.game_store = build_test_app()
        self.client = self.app.test_client()

    def test_missing_credentials(self):
        resp = self.client.get('/api/games?year=2024&month=1')
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.headers['WWW-Authenticate'], 'Basic realm="Admin Panel"')
        self.assertFalse(resp.get_json()['success'])

    def test_wrong_password(self):
        resp = self.client.get('/api/games?year=2024&month=1', headers=basic_auth_headers(password='nope'))
        self.assertEqual(resp.status_code, 401)

    def test_malformed_basic_header(self):
        resp = self.client.get('/api/games?year=2024&month=1', headers={'Authorization': 'Basic !!!'})
        self.assertEqual(resp.status_code, 401)

    def test_basic_credentials(self):
        resp = self.client.get('/api/games?year=2024&month=1', headers=basic_auth_headers())
        self.assertEqual(resp.status_code, 200)

    def test_login_and_bearer_token(self):
        resp = self.client.post('/api/admin/login', json={'username': 'admin', 'password': 'hunter22'})
        self.assertEqual(resp.status_code, 200)
        token = resp.get_json()['token']

        resp = self.client.get('/api/games?year=2024&month=1', headers={'Authorization': f'Bearer {token}'})
        self.assertEqual(resp.status_code, 200)

    def test_login_rejects_bad_password(self):
        resp = self.client.post('/api/admin/login', json={'username': 'admin', 'password': 'nope'})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.get_json()['error'], 'Invalid username or password')

    def test_bad_bearer_token(self):
        resp = self.client.get('/api/games?year=2024&month=1', headers={'Authorization': 'Bearer not-a-jwt'})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.get_json()['error'], 'Invalid token')


class GameCalendarTests(unittest.TestCase):
    def setUp(self):
        self.app, self.socketio, self.game_store = build_test_app()
        self.client = self.app.test_client()
        self.headers = basic_auth_headers()

    def test_put_then_get(self):
        resp = self.client.put('/api/games/2024-01-15', json=sample_config_dict(date='2000-01-01'),
                               headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json()['game']['date'], '2024-01-15')

        self.game_store.submit_progress('p1', '2024-01-15')
        resp = self.client.get('/api/games/2024-01-15', headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        data = resp.get_json()
        self.assertEqual(data['game']['title'], 'Sample Puzzle')
        self.assertEqual(data['displayDate'], 'Monday, January 15, 2024')
        self.assertEqual(data['players'], 1)

    def test_put_rejects_malformed_config(self):
        data = sample_config_dict()
        data['levels'][0]['groups'][0]['words'] = ['ONLY', 'THREE', 'WORDS']
        resp = self.client.put('/api/games/2024-01-15', json=data, headers=self.headers)
        self.assertEqual(resp.status_code, 400)
        self.assertIsNone(self.game_store.get_game_config('2024-01-15'))

    def test_put_requires_fields(self):
        resp = self.client.put('/api/games/2024-01-15', json={'title': 'No levels'}, headers=self.headers)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.get_json()['error'], 'Invalid game data - missing required fields')

    def test_get_missing(self):
        resp = self.client.get('/api/games/2024-01-15', headers=self.headers)
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.get_json()['error'], 'Game not found for this date')

    def test_bad_date(self):
        resp = self.client.get('/api/games/2024-1-5', headers=self.headers)
        self.assertEqual(resp.status_code, 400)

    def test_delete(self):
        self.game_store.save_game_config(sample_config('2024-01-15'))
        resp = self.client.delete('/api/games/2024-01-15', headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json(), {'success': True, 'message': 'Game deleted successfully'})

        resp = self.client.delete('/api/games/2024-01-15', headers=self.headers)
        self.assertEqual(resp.status_code, 404)

    def test_month_listing(self):
        self.game_store.save_game_config(sample_config('2024-01-20', title='Later'))
        self.game_store.save_game_config(sample_config('2024-01-05', title='Earlier'))
        self.game_store.save_game_config(sample_config('2024-02-01'))
        resp = self.client.get('/api/games?year=2024&month=1', headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        data = resp.get_json()
        self.assertEqual([g['title'] for g in data['games']], ['Earlier', 'Later'])
        self.assertEqual((data['year'], data['month']), (2024, 1))

    def test_month_listing_requires_params(self):
        resp = self.client.get('/api/games?year=2024', headers=self.headers)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.get_json()['error'], 'Year and month parameters are required')

    def test_month_listing_rejects_bad_values(self):
        for query in ('year=abc&month=1', 'year=2024&month=13'):
            resp = self.client.get(f'/api/games?{query}', headers=self.headers)
            self.assertEqual(resp.status_code, 400)
            self.assertEqual(resp.get_json()['error'], 'Invalid year or month values')

    def test_save_config(self):
        resp = self.client.post('/api/save-config', json=sample_config_dict(date='2024-03-01'),
                                headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json(),
                         {'success': True, 'gameId': '2024-03-01', 'date': '2024-03-01', 'title': 'Sample Puzzle'})
        self.assertIsNotNone(self.game_store.get_game_config('2024-03-01'))

    def test_save_config_rejects_impossible_date(self):
        for date in ('2024-02-30', '2024-13-45'):
            resp = self.client.post('/api/save-config', json=sample_config_dict(date=date), headers=self.headers)
            self.assertEqual(resp.status_code, 400)
            self.assertEqual(resp.get_json()['error'], 'Invalid date format. Use YYYY-MM-DD')
            self.assertIsNone(self.game_store.kv.get(f'game:{date}'))

    def test_save_config_requires_date(self):
        data = sample_config_dict()
        del data['date']
        resp = self.client.post('/api/save-config', json=data, headers=self.headers)
        self.assertEqual(resp.status_code, 400)


class WordsEndpointTests(unittest.TestCase):
    def test_generate_words(self):
        client = fake_claude_client('SALMON, TROUT, COD, TUNA')
        app, _, _ = build_test_app(word_client=client)
        resp = app.test_client().post('/api/words', json={'category': 'Fish', 'difficulty': 'yellow'},
                                      headers=basic_auth_headers())
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json(),
                         {'words': ['SALMON', 'TROUT', 'COD', 'TUNA'], 'category': 'Fish', 'difficulty': 'yellow'})

    def test_requires_category_and_difficulty(self):
        app, _, _ = build_test_app(word_client=fake_claude_client())
        resp = app.test_client().post('/api/words', json={'category': 'Fish'}, headers=basic_auth_headers())
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.get_json()['error'], 'Category and difficulty are required')

    def test_without_api_key(self):
        app, _, _ = build_test_app()
        resp = app.test_client().post('/api/words', json={'category': 'Fish', 'difficulty': 'yellow'},
                                      headers=basic_auth_headers())
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.get_json()['error'], 'ANTHROPIC_API_KEY not configured')

    def test_malformed_model_reply(self):
        app, _, _ = build_test_app(word_client=fake_claude_client('SALMON, TROUT'))
        resp = app.test_client().post('/api/words', json={'category': 'Fish', 'difficulty': 'yellow'},
                                      headers=basic_auth_headers())
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.get_json()['error'], 'Failed to generate exactly 4 words')


if __name__ == '__main__':
    unittest.main()
