import unittest

from venturesim.api import server
from venturesim.api.server import app
from venturesim.notify.outbox import OutboxNotifier
from venturesim.store.registry import SimulationStore


class TestAPIExtras(unittest.TestCase):
    def setUp(self):
        app.config['TESTING'] = True
        app.config['STORE'] = SimulationStore()
        app.config['NOTIFIER'] = OutboxNotifier()
        app.config['API_KEY'] = None
        app.config['RATE_LIMIT_N'] = 0
        app.config['RATE_LIMIT_WINDOW_SEC'] = 1.0
        server._recent.clear()
        self.client = app.test_client()

    def tearDown(self):
        app.config['API_KEY'] = None
        app.config['RATE_LIMIT_N'] = 0

    def test_openapi(self):
        resp = self.client.get('/openapi.json')
        self.assertEqual(resp.status_code, 200)
        data = resp.get_json()
        self.assertIn('openapi', data)
        self.assertIn('/simulations', data.get('paths', {}))

    def test_rate_limit(self):
        app.config['RATE_LIMIT_N'] = 2
        app.config['RATE_LIMIT_WINDOW_SEC'] = 60.0
        body = {'businessModel': 'Space Tourism', 'templateName': 'T'}
        codes = [self.client.post('/templates', json=body).status_code for _ in range(3)]
        self.assertEqual(codes, [201, 201, 429])
        # reads and live projections are not limited
        self.assertEqual(self.client.get('/templates').status_code, 200)
        self.assertEqual(self.client.post('/projections', json={'businessModel': 'Space Tourism'}).status_code, 200)

    def test_api_key(self):
        app.config['API_KEY'] = 'secret'
        self.assertEqual(self.client.get('/business-models').status_code, 401)
        ok = self.client.get('/business-models', headers={'X-API-Key': 'secret'})
        self.assertEqual(ok.status_code, 200)
        self.assertEqual(self.client.get('/openapi.json').status_code, 200)


if __name__ == "__main__":
    unittest.main()
