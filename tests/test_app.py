"""
Application-level tests: health, index, audit endpoint, error rendering
and configuration switches.
"""
from unittest.mock import patch

from resolution_desk.config.settings import TestingConfig
from resolution_desk.components import EXTENSION_KEY
from resolution_desk.desk_app import create_app

from conftest import fixed_clock


class EmptyDeskConfig(TestingConfig):
    SEED_DEMO_DATA = False


class LimitedDeskConfig(TestingConfig):
    RATELIMIT_ENABLED = True
    RATELIMIT_DEFAULT = '2 per minute'


class TestHealthAndIndex:

    def test_health(self, client):
        response = client.get('/health')
        assert response.status_code == 200

        body = response.get_json()
        assert body['status'] == 'healthy'
        assert body['components'] == ['claims', 'entities', 'litigation', 'resolution', 'service_requests',
                                      'subscriptions', 'work_orders']
        assert body['process']['pid'] > 0

    def test_index(self, client):
        body = client.get('/api').get_json()
        assert body['service'] == 'resolution-desk'
        assert body['endpoints']['claims'] == '/api/claims'


class TestAuditEndpoint:

    def test_startup_entry(self, client):
        body = client.get('/api/audit?module=desk').get_json()
        assert body['count'] == 1
        assert body['entries'][0]['action'] == 'startup'
        assert body['entries'][0]['timestamp'] == '2024-01-20T10:00:00'

    def test_filters(self, client):
        client.post('/api/claims/INV003/allocate', json={'assignee': 'Jane Smith'},
                    headers={'X-User-Id': 'admin'})
        client.delete('/api/claims/INV003')

        warnings = client.get('/api/audit?level=warning').get_json()['entries']
        assert [e['action'] for e in warnings] == ['claim_deleted']

        entries = client.get('/api/audit?reference=INV003').get_json()['entries']
        assert [e['actor'] for e in entries] == ['admin', None]

        assert client.get('/api/audit?limit=1').get_json()['count'] == 1

    def test_bad_parameters(self, client):
        assert client.get('/api/audit?level=LOUD').status_code == 400
        assert client.get('/api/audit?limit=ten').status_code == 400

    def test_limit_must_be_positive(self, client):
        for limit in ('-2', '0'):
            response = client.get(f'/api/audit?limit={limit}')
            assert response.status_code == 400
            assert response.get_json() == {'error': 'limit must be 1 or greater'}


class TestErrorRendering:

    def test_unknown_route_is_json(self, client):
        response = client.get('/api/nowhere')
        assert response.status_code == 404
        assert 'error' in response.get_json()

    def test_wrong_method(self, client):
        response = client.post('/health')
        assert response.status_code == 405
        assert 'error' in response.get_json()

    def test_malformed_json(self, client):
        response = client.post('/api/claims', data='{not json', content_type='application/json')
        assert response.status_code == 400
        assert response.get_json() == {'error': 'No data received'}

    def test_non_object_body(self, client):
        response = client.post('/api/claims', json=['a', 'b'])
        assert response.status_code == 400
        assert response.get_json() == {'error': 'Request body must be a JSON object'}

    def test_unexpected_failure_is_500(self, app):
        service = app.extensions[EXTENSION_KEY]['claims']
        with patch.object(service, 'get_claim_stats', side_effect=RuntimeError('boom')):
            response = app.test_client().get('/api/claims/stats')
        assert response.status_code == 500
        assert response.get_json() == {'error': 'Internal server error'}


class TestConfigurationSwitches:

    def test_demo_data_can_be_disabled(self):
        client = create_app(EmptyDeskConfig, clock=fixed_clock).test_client()
        assert client.get('/api/claims').get_json()['total'] == 0
        assert client.get('/api/work-orders').get_json()['total'] == 0

    def test_rate_limit(self):
        client = create_app(LimitedDeskConfig, clock=fixed_clock).test_client()
        assert client.get('/api').status_code == 200
        assert client.get('/api').status_code == 200

        response = client.get('/api')
        assert response.status_code == 429
        assert 'error' in response.get_json()

    def test_apps_do_not_share_state(self, client):
        client.delete('/api/claims/INV003')
        other = create_app(TestingConfig, clock=fixed_clock).test_client()
        assert other.get('/api/claims/INV003').status_code == 200
