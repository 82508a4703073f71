"""
Tests for the scheduler HTTP API.
"""

import math

import pytest

from moore_hodgson.server import create_app


ERRANDS = [
    {"payload": "ApplyForJob", "due_time": 6, "processing_time": 5},
    {"payload": "FileTaxes", "due_time": 7, "processing_time": 1},
    {"payload": "BuyPresentForMom", "due_time": 4, "processing_time": 1},
    {"payload": "SolveUrgentProblem", "due_time": 6, "processing_time": 4},
    {"payload": "ApplyForLoan", "due_time": 8, "processing_time": 3},
]


@pytest.fixture
def app():
    return create_app({'TESTING': True})


@pytest.fixture
def client(app):
    return app.test_client()


class TestHealth:
    """Test service endpoints."""

    def test_health(self, client):
        resp = client.get('/health')

        assert resp.status_code == 200
        data = resp.get_json()
        assert data['status'] == 'healthy'
        assert data['service'] == 'moore-hodgson-scheduler'

    def test_policy(self, client):
        resp = client.get('/policy')

        assert resp.get_json() == {
            'max_jobs': 10000,
            'include_completion_times': True
        }

    def test_not_found(self, client):
        resp = client.get('/nope')

        assert resp.status_code == 404
        assert resp.get_json() == {'error': 'Not found'}


class TestSchedule:
    """Test the schedule endpoint."""

    def test_errands(self, client):
        """The response splits jobs into on-time and late."""
        resp = client.post('/schedule', json={
            'type': 'schedule_request',
            'jobs': ERRANDS
        })

        assert resp.status_code == 200
        data = resp.get_json()
        assert data['type'] == 'schedule_response'
        assert data['on_time_count'] == 3
        assert [j['payload'] for j in data['on_time_jobs']] == [
            'BuyPresentForMom', 'ApplyForJob', 'FileTaxes'
        ]
        assert sorted(j['payload'] for j in data['late_jobs']) == [
            'ApplyForLoan', 'SolveUrgentProblem'
        ]
        assert data['completion_times'] == [1, 6, 7]
        assert data['metrics']['late_count'] == 2
        assert data['metrics']['makespan'] == 7

    def test_empty_job_list(self, client):
        """An empty job list schedules nothing."""
        resp = client.post('/schedule', json={'jobs': []})

        assert resp.status_code == 200
        data = resp.get_json()
        assert data['on_time_count'] == 0
        assert data['on_time_jobs'] == []
        assert data['late_jobs'] == []

    def test_structured_payload(self, client):
        """Payloads are returned unchanged."""
        payload = {'id': 42, 'tags': ['urgent']}
        resp = client.post('/schedule', json={
            'jobs': [{'payload': payload, 'due_time': 3, 'processing_time': 1.5}]
        })

        data = resp.get_json()
        assert data['on_time_jobs'] == [
            {'payload': payload, 'due_time': 3, 'processing_time': 1.5}
        ]

    def test_nan_due_time(self, client):
        """A NaN due time is accepted and the job is late."""
        body = (
            '{"jobs": [{"payload": "x", "due_time": NaN, "processing_time": 3},'
            ' {"payload": "y", "due_time": 7, "processing_time": 6}]}'
        )
        resp = client.post('/schedule', data=body, content_type='application/json')

        assert resp.status_code == 200
        data = resp.get_json()
        assert data['on_time_count'] == 1
        assert data['on_time_jobs'][0]['payload'] == 'y'
        assert math.isnan(data['late_jobs'][0]['due_time'])

    def test_without_completion_times(self):
        """Completion times can be switched off."""
        app = create_app({'TESTING': True, 'INCLUDE_COMPLETION_TIMES': False})

        resp = app.test_client().post('/schedule', json={'jobs': ERRANDS})

        assert resp.status_code == 200
        assert 'completion_times' not in resp.get_json()

    def test_config_from_environment(self, monkeypatch):
        """Prefixed environment variables configure the policy."""
        monkeypatch.setenv('MOORE_HODGSON_MAX_JOBS', '5')

        resp = create_app().test_client().get('/policy')

        assert resp.get_json()['max_jobs'] == 5


class TestValidation:
    """Test request validation."""

    def test_empty_body(self, client):
        resp = client.post('/schedule', data='', content_type='application/json')

        assert resp.status_code == 400
        assert resp.get_json() == {'error': 'Empty request body'}

    def test_jobs_not_a_list(self, client):
        resp = client.post('/schedule', json={'jobs': 'all of them'})

        assert resp.status_code == 400

    def test_missing_due_time(self, client):
        resp = client.post('/schedule', json={
            'jobs': [{'payload': 'x', 'processing_time': 1}]
        })

        assert resp.status_code == 400
        assert 'Invalid job data' in resp.get_json()['error']

    @pytest.mark.parametrize("value", ["5", True, None, [1]])
    def test_non_numeric_time(self, client, value):
        """Times must be JSON numbers."""
        resp = client.post('/schedule', json={
            'jobs': [{'payload': 'x', 'due_time': value, 'processing_time': 1}]
        })

        assert resp.status_code == 400

    def test_job_not_an_object(self, client):
        resp = client.post('/schedule', json={'jobs': [[1, 2, 3]]})

        assert resp.status_code == 400

    def test_too_many_jobs(self):
        """Requests above the configured limit are rejected."""
        app = create_app({'TESTING': True, 'MAX_JOBS': 2})

        resp = app.test_client().post('/schedule', json={'jobs': ERRANDS})

        assert resp.status_code == 400
        assert 'Too many jobs' in resp.get_json()['error']
