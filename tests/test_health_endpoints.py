from fastapi.testclient import TestClient

from reflectbin.config import Settings
from reflectbin.main import app, create_app

client = TestClient(app)


def test_health_endpoints():
    assert client.get('/health').status_code == 200
    assert client.get('/metrics').status_code == 200


def test_health_payload():
    fresh = TestClient(create_app(Settings(service_name="reflectbin-test")))
    body = fresh.get('/health').json()
    assert body['status'] == 'healthy'
    assert body['service'] == 'reflectbin-test'
    assert body['uptime_seconds'] >= 0
    assert body['started_at']
    assert body['version']


def test_metrics_counts_itself_before_snapshot():
    fresh = TestClient(create_app(Settings()))
    body = fresh.get('/metrics').json()
    assert body == {
        'total_requests': 1,
        'successful_requests': 0,
        'failed_requests': 0,
        'security_blocks': {
            'redirects_blocked': 0,
            'delays_blocked': 0,
            'bytes_blocked': 0,
            'dangerous_urls_blocked': 0,
        },
        'endpoint_stats': {'/metrics': 1},
    }
    body = fresh.get('/metrics').json()
    assert body['total_requests'] == 2
    assert body['successful_requests'] == 1


def test_metrics_after_mixed_traffic():
    fresh_app = create_app(Settings())
    fresh = TestClient(fresh_app)
    fresh.get('/get')
    fresh.get('/redirect/11')
    fresh.get('/redirect-to', params={'url': 'javascript:alert(1)'})
    fresh.get('/bytes/100001')
    fresh.get('/delay/11')
    fresh.get('/stream/101')

    body = fresh.get('/metrics').json()
    assert body['total_requests'] == 7
    assert body['successful_requests'] == 1
    assert body['failed_requests'] == 5
    assert body['security_blocks'] == {
        'redirects_blocked': 1,
        'delays_blocked': 1,
        'bytes_blocked': 1,
        'dangerous_urls_blocked': 1,
    }
    assert body['endpoint_stats']['/redirect/{n}'] == 1
    assert body['endpoint_stats']['/bytes/{n}'] == 1
    assert body['endpoint_stats']['/redirect-to'] == 1
    assert body['endpoint_stats']['/metrics'] == 1
    assert body['successful_requests'] + body['failed_requests'] <= body['total_requests']


def test_apps_do_not_share_counters():
    first = create_app(Settings())
    second = create_app(Settings())
    TestClient(first).get('/get')
    assert second.state.metering.counters.value('total_requests') == 0
