
def test_health_check(client):
    response = client.get('/health')
    assert response.status_code == 200
    json_data = response.get_json()
    assert json_data.get('status') == 'ok'


def test_search_health_reports_database(client):
    response = client.get('/api/search/health')
    assert response.status_code == 200
    assert response.get_json() == {'status': 'healthy'}


def test_test_support_available_under_api_prefix(client):
    r = client.get("/api/test_support/__ok")
    assert r.status_code == 200
    assert r.get_json()["data"]["ping"] == "pong"


def test_apispec_lists_api_routes(client):
    r = client.get("/apispec.json")
    assert r.status_code == 200
    paths = r.get_json()["paths"]
    assert "/api/restaurants/nearest" in paths
    assert all(p.startswith("/api/") for p in paths)


def test_cached_payload_reused_until_refresh(client):
    first = client.get("/__cached").get_json()["data"]["build"]
    assert client.get("/__cached").get_json()["data"]["build"] == first
    assert client.get("/__cached?refresh=1").get_json()["data"]["build"] == first + 1
