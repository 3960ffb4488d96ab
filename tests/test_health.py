def test_health(client):
    response = client.get('/api/health')

    assert response.status_code == 200
    assert response.get_json()['database'] == 'ok'


def test_unknown_api_route_is_json_404(client):
    response = client.get('/api/does-not-exist')

    assert response.status_code == 404
    assert response.get_json()['success'] is False
