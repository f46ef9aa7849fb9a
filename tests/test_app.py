"""
Unit tests for Flask web application.
"""
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from conftest import make_bracket, make_raw_match


class TestHealth:
    """Tests for /api/health."""

    def test_no_views_yet(self, client):
        response = client.get('/api/health')
        assert response.status_code == 200
        assert response.get_json() == {'success': True, 'views': []}

    def test_views_listed_after_layout(self, client):
        client.post('/api/bracket/layout', json={'matches': make_bracket(1), 'view': 'main'})
        assert client.get('/api/health').get_json()['views'] == ['main']


class TestLayoutEndpoint:
    """Tests for /api/bracket/layout."""

    def test_layout(self, client):
        response = client.post('/api/bracket/layout', json={
            'matches': make_bracket(4),
            'container': {'width': 1280, 'height': 720},
        })
        assert response.status_code == 200
        data = response.get_json()
        assert data['success'] is True
        assert data['ok'] is True
        assert len(data['layout']['positions']) == 7
        assert len(data['layout']['connections']) == 3
        assert data['layout']['scaling']['scaleFactor'] == 1.0
        assert data['layout']['matches'][-1]['roundLabel'] == 'Final'

    def test_default_container(self, client):
        data = client.post('/api/bracket/layout', json={'matches': make_bracket(2)}).get_json()
        assert data['ok'] is True
        assert data['layout']['scaling']['scaledDimensions']['containerWidth'] == 1248

    def test_empty_matches(self, client):
        data = client.post('/api/bracket/layout', json={'matches': []}).get_json()
        assert data['success'] is True
        assert data['ok'] is False
        assert 'No rounds available for display' in data['warnings']

    def test_bad_container_reported(self, client):
        data = client.post('/api/bracket/layout', json={
            'matches': make_bracket(1),
            'container': {'width': -10, 'height': 10},
        }).get_json()
        assert data['ok'] is False
        assert data['errors'] == ['Container dimensions must be positive']

    @pytest.mark.parametrize('body', ['[1, 2]', 'not json'])
    def test_body_must_be_object(self, client, body):
        response = client.post('/api/bracket/layout', data=body, content_type='application/json')
        assert response.status_code == 400
        assert response.get_json() == {'success': False, 'error': 'Request body must be a JSON object.'}


class TestValidateEndpoint:
    """Tests for /api/bracket/validate."""

    def test_valid(self, client):
        data = client.post('/api/bracket/validate', json={'matches': make_bracket(2)}).get_json()
        assert data == {'success': True, 'isValid': True, 'errors': [], 'warnings': []}

    def test_duplicates(self, client):
        matches = [make_raw_match('a', 1, 1), make_raw_match('a', 1, 2)]
        data = client.post('/api/bracket/validate', json={'matches': matches}).get_json()
        assert data['isValid'] is False
        assert data['errors'] == ['Duplicate match IDs found: a']

    def test_unhashable_ids(self, client):
        matches = [{'id': {'a': 1}, 'matchNumber': 1}, {'id': {'a': 1}, 'matchNumber': 2}]
        response = client.post('/api/bracket/validate', json={'matches': matches})
        assert response.status_code == 200
        assert response.get_json()['errors'] == ["Duplicate match IDs found: {'a': 1}"]

    def test_missing_matches(self, client):
        data = client.post('/api/bracket/validate', json={}).get_json()
        assert data['errors'] == ['Matches must be an array']

    def test_bad_body(self, client):
        response = client.post('/api/bracket/validate', data='3', content_type='application/json')
        assert response.status_code == 400


class TestCacheClearEndpoint:
    """Tests for /api/bracket/cache/clear."""

    def test_clear_view(self, client):
        client.post('/api/bracket/layout', json={'matches': make_bracket(2), 'view': 'stage'})
        data = client.post('/api/bracket/cache/clear', json={'view': 'stage'}).get_json()
        assert data['success'] is True
        assert data['cleared'] > 0

        again = client.post('/api/bracket/cache/clear', json={'view': 'stage'}).get_json()
        assert again['cleared'] == 0

    def test_view_from_query_string(self, client):
        client.post('/api/bracket/layout?view=lobby', json={'matches': make_bracket(2)})
        data = client.post('/api/bracket/cache/clear?view=lobby').get_json()
        assert data['cleared'] > 0

    def test_unknown_view(self, client):
        data = client.post('/api/bracket/cache/clear', json={'view': 'ghost'}).get_json()
        assert data == {'success': True, 'cleared': 0}

    def test_views_are_isolated(self, client):
        client.post('/api/bracket/layout', json={'matches': make_bracket(2), 'view': 'one'})
        client.post('/api/bracket/layout', json={'matches': make_bracket(2), 'view': 'two'})
        client.post('/api/bracket/cache/clear', json={'view': 'one'})
        data = client.post('/api/bracket/cache/clear', json={'view': 'two'}).get_json()
        assert data['cleared'] > 0
