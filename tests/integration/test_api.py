"""
Integration tests for the JSON API, backed by local file storage.
"""
import csv
import io
import json

import pytest
from django.test import Client

from apps.core.storage import LocalFileStorage, set_storage_backend


@pytest.fixture
def client(api_storage):
    return Client()


def post_json(client, url, data, method='post'):
    return getattr(client, method)(url, data=json.dumps(data), content_type='application/json')


class TestProductsApi:
    """Tests for /api/products/."""

    def test_add_list_delete(self, client):
        response = post_json(client, '/api/products/', {'title': 'Widget', 'price': '100'})
        assert response.status_code == 201
        product = response.json()
        assert product['price'] == 100.0
        assert product['status'] == 'published'

        listing = client.get('/api/products/').json()
        assert [p['id'] for p in listing] == [product['id']]

        response = client.delete(f'/api/products/?id={product["id"]}')
        assert response.status_code == 200
        assert client.get('/api/products/').json() == []

    def test_add_missing_fields(self, client):
        response = post_json(client, '/api/products/', {'title': 'Widget'})
        assert response.status_code == 400
        assert 'price' in response.json()['error']

    def test_add_invalid_price(self, client):
        response = post_json(client, '/api/products/', {'title': 'Widget', 'price': 'abc'})
        assert response.status_code == 400

    def test_add_non_finite_price(self, client):
        response = post_json(client, '/api/products/', {'title': 'Ghost', 'price': 'nan'})
        assert response.status_code == 400
        assert client.get('/api/products/').json() == []

    def test_invalid_json(self, client):
        response = client.post('/api/products/', data='{', content_type='application/json')
        assert response.status_code == 400

    def test_update(self, client):
        product = post_json(client, '/api/products/', {'title': 'Widget', 'price': 1}).json()
        response = post_json(
            client, '/api/products/',
            {'id': product['id'], 'title': 'Widget 2', 'price': '2.5', 'tagIds': ['t1']},
            method='put',
        )
        assert response.status_code == 200
        assert response.json()['tagId'] == 't1'
        assert client.get('/api/products/').json()[0]['title'] == 'Widget 2'

    def test_update_not_found(self, client):
        response = post_json(
            client, '/api/products/', {'id': 'missing', 'title': 'X', 'price': 1}, method='put',
        )
        assert response.status_code == 404

    def test_delete_not_found(self, client):
        assert client.delete('/api/products/?id=missing').status_code == 404

    def test_delete_requires_id(self, client):
        assert client.delete('/api/products/').status_code == 400

    def test_filters(self, client):
        post_json(client, '/api/products/', {'title': 'Cheap', 'price': 1})
        post_json(client, '/api/products/', {'title': 'Dear', 'price': 50})

        listing = client.get('/api/products/?sort=price_desc').json()
        assert [p['title'] for p in listing] == ['Dear', 'Cheap']

        listing = client.get('/api/products/?max_price=10').json()
        assert [p['title'] for p in listing] == ['Cheap']

        assert client.get('/api/products/?sort=bogus').status_code == 400

    def test_toggle(self, client):
        product = post_json(client, '/api/products/', {'title': 'Widget', 'price': 1}).json()

        response = post_json(client, '/api/products/toggle/', {'id': product['id'], 'status': 'archived'})
        assert response.status_code == 200
        assert response.json()['status'] == 'archived'
        assert client.get('/api/products/?published=1').json() == []

        post_json(client, '/api/products/toggle/', {'id': product['id'], 'status': 'published'})
        assert len(client.get('/api/products/?published=1').json()) == 1

    def test_toggle_errors(self, client):
        assert post_json(client, '/api/products/toggle/', {'id': 'x', 'status': 'gone'}).status_code == 400
        assert post_json(client, '/api/products/toggle/', {'id': 'x', 'status': 'archived'}).status_code == 404

    def test_method_not_allowed(self, client):
        assert client.patch('/api/products/').status_code == 405


class TestNamedApi:
    """Tests for suppliers/tags/categories endpoints."""

    @pytest.mark.parametrize('url', ['/api/suppliers/', '/api/tags/', '/api/categories/'])
    def test_add_and_list(self, client, url):
        response = post_json(client, url, {'name': ' Acme '})
        assert response.status_code == 201
        assert response.json()['name'] == 'Acme'

        duplicate = post_json(client, url, {'name': 'acme'})
        assert duplicate.json()['id'] == response.json()['id']
        assert len(client.get(url).json()) == 1

    @pytest.mark.parametrize('url', ['/api/suppliers/', '/api/tags/', '/api/categories/'])
    def test_missing_name(self, client, url):
        assert post_json(client, url, {}).status_code == 400
        assert post_json(client, url, {'name': 42}).status_code == 400


class TestSalesApi:
    """Tests for salespeople endpoints."""

    def test_seed_is_idempotent(self, client, settings):
        settings.STOREFRONT_SALES_NAME = 'Dana'
        settings.STOREFRONT_SALES_PHONE = '628000'

        first = client.post('/api/sales/seed/')
        second = client.get('/api/sales/seed/')

        assert first.status_code == 201
        assert second.status_code == 200
        assert first.json()['id'] == second.json()['id']
        assert len(client.get('/api/salespeople/').json()) == 1

    def test_add_salesperson(self, client):
        response = post_json(client, '/api/salespeople/', {'name': 'Robin', 'phone': '123'})
        assert response.status_code == 201
        assert response.json()['phone'] == '123'


class TestCatalogApi:

    def test_catalog_payload(self, client):
        category = post_json(client, '/api/categories/', {'name': 'Snacks'}).json()
        post_json(client, '/api/products/', {'title': 'Chips', 'price': 12, 'categoryId': category['id']})
        hidden = post_json(client, '/api/products/', {'title': 'Old', 'price': 99}).json()
        post_json(client, '/api/products/toggle/', {'id': hidden['id'], 'status': 'archived'})

        payload = client.get('/api/catalog/').json()

        assert [p['title'] for p in payload['products']] == ['Chips']
        assert payload['categoryCounts'] == {category['id']: 1}
        assert payload['maxPrice'] == 12.0
        assert payload['categories'][0]['name'] == 'Snacks'


class TestExportApi:

    def test_csv(self, client):
        post_json(client, '/api/products/', {'title': 'Chips', 'price': 12})
        response = client.get('/api/export/products/?format=csv')

        assert response.status_code == 200
        assert 'attachment' in response['Content-Disposition']
        rows = list(csv.reader(io.StringIO(response.content.decode())))
        assert rows[1][1] == 'Chips'

    def test_xlsx(self, client):
        response = client.get('/api/export/products/')
        assert response.status_code == 200
        assert response['Content-Disposition'].endswith('.xlsx"')

    def test_unknown_format(self, client):
        assert client.get('/api/export/products/?format=pdf').status_code == 400


class TestAuthApi:

    def test_login(self, client, settings):
        settings.STOREFRONT_ADMIN_USERNAME = 'owner'
        settings.STOREFRONT_ADMIN_PASSWORD = 'secret'

        response = post_json(client, '/api/login/', {'username': 'owner', 'password': 'secret'})
        assert response.status_code == 200
        assert response.cookies['auth'].value == 'true'

    def test_login_invalid(self, client, settings):
        settings.STOREFRONT_ADMIN_USERNAME = 'owner'
        settings.STOREFRONT_ADMIN_PASSWORD = 'secret'

        response = post_json(client, '/api/login/', {'username': 'owner', 'password': 'nope'})
        assert response.status_code == 401

    def test_logout(self, client):
        response = client.post('/api/logout/')
        assert response.status_code == 200
        assert response.cookies['auth'].value == ''


class TestReadOnlyStorage:
    """Managed host without a configured backend."""

    @pytest.fixture
    def client(self, tmp_path):
        set_storage_backend(LocalFileStorage(base_path=tmp_path, read_only=True))
        yield Client()
        set_storage_backend(None)

    def test_reads_degrade_to_empty(self, client):
        response = client.get('/api/products/')
        assert response.status_code == 200
        assert response.json() == []

    def test_writes_fail_with_configuration_error(self, client):
        response = post_json(client, '/api/suppliers/', {'name': 'Acme'})
        assert response.status_code == 500
        assert 'Storage not configured' in response.json()['error']

    def test_update_missing_product_fails_with_configuration_error(self, client):
        response = post_json(client, '/api/products/', {'id': 'missing', 'title': 'Ghost', 'price': 1}, method='put')
        assert response.status_code == 500
        assert 'Storage not configured' in response.json()['error']

    def test_health_is_degraded(self, client):
        response = client.get('/health/')
        assert response.status_code == 503
        assert response.json()['checks']['storage'] == 'file (read-only)'


class TestHealth:

    def test_health_ok(self, client):
        response = client.get('/health/')
        assert response.status_code == 200
        assert response.json()['checks']['storage'] == 'file'

    def test_ready(self, client):
        assert client.get('/health/ready/').json() == {'status': 'ready'}
